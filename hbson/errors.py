# Copyright 2009-present MongoDB, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Exceptions raised by the hbson package."""
from __future__ import annotations

from typing import Any, Optional


class BSONError(Exception):
    """Root of every error hbson raises."""


class InvalidBSON(BSONError):
    """The bytes handed to the decoder are not a well formed document.

    The buffer was truncated, carried an inconsistent length prefix or
    terminator, or used an element type this codec does not know.
    """


class InvalidStringData(BSONError):
    """A string to encode cannot be represented as UTF-8."""


class InvalidDocument(BSONError):
    """A document holds a key or value with no BSON representation.

    :param message: what could not be encoded
    :param document: the offending document or value, if known
    """

    def __init__(self, message: str, document: Optional[Any] = None) -> None:
        super().__init__(message)
        self._document = document

    @property
    def document(self) -> Any:
        """The document (or value) that failed to encode."""
        return self._document


class InvalidId(BSONError):
    """An ObjectId was built from something that is not 12 bytes or 24 hex digits."""
