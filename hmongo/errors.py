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

"""Exceptions raised by hmongo."""
from __future__ import annotations

from typing import Any, Mapping, Optional

from hbson.errors import InvalidBSON, InvalidDocument

__all__ = [
    "MongoError",
    "ConfigurationError",
    "DriverError",
    "OperationFailure",
    "WriteError",
    "InvalidBSON",
    "InvalidDocument",
]


class MongoError(Exception):
    """Base class for all hmongo exceptions."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self._message = message


def _format_detailed_error(message: str, details: Any) -> str:
    if details is not None:
        message = f"{message}, full error: {details}"
    return message


class ConfigurationError(MongoError):
    """Raised when something is incorrectly configured."""


class DriverError(MongoError):
    """Raised by a :class:`~hmongo.driver.Driver` when it rejects a submission.

    :param message: the driver's diagnostic text
    :param code: the server or driver error code, if any
    :param details: the complete error document, if any
    """

    def __init__(
        self,
        message: str = "",
        code: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.__code = code
        self.__details = details

    @property
    def code(self) -> Optional[int]:
        """The error code reported by the driver, if any."""
        return self.__code

    @property
    def details(self) -> Optional[Mapping[str, Any]]:
        """The error document reported by the driver, if any."""
        return self.__details


class OperationFailure(MongoError):
    """Raised when a database operation fails."""

    def __init__(
        self,
        error: str,
        code: Optional[int] = None,
        details: Optional[Mapping[str, Any]] = None,
    ) -> None:
        super().__init__(_format_detailed_error(error, details))
        self.__code = code
        self.__details = details

    @property
    def code(self) -> Optional[int]:
        """The error code returned by the server, if any."""
        return self.__code

    @property
    def details(self) -> Optional[Mapping[str, Any]]:
        """The complete error document returned by the server.

        Depending on the error that occurred, the error document
        may include useful information beyond just the error
        message.
        """
        return self.__details


class WriteError(OperationFailure):
    """Raised when the driver rejects an insert, update or remove.

    The driver's message is preserved, and the originating
    :class:`DriverError` is available as ``__cause__``.
    """

    @classmethod
    def _from_driver_error(cls, exc: DriverError) -> WriteError:
        return cls(str(exc), exc.code, exc.details)
