# Copyright 2015-present MongoDB, Inc.
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

"""The boundary between the CRUD command layer and a database transport.

A :class:`Driver` receives already encoded BSON and a resolved
:class:`~hmongo.write_concern.WriteConcern`. It never sees Python documents.
Implementations signal a rejected submission by raising
:class:`~hmongo.errors.DriverError`.
"""
from __future__ import annotations

import abc
import enum

from hmongo.write_concern import WriteConcern


class DeleteMode(enum.IntEnum):
    """How many matching documents a delete removes."""

    NONE = 0
    """Remove every matching document."""

    SINGLE_REMOVE = 1
    """Remove at most one matching document."""


class UpdateFlags(enum.IntFlag):
    """Modifiers for an update submission. Members combine with ``|``."""

    NONE = 0
    UPSERT = 1
    MULTI_UPDATE = 2


class Driver(abc.ABC):
    """A transport that accepts BSON encoded write submissions."""

    @abc.abstractmethod
    def submit_insert(self, raw: bytes, write_concern: WriteConcern) -> None:
        """Insert the single BSON document `raw`."""

    @abc.abstractmethod
    def submit_delete(
        self, raw: bytes, delete_mode: DeleteMode, write_concern: WriteConcern
    ) -> None:
        """Delete the documents matched by the BSON selector `raw`."""

    @abc.abstractmethod
    def submit_update(
        self,
        raw_selector: bytes,
        raw_update: bytes,
        update_flags: UpdateFlags,
        write_concern: WriteConcern,
    ) -> None:
        """Apply the BSON update `raw_update` to documents matching `raw_selector`."""

    @abc.abstractmethod
    def fetch_last_operation_result(self) -> bytes:
        """Return the BSON reply of the most recent update on this driver.

        The reply carries ``nMatched``, ``nModified`` and ``writeErrors``,
        and may carry ``ok`` and ``lastOp``.
        """
