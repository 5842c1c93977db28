# Copyright 2012-present MongoDB, Inc.
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

"""Utilities for testing hmongo."""
from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

import hbson
from hmongo.driver import DeleteMode, Driver, UpdateFlags
from hmongo.errors import DriverError
from hmongo.write_concern import WriteConcern


class RecordingDriver(Driver):
    """A Driver that records every submission instead of sending it.

    :param update_reply: the document handed back by
      :meth:`fetch_last_operation_result`
    :param error: if set, every submission raises this
      :class:`~hmongo.errors.DriverError`
    """

    def __init__(
        self,
        update_reply: Optional[Mapping[str, Any]] = None,
        error: Optional[DriverError] = None,
    ) -> None:
        self.update_reply = update_reply if update_reply is not None else {"ok": 1}
        self.error = error
        self.inserts: List[Tuple[bytes, WriteConcern]] = []
        self.deletes: List[Tuple[bytes, DeleteMode, WriteConcern]] = []
        self.updates: List[Tuple[bytes, bytes, UpdateFlags, WriteConcern]] = []
        self.fetches = 0

    @property
    def calls(self) -> int:
        return len(self.inserts) + len(self.deletes) + len(self.updates)

    def _check(self) -> None:
        if self.error is not None:
            raise self.error

    def submit_insert(self, raw: bytes, write_concern: WriteConcern) -> None:
        self._check()
        self.inserts.append((raw, write_concern))

    def submit_delete(
        self, raw: bytes, delete_mode: DeleteMode, write_concern: WriteConcern
    ) -> None:
        self._check()
        self.deletes.append((raw, delete_mode, write_concern))

    def submit_update(
        self,
        raw_selector: bytes,
        raw_update: bytes,
        update_flags: UpdateFlags,
        write_concern: WriteConcern,
    ) -> None:
        self._check()
        self.updates.append((raw_selector, raw_update, update_flags, write_concern))

    def fetch_last_operation_result(self) -> bytes:
        self.fetches += 1
        return hbson.encode(self.update_reply)
