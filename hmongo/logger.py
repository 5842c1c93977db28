# Copyright 2023-present MongoDB, Inc.
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

"""Structured debug logging of the commands a Collection submits.

Records go to the ``hmongo.command`` logger and are only built when that
logger is enabled for ``DEBUG``. Each record is a single JSON object.
"""
from __future__ import annotations

import enum
import logging
import os
from typing import Any, Mapping

from bson import json_util


class _CommandStatusMessage(str, enum.Enum):
    STARTED = "Command started"
    SUCCEEDED = "Command succeeded"
    FAILED = "Command failed"


_DEFAULT_DOCUMENT_LENGTH = 1000
_DOCUMENT_LENGTH_ENV = "HMONGO_LOG_MAX_DOCUMENT_LENGTH"
_DOCUMENT_NAMES = ("command", "reply", "failure")
_COMMAND_LOGGER = logging.getLogger("hmongo.command")


def _debug_log(logger: logging.Logger, **fields: Any) -> None:
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(LogMessage(**fields))


def _max_document_length() -> int:
    """Read the document length limit, ignoring unusable values."""
    try:
        limit = int(os.environ.get(_DOCUMENT_LENGTH_ENV, _DEFAULT_DOCUMENT_LENGTH))
    except ValueError:
        return _DEFAULT_DOCUMENT_LENGTH
    return limit if limit >= 0 else _DEFAULT_DOCUMENT_LENGTH


def _dumps(obj: Any) -> str:
    # Values json_util cannot represent (hbson types) fall back to repr.
    return json_util.dumps(obj, default=repr)


def _render_document(doc: Any, limit: int) -> str:
    rendered = doc if isinstance(doc, str) else _dumps(doc)
    if len(rendered) > limit:
        return rendered[:limit] + "..."
    return rendered


class LogMessage:
    """One log record, rendered lazily as a JSON object.

    Embedded documents (``command``, ``reply`` and ``failure``) are
    rendered to JSON strings of their own and cut to the length set by
    ``HMONGO_LOG_MAX_DOCUMENT_LENGTH``, with ``...`` marking a cut.
    """

    __slots__ = ("_fields",)

    def __init__(self, **fields: Any) -> None:
        duration = fields.get("durationMS")
        if duration is not None:
            fields["durationMS"] = duration.total_seconds() * 1000
        self._fields: Mapping[str, Any] = fields

    def __str__(self) -> str:
        limit = _max_document_length()
        rendered = {
            key: _render_document(value, limit)
            if key in _DOCUMENT_NAMES and value is not None
            else value
            for key, value in self._fields.items()
        }
        return _dumps(rendered)
