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

"""CRUD command layer for MongoDB over a pluggable driver."""
from __future__ import annotations

from typing import Tuple, Union

version_tuple: Tuple[Union[int, str], ...] = (1, 0, 0)


def get_version_string() -> str:
    if isinstance(version_tuple[-1], str):
        return ".".join(map(str, version_tuple[:-1])) + version_tuple[-1]
    return ".".join(map(str, version_tuple))


__version__: str = get_version_string()
version = __version__

"""Current version of hmongo."""

from hmongo.collection import Collection  # noqa: F401,E402
from hmongo.driver import DeleteMode, Driver, UpdateFlags  # noqa: F401,E402
from hmongo.results import CrudResult  # noqa: F401,E402
from hmongo.write_concern import WriteConcern  # noqa: F401,E402

__all__ = [
    "Collection",
    "CrudResult",
    "DeleteMode",
    "Driver",
    "UpdateFlags",
    "WriteConcern",
    "version",
    "version_tuple",
]
