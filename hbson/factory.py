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

"""Construction of extended BSON values during decoding.

The decoder never instantiates the extended types itself. It reads the
primitive fields of each element and hands them to a :class:`TypeFactory`,
which is carried by :class:`~hbson.codec_options.CodecOptions`. Subclass
:class:`TypeFactory` to materialize BSON values as application types::

  >>> class HexIds(TypeFactory):
  ...     def object_id(self, hex_string):
  ...         return hex_string
  ...
  >>> decode(data, CodecOptions(type_factory=HexIds()))
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

from hbson.binary import Binary
from hbson.code import Code
from hbson.datetime_ms import DateTime
from hbson.dbpointer import DBPointer
from hbson.max_key import MaxKey
from hbson.min_key import MinKey
from hbson.objectid import ObjectId
from hbson.regex import Regex
from hbson.timestamp import Timestamp


class TypeFactory:
    """Builds the hbson value types from decoded primitive fields."""

    def object_id(self, hex_string: str) -> Any:
        return ObjectId(hex_string)

    def date_time(self, sec: int, usec: int) -> Any:
        return DateTime(sec, usec)

    def regex(self, presentation: str) -> Any:
        """`presentation` is ``"/" + pattern + "/" + options``."""
        return Regex(presentation)

    def binary(self, data: bytes, subtype: int) -> Any:
        return Binary(data, subtype)

    def db_pointer(self, collection: str, hex_string: str) -> Any:
        return DBPointer(collection, hex_string)

    def code(self, text: str, scope: Optional[Mapping[str, Any]] = None) -> Any:
        return Code(text, scope)

    def timestamp(self, time: int, inc: int) -> Any:
        return Timestamp(time, inc)

    def min_key(self) -> Any:
        return MinKey()

    def max_key(self) -> Any:
        return MaxKey()


DEFAULT_TYPE_FACTORY = TypeFactory()
