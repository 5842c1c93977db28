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

"""Tools for representing BSON binary data."""
from __future__ import annotations

from typing import Any, Tuple, Type, Union

BINARY_SUBTYPE = 0
"""Generic binary data, the default subtype."""

OLD_BINARY_SUBTYPE = 2
"""Legacy generic subtype. On the wire its payload carries a second,
inner int32 length."""

USER_DEFINED_SUBTYPE = 128
"""First of the subtypes (128-255) reserved for user defined payloads."""


class Binary(bytes):
    """A BSON binary value: raw bytes tagged with a one byte subtype.

    Any subtype in [0, 256) is accepted and written back unchanged, so
    payloads the codec does not interpret still round trip.

    Raises :class:`TypeError` if `data` is not bytes-like or `subtype` is
    not an :class:`int`, and :class:`ValueError` if `subtype` is out of
    range.

    :param data: the payload; anything supporting the buffer protocol
    :param subtype: the binary subtype, :data:`BINARY_SUBTYPE` by default
    """

    _type_marker = 5
    __subtype: int

    def __new__(
        cls: Type[Binary],
        data: Union[memoryview, bytes, bytearray],
        subtype: int = BINARY_SUBTYPE,
    ) -> Binary:
        if not isinstance(subtype, int) or isinstance(subtype, bool):
            raise TypeError(f"subtype must be an instance of int, not {type(subtype)}")
        if not 0 <= subtype < 256:
            raise ValueError("subtype must be contained in [0, 256)")
        self = bytes.__new__(cls, data)
        self.__subtype = subtype
        return self

    @property
    def subtype(self) -> int:
        """The subtype byte of this value."""
        return self.__subtype

    @property
    def is_user_defined(self) -> bool:
        """``True`` for subtypes 128 through 255."""
        return self.__subtype >= USER_DEFINED_SUBTYPE

    def __getnewargs__(self) -> Tuple[bytes, int]:  # type: ignore[override]
        return bytes(self), self.__subtype

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Binary):
            return self.__subtype == other.subtype and bytes.__eq__(self, other)
        # Plain bytes never equal a Binary, whatever the subtype.
        return False

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((bytes(self), self.__subtype))

    def __repr__(self) -> str:
        return f"Binary({bytes.__repr__(self)}, {self.__subtype})"
