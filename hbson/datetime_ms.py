# Copyright 2022-present MongoDB, Inc.
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

"""Tools for representing BSON UTC datetimes as (seconds, microseconds)."""
from __future__ import annotations

import calendar
import datetime
import time
from typing import Any, Optional, Tuple

EPOCH_AWARE = datetime.datetime.fromtimestamp(0, datetime.timezone.utc)


def _millis_to_sec_usec(millis: int) -> Tuple[int, int]:
    """Split milliseconds since epoch UTC into (seconds, microseconds)."""
    return millis // 1000, (millis % 1000) * 1000


def _datetime_to_millis(dtm: datetime.datetime) -> int:
    """Convert datetime to milliseconds since epoch UTC."""
    offset = dtm.utcoffset()
    if offset is not None:
        dtm = dtm - offset
    return int(calendar.timegm(dtm.timetuple()) * 1000 + dtm.microsecond // 1000)


class DateTime:
    """Represents a BSON UTC datetime.

    BSON UTC datetimes are an int64 of milliseconds since the Unix epoch.
    They are surfaced as a whole number of seconds plus a microsecond
    component, where the microseconds are always a multiple of 1000
    (BSON has millisecond precision) and always in [0, 1000000).

    ``DateTime()`` stamps the current time.

    :param sec: seconds since the Unix epoch
    :param usec: microseconds; sub-millisecond digits are truncated
    """

    __slots__ = ("__millis",)

    _type_marker = 9

    def __init__(self, sec: Optional[int] = None, usec: int = 0) -> None:
        if sec is None:
            self.__millis = int(time.time() * 1000)
            return
        if not isinstance(sec, int):
            raise TypeError(f"sec must be an instance of int, not {type(sec)}")
        if not isinstance(usec, int):
            raise TypeError(f"usec must be an instance of int, not {type(usec)}")
        self.__millis = sec * 1000 + usec // 1000

    @classmethod
    def now(cls) -> DateTime:
        """The current time, to the millisecond."""
        return cls()

    @classmethod
    def from_millis(cls, millis: int) -> DateTime:
        """Create a :class:`DateTime` from milliseconds since epoch UTC."""
        return cls(*_millis_to_sec_usec(millis))

    @classmethod
    def from_datetime(cls, dtm: datetime.datetime) -> DateTime:
        """Create a :class:`DateTime` from a :class:`datetime.datetime`.

        Naive datetimes are treated as UTC.
        """
        return cls.from_millis(_datetime_to_millis(dtm))

    @property
    def sec(self) -> int:
        """Whole seconds since the Unix epoch."""
        return _millis_to_sec_usec(self.__millis)[0]

    @property
    def usec(self) -> int:
        """Microsecond component, ``(millis mod 1000) * 1000``."""
        return _millis_to_sec_usec(self.__millis)[1]

    @property
    def millis(self) -> int:
        """Milliseconds since the Unix epoch, as stored in BSON."""
        return self.__millis

    def as_datetime(self) -> datetime.datetime:
        """Return an aware :class:`datetime.datetime` in UTC."""
        sec, usec = _millis_to_sec_usec(self.__millis)
        return EPOCH_AWARE + datetime.timedelta(seconds=sec, microseconds=usec)

    def __int__(self) -> int:
        return self.__millis

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DateTime):
            return self.__millis == other.millis
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __lt__(self, other: Any) -> bool:
        if isinstance(other, DateTime):
            return self.__millis < other.millis
        return NotImplemented

    def __le__(self, other: Any) -> bool:
        if isinstance(other, DateTime):
            return self.__millis <= other.millis
        return NotImplemented

    def __gt__(self, other: Any) -> bool:
        if isinstance(other, DateTime):
            return self.__millis > other.millis
        return NotImplemented

    def __ge__(self, other: Any) -> bool:
        if isinstance(other, DateTime):
            return self.__millis >= other.millis
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.__millis)

    def __repr__(self) -> str:
        return f"DateTime({self.sec}, {self.usec})"
