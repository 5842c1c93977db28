# Copyright 2013-present MongoDB, Inc.
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

"""Tools for representing MongoDB regular expressions."""
from __future__ import annotations

import re
from typing import Any, Optional, Pattern


def str_flags_to_int(str_flags: str) -> int:
    flags = 0
    if "i" in str_flags:
        flags |= re.IGNORECASE
    if "l" in str_flags:
        flags |= re.LOCALE
    if "m" in str_flags:
        flags |= re.MULTILINE
    if "s" in str_flags:
        flags |= re.DOTALL
    if "u" in str_flags:
        flags |= re.UNICODE
    if "x" in str_flags:
        flags |= re.VERBOSE

    return flags


class Regex:
    """BSON regular expression data."""

    __slots__ = ("pattern", "flags")

    _type_marker = 11

    def __init__(self, regex: str, flags: Optional[str] = None) -> None:
        """BSON regular expression data.

        A BSON regex is a pattern plus an options string. It is presented
        as ``/pattern/options``, and that presentation is accepted here::

          >>> Regex("/^acme/i")
          Regex('^acme', 'i')
          >>> Regex("^acme", "i")
          Regex('^acme', 'i')

        The options string is kept verbatim so it is written back exactly
        as it was read.

        :param regex: a ``/pattern/options`` string, or a bare pattern when
          `flags` is given
        :param flags: (optional) option characters like "im"
        """
        if not isinstance(regex, str):
            raise TypeError(f"pattern must be an instance of str, not {type(regex)}")
        if flags is None:
            if not regex.startswith("/") or regex.rfind("/") == 0:
                raise ValueError(f"{regex!r} is not of the form /pattern/options")
            end = regex.rfind("/")
            self.pattern = regex[1:end]
            self.flags = regex[end + 1 :]
        elif isinstance(flags, str):
            self.pattern = regex
            self.flags = flags
        else:
            raise TypeError(f"flags must be an instance of str, not {type(flags)}")

    def __getstate__(self) -> dict[str, Any]:
        return {"pattern": self.pattern, "flags": self.flags}

    def __setstate__(self, state: dict[str, Any]) -> None:
        self.pattern = state["pattern"]
        self.flags = state["flags"]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Regex):
            return self.pattern == other.pattern and self.flags == other.flags
        else:
            return NotImplemented

    __hash__ = None  # type: ignore

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __str__(self) -> str:
        return f"/{self.pattern}/{self.flags}"

    def __repr__(self) -> str:
        return f"Regex({self.pattern!r}, {self.flags!r})"

    def try_compile(self) -> Pattern[str]:
        """Compile this :class:`Regex` as a Python regular expression.

        .. warning::
           Python regular expressions use a different syntax and different
           set of flags than MongoDB, which uses `PCRE`_. A regular
           expression retrieved from the server may not compile in
           Python, or may match a different set of strings in Python than
           when used in a MongoDB query. :meth:`try_compile()` may raise
           :exc:`re.error`.

        .. _PCRE: http://www.pcre.org/
        """
        return re.compile(self.pattern, str_flags_to_int(self.flags))
