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

"""Tools for creating and manipulating SON, the Serialized Ocument Notation.

Regular dictionaries can be used instead of SON objects, but not when the
order of keys matters for equality. A SON object can be used just like a
normal Python dictionary."""
from __future__ import annotations

import copy
from collections.abc import Mapping as _Mapping
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union


class SON(Dict[str, Any]):
    """SON data.

    A subclass of dict that compares order-sensitively against other SON
    instances, which is how BSON documents compare: two documents are
    equal only when they hold the same keys, in the same order, with
    equal values.
    """

    def __init__(
        self,
        data: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
        **kwargs: Any,
    ) -> None:
        dict.__init__(self)
        self.update(data)
        self.update(kwargs)

    def __repr__(self) -> str:
        result = []
        for key, value in self.items():
            result.append(f"({key!r}, {value!r})")
        return "SON([%s])" % ", ".join(result)

    def copy(self) -> SON:
        other: SON = SON()
        other.update(self)
        return other

    def update(self, other: Optional[Any] = None, **kwargs: Any) -> None:  # type: ignore[override]
        # Make progressively weaker assumptions about "other"
        if other is None:
            pass
        elif hasattr(other, "items"):
            for k, v in other.items():
                self[k] = v
        elif hasattr(other, "keys"):
            for k in other.keys():
                self[k] = other[k]
        else:
            for k, v in other:
                self[k] = v
        if kwargs:
            self.update(kwargs)

    def __eq__(self, other: Any) -> bool:
        """Comparison to another SON is order-sensitive while comparison to a
        regular dictionary is order-insensitive.
        """
        if isinstance(other, SON):
            return len(self) == len(other) and list(self.items()) == list(other.items())
        return self.to_dict() == other

    def __ne__(self, other: Any) -> bool:
        return not self == other

    __hash__: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert a SON document to a normal Python dictionary instance.

        This is trickier than just *dict(...)* because it needs to be
        recursive.
        """

        def transform_value(value: Any) -> Any:
            if isinstance(value, list):
                return [transform_value(v) for v in value]
            elif isinstance(value, _Mapping):
                return {k: transform_value(v) for k, v in value.items()}
            else:
                return value

        return transform_value(dict(self))

    def __deepcopy__(self, memo: Dict[int, SON]) -> SON:
        out: SON = SON()
        val_id = id(self)
        if val_id in memo:
            return memo[val_id]
        memo[val_id] = out
        for k, v in self.items():
            out[k] = copy.deepcopy(v, memo)
        return out
