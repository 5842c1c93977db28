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

"""Result class definitions."""
from __future__ import annotations

from typing import Any, Mapping

from hbson.timestamp import Timestamp

_RESULT_KEYS = ("ok", "n", "nModified", "updatedExisting", "err", "errmsg", "lastOp", "raw")


class CrudResult:
    """The return type for :meth:`~hmongo.collection.Collection.update`.

    Built once from the driver's reply and never modified afterwards. The
    reply's ``nMatched`` surfaces as :attr:`n` and its ``writeErrors`` as
    both :attr:`err` and :attr:`errmsg`. Item access uses the reply style
    names::

      >>> result["n"], result["updatedExisting"]
      (1, True)
    """

    __slots__ = (
        "__ok",
        "__n",
        "__n_modified",
        "__updated_existing",
        "__err",
        "__errmsg",
        "__last_op",
        "__raw_result",
    )

    def __init__(
        self,
        ok: bool,
        n: int,
        n_modified: int,
        updated_existing: bool,
        err: Any,
        errmsg: Any,
        last_op: Timestamp,
        raw_result: Mapping[str, Any],
    ) -> None:
        self.__ok = ok
        self.__n = n
        self.__n_modified = n_modified
        self.__updated_existing = updated_existing
        self.__err = err
        self.__errmsg = errmsg
        self.__last_op = last_op
        self.__raw_result = raw_result

    @classmethod
    def _from_update_reply(cls, reply: Mapping[str, Any]) -> CrudResult:
        """Project a decoded update reply onto a :class:`CrudResult`."""
        n_matched = reply.get("nMatched", 0)
        write_errors = reply.get("writeErrors")
        last_op = reply.get("lastOp", reply.get("opTime"))
        if not isinstance(last_op, Timestamp):
            last_op = Timestamp(0, 0)
        return cls(
            ok=bool(reply.get("ok", 1)),
            n=n_matched,
            n_modified=reply.get("nModified", 0),
            updated_existing=n_matched > 0,
            err=write_errors,
            errmsg=write_errors,
            last_op=last_op,
            raw_result=reply,
        )

    @property
    def ok(self) -> bool:
        """Whether the driver reported the command as successful."""
        return self.__ok

    @property
    def n(self) -> int:
        """The number of documents matched by the selector."""
        return self.__n

    @property
    def n_modified(self) -> int:
        """The number of documents modified."""
        return self.__n_modified

    @property
    def updated_existing(self) -> bool:
        """``True`` when at least one existing document matched."""
        return self.__updated_existing

    @property
    def err(self) -> Any:
        """The reply's write errors, or ``None``."""
        return self.__err

    @property
    def errmsg(self) -> Any:
        """Same as :attr:`err`."""
        return self.__errmsg

    @property
    def last_op(self) -> Timestamp:
        """The optime of the write, ``Timestamp(0, 0)`` when not reported."""
        return self.__last_op

    @property
    def raw_result(self) -> Mapping[str, Any]:
        """The decoded reply exactly as the driver returned it."""
        return self.__raw_result

    def as_dict(self) -> dict[str, Any]:
        return {
            "ok": self.__ok,
            "n": self.__n,
            "nModified": self.__n_modified,
            "updatedExisting": self.__updated_existing,
            "err": self.__err,
            "errmsg": self.__errmsg,
            "lastOp": self.__last_op,
            "raw": self.__raw_result,
        }

    def __getitem__(self, key: str) -> Any:
        if key not in _RESULT_KEYS:
            raise KeyError(key)
        return self.as_dict()[key]

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, CrudResult):
            return self.as_dict() == other.as_dict()
        return NotImplemented

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(ok={self.__ok!r}, n={self.__n!r}, "
            f"nModified={self.__n_modified!r}, updatedExisting={self.__updated_existing!r}, "
            f"err={self.__err!r}, lastOp={self.__last_op!r})"
        )
