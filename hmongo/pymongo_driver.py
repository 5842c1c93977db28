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

"""A :class:`~hmongo.driver.Driver` backed by a PyMongo collection.

Usage::

  >>> from pymongo import MongoClient
  >>> from hmongo import Collection
  >>> from hmongo.pymongo_driver import PyMongoDriver
  >>> client = MongoClient()
  >>> people = Collection(PyMongoDriver(client.test.people), "people", "test")
  >>> people.insert({"name": "Ada"})
  True

Encoded documents are handed to PyMongo as
:class:`bson.raw_bson.RawBSONDocument` so they reach the server byte for
byte as :mod:`hbson` produced them.
"""
from __future__ import annotations

import threading
from typing import Any, Optional

import bson
from bson.errors import BSONError
from bson.raw_bson import RawBSONDocument
from pymongo.collection import Collection as _PyMongoCollection
from pymongo.errors import PyMongoError
from pymongo.write_concern import WriteConcern as _PyMongoWriteConcern

from hmongo.driver import DeleteMode, Driver, UpdateFlags
from hmongo.errors import DriverError
from hmongo.write_concern import WriteConcern


def _translate(exc: Exception) -> DriverError:
    return DriverError(str(exc), getattr(exc, "code", None), getattr(exc, "details", None))


class PyMongoDriver(Driver):
    """Submit writes through a :class:`pymongo.collection.Collection`.

    The reply of the most recent update is kept per thread and handed
    back by :meth:`fetch_last_operation_result`.

    :param collection: the PyMongo collection writes are applied to
    """

    def __init__(self, collection: _PyMongoCollection) -> None:
        if not isinstance(collection, _PyMongoCollection):
            raise TypeError(
                f"collection must be an instance of pymongo.collection.Collection, not {type(collection)}"
            )
        self.__collection = collection
        self.__local = threading.local()

    @property
    def collection(self) -> _PyMongoCollection:
        return self.__collection

    def _collection_for(self, write_concern: WriteConcern) -> _PyMongoCollection:
        if write_concern.is_server_default:
            return self.__collection
        return self.__collection.with_options(
            write_concern=_PyMongoWriteConcern(**write_concern.document)
        )

    def submit_insert(self, raw: bytes, write_concern: WriteConcern) -> None:
        try:
            self._collection_for(write_concern).insert_one(RawBSONDocument(raw))
        except (PyMongoError, BSONError) as exc:
            raise _translate(exc) from exc

    def submit_delete(
        self, raw: bytes, delete_mode: DeleteMode, write_concern: WriteConcern
    ) -> None:
        collection = self._collection_for(write_concern)
        try:
            selector = RawBSONDocument(raw)
            if delete_mode == DeleteMode.SINGLE_REMOVE:
                collection.delete_one(selector)
            else:
                collection.delete_many(selector)
        except (PyMongoError, BSONError) as exc:
            raise _translate(exc) from exc

    def submit_update(
        self,
        raw_selector: bytes,
        raw_update: bytes,
        update_flags: UpdateFlags,
        write_concern: WriteConcern,
    ) -> None:
        collection = self._collection_for(write_concern)
        upsert = bool(update_flags & UpdateFlags.UPSERT)
        multi = bool(update_flags & UpdateFlags.MULTI_UPDATE)
        try:
            selector = RawBSONDocument(raw_selector)
            update = RawBSONDocument(raw_update)
            first_key: Optional[str] = next(iter(update), None)
            if first_key is not None and first_key.startswith("$"):
                if multi:
                    result = collection.update_many(selector, update, upsert=upsert)
                else:
                    result = collection.update_one(selector, update, upsert=upsert)
            else:
                if multi:
                    raise DriverError("multi update only works with $ operators")
                result = collection.replace_one(selector, update, upsert=upsert)
        except (PyMongoError, BSONError) as exc:
            raise _translate(exc) from exc

        reply: dict[str, Any] = {"ok": 1}
        if result.acknowledged:
            reply["nMatched"] = result.matched_count
            reply["nModified"] = result.modified_count
            reply["nUpserted"] = 0 if result.upserted_id is None else 1
        self.__local.last_reply = bson.encode(reply)

    def fetch_last_operation_result(self) -> bytes:
        try:
            return self.__local.last_reply
        except AttributeError:
            raise DriverError("no update has been submitted on this thread") from None
