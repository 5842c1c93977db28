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

"""Collection level write operations."""
from __future__ import annotations

import datetime
from collections.abc import Mapping as _Mapping
from typing import Any, Callable, Iterable, List, Mapping, MutableMapping, Optional, TypeVar, Union

import hbson
from hbson.codec_options import DEFAULT_CODEC_OPTIONS, CodecOptions
from hbson.objectid import ObjectId
from hbson.son import SON
from hmongo import common
from hmongo.driver import Driver, UpdateFlags
from hmongo.errors import DriverError, WriteError
from hmongo.logger import _COMMAND_LOGGER, _CommandStatusMessage, _debug_log
from hmongo.results import CrudResult

_T = TypeVar("_T")


class Collection:
    """A Mongo collection.

    Documents are encoded to BSON here and handed to a
    :class:`~hmongo.driver.Driver`, which performs the actual write.
    """

    def __init__(
        self,
        driver: Driver,
        name: str,
        database: Optional[str] = None,
        codec_options: Optional[CodecOptions] = None,
    ) -> None:
        """Get a Mongo collection.

        Raises :class:`TypeError` if `name` is not an instance of
        :class:`str` or `driver` is not a :class:`~hmongo.driver.Driver`.
        Raises :class:`ValueError` if `name` is empty.

        :param driver: the transport that receives encoded submissions
        :param name: the name of the collection
        :param database: (optional) the name of the database holding the
          collection
        :param codec_options: (optional) An instance of
          :class:`~hbson.codec_options.CodecOptions`. Used to encode
          documents and decode replies.
        """
        if not isinstance(driver, Driver):
            raise TypeError(f"driver must be an instance of hmongo.driver.Driver, not {type(driver)}")
        common.validate_string("name", name)
        if not name:
            raise ValueError("collection names cannot be empty")
        if database is not None:
            common.validate_string("database", database)
        if codec_options is None:
            codec_options = DEFAULT_CODEC_OPTIONS
        elif not isinstance(codec_options, CodecOptions):
            raise TypeError("codec_options must be an instance of hbson.codec_options.CodecOptions")

        self.__driver = driver
        self.__name = name
        self.__database = database
        self.__codec_options = codec_options
        if database:
            self.__full_name = f"{database}.{name}"
        else:
            self.__full_name = name

    def __repr__(self) -> str:
        return f"Collection({self.__database!r}, {self.__name!r})"

    def __str__(self) -> str:
        return self.__full_name

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, Collection):
            return (self.__database, self.__name) == (other.database, other.name)
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self.__database, self.__name))

    @property
    def full_name(self) -> str:
        """The full name of this :class:`Collection`.

        The full name is of the form `database_name.collection_name`, or
        just the collection name when no database was given.
        """
        return self.__full_name

    @property
    def name(self) -> str:
        """The name of this :class:`Collection`."""
        return self.__name

    @property
    def database(self) -> Optional[str]:
        """The name of the database this :class:`Collection` is a part of."""
        return self.__database

    @property
    def driver(self) -> Driver:
        """The :class:`~hmongo.driver.Driver` writes are submitted to."""
        return self.__driver

    @property
    def codec_options(self) -> CodecOptions:
        """Read only access to the :class:`~hbson.codec_options.CodecOptions`
        of this instance.
        """
        return self.__codec_options

    def _encode(self, document: Mapping[str, Any]) -> bytes:
        return hbson.encode(document, codec_options=self.__codec_options)

    def _command(
        self, command_name: str, command: Mapping[str, Any], submit: Callable[[], _T]
    ) -> _T:
        """Run one driver submission, logging it and translating failures."""
        start = datetime.datetime.now()
        _debug_log(
            _COMMAND_LOGGER,
            message=_CommandStatusMessage.STARTED,
            commandName=command_name,
            databaseName=self.__database,
            collectionName=self.__name,
            command=command,
        )
        try:
            reply = submit()
        except DriverError as exc:
            _debug_log(
                _COMMAND_LOGGER,
                message=_CommandStatusMessage.FAILED,
                commandName=command_name,
                databaseName=self.__database,
                collectionName=self.__name,
                durationMS=datetime.datetime.now() - start,
                failure=exc.details if exc.details is not None else {"errmsg": str(exc)},
            )
            raise WriteError._from_driver_error(exc) from exc
        _debug_log(
            _COMMAND_LOGGER,
            message=_CommandStatusMessage.SUCCEEDED,
            commandName=command_name,
            databaseName=self.__database,
            collectionName=self.__name,
            durationMS=datetime.datetime.now() - start,
            reply=reply if isinstance(reply, _Mapping) else {"ok": 1},
        )
        return reply

    def insert(
        self, doc: MutableMapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> bool:
        """Insert a document into this collection.

        An ``"_id"`` holding a new :class:`~hbson.objectid.ObjectId` is
        added to `doc` if it does not already contain one, so the caller
        can read the assigned identifier back from `doc`.

        :param doc: the document to insert, a mutable mapping
        :param options: (optional) write concern keys ``w``, ``wtimeout``,
          ``j`` and ``fsync``

        :return: ``True`` once the driver accepts the document.

        Raises :class:`~hbson.errors.InvalidDocument` when `doc` holds a
        value with no BSON representation, in which case nothing is sent.
        Raises :class:`~hmongo.errors.WriteError` when the driver rejects
        the insert.
        """
        common.validate_is_document_type("doc", doc)
        write_concern = common.resolve_write_concern(options)
        if "_id" not in doc:
            doc["_id"] = ObjectId()
        raw = self._encode(doc)
        self._command(
            "insert",
            SON([("insert", self.__name), ("documents", [doc])]),
            lambda: self.__driver.submit_insert(raw, write_concern),
        )
        return True

    def batch_insert(
        self, docs: Iterable[MutableMapping[str, Any]], options: Optional[Mapping[str, Any]] = None
    ) -> List[bool]:
        """Insert each document of `docs` in turn with :meth:`insert`.

        Every document gets its own ``"_id"`` when it lacks one. The first
        failure is raised and the remaining documents are not sent.

        :return: one result per document, in order.
        """
        if isinstance(docs, _Mapping):
            raise TypeError("docs must be an iterable of documents, not a document")
        return [self.insert(doc, options) for doc in docs]

    def remove(
        self, criteria: Any = None, options: Optional[Mapping[str, Any]] = None
    ) -> bool:
        """Remove documents from this collection.

        If `criteria` is ``None``, all documents in this collection will be
        removed. A value that is not a mapping is taken to be the
        ``"_id"`` of the document to remove.

        :param criteria: (optional) a selector document, or an ``"_id"``
        :param options: (optional) ``justOne`` to remove at most one
          matching document, plus write concern keys

        :return: ``True`` once the driver accepts the delete.
        """
        if criteria is None:
            criteria = {}
        if not isinstance(criteria, _Mapping):
            criteria = {"_id": criteria}
        delete_mode = common.resolve_delete_mode(options)
        write_concern = common.resolve_write_concern(options)
        raw = self._encode(criteria)
        self._command(
            "delete",
            SON([("delete", self.__name), ("q", criteria), ("limit", int(delete_mode))]),
            lambda: self.__driver.submit_delete(raw, delete_mode, write_concern),
        )
        return True

    def update(
        self,
        criteria: Mapping[str, Any],
        new_object: Mapping[str, Any],
        options: Optional[Mapping[str, Any]] = None,
    ) -> CrudResult:
        """Update documents in this collection.

        :param criteria: a selector document
        :param new_object: the update or replacement document
        :param options: (optional) ``upsert`` to insert `new_object` when
          nothing matches, ``multiple`` to update every match, plus write
          concern keys

        :return: a :class:`~hmongo.results.CrudResult` built from the
          driver's reply to this update.
        """
        common.validate_is_mapping("criteria", criteria)
        common.validate_is_mapping("new_object", new_object)
        update_flags = common.resolve_update_flags(options)
        write_concern = common.resolve_write_concern(options)
        raw_selector = self._encode(criteria)
        raw_update = self._encode(new_object)

        def submit() -> bytes:
            self.__driver.submit_update(raw_selector, raw_update, update_flags, write_concern)
            return self.__driver.fetch_last_operation_result()

        raw_reply = self._command(
            "update",
            SON(
                [
                    ("update", self.__name),
                    ("q", criteria),
                    ("u", new_object),
                    ("upsert", bool(update_flags & UpdateFlags.UPSERT)),
                    ("multi", bool(update_flags & UpdateFlags.MULTI_UPDATE)),
                ]
            ),
            submit,
        )
        reply = hbson.decode(raw_reply, self.__codec_options)
        return CrudResult._from_update_reply(reply)

    def save(
        self, doc: MutableMapping[str, Any], options: Optional[Mapping[str, Any]] = None
    ) -> Union[bool, CrudResult]:
        """Save a document in this collection.

        If `doc` already has an ``"_id"`` then an :meth:`update` (upsert)
        operation is performed and any existing document with that
        ``"_id"`` is overwritten. Otherwise an :meth:`insert` operation is
        performed and an ``"_id"`` is added to `doc`.
        """
        common.validate_is_document_type("doc", doc)
        if "_id" not in doc:
            return self.insert(doc, options)
        upsert_options = dict(options or {})
        upsert_options["upsert"] = True
        return self.update({"_id": doc["_id"]}, doc, upsert_options)

    def create_dbref(self, doc_or_id: Any) -> Optional[SON]:
        """Create a database reference to a document in this collection.

        :param doc_or_id: a document holding an ``"_id"``, or the ``"_id"``
          value itself

        :return: ``SON([("$ref", name), ("$id", id), ("$db", database)])``,
          or ``None`` when `doc_or_id` is a document without an ``"_id"``.
        """
        if isinstance(doc_or_id, _Mapping):
            if "_id" not in doc_or_id:
                return None
            doc_or_id = doc_or_id["_id"]
        return SON([("$ref", self.__name), ("$id", doc_or_id), ("$db", self.__database)])
