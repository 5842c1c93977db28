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

"""Tools for the deprecated BSON DBPointer type."""
from __future__ import annotations

from typing import Any, Union

from hbson.objectid import ObjectId


class DBPointer:
    """A legacy reference to a document: a collection name plus an ObjectId.

    This is the BSON DBPointer element (type ``0x0C``), not the
    ``{"$ref": ..., "$id": ...}`` convention built by
    :meth:`hmongo.collection.Collection.create_dbref`.
    """

    __slots__ = ("__collection", "__id")

    _type_marker = 12

    def __init__(self, collection: str, id: Union[str, bytes, ObjectId]) -> None:
        """Initialize a new :class:`DBPointer`.

        Raises :class:`TypeError` if `collection` is not an instance of
        :class:`str`.

        :param collection: name of the collection the document is stored in
        :param id: the referenced ObjectId, or its 24 character hex form
        """
        if not isinstance(collection, str):
            raise TypeError(f"collection must be an instance of str, not {type(collection)}")

        self.__collection = collection
        self.__id = ObjectId(id)

    @property
    def collection(self) -> str:
        """Get the name of this DBPointer's collection."""
        return self.__collection

    @property
    def id(self) -> ObjectId:
        """Get this DBPointer's ObjectId."""
        return self.__id

    def __repr__(self) -> str:
        return f"DBPointer({self.__collection!r}, {str(self.__id)!r})"

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, DBPointer):
            return (self.__collection, self.__id) == (other.collection, other.id)
        return NotImplemented

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash((self.__collection, self.__id))
