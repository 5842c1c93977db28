# Copyright 2014-present MongoDB, Inc.
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

"""Tools for specifying BSON codec options."""
from __future__ import annotations

from collections import namedtuple
from collections.abc import MutableMapping as _MutableMapping
from typing import Any

from hbson.factory import DEFAULT_TYPE_FACTORY, TypeFactory

_options_base = namedtuple(  # type: ignore[misc]
    "_options_base",
    ("document_class", "unicode_decode_error_handler", "type_factory"),
)


class CodecOptions(_options_base):
    """Encapsulates options used encoding and / or decoding BSON.

    :param document_class: BSON documents returned by the decoder will be
      instances of this class. Must be a subclass of
      :class:`~collections.abc.MutableMapping`. Defaults to :class:`dict`.
      Use :class:`~hbson.son.SON` for order-sensitive equality.
    :param unicode_decode_error_handler: The error handler to apply when
      a Unicode-related error occurs during BSON decoding that would
      otherwise raise :exc:`UnicodeDecodeError`. Valid options include
      'strict', 'replace', 'backslashreplace', 'surrogateescape', and
      'ignore'. Defaults to 'strict'.
    :param type_factory: The :class:`~hbson.factory.TypeFactory` that
      materializes ObjectId, datetime, regex, binary, DBPointer, code,
      timestamp, MinKey and MaxKey values. Defaults to a factory building
      the hbson types.

    .. warning:: Care must be taken when changing
       `unicode_decode_error_handler` from its default value ('strict').
       The 'replace' and 'ignore' modes should not be used when documents
       retrieved from the server will be modified in the client application
       and stored back to the server.
    """

    def __new__(
        cls: type[CodecOptions],
        document_class: type = dict,
        unicode_decode_error_handler: str = "strict",
        type_factory: TypeFactory = DEFAULT_TYPE_FACTORY,
    ) -> CodecOptions:
        if not (isinstance(document_class, type) and issubclass(document_class, _MutableMapping)):
            raise TypeError(
                "document_class must be dict, hbson.son.SON, or another "
                f"subclass of collections.abc.MutableMapping, not {document_class!r}"
            )
        if not isinstance(unicode_decode_error_handler, str):
            raise ValueError("unicode_decode_error_handler must be a string")
        if not isinstance(type_factory, TypeFactory):
            raise TypeError(
                f"type_factory must be an instance of hbson.factory.TypeFactory, not {type_factory!r}"
            )

        return tuple.__new__(cls, (document_class, unicode_decode_error_handler, type_factory))

    def _arguments_repr(self) -> str:
        document_class_repr = (
            "dict" if self.document_class is dict else repr(self.document_class)
        )
        return "document_class={}, unicode_decode_error_handler={!r}, type_factory={!r}".format(
            document_class_repr,
            self.unicode_decode_error_handler,
            self.type_factory,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._arguments_repr()})"

    def with_options(self, **kwargs: Any) -> CodecOptions:
        """Make a copy of this CodecOptions, overriding some options::

            >>> from hbson.son import SON
            >>> options = DEFAULT_CODEC_OPTIONS.with_options(document_class=SON)
            >>> options.document_class
            <class 'hbson.son.SON'>
        """
        opts = self._asdict()
        opts.update(kwargs)
        return CodecOptions(**opts)


DEFAULT_CODEC_OPTIONS = CodecOptions()

