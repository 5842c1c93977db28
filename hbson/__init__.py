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

"""BSON (Binary JSON) encoding and decoding.

The mapping from Python types to BSON types is as follows:

=======================================  =============  ===================
Python Type                              BSON Type      Supported Direction
=======================================  =============  ===================
None                                     null           both
bool                                     boolean        both
int [#int]_                              int32 / int64  py -> bson
:class:`hbson.int64.Int64`               int64          both
float                                    number (real)  both
str                                      string         both
list                                     array          both
dict / :class:`hbson.son.SON`            object         both
:class:`hbson.binary.Binary`             binary         both
bytes                                    binary (0)     py -> bson
:class:`hbson.objectid.ObjectId`         oid            both
:class:`hbson.datetime_ms.DateTime`      date           both
datetime.datetime                        date           py -> bson
:class:`hbson.regex.Regex`               regex          both
:class:`hbson.dbpointer.DBPointer`       dbpointer      both
:class:`hbson.code.Code`                 code           both
:class:`hbson.timestamp.Timestamp`       timestamp      both
:class:`hbson.min_key.MinKey`            min key        both
:class:`hbson.max_key.MaxKey`            max key        both
=======================================  =============  ===================

.. [#int] A Python int will be saved as a BSON int32 if it fits in the
   int32 range, otherwise it is saved as int64. BSON int32 values decode
   to int and BSON int64 values decode to :class:`~hbson.int64.Int64`, so
   the width of every decoded integer survives being written back.

Extended values are built during decoding by the
:class:`~hbson.factory.TypeFactory` carried in the
:class:`~hbson.codec_options.CodecOptions` passed to each call.
"""
from __future__ import annotations

import datetime
import itertools
import struct
import sys
from codecs import utf_8_decode as _utf_8_decode
from codecs import utf_8_encode as _utf_8_encode
from collections.abc import Mapping as _Mapping
from typing import (
    Any,
    Callable,
    Dict,
    Generator,
    Iterator,
    List,
    Mapping,
    NoReturn,
    Tuple,
    Type,
    Union,
)

from hbson.binary import OLD_BINARY_SUBTYPE, Binary
from hbson.code import Code
from hbson.codec_options import DEFAULT_CODEC_OPTIONS, CodecOptions
from hbson.datetime_ms import DateTime, _datetime_to_millis
from hbson.dbpointer import DBPointer
from hbson.errors import InvalidBSON, InvalidDocument, InvalidStringData
from hbson.factory import DEFAULT_TYPE_FACTORY, TypeFactory
from hbson.int64 import Int64
from hbson.max_key import MaxKey
from hbson.min_key import MinKey
from hbson.objectid import ObjectId
from hbson.regex import Regex
from hbson.son import SON
from hbson.timestamp import Timestamp

__all__ = [
    "ObjectId",
    "Binary",
    "Code",
    "CodecOptions",
    "DEFAULT_CODEC_OPTIONS",
    "DateTime",
    "DBPointer",
    "InvalidBSON",
    "InvalidDocument",
    "InvalidStringData",
    "Int64",
    "MaxKey",
    "MinKey",
    "Regex",
    "SON",
    "Timestamp",
    "TypeFactory",
    "DEFAULT_TYPE_FACTORY",
    "BSONNUM",
    "BSONSTR",
    "BSONOBJ",
    "BSONARR",
    "BSONBIN",
    "BSONUND",
    "BSONOID",
    "BSONBOO",
    "BSONDAT",
    "BSONNUL",
    "BSONRGX",
    "BSONREF",
    "BSONCOD",
    "BSONSYM",
    "BSONCWS",
    "BSONINT",
    "BSONTIM",
    "BSONLON",
    "BSONMIN",
    "BSONMAX",
    "encode",
    "decode",
    "decode_array",
    "decode_all",
    "decode_iter",
    "gen_list_name",
    "is_valid",
    "BSON",
]

BSONNUM = b"\x01"  # Floating point
BSONSTR = b"\x02"  # UTF-8 string
BSONOBJ = b"\x03"  # Embedded document
BSONARR = b"\x04"  # Array
BSONBIN = b"\x05"  # Binary
BSONUND = b"\x06"  # Undefined
BSONOID = b"\x07"  # ObjectId
BSONBOO = b"\x08"  # Boolean
BSONDAT = b"\x09"  # UTC Datetime
BSONNUL = b"\x0A"  # Null
BSONRGX = b"\x0B"  # Regex
BSONREF = b"\x0C"  # DBPointer
BSONCOD = b"\x0D"  # Javascript code
BSONSYM = b"\x0E"  # Symbol
BSONCWS = b"\x0F"  # Javascript code with scope
BSONINT = b"\x10"  # 32bit int
BSONTIM = b"\x11"  # Timestamp
BSONLON = b"\x12"  # 64bit int
BSONMIN = b"\xFF"  # Min key
BSONMAX = b"\x7F"  # Max key


_UNPACK_FLOAT_FROM = struct.Struct("<d").unpack_from
_UNPACK_INT = struct.Struct("<i").unpack
_UNPACK_INT_FROM = struct.Struct("<i").unpack_from
_UNPACK_LENGTH_SUBTYPE_FROM = struct.Struct("<iB").unpack_from
_UNPACK_LONG_FROM = struct.Struct("<q").unpack_from
_UNPACK_TIMESTAMP_FROM = struct.Struct("<II").unpack_from

_ReadableBuffer = Union[bytes, bytearray, memoryview]


def _raise_unknown_type(element_type: int, element_name: str) -> NoReturn:
    """Unknown type helper."""
    raise InvalidBSON(
        "Detected unknown BSON type {!r} for fieldname '{}'.".format(
            bytes([element_type]), element_name
        )
    )


def _get_int(data: Any, position: int, dummy0: Any, dummy1: Any) -> Tuple[int, int]:
    """Decode a BSON int32 to python int."""
    return _UNPACK_INT_FROM(data, position)[0], position + 4


def _get_c_string(data: Any, position: int, opts: CodecOptions) -> Tuple[str, int]:
    """Decode a BSON 'C' string to python str."""
    end = data.index(b"\x00", position)
    return _utf_8_decode(data[position:end], opts.unicode_decode_error_handler, True)[0], end + 1


def _get_float(data: Any, position: int, dummy0: Any, dummy1: Any) -> Tuple[float, int]:
    """Decode a BSON double to python float."""
    return _UNPACK_FLOAT_FROM(data, position)[0], position + 8


def _get_string(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[str, int]:
    """Decode a BSON string to python str."""
    length = _UNPACK_INT_FROM(data, position)[0]
    position += 4
    if length < 1 or obj_end - position < length:
        raise InvalidBSON("invalid string length")
    end = position + length - 1
    if data[end] != 0:
        raise InvalidBSON("invalid end of string")
    return _utf_8_decode(data[position:end], opts.unicode_decode_error_handler, True)[0], end + 1


def _get_object_size(data: Any, position: int, obj_end: int) -> Tuple[int, int]:
    """Validate and return a BSON document's size."""
    try:
        obj_size = _UNPACK_INT_FROM(data, position)[0]
    except struct.error as exc:
        raise InvalidBSON(str(exc)) from None
    end = position + obj_size - 1
    if obj_size < 5 or end >= obj_end:
        raise InvalidBSON("invalid object length")
    if data[end] != 0:
        raise InvalidBSON("bad eoo")
    return obj_size, end


def _get_object(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON subdocument to opts.document_class."""
    obj_size, end = _get_object_size(data, position, obj_end)
    obj = _elements_to_dict(data, position + 4, end + 1, opts)
    return obj, position + obj_size


def _get_array(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON array to python list."""
    size, end = _get_object_size(data, position, obj_end)
    return _elements_to_list(data, position + 4, end + 1, opts), position + size


def _get_binary(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON binary through the type factory."""
    length, subtype = _UNPACK_LENGTH_SUBTYPE_FROM(data, position)
    position += 5
    if subtype == OLD_BINARY_SUBTYPE:
        length2 = _UNPACK_INT_FROM(data, position)[0]
        position += 4
        if length2 != length - 4:
            raise InvalidBSON("invalid binary (st 2) - lengths don't match!")
        length = length2
    end = position + length
    if length < 0 or end > obj_end:
        raise InvalidBSON("bad binary object length")
    return opts.type_factory.binary(bytes(data[position:end]), subtype), end


def _get_oid_hex(data: Any, position: int, obj_end: int) -> Tuple[str, int]:
    end = position + 12
    if end > obj_end:
        raise InvalidBSON("bad ObjectId length")
    return bytes(data[position:end]).hex(), end


def _get_oid(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON ObjectId through the type factory."""
    hex_string, end = _get_oid_hex(data, position, obj_end)
    return opts.type_factory.object_id(hex_string), end


def _get_boolean(data: Any, position: int, dummy0: Any, dummy1: Any) -> Tuple[bool, int]:
    """Decode a BSON true/false to python True/False."""
    end = position + 1
    boolean_byte = data[position:end]
    if boolean_byte == b"\x00":
        return False, end
    elif boolean_byte == b"\x01":
        return True, end
    raise InvalidBSON("invalid boolean value: %r" % boolean_byte)


def _get_date(data: Any, position: int, dummy: Any, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON datetime through the type factory.

    The raw value is milliseconds since the epoch; the factory receives it
    split into whole seconds and a microsecond component.
    """
    millis = _UNPACK_LONG_FROM(data, position)[0]
    return opts.type_factory.date_time(millis // 1000, (millis % 1000) * 1000), position + 8


def _get_code(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON code through the type factory."""
    code, position = _get_string(data, position, obj_end, opts)
    return opts.type_factory.code(code), position


def _get_code_w_scope(
    data: Any, position: int, obj_end: int, opts: CodecOptions
) -> Tuple[Any, int]:
    """Decode a BSON code_w_scope through the type factory."""
    code_end = position + _UNPACK_INT_FROM(data, position)[0]
    code, position = _get_string(data, position + 4, code_end, opts)
    scope, position = _get_object(data, position, code_end, opts)
    if position != code_end:
        raise InvalidBSON("scope outside of javascript code boundaries")
    return opts.type_factory.code(code, scope), position


def _get_regex(data: Any, position: int, dummy0: Any, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON regex through the type factory as ``/pattern/options``."""
    pattern, position = _get_c_string(data, position, opts)
    bson_flags, position = _get_c_string(data, position, opts)
    return opts.type_factory.regex("/" + pattern + "/" + bson_flags), position


def _get_ref(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode (deprecated) BSON DBPointer through the type factory."""
    collection, position = _get_string(data, position, obj_end, opts)
    hex_string, position = _get_oid_hex(data, position, obj_end)
    return opts.type_factory.db_pointer(collection, hex_string), position


def _get_timestamp(data: Any, position: int, dummy0: Any, opts: CodecOptions) -> Tuple[Any, int]:
    """Decode a BSON timestamp through the type factory."""
    inc, timestamp = _UNPACK_TIMESTAMP_FROM(data, position)
    return opts.type_factory.timestamp(timestamp, inc), position + 8


def _get_int64(data: Any, position: int, dummy0: Any, dummy1: Any) -> Tuple[Int64, int]:
    """Decode a BSON int64 to hbson.int64.Int64."""
    return Int64(_UNPACK_LONG_FROM(data, position)[0]), position + 8


# Each decoder function's signature is:
#   - data: bytes
#   - position: int, beginning of object in 'data' to decode
#   - obj_end: int, end of object to decode in 'data' if variable-length type
#   - opts: a CodecOptions
_ELEMENT_GETTER: Dict[int, Callable[..., Tuple[Any, int]]] = {
    ord(BSONNUM): _get_float,
    ord(BSONSTR): _get_string,
    ord(BSONOBJ): _get_object,
    ord(BSONARR): _get_array,
    ord(BSONBIN): _get_binary,
    ord(BSONUND): lambda u, v, w, x: (None, v),  # Deprecated undefined
    ord(BSONOID): _get_oid,
    ord(BSONBOO): _get_boolean,
    ord(BSONDAT): _get_date,
    ord(BSONNUL): lambda u, v, w, x: (None, v),
    ord(BSONRGX): _get_regex,
    ord(BSONREF): _get_ref,  # Deprecated DBPointer
    ord(BSONCOD): _get_code,
    ord(BSONSYM): _get_string,  # Deprecated symbol
    ord(BSONCWS): _get_code_w_scope,
    ord(BSONINT): _get_int,
    ord(BSONTIM): _get_timestamp,
    ord(BSONLON): _get_int64,
    ord(BSONMIN): lambda u, v, w, x: (x.type_factory.min_key(), v),
    ord(BSONMAX): lambda u, v, w, x: (x.type_factory.max_key(), v),
}


def _element_to_dict(
    data: Any, position: int, obj_end: int, opts: CodecOptions
) -> Tuple[str, Any, int]:
    """Decode a single key, value pair."""
    element_type = data[position]
    position += 1
    element_name, position = _get_c_string(data, position, opts)
    try:
        getter = _ELEMENT_GETTER[element_type]
    except KeyError:
        _raise_unknown_type(element_type, element_name)
    value, position = getter(data, position, obj_end, opts)
    return element_name, value, position


def _elements_to_dict(data: Any, position: int, obj_end: int, opts: CodecOptions) -> Any:
    """Decode a BSON document into opts.document_class."""
    result = opts.document_class()
    end = obj_end - 1
    while position < end:
        key, value, position = _element_to_dict(data, position, obj_end, opts)
        result[key] = value
    if position != end:
        raise InvalidBSON("bad object or element length")
    return result


def _elements_to_list(data: Any, position: int, obj_end: int, opts: CodecOptions) -> List[Any]:
    """Decode the elements of a BSON array, skipping their keys."""
    result: List[Any] = []
    end = obj_end - 1

    # Avoid doing global and attribute lookups in the loop.
    append = result.append
    index = data.index
    getter = _ELEMENT_GETTER

    while position < end:
        element_type = data[position]
        # Just skip the keys.
        position = index(b"\x00", position) + 1
        try:
            value, position = getter[element_type](data, position, obj_end, opts)
        except KeyError:
            _raise_unknown_type(element_type, "array element")
        append(value)
    if position != end:
        raise InvalidBSON("bad array length")
    return result


def _decode_top_level(
    data: Any, opts: CodecOptions, elements: Callable[[Any, int, int, CodecOptions], Any]
) -> Any:
    """Validate the outer frame of one BSON document and decode its body."""
    if len(data) < 5:
        raise InvalidBSON("not enough data for a BSON document")
    obj_size = _UNPACK_INT(data[:4])[0]
    if obj_size != len(data):
        raise InvalidBSON("invalid object size")
    if data[obj_size - 1] != 0:
        raise InvalidBSON("bad eoo")
    try:
        return elements(data, 4, obj_size, opts)
    except (InvalidBSON, RecursionError):
        # Too-deep nesting is not malformed input.
        raise
    except Exception:
        # Change exception type to InvalidBSON but preserve traceback.
        _, exc_value, exc_tb = sys.exc_info()
        raise InvalidBSON(str(exc_value)).with_traceback(exc_tb) from exc_value


def _bson_to_dict(data: Any, opts: CodecOptions) -> Any:
    """Decode a BSON string to document_class."""
    return _decode_top_level(data, opts, _elements_to_dict)


_PACK_FLOAT = struct.Struct("<d").pack
_PACK_INT = struct.Struct("<i").pack
_PACK_LENGTH_SUBTYPE = struct.Struct("<iB").pack
_PACK_LONG = struct.Struct("<q").pack
_PACK_TIMESTAMP = struct.Struct("<II").pack
_LIST_NAMES = tuple((str(i) + "\x00").encode("utf8") for i in range(1000))


def gen_list_name() -> Generator[bytes, None, None]:
    """Generate "keys" for encoded lists in the sequence
    b"0\x00", b"1\x00", b"2\x00", ...

    The first 1000 keys are returned from a pre-built cache. All
    subsequent keys are generated on the fly.
    """
    yield from _LIST_NAMES

    counter = itertools.count(1000)
    while True:
        yield (str(next(counter)) + "\x00").encode("utf8")


def _make_c_string_check(string: str) -> bytes:
    """Make a 'C' string, checking for embedded NUL characters."""
    if "\x00" in string:
        raise InvalidDocument("BSON keys / regex patterns must not contain a NUL character")
    try:
        return _utf_8_encode(string)[0] + b"\x00"
    except UnicodeEncodeError:
        raise InvalidStringData("strings in documents must be valid UTF-8: %r" % string) from None


def _make_name(string: str) -> bytes:
    """Make a 'C' string suitable for a BSON key."""
    if "\x00" in string:
        raise InvalidDocument("BSON keys must not contain a NUL character")
    try:
        return _utf_8_encode(string)[0] + b"\x00"
    except UnicodeEncodeError:
        raise InvalidStringData("strings in documents must be valid UTF-8: %r" % string) from None


def _encode_float(name: bytes, value: float, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a float."""
    return b"\x01" + name + _PACK_FLOAT(value)


def _encode_bytes(name: bytes, value: bytes, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a python bytes."""
    # Python3 special case. Store 'bytes' as BSON binary subtype 0.
    return b"\x05" + name + _PACK_INT(len(value)) + b"\x00" + value


def _encode_mapping(name: bytes, value: Any, check_keys: bool, opts: CodecOptions) -> bytes:
    """Encode a mapping type."""
    data = b"".join([_element_to_bson(key, val, check_keys, opts) for key, val in value.items()])
    return b"\x03" + name + _PACK_INT(len(data) + 5) + data + b"\x00"


def _encode_list(name: bytes, value: Any, check_keys: bool, opts: CodecOptions) -> bytes:
    """Encode a list/tuple."""
    lname = gen_list_name()
    data = b"".join([_name_value_to_bson(next(lname), item, check_keys, opts) for item in value])
    return b"\x04" + name + _PACK_INT(len(data) + 5) + data + b"\x00"


def _encode_text(name: bytes, value: str, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a python str."""
    try:
        bvalue = _utf_8_encode(value)[0]
    except UnicodeEncodeError:
        raise InvalidStringData("strings in documents must be valid UTF-8: %r" % value) from None
    return b"\x02" + name + _PACK_INT(len(bvalue) + 1) + bvalue + b"\x00"


def _encode_binary(name: bytes, value: Binary, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.binary.Binary."""
    subtype = value.subtype
    if subtype == OLD_BINARY_SUBTYPE:
        value = _PACK_INT(len(value)) + value  # type: ignore
    return b"\x05" + name + _PACK_LENGTH_SUBTYPE(len(value), subtype) + value


def _encode_objectid(name: bytes, value: ObjectId, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.objectid.ObjectId."""
    return b"\x07" + name + value.binary


def _encode_bool(name: bytes, value: bool, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a python boolean (True/False)."""
    return b"\x08" + name + (value and b"\x01" or b"\x00")


def _encode_datetime(name: bytes, value: datetime.datetime, dummy0: Any, dummy1: Any) -> bytes:
    """Encode datetime.datetime."""
    return _encode_millis(name, _datetime_to_millis(value))


def _encode_datetime_ms(name: bytes, value: DateTime, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.datetime_ms.DateTime."""
    return _encode_millis(name, value.millis)


def _encode_millis(name: bytes, millis: int) -> bytes:
    try:
        return b"\x09" + name + _PACK_LONG(millis)
    except struct.error:
        raise OverflowError("BSON datetimes must fit in 8 bytes") from None


def _encode_none(name: bytes, dummy0: Any, dummy1: Any, dummy2: Any) -> bytes:
    """Encode python None."""
    return b"\x0A" + name


def _encode_regex(name: bytes, value: Regex, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.regex.Regex, keeping its options string verbatim."""
    return b"\x0B" + name + _make_c_string_check(value.pattern) + _make_c_string_check(value.flags)


def _encode_dbpointer(name: bytes, value: DBPointer, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.dbpointer.DBPointer."""
    try:
        collection = _utf_8_encode(value.collection)[0]
    except UnicodeEncodeError:
        raise InvalidStringData(
            "strings in documents must be valid UTF-8: %r" % value.collection
        ) from None
    return (
        b"\x0C"
        + name
        + _PACK_INT(len(collection) + 1)
        + collection
        + b"\x00"
        + value.id.binary
    )


def _encode_code(name: bytes, value: Code, dummy: Any, opts: CodecOptions) -> bytes:
    """Encode hbson.code.Code."""
    cstring = _make_c_string_check(value)
    cstrlen = len(cstring)
    if value.scope is None:
        return b"\x0D" + name + _PACK_INT(cstrlen) + cstring
    scope = _dict_to_bson(value.scope, False, opts, False)
    full_length = _PACK_INT(8 + cstrlen + len(scope))
    return b"\x0F" + name + full_length + _PACK_INT(cstrlen) + cstring + scope


def _encode_int(name: bytes, value: int, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a python int."""
    if -2147483648 <= value <= 2147483647:
        return b"\x10" + name + _PACK_INT(value)
    else:
        try:
            return b"\x12" + name + _PACK_LONG(value)
        except struct.error:
            raise OverflowError("BSON can only handle up to 8-byte ints") from None


def _encode_timestamp(name: bytes, value: Timestamp, dummy0: Any, dummy1: Any) -> bytes:
    """Encode hbson.timestamp.Timestamp."""
    return b"\x11" + name + _PACK_TIMESTAMP(value.inc, value.time)


def _encode_long(name: bytes, value: Any, dummy0: Any, dummy1: Any) -> bytes:
    """Encode a hbson.int64.Int64."""
    try:
        return b"\x12" + name + _PACK_LONG(value)
    except struct.error:
        raise OverflowError("BSON can only handle up to 8-byte ints") from None


def _encode_minkey(name: bytes, dummy0: Any, dummy1: Any, dummy2: Any) -> bytes:
    """Encode hbson.min_key.MinKey."""
    return b"\xFF" + name


def _encode_maxkey(name: bytes, dummy0: Any, dummy1: Any, dummy2: Any) -> bytes:
    """Encode hbson.max_key.MaxKey."""
    return b"\x7F" + name


# Each encoder function's signature is:
#   - name: utf-8 bytes
#   - value: a Python data type, e.g. a Python int for _encode_int
#   - check_keys: bool, whether to check for invalid names
#   - opts: a CodecOptions
_ENCODERS: Dict[Type[Any], Callable[[bytes, Any, bool, CodecOptions], bytes]] = {
    bool: _encode_bool,
    bytes: _encode_bytes,
    datetime.datetime: _encode_datetime,
    dict: _encode_mapping,
    float: _encode_float,
    int: _encode_int,
    list: _encode_list,
    str: _encode_text,
    tuple: _encode_list,
    type(None): _encode_none,
    Binary: _encode_binary,
    Int64: _encode_long,
    Code: _encode_code,
    DateTime: _encode_datetime_ms,
    DBPointer: _encode_dbpointer,
    MaxKey: _encode_maxkey,
    MinKey: _encode_minkey,
    ObjectId: _encode_objectid,
    Regex: _encode_regex,
    SON: _encode_mapping,
    Timestamp: _encode_timestamp,
    # Special case. This will never be looked up directly.
    _Mapping: _encode_mapping,
}

# Map each _type_marker to its encoder for faster lookup.
_MARKERS: Dict[int, Callable[[bytes, Any, bool, CodecOptions], bytes]] = {}
for _typ in _ENCODERS:
    if hasattr(_typ, "_type_marker"):
        _MARKERS[_typ._type_marker] = _ENCODERS[_typ]

_BUILT_IN_ENCODERS = tuple(_ENCODERS.items())


def _name_value_to_bson(name: bytes, value: Any, check_keys: bool, opts: CodecOptions) -> bytes:
    """Encode a single name, value pair."""

    # First see if the type is already cached. KeyError will only ever
    # happen once per subtype.
    try:
        return _ENCODERS[type(value)](name, value, check_keys, opts)
    except KeyError:
        pass

    # Second, fall back to trying _type_marker. This has to be done
    # before the loop below since users could subclass one of our
    # custom types that subclasses a python built-in (e.g. Binary)
    marker = getattr(value, "_type_marker", None)
    if isinstance(marker, int) and marker in _MARKERS:
        func = _MARKERS[marker]
        # Cache this type for faster subsequent lookup.
        _ENCODERS[type(value)] = func
        return func(name, value, check_keys, opts)

    # If all else fails test each base type. This will only happen once for
    # a subtype of a supported base type.
    for base, encoder in _BUILT_IN_ENCODERS:
        if isinstance(value, base):
            # Cache this type for faster subsequent lookup.
            _ENCODERS[type(value)] = encoder
            return encoder(name, value, check_keys, opts)

    raise InvalidDocument(f"cannot encode object: {value!r}, of type: {type(value)!r}", value)


def _element_to_bson(key: Any, value: Any, check_keys: bool, opts: CodecOptions) -> bytes:
    """Encode a single key, value pair."""
    if not isinstance(key, str):
        raise InvalidDocument(f"documents must have only string keys, key was {key!r}")
    if check_keys:
        if key.startswith("$"):
            raise InvalidDocument(f"key {key!r} must not start with '$'")
        if "." in key:
            raise InvalidDocument(f"key {key!r} must not contain '.'")

    name = _make_name(key)
    return _name_value_to_bson(name, value, check_keys, opts)


def _dict_to_bson(doc: Any, check_keys: bool, opts: CodecOptions, top_level: bool = True) -> bytes:
    """Encode a document to BSON."""
    if not isinstance(doc, _Mapping):
        raise TypeError(f"encoder expected a mapping type but got: {doc!r}")
    elements = []
    if top_level and "_id" in doc:
        elements.append(_name_value_to_bson(b"_id\x00", doc["_id"], check_keys, opts))
    for key, value in doc.items():
        if not top_level or key != "_id":
            elements.append(_element_to_bson(key, value, check_keys, opts))

    encoded = b"".join(elements)
    return _PACK_INT(len(encoded) + 5) + encoded + b"\x00"


_CODEC_OPTIONS_TYPE_ERROR = TypeError("codec_options must be an instance of CodecOptions")


def encode(
    document: Mapping[str, Any],
    check_keys: bool = False,
    codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS,
) -> bytes:
    """Encode a document to BSON.

    A document can be any mapping type (like :class:`dict`). Keys are
    written in iteration order, except that a top level ``"_id"`` is always
    written first. The document is never modified.

    Raises :class:`TypeError` if `document` is not a mapping type. Raises
    :class:`~hbson.errors.InvalidDocument` if `document` has a key that is
    not a :class:`str` or holds a value that has no BSON representation,
    and :class:`OverflowError` for an integer or datetime that does not fit
    in 8 bytes. Strings that are not valid UTF-8 raise
    :class:`~hbson.errors.InvalidStringData`. A document nested too deeply
    to encode raises :class:`RecursionError`.

    :param document: mapping type representing a document
    :param check_keys: check if keys start with '$' or
      contain '.', raising :class:`~hbson.errors.InvalidDocument` in
      either case
    :param codec_options: An instance of
      :class:`~hbson.codec_options.CodecOptions`.
    """
    if not isinstance(codec_options, CodecOptions):
        raise _CODEC_OPTIONS_TYPE_ERROR

    return _dict_to_bson(document, check_keys, codec_options)


def decode(data: _ReadableBuffer, codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS) -> Any:
    """Decode BSON to a document.

    By default, returns a BSON document represented as a Python
    :class:`dict`. To use a different :class:`MutableMapping` class,
    configure a :class:`~hbson.codec_options.CodecOptions`::

        >>> import hbson
        >>> from hbson.son import SON
        >>> from hbson.codec_options import CodecOptions
        >>> data = hbson.encode({'a': 1})
        >>> decoded_doc = hbson.decode(data)
        >>> type(decoded_doc)
        <class 'dict'>
        >>> options = CodecOptions(document_class=SON)
        >>> decoded_doc = hbson.decode(data, codec_options=options)
        >>> type(decoded_doc)
        <class 'hbson.son.SON'>

    Raises :class:`~hbson.errors.InvalidBSON` if `data` is truncated, its
    length prefix disagrees with its size, or it holds an unknown element
    type. No partial document is ever returned.

    :param data: the BSON to decode. Any bytes-like object that implements
      the buffer protocol.
    :param codec_options: An instance of
      :class:`~hbson.codec_options.CodecOptions`.
    """
    if not isinstance(codec_options, CodecOptions):
        raise _CODEC_OPTIONS_TYPE_ERROR

    return _bson_to_dict(bytes(data), codec_options)


def decode_array(
    data: _ReadableBuffer, codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS
) -> List[Any]:
    """Decode one BSON document to a list of its values, in order.

    This is how a top level BSON array is read: the wire value is a
    document whose keys are ``"0"``, ``"1"``, ... The keys themselves are
    skipped rather than checked.

    :param data: the BSON to decode.
    :param codec_options: An instance of
      :class:`~hbson.codec_options.CodecOptions`.
    """
    if not isinstance(codec_options, CodecOptions):
        raise _CODEC_OPTIONS_TYPE_ERROR

    return _decode_top_level(bytes(data), codec_options, _elements_to_list)


def _split_documents(data: bytes) -> Iterator[bytes]:
    """Yield each BSON document in a buffer of concatenated documents."""
    position = 0
    end = len(data)
    while position < end:
        if end - position < 5:
            raise InvalidBSON("not enough data for a BSON document")
        obj_size = _UNPACK_INT_FROM(data, position)[0]
        if obj_size < 5 or end - position < obj_size:
            raise InvalidBSON("invalid object size")
        yield data[position : position + obj_size]
        position += obj_size


def decode_all(
    data: _ReadableBuffer, codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS
) -> List[Any]:
    """Decode BSON data to multiple documents.

    `data` must be a bytes-like object implementing the buffer protocol that
    provides concatenated, valid, BSON-encoded documents.

    :param data: BSON data
    :param codec_options: An instance of
      :class:`~hbson.codec_options.CodecOptions`.
    """
    return list(decode_iter(data, codec_options))


def decode_iter(
    data: _ReadableBuffer, codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS
) -> Iterator[Any]:
    """Decode BSON data to multiple documents as a generator.

    Works similarly to the decode_all function, but yields one document at a
    time.

    :param data: BSON data
    :param codec_options: An instance of
      :class:`~hbson.codec_options.CodecOptions`.
    """
    if not isinstance(codec_options, CodecOptions):
        raise _CODEC_OPTIONS_TYPE_ERROR

    for elements in _split_documents(bytes(data)):
        yield _bson_to_dict(elements, codec_options)


def is_valid(bson: bytes) -> bool:
    """Check that the given string represents valid :class:`BSON` data.

    Raises :class:`TypeError` if `bson` is not an instance of
    :class:`bytes`. Returns ``True`` if `bson` is valid :class:`BSON`,
    ``False`` otherwise.

    :param bson: the data to be validated
    """
    if not isinstance(bson, bytes):
        raise TypeError("BSON data must be an instance of a subclass of bytes")

    try:
        _bson_to_dict(bson, DEFAULT_CODEC_OPTIONS)
        return True
    except InvalidBSON:
        return False


class BSON(bytes):
    """BSON (Binary JSON) data.

    .. warning:: Using this class to encode and decode BSON adds a
       performance cost. For better performance use the module level
       functions :func:`encode` and :func:`decode` instead.
    """

    @classmethod
    def encode(
        cls: Type[BSON],
        document: Mapping[str, Any],
        check_keys: bool = False,
        codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS,
    ) -> BSON:
        """Encode a document to a new :class:`BSON` instance.

        :param document: mapping type representing a document
        :param check_keys: check if keys start with '$' or
          contain '.', raising :class:`~hbson.errors.InvalidDocument` in
          either case
        :param codec_options: An instance of
          :class:`~hbson.codec_options.CodecOptions`.
        """
        return cls(encode(document, check_keys, codec_options))

    def decode(self, codec_options: CodecOptions = DEFAULT_CODEC_OPTIONS) -> Any:  # type: ignore[override]
        """Decode this BSON data.

        :param codec_options: An instance of
          :class:`~hbson.codec_options.CodecOptions`.
        """
        return decode(self, codec_options)
