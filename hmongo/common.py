# Copyright 2011-present MongoDB, Inc.
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

"""Functions and classes common to multiple hmongo modules."""
from __future__ import annotations

from collections.abc import Mapping as _Mapping
from collections.abc import MutableMapping as _MutableMapping
from typing import Any, Mapping, NoReturn, Optional, Union

from hmongo.driver import DeleteMode, UpdateFlags
from hmongo.errors import ConfigurationError
from hmongo.write_concern import DEFAULT_WRITE_CONCERN, WriteConcern


def raise_config_error(key: str, dummy: Any) -> NoReturn:
    """Raise ConfigurationError with the given key name."""
    raise ConfigurationError(f"Unknown option {key}")


def validate_boolean(option: str, value: Any) -> bool:
    """Validates that 'value' is True or False."""
    if isinstance(value, bool):
        return value
    raise TypeError(f"{option} must be True or False, was: {option}={value!r}")


def validate_boolean_or_string(option: str, value: Any) -> bool:
    """Validates that value is True, False, 'true', or 'false'."""
    if isinstance(value, str):
        if value not in ("true", "false"):
            raise ConfigurationError(f"The value of {option} must be 'true' or 'false'")
        return value == "true"
    return validate_boolean(option, value)


def validate_integer(option: str, value: Any) -> int:
    """Validates that 'value' is an integer (or basestring representation)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"The value of {option} must be an integer") from None
    raise TypeError(f"Wrong type for {option}, value must be an integer")


def validate_non_negative_integer(option: str, value: Any) -> int:
    """Validate that 'value' is a positive integer or 0."""
    val = validate_integer(option, value)
    if val < 0:
        raise ConfigurationError(f"The value of {option} must be a non negative integer")
    return val


def validate_non_negative_integer_or_none(option: str, value: Any) -> Optional[int]:
    """Validate that 'value' is a positive integer or 0 or None."""
    if value is None:
        return value
    return validate_non_negative_integer(option, value)


def validate_string(option: str, value: Any) -> str:
    """Validates that 'value' is an instance of `str`."""
    if isinstance(value, str):
        return value
    raise TypeError(f"Wrong type for {option}, value must be an instance of str")


def validate_int_or_basestring(option: str, value: Any) -> Union[int, str]:
    """Validates that 'value' is an integer or string."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    elif isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return value
    raise TypeError(f"Wrong type for {option}, value must be an integer or a string")


def validate_is_mapping(option: str, value: Any) -> None:
    """Validate the type of method arguments that expect a document."""
    if not isinstance(value, _Mapping):
        raise TypeError(
            f"{option} must be an instance of dict, hbson.son.SON, or "
            "any other type that inherits from collections.Mapping"
        )


def validate_is_document_type(option: str, value: Any) -> None:
    """Validate the type of method arguments that expect a mutable document."""
    if not isinstance(value, _MutableMapping):
        raise TypeError(
            f"{option} must be an instance of dict, hbson.son.SON, or "
            "any other type that inherits from collections.MutableMapping"
        )


# Write concern keys accepted in an options mapping. journal is an alias
# for j, wtimeoutms is an alias for wtimeout.
_WRITE_CONCERN_VALIDATORS = {
    "w": ("w", validate_int_or_basestring),
    "wtimeout": ("wtimeout", validate_non_negative_integer_or_none),
    "wtimeoutms": ("wtimeout", validate_non_negative_integer_or_none),
    "j": ("j", validate_boolean_or_string),
    "journal": ("j", validate_boolean_or_string),
    "fsync": ("fsync", validate_boolean_or_string),
}


def validate_write_concern_option(option: str, value: Any) -> tuple[str, Any]:
    """Validate one write concern option, returning its canonical name."""
    try:
        name, validator = _WRITE_CONCERN_VALIDATORS[option.lower()]
    except KeyError:
        raise_config_error(option, value)
    return name, validator(option, value)


def _options_or_empty(options: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if options is None:
        return {}
    validate_is_mapping("options", options)
    return options


def resolve_write_concern(options: Optional[Mapping[str, Any]] = None) -> WriteConcern:
    """Build the :class:`~hmongo.write_concern.WriteConcern` for one call.

    Only write concern keys are read; other keys (``justOne``, ``upsert``,
    ...) belong to the operation and are ignored here. With no write
    concern keys the server default applies.
    """
    options = _options_or_empty(options)
    kwargs: dict[str, Any] = {}
    for key, value in options.items():
        if not isinstance(key, str) or value is None:
            continue
        if key.lower() in _WRITE_CONCERN_VALIDATORS:
            name, value = validate_write_concern_option(key, value)
            kwargs[name] = value
    if not kwargs:
        return DEFAULT_WRITE_CONCERN
    return WriteConcern(**kwargs)


def resolve_delete_mode(options: Optional[Mapping[str, Any]] = None) -> DeleteMode:
    """A truthy ``justOne`` removes a single document, otherwise all matches."""
    options = _options_or_empty(options)
    if options.get("justOne"):
        return DeleteMode.SINGLE_REMOVE
    return DeleteMode.NONE


def resolve_update_flags(options: Optional[Mapping[str, Any]] = None) -> UpdateFlags:
    """Translate ``multiple`` and ``upsert`` into :class:`~hmongo.driver.UpdateFlags`.

    The two options are independent: both truthy yields
    ``UPSERT | MULTI_UPDATE``.
    """
    options = _options_or_empty(options)
    flags = UpdateFlags.NONE
    if options.get("multiple"):
        flags |= UpdateFlags.MULTI_UPDATE
    if options.get("upsert"):
        flags |= UpdateFlags.UPSERT
    return flags
