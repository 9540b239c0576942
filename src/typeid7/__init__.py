"""TypeID - type-prefixed, sortable identifiers backed by UUIDv7."""

from __future__ import annotations

import logging

from typeid7.base32 import decode, encode
from typeid7.errors import TypeIDConstructionError, TypeIDError, TypeIDValidationError
from typeid7.typeid import ZERO_SUFFIX, TypeID, TypeIDType, _get_prefix, factory, parse
from typeid7.validation import (
    is_valid_prefix,
    is_valid_suffix,
    is_valid_uuid,
    is_valid_uuidv7,
    parse_typeid,
)


logging.getLogger(__name__).addHandler(logging.NullHandler())


__all__ = [
    "ZERO_SUFFIX",
    "TypeID",
    "TypeIDConstructionError",
    "TypeIDError",
    "TypeIDType",
    "TypeIDValidationError",
    "_get_prefix",
    "decode",
    "encode",
    "factory",
    "is_valid_prefix",
    "is_valid_suffix",
    "is_valid_uuid",
    "is_valid_uuidv7",
    "parse",
    "parse_typeid",
]
