"""Grammar checks for TypeID prefixes, suffixes and UUID text.

The ``is_valid_*`` predicates accept any string and never raise.
``parse_typeid`` raises ``TypeIDValidationError`` on malformed input.
"""

from __future__ import annotations

import re

from typeid7.errors import TypeIDValidationError


# Crockford base32, lowercase, without i, l, o, u
# IMPORTANT: '0' must be first character for zfill padding to work correctly
ALPHABET = "0123456789abcdefghjkmnpqrstvwxyz"

# A 128-bit UUID requires ceiling(128 / log2(32)) = 26 base32 characters
SUFFIX_LENGTH = 26

# Prefix: lowercase letters and underscores, starting and ending with a letter.
# Length is checked before the regex runs.
PREFIX_MAX_LENGTH = 63
_PREFIX_PATTERN = re.compile(r"[a-z](?:[a-z_]*[a-z])?")

_SUFFIX_PATTERN = re.compile(f"[{ALPHABET}]{{{SUFFIX_LENGTH}}}")

# Hyphens are all-or-nothing: 8-4-4-4-12 or 32 bare hex digits
_UUID_PATTERN = re.compile(
    r"[0-9a-f]{32}|[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}",
    re.IGNORECASE,
)

# RFC 9562: version in nibble 12, variant bits 10xx in nibble 16
_UUIDV7_VERSION_INDEX = 12
_UUIDV7_VARIANT_INDEX = 16
_UUIDV7_VARIANT_NIBBLES = frozenset("89ab")

ZERO_UUID = "00000000-0000-0000-0000-000000000000"

_SEPARATOR = "_"


def _hex_digits(text: str) -> str:
    return text.replace("-", "").lower()


def is_valid_prefix(prefix: str) -> bool:
    """Return True if ``prefix`` is empty or a well-formed type prefix."""
    if prefix == "":
        return True
    if len(prefix) > PREFIX_MAX_LENGTH:
        return False
    return _PREFIX_PATTERN.fullmatch(prefix) is not None


def is_valid_suffix(suffix: str) -> bool:
    """Return True if ``suffix`` is empty or 26 lowercase base32 characters.

    No case folding or look-alike normalization happens here; see
    ``typeid7.base32.decode`` for the lenient form.
    """
    if suffix == "":
        return True
    return _SUFFIX_PATTERN.fullmatch(suffix) is not None


def is_valid_uuid(text: str) -> bool:
    """Return True if ``text`` is UUID-shaped hex, hyphenated or bare."""
    return _UUID_PATTERN.fullmatch(text) is not None


def is_valid_uuidv7(text: str) -> bool:
    """Return True if ``text`` is a UUID with version 7 and RFC variant bits.

    The all-zero UUID is not a UUIDv7; callers that accept it as a sentinel
    check ``is_zero_uuid`` separately.
    """
    if not is_valid_uuid(text):
        return False
    digits = _hex_digits(text)
    return (
        digits[_UUIDV7_VERSION_INDEX] == "7"
        and digits[_UUIDV7_VARIANT_INDEX] in _UUIDV7_VARIANT_NIBBLES
    )


def is_zero_uuid(text: str) -> bool:
    """Return True for the all-zero UUID in either textual form."""
    return is_valid_uuid(text) and int(_hex_digits(text), 16) == 0


def parse_typeid(text: str) -> tuple[str, str]:
    """Split a TypeID string into ``(prefix, suffix)``.

    A string without an underscore is a bare suffix. Otherwise the split
    happens at the last underscore, so ``user_profile_<suffix>`` yields the
    prefix ``user_profile``. Each half is checked on its own, so ``user_``
    yields an empty suffix and ``_<suffix>`` an empty prefix.

    Raises:
        TypeIDValidationError: If the string is empty or either part is invalid.
    """
    if text == "":
        raise TypeIDValidationError("TypeID string must not be empty")

    if _SEPARATOR not in text:
        if not is_valid_suffix(text):
            raise TypeIDValidationError(
                f"TypeID without prefix must be a {SUFFIX_LENGTH}-character "
                f"base32 suffix, got {text!r}"
            )
        return "", text

    prefix, _, suffix = text.rpartition(_SEPARATOR)

    if not is_valid_prefix(prefix):
        raise TypeIDValidationError(
            f"Prefix must be at most {PREFIX_MAX_LENGTH} lowercase letters or "
            f"underscores, starting and ending with a letter, got {prefix!r}"
        )
    if not is_valid_suffix(suffix):
        raise TypeIDValidationError(
            f"Suffix must be {SUFFIX_LENGTH} lowercase base32 characters, got {suffix!r}"
        )
    return prefix, suffix


__all__ = [
    "ALPHABET",
    "PREFIX_MAX_LENGTH",
    "SUFFIX_LENGTH",
    "ZERO_UUID",
    "is_valid_prefix",
    "is_valid_suffix",
    "is_valid_uuid",
    "is_valid_uuidv7",
    "is_zero_uuid",
    "parse_typeid",
]
