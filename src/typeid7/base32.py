"""Crockford base32 codec between UUID text and 26-character TypeID suffixes.

The conversion is positional (repeated division by 32 over the full 128-bit
integer), not the byte-aligned RFC 4648 scheme, so the suffix sorts in the
same order as the UUID's numeric value.
"""

from __future__ import annotations

from string import ascii_uppercase
from typing import TYPE_CHECKING

from typeid7.errors import TypeIDValidationError
from typeid7.validation import (
    ALPHABET,
    SUFFIX_LENGTH,
    is_valid_uuid,
    is_valid_uuidv7,
    is_zero_uuid,
)


if TYPE_CHECKING:
    from uuid import UUID


_DECODE_MAP = {c: i for i, c in enumerate(ALPHABET)}

# ASCII case folding only, then look-alikes: o -> 0, i/l -> 1
_NORMALIZE_TABLE = str.maketrans(
    {
        **{c: c.lower() for c in ascii_uppercase},
        **dict.fromkeys("oO", "0"),
        **dict.fromkeys("iIlL", "1"),
    }
)

_UUID_BITS = 128
_UUID_HEX_LENGTH = 32


def _int_to_base32(num: int) -> str:
    """Convert a non-negative integer to base32, padded to 26 chars."""
    if num == 0:
        return "0" * SUFFIX_LENGTH

    result: list[str] = []
    while num > 0:
        num, remainder = divmod(num, 32)
        result.append(ALPHABET[remainder])

    return "".join(reversed(result)).zfill(SUFFIX_LENGTH)


def _base32_to_int(s: str) -> int:
    """Convert a lowercase base32 string to an integer.

    Raises:
        ValueError: If input exceeds the suffix length.
        KeyError: If input contains characters outside the alphabet.
    """
    if len(s) > SUFFIX_LENGTH:
        raise ValueError(f"Input exceeds maximum length of {SUFFIX_LENGTH}")
    result = 0
    for char in s:
        result = result * 32 + _DECODE_MAP[char]
    return result


def _format_uuid(digits: str) -> str:
    return f"{digits[:8]}-{digits[8:12]}-{digits[12:16]}-{digits[16:20]}-{digits[20:]}"


def normalize(suffix: str) -> str:
    """Lowercase ASCII letters in ``suffix`` and map look-alikes to canonical symbols.

    Non-ASCII characters are left as they are, so they fail the alphabet check.
    """
    return suffix.translate(_NORMALIZE_TABLE)


def encode(uuid: str | UUID) -> str:
    """Encode a UUIDv7 (or the all-zero UUID) as a 26-character suffix.

    Args:
        uuid: UUID text with or without hyphens, any case, or a ``uuid.UUID``.

    Returns:
        The lowercase Crockford base32 suffix.

    Raises:
        TypeIDValidationError: If the text is not a UUID, or is neither a
            UUIDv7 nor the all-zero UUID.
    """
    text = str(uuid)
    if not is_valid_uuid(text):
        raise TypeIDValidationError(
            f"UUID must be 32 hex digits, optionally hyphenated 8-4-4-4-12, got {text!r}"
        )
    if not is_valid_uuidv7(text) and not is_zero_uuid(text):
        raise TypeIDValidationError(
            f"UUID must be version 7 with RFC 9562 variant bits, got {text!r}"
        )
    return _int_to_base32(int(text.replace("-", ""), 16))


def decode(suffix: str) -> str:
    """Decode a 26-character suffix to canonical lowercase UUID text.

    ASCII uppercase letters are folded and the look-alikes ``o``, ``i`` and ``l``
    are read as ``0``, ``1`` and ``1`` before validation.

    Raises:
        TypeIDValidationError: If the suffix has the wrong length, contains
            characters outside the alphabet, overflows 128 bits, or decodes
            to something that is neither a UUIDv7 nor the all-zero UUID.
    """
    normalized = normalize(suffix)
    if len(normalized) != SUFFIX_LENGTH:
        raise TypeIDValidationError(
            f"Suffix must be {SUFFIX_LENGTH} characters, got {len(normalized)} in {suffix!r}"
        )

    try:
        value = _base32_to_int(normalized)
    except KeyError as e:
        raise TypeIDValidationError(
            f"Suffix contains characters outside the base32 alphabet: {suffix!r}"
        ) from e

    if value >> _UUID_BITS:
        raise TypeIDValidationError(f"Decoded value of {suffix!r} exceeds 128 bits")

    uuid_text = _format_uuid(f"{value:0{_UUID_HEX_LENGTH}x}")
    if not is_valid_uuidv7(uuid_text) and not is_zero_uuid(uuid_text):
        raise TypeIDValidationError(
            f"Suffix {suffix!r} decodes to {uuid_text!r}, which is not a valid UUIDv7"
        )
    return uuid_text


__all__ = ["decode", "encode", "normalize"]
