"""TypeID - type-prefixed, sortable identifiers backed by UUIDv7."""

from __future__ import annotations

import logging
from datetime import UTC
from datetime import datetime as dt_datetime
from typing import (
    TYPE_CHECKING,
    Any,
    LiteralString,
    Protocol,
    Self,
    get_args,
    get_origin,
    runtime_checkable,
)
from uuid import UUID, uuid7

from pydantic_core import CoreSchema, core_schema

from typeid7.base32 import decode, encode
from typeid7.errors import TypeIDConstructionError, TypeIDError, TypeIDValidationError
from typeid7.validation import (
    PREFIX_MAX_LENGTH,
    SUFFIX_LENGTH,
    is_valid_prefix,
    is_valid_suffix,
    parse_typeid,
)


if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Callable


logger = logging.getLogger(__name__)

# Suffix of the all-zero UUID, used for empty suffixes and TypeID.zero()
ZERO_SUFFIX = "0" * SUFFIX_LENGTH

# 32^26 > 2^128: a leading symbol above '7' cannot fit in 128 bits
_MAX_LEADING_SYMBOL = "7"

# UUIDv7 timestamp extraction (RFC 9562):
# Bits 0-47 contain 48-bit Unix timestamp in milliseconds
_UUIDV7_TIMESTAMP_SHIFT = 80  # 128 - 48 = shift to extract timestamp
_MS_PER_SECOND = 1000


@runtime_checkable
class TypeIDType(Protocol):
    """Protocol for any TypeID, useful for generic function signatures.

    Example:
        def log_entity(entity_id: TypeIDType) -> None:
            print(f"{entity_id.prefix} created at {entity_id.datetime}")
    """

    __slots__ = ()

    @property
    def prefix(self) -> str:
        """The type prefix (e.g., 'user', 'api_key'), possibly empty."""
        ...

    @property
    def suffix(self) -> str:
        """The 26-character base32 suffix."""
        ...

    @property
    def uid(self) -> UUID:
        """The underlying UUIDv7."""
        ...

    @property
    def datetime(self) -> dt.datetime:
        """The timestamp extracted from the UUIDv7."""
        ...

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) from the UUIDv7."""
        ...

    def __str__(self) -> str:
        """String representation as '<prefix>_<suffix>' or '<suffix>'."""
        ...


def _validate_prefix(prefix: str) -> None:
    """Raise TypeIDValidationError unless prefix is empty or well-formed."""
    if not isinstance(prefix, str):
        raise TypeIDValidationError(f"Prefix must be a string, got {type(prefix).__name__}")
    if len(prefix) > PREFIX_MAX_LENGTH:
        raise TypeIDValidationError(
            f"Prefix must be at most {PREFIX_MAX_LENGTH} characters, got {len(prefix)}"
        )
    if not is_valid_prefix(prefix):
        raise TypeIDValidationError(
            f"Prefix must be lowercase letters and underscores, starting and "
            f"ending with a letter, got {prefix!r}"
        )


def _validate_suffix(suffix: str) -> None:
    """Raise TypeIDValidationError unless suffix is empty or a 128-bit base32 value."""
    if not isinstance(suffix, str):
        raise TypeIDValidationError(f"Suffix must be a string, got {type(suffix).__name__}")
    if not is_valid_suffix(suffix):
        raise TypeIDValidationError(
            f"Suffix must be {SUFFIX_LENGTH} lowercase base32 characters, got {suffix!r}"
        )
    if suffix and suffix[0] > _MAX_LEADING_SYMBOL:
        raise TypeIDValidationError(f"Suffix {suffix!r} exceeds 128 bits")


class TypeID[PREFIX: LiteralString]:
    """Type-prefixed identifier wrapping a base32-encoded UUIDv7.

    A TypeID pairs a lowercase prefix (like 'user', 'api_key') with the
    26-character Crockford base32 form of a UUIDv7. The string form sorts
    in the same order as the UUID within a prefix.

    Example:
        >>> from typing import Literal
        >>> UserId = TypeID[Literal["user"]]
        >>> user_id = TypeID.generate("user")
        >>> print(user_id)  # user_01h455vb4pex5vsknk084sn02q

    Note:
        Constructing directly from a suffix checks its grammar only. A
        suffix that does not decode to a UUIDv7 is rejected later by
        ``to_uuid``, ``uid``, ``datetime`` and ``timestamp``.
    """

    __slots__ = ("_prefix", "_suffix", "_uid")

    def __init__(self, prefix: PREFIX = "", suffix: str = "") -> None:  # type: ignore[assignment]
        """Initialize a TypeID from a prefix and a base32 suffix.

        Args:
            prefix: The type prefix, or "" for none.
            suffix: The 26-character lowercase base32 suffix. An empty suffix
                stands for the zero ID.

        Raises:
            TypeIDValidationError: If the prefix or suffix is invalid.
        """
        _validate_prefix(prefix)
        _validate_suffix(suffix)
        self._prefix = prefix
        self._suffix = suffix or ZERO_SUFFIX
        self._uid: UUID | None = None

    @classmethod
    def _create(cls, prefix: PREFIX, suffix: str) -> Self:
        """Build an instance from parts that are already validated."""
        instance = cls.__new__(cls)
        instance._prefix = prefix  # noqa: SLF001
        instance._suffix = suffix  # noqa: SLF001
        instance._uid = None  # noqa: SLF001
        return instance

    @property
    def prefix(self) -> PREFIX:
        """The type prefix (e.g., 'user', 'api_key'), possibly empty."""
        return self._prefix

    @property
    def suffix(self) -> str:
        """The 26-character base32 suffix, never empty."""
        return self._suffix

    @property
    def uid(self) -> UUID:
        """The underlying UUID decoded from the suffix.

        Raises:
            TypeIDValidationError: If the suffix is not a UUIDv7 encoding.
        """
        if self._uid is None:
            self._uid = UUID(self.to_uuid())
        return self._uid

    @property
    def datetime(self) -> dt_datetime:
        """The timestamp extracted from the UUIDv7."""
        ms = self.uid.int >> _UUIDV7_TIMESTAMP_SHIFT
        return dt_datetime.fromtimestamp(ms / _MS_PER_SECOND, tz=UTC)

    @property
    def timestamp(self) -> float:
        """The Unix timestamp (seconds) from the UUIDv7."""
        ms = self.uid.int >> _UUIDV7_TIMESTAMP_SHIFT
        return ms / _MS_PER_SECOND

    def to_uuid(self) -> str:
        """Decode the suffix to canonical lowercase UUID text.

        Raises:
            TypeIDValidationError: If the suffix decodes to neither a UUIDv7
                nor the all-zero UUID.
        """
        try:
            return decode(self._suffix)
        except TypeIDValidationError as e:
            raise TypeIDValidationError(f"Failed to decode {str(self)!r} to UUID: {e}") from e

    def is_zero(self) -> bool:
        """Return True if this is the zero ID."""
        return self._suffix == ZERO_SUFFIX

    def has_prefix(self, prefix: str) -> bool:
        """Return True if this TypeID's prefix is exactly ``prefix``."""
        return self._prefix == prefix

    def __str__(self) -> str:
        """Return '<prefix>_<suffix>', or the bare suffix when prefix is empty."""
        if not self._prefix:
            return self._suffix
        return f"{self._prefix}_{self._suffix}"

    def __repr__(self) -> str:
        """Return a detailed representation."""
        return f"TypeID({self._prefix!r}, {self._suffix!r})"

    def __hash__(self) -> int:
        """Return hash for use in sets and dict keys."""
        return hash((self._prefix, self._suffix))

    def __eq__(self, other: object) -> bool:
        """Check equality with another TypeID."""
        if isinstance(other, TypeID):
            return self._prefix == other._prefix and self._suffix == other._suffix
        return NotImplemented

    def __lt__(self, other: object) -> bool:
        """Compare for sorting (by prefix, then by suffix)."""
        if isinstance(other, TypeID):
            return (self._prefix, self._suffix) < (other._prefix, other._suffix)
        return NotImplemented

    def __le__(self, other: object) -> bool:
        """Compare for sorting (by prefix, then by suffix)."""
        if isinstance(other, TypeID):
            return (self._prefix, self._suffix) <= (other._prefix, other._suffix)
        return NotImplemented

    def __gt__(self, other: object) -> bool:
        """Compare for sorting (by prefix, then by suffix)."""
        if isinstance(other, TypeID):
            return (self._prefix, self._suffix) > (other._prefix, other._suffix)
        return NotImplemented

    def __ge__(self, other: object) -> bool:
        """Compare for sorting (by prefix, then by suffix)."""
        if isinstance(other, TypeID):
            return (self._prefix, self._suffix) >= (other._prefix, other._suffix)
        return NotImplemented

    def __copy__(self) -> Self:
        """Return self (TypeIDs are immutable)."""
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> Self:
        """Return self (TypeIDs are immutable)."""
        return self

    def __reduce__(self) -> tuple[type[Self], tuple[str, str]]:
        """Support pickling for multiprocessing, caching, etc."""
        return (type(self), (self._prefix, self._suffix))

    @classmethod
    def from_uuid(cls, uuid: str | UUID, prefix: PREFIX = "") -> Self:  # type: ignore[assignment]
        """Create a TypeID from a UUIDv7.

        Args:
            uuid: UUID text (hyphenated or bare, any case) or a ``uuid.UUID``.
            prefix: The type prefix, or "" for none.

        Returns:
            A TypeID instance.

        Raises:
            TypeIDValidationError: If the prefix is invalid.
            TypeIDConstructionError: If the UUID cannot be encoded, e.g. it is
                malformed or not a UUIDv7.
        """
        _validate_prefix(prefix)
        try:
            suffix = encode(uuid)
        except TypeIDValidationError as e:
            logger.debug("Cannot build TypeID with prefix %r from %r: %s", prefix, uuid, e)
            raise TypeIDConstructionError(f"Failed to create TypeID from UUID: {e}") from e
        instance = cls._create(prefix, suffix)
        if isinstance(uuid, UUID):
            instance._uid = uuid  # noqa: SLF001
        return instance

    @classmethod
    def from_string(cls, string: str, prefix: PREFIX | None = None) -> Self:
        """Parse a TypeID from its string representation.

        Args:
            string: The string to parse ('<prefix>_<suffix>' or '<suffix>').
            prefix: The expected prefix. When None, any prefix is accepted.

        Returns:
            A TypeID instance.

        Raises:
            TypeIDValidationError: If the string format is invalid or the
                prefix doesn't match.
        """
        parsed_prefix, suffix = parse_typeid(string)
        if prefix is not None and parsed_prefix != prefix:
            raise TypeIDValidationError(f"Expected prefix {prefix!r}, got {parsed_prefix!r}")
        return cls(parsed_prefix, suffix)  # type: ignore[arg-type]

    @classmethod
    def generate(cls, prefix: PREFIX = "") -> Self:  # type: ignore[assignment]
        """Generate a new TypeID from a fresh UUIDv7.

        Raises:
            TypeIDValidationError: If the prefix is invalid.
            TypeIDConstructionError: If the generated UUID cannot be encoded.
        """
        return cls.from_uuid(uuid7(), prefix)

    @classmethod
    def zero(cls, prefix: PREFIX = "") -> Self:  # type: ignore[assignment]
        """Return the zero TypeID for ``prefix``.

        Raises:
            TypeIDValidationError: If the prefix is invalid.
        """
        _validate_prefix(prefix)
        return cls._create(prefix, ZERO_SUFFIX)

    @classmethod
    def __get_pydantic_core_schema__(
        cls,
        source_type: Any,  # noqa: ANN401
        handler: Any,  # noqa: ANN401
    ) -> CoreSchema:
        """Pydantic integration for validation and serialization.

        ``TypeID[Literal["user"]]`` only accepts IDs with the 'user' prefix;
        a bare ``TypeID`` annotation accepts any prefix.
        """
        expected = _get_prefix(source_type) if get_origin(source_type) is not None else None

        def validate(v: TypeID[Any] | str) -> TypeID[Any]:
            if isinstance(v, str):
                return cls.from_string(v, expected)
            if isinstance(v, TypeID):
                if expected is not None and v.prefix != expected:
                    raise TypeIDValidationError(f"Expected prefix {expected!r}, got {v.prefix!r}")
                return v
            raise TypeIDError(f"Expected TypeID or str, got {type(v).__name__}")

        return core_schema.json_or_python_schema(
            json_schema=core_schema.chain_schema(
                [
                    core_schema.str_schema(),
                    core_schema.no_info_plain_validator_function(validate),
                ]
            ),
            python_schema=core_schema.no_info_plain_validator_function(validate),
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


def _get_prefix[PREFIX: LiteralString](typeid_type: type[TypeID[PREFIX]]) -> str:
    """Extract the prefix string from a parameterized TypeID type."""
    args = get_args(typeid_type)
    if not args:
        raise TypeIDError("TypeID type must be parameterized with a Literal prefix")
    literal_type = args[0]
    literal_args = get_args(literal_type)
    # Handle TypeVar case (Python 3.12+ type parameter syntax)
    if not literal_args and hasattr(literal_type, "__value__"):  # pragma: no cover
        literal_args = get_args(literal_type.__value__)
    if not literal_args:  # pragma: no cover
        raise TypeIDError(f"Could not extract prefix from {literal_type}")
    return literal_args[0]


def factory[PREFIX: LiteralString](
    typeid_type: type[TypeID[PREFIX]],
) -> Callable[[], TypeID[PREFIX]]:
    """Create a factory function for generating new TypeIDs of a specific type.

    This is useful with Pydantic's Field(default_factory=...).

    Example:
        UserId = TypeID[Literal["user"]]

        class User(BaseModel):
            id: UserId = Field(default_factory=factory(UserId))
    """
    prefix = _get_prefix(typeid_type)

    def _factory() -> TypeID[PREFIX]:
        return TypeID.generate(prefix)

    return _factory


def parse[PREFIX: LiteralString](
    typeid_type: type[TypeID[PREFIX]],
) -> Callable[[str], TypeID[PREFIX]]:
    """Create a parse function for converting strings to TypeIDs.

    Raises TypeIDValidationError on invalid input or a foreign prefix.

    Example:
        UserId = TypeID[Literal["user"]]
        parse_user_id = parse(UserId)

        try:
            user_id = parse_user_id("user_01h455vb4pex5vsknk084sn02q")
        except TypeIDError as e:
            print(f"Invalid ID: {e}")
    """
    prefix = _get_prefix(typeid_type)

    def _parse(v: str) -> TypeID[PREFIX]:
        return TypeID.from_string(v, prefix)

    return _parse
