"""Store TypeIDs in SQLAlchemy and SQLModel tables.

By default a TypeID column holds the canonical ``<prefix>_<suffix>`` text, so
``ORDER BY`` on the column follows UUIDv7 creation order within the prefix.
With ``as_uuid=True`` the column holds only the UUID, in the dialect's native
UUID type (``CHAR(32)`` on SQLite), and the TypeID is rebuilt from the
column's prefix on load.

Example:
    from typing import Literal
    from sqlalchemy.orm import DeclarativeBase, Mapped
    from typeid7 import TypeID
    from typeid7.sqlalchemy import typeid_column

    UserId = TypeID[Literal["user"]]
    OrgId = TypeID[Literal["org"]]

    class Base(DeclarativeBase):
        pass

    class Membership(Base):
        __tablename__ = "memberships"

        user_id: Mapped[UserId] = typeid_column(UserId, primary_key=True)
        org_id: Mapped[OrgId] = typeid_column(OrgId, as_uuid=True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypedDict, Unpack, cast
from uuid import UUID

from sqlalchemy import Text, Uuid
from sqlalchemy.orm import mapped_column
from sqlalchemy.types import TypeDecorator

from typeid7 import TypeID, TypeIDError, TypeIDType, TypeIDValidationError, _get_prefix


if TYPE_CHECKING:
    from collections.abc import Callable

    from sqlalchemy.engine import Dialect
    from sqlalchemy.orm import MappedColumn
    from sqlalchemy.types import TypeEngine


logger = logging.getLogger(__name__)


class TypeIDColumnKwargs(TypedDict, total=False):
    """Options forwarded to ``mapped_column``."""

    primary_key: bool
    nullable: bool
    default: object
    default_factory: Callable[[], object]
    index: bool
    unique: bool
    insert_default: object
    onupdate: object


class TypeIDColumn(TypeDecorator[TypeIDType]):
    """Column type holding TypeIDs of a single prefix.

    Bind values may be a TypeID, its canonical string, or a ``uuid.UUID``
    (encoded with the column's prefix). Every value is checked against the
    prefix before it reaches the database. Strings must already be
    canonical; look-alike and uppercase suffixes are rejected rather than
    rewritten.

    Args:
        prefix: Prefix of every TypeID in the column, ``""`` for bare suffixes.
        as_uuid: Store the decoded UUID instead of the TypeID text.
    """

    impl = Text
    cache_ok = True

    def __init__(self, prefix: str = "", *, as_uuid: bool = False) -> None:
        self.prefix = prefix
        self.as_uuid = as_uuid
        super().__init__()

    def load_dialect_impl(self, dialect: Dialect) -> TypeEngine[Any]:
        if self.as_uuid:
            return dialect.type_descriptor(Uuid(as_uuid=True))
        return dialect.type_descriptor(Text())

    def _coerce(self, value: TypeIDType | UUID | str) -> TypeIDType:
        if isinstance(value, UUID):
            return TypeID.from_uuid(value, self.prefix)
        if isinstance(value, str):
            return TypeID.from_string(value, self.prefix)
        if value.prefix != self.prefix:
            logger.debug("Rejected %s for column with prefix %r", value, self.prefix)
            raise TypeIDValidationError(f"Expected prefix {self.prefix!r}, got {value.prefix!r}")
        return value

    def process_bind_param(
        self,
        value: TypeIDType | UUID | str | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> str | UUID | None:
        if value is None:
            return None
        typeid = self._coerce(value)
        return typeid.uid if self.as_uuid else str(typeid)

    def process_result_value(
        self,
        value: str | UUID | None,
        dialect: Dialect,  # noqa: ARG002
    ) -> TypeIDType | None:
        if value is None:
            return None
        if isinstance(value, UUID):
            return TypeID.from_uuid(value, self.prefix)
        return TypeID.from_string(value, self.prefix)


def _column_prefix[T](typeid_type: type[T]) -> str:
    # Misusing an unparameterized TypeID here is a schema definition error.
    try:
        return _get_prefix(typeid_type)  # type: ignore[arg-type]
    except TypeIDError as e:
        raise TypeError(str(e)) from e


def typeid_column[T](
    typeid_type: type[T],
    *,
    as_uuid: bool = False,
    **kwargs: Unpack[TypeIDColumnKwargs],
) -> MappedColumn[T]:
    """Return a ``mapped_column`` for ``TypeID[Literal[...]]`` values.

    The prefix comes from the type's ``Literal`` argument.

    Raises:
        TypeError: If ``typeid_type`` has no ``Literal`` prefix.
    """
    column_type = TypeIDColumn(_column_prefix(typeid_type), as_uuid=as_uuid)
    return mapped_column(column_type, **kwargs)


class TypeIDFieldKwargs(TypedDict, total=False):
    """Options forwarded to SQLModel's ``Field``."""

    default: object
    default_factory: Callable[[], object]
    primary_key: bool
    index: bool
    unique: bool


def typeid_field[T](
    typeid_type: type[T],
    *,
    as_uuid: bool = False,
    **kwargs: Unpack[TypeIDFieldKwargs],
) -> Any:  # noqa: ANN401 - return type matches SQLModel's Field
    """Return a SQLModel ``Field`` backed by a :class:`TypeIDColumn`.

    Example:
        class Account(SQLModel, table=True):
            id: UserId = typeid_field(UserId, default_factory=factory(UserId), primary_key=True)
    """
    from sqlmodel import Field

    column_type = TypeIDColumn(_column_prefix(typeid_type), as_uuid=as_uuid)
    # sa_type is annotated as type[Any], but SQLModel passes instances through.
    return Field(sa_type=cast("type[Any]", column_type), **kwargs)


__all__ = ["TypeIDColumn", "typeid_column", "typeid_field"]
