"""
Module: mapper_kernel.db.base
Responsibility: SQLAlchemy integration for record-like mapping targets.
    FillableMixin gives any declarative model the record-fill capability
    (fill_from) and the structured-payload capability (export_all); Base is
    a ready-made declarative base that includes it.
Architecture position: Kernel > DB.  Imports only from sqlalchemy.  The
    mapping engine never imports this module; it recognizes models through
    the RecordFillable / ExportsAll protocols.

Invariants enforced:
    - fill_from() only assigns mapped column attributes.  Relationship keys,
      synonyms, unknown keys and guarded keys are ignored.
    - __fillable__ (allow-list) takes precedence over __guarded__ (deny-list).
    - The primary key ``id`` is guarded by default.

Failure modes:
    - None raised here.  Type conversion happens in the column types when
      the row is flushed, not during fill_from().
"""

from collections.abc import Mapping
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar
from uuid import UUID as PyUUID, uuid4

from sqlalchemy import DateTime, Numeric, String, inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator


class UUIDString(TypeDecorator):
    """
    UUID type stored as String(36) for cross-database portability.

    Guarantees:
        - process_bind_param: UUID -> str on INSERT/UPDATE.
        - process_result_value: str -> UUID on SELECT.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return None

    def process_result_value(self, value, dialect):
        if value is not None:
            return PyUUID(value)
        return None


class FillableMixin:
    """
    Mass assignment for declarative models.

    Contract:
        Declare either ``__fillable__`` (only these keys may be assigned) or
        ``__guarded__`` (every column except these may be assigned).

    Example::

        class Airport(Base):
            __tablename__ = "airports"
            __fillable__ = ("code", "city")

            code: Mapped[str] = mapped_column(String(3))
            city: Mapped[str | None]

        airport = Airport().fill_from({"code": "LPK", "city": "Lipetsk"})
    """

    __fillable__: ClassVar[tuple[str, ...] | None] = None
    __guarded__: ClassVar[tuple[str, ...]] = ("id",)

    @classmethod
    def column_keys(cls) -> tuple[str, ...]:
        """Keys of the mapped column attributes, in mapper order."""
        return tuple(attr.key for attr in inspect(cls).column_attrs)

    @classmethod
    def is_fillable(cls, key: str) -> bool:
        if key not in cls.column_keys():
            return False
        if cls.__fillable__ is not None:
            return key in cls.__fillable__
        return key not in cls.__guarded__

    def fill_from(self, attributes: Mapping[str, Any]) -> "FillableMixin":
        """Assign every fillable key in ``attributes``. Returns self."""
        for key, value in attributes.items():
            if isinstance(key, str) and self.is_fillable(key):
                setattr(self, key, value)
        return self

    def export_all(self) -> dict[str, Any]:
        """Column values keyed by attribute name."""
        return {key: getattr(self, key) for key in self.column_keys()}


class Base(FillableMixin, DeclarativeBase):
    """
    Declarative base whose models are fillable mapping targets.

    Guarantees:
        - id is a uuid4-generated UUID stored as String(36).
        - Decimal maps to Numeric(38, 9); datetime to DateTime(timezone=True).
    """

    type_annotation_map: ClassVar[dict] = {
        Decimal: Numeric(38, 9),
        datetime: DateTime(timezone=True),
        PyUUID: UUIDString(),
    }

    id: Mapped[PyUUID] = mapped_column(
        UUIDString(),
        primary_key=True,
        default=uuid4,
    )
