"""
Base class, tenant/audit mixins and the soft-delete predicate for all models.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Any, Optional

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, func
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column

# BIGINT on server databases, INTEGER on SQLite so rowid autoincrement works
IdType = BigInteger().with_variant(Integer, "sqlite")


def utcnow() -> datetime:
    """Timezone-aware current time."""
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime | None) -> datetime | None:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class RecordState(str, enum.Enum):
    """Lifecycle state of every audited row."""

    ACTIVE = "ACTIVE"
    DELETED = "DELETED"


class AuditMixin:
    """
    Mixin providing soft delete and audit trail fields for all models.

    Fields added:
    - created_at, updated_at, deleted_at: Audit timestamps
    - created_by_id, updated_by_id, deleted_by_id: Acting user ids

    A row is DELETED exactly when ``deleted_at`` is set. Queries must
    express that through ``not_deleted(Model)``.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=func.now(), nullable=True
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    # No FK to app_user: the user table itself carries this mixin
    created_by_id: Mapped[Optional[int]] = mapped_column(IdType, nullable=True)
    updated_by_id: Mapped[Optional[int]] = mapped_column(IdType, nullable=True)
    deleted_by_id: Mapped[Optional[int]] = mapped_column(IdType, nullable=True)

    @property
    def state(self) -> RecordState:
        return RecordState.DELETED if self.deleted_at is not None else RecordState.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.state is RecordState.DELETED

    def soft_delete(self, actor_id: int | None) -> None:
        """Mark the row deleted. The row itself is never removed."""
        self.deleted_at = utcnow()
        self.deleted_by_id = actor_id

    def restore(self, actor_id: int) -> None:
        """Bring a soft-deleted row back."""
        self.deleted_at = None
        self.deleted_by_id = None
        self.set_updated_by(actor_id)

    def set_created_by(self, actor_id: int | None) -> None:
        """Set created_by/updated_by on a new entity."""
        self.created_by_id = actor_id
        self.updated_by_id = actor_id

    def set_updated_by(self, actor_id: int | None) -> None:
        self.updated_by_id = actor_id
        self.updated_at = utcnow()

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, "id", None)
        return f"<{class_name}(id={id_val}, {self.state.value.lower()})>"


class TenantMixin:
    """Adds the owning company (tenant) column."""

    @declared_attr
    def company_id(cls) -> Mapped[int]:
        return mapped_column(
            IdType, ForeignKey("company.id"), nullable=False, index=True
        )


def not_deleted(model: Any):
    """
    The single "row is not soft-deleted" predicate.

    Usage:
        select(Room).where(Room.company_id == tenant_id, not_deleted(Room))
    """
    return model.deleted_at.is_(None)
