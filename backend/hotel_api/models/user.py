"""
User and Invitation models.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import InvitationStatus, Roles, UserStatus

from .base import AuditMixin, Base, IdType, TenantMixin, ensure_utc, utcnow

if TYPE_CHECKING:
    from .company import Company


class User(TenantMixin, AuditMixin, Base):
    """
    Staff member of a company.

    Email is unique among non-deleted users across all companies; the rule
    is enforced by the services so a deleted account frees its address.
    """

    __tablename__ = "app_user"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    role: Mapped[str] = mapped_column(String(32), nullable=False, default=Roles.STAFF)
    status: Mapped[str] = mapped_column(
        String(32), nullable=False, default=UserStatus.ACTIVE
    )

    company: Mapped["Company"] = relationship(back_populates="users")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}', company_id={self.company_id})>"


class Invitation(TenantMixin, AuditMixin, Base):
    """
    Pending invitation for a new user to join a company.

    pending -> accepted (terminal), or pending -> expired (terminal, checked
    at use time). Cancelling soft-deletes the row.
    """

    __tablename__ = "invitation"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[str] = mapped_column(String(32), nullable=False)
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    accepted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    company: Mapped["Company"] = relationship()

    @property
    def is_accepted(self) -> bool:
        return self.accepted_at is not None

    @property
    def is_expired(self) -> bool:
        return ensure_utc(self.expires_at) < utcnow()

    @property
    def status(self) -> str:
        if self.is_accepted:
            return InvitationStatus.ACCEPTED
        if self.is_expired:
            return InvitationStatus.EXPIRED
        return InvitationStatus.PENDING
