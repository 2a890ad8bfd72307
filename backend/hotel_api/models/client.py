"""
Client Model: hotel guests and restaurant customers.
"""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import CustomerType

from .base import AuditMixin, Base, IdType, TenantMixin

if TYPE_CHECKING:
    from .hotel import Stay


class Client(TenantMixin, AuditMixin, Base):
    """
    Customer of the company.

    Email and phone, when given, are unique per company among non-deleted
    clients. Corporate employees point at their sponsor through
    sponsor_company_id (another client of type CORPORATE).
    """

    __tablename__ = "client"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), index=True)
    address: Mapped[Optional[str]] = mapped_column(Text)
    id_number: Mapped[Optional[str]] = mapped_column(String(50))
    customer_type: Mapped[str] = mapped_column(
        String(20), nullable=False, default=CustomerType.WALK_IN
    )
    has_account: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    credit_limit: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    current_balance: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    sponsor_company_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("client.id"), index=True
    )
    employee_id: Mapped[Optional[str]] = mapped_column(String(50))
    department: Mapped[Optional[str]] = mapped_column(String(100))

    sponsor_company: Mapped[Optional["Client"]] = relationship(
        remote_side="Client.id", lazy="joined", join_depth=1
    )
    stays: Mapped[list["Stay"]] = relationship(back_populates="client")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def available_credit(self) -> Decimal:
        return (self.credit_limit or Decimal("0")) - (self.current_balance or Decimal("0"))
