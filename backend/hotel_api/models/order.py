"""
Columns shared by outlet orders (restaurant, supermarket) and their lines.

Concrete order classes add ``items`` (and ``payments`` where the outlet
takes payments); line classes add ``order_id`` and ``order``.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, declared_attr, mapped_column, relationship

from shared.config.constants import OrderStatus, PaymentStatus, ServiceMode

from .base import IdType

if TYPE_CHECKING:
    from .client import Client
    from .hotel import Stay
    from .inventory import Product


class OutletOrderMixin:
    """
    Order placed at an outlet for a client, optionally charged to a stay.

    status: PENDING -> ... -> COMPLETED, or CANCELLED.
    payment_status: PENDING -> PARTIAL -> PAID.
    """

    @declared_attr
    def client_id(cls) -> Mapped[int]:
        return mapped_column(IdType, ForeignKey("client.id"), nullable=False, index=True)

    @declared_attr
    def stay_id(cls) -> Mapped[Optional[int]]:
        return mapped_column(IdType, ForeignKey("stay.id"), index=True)

    service_mode: Mapped[str] = mapped_column(
        String(20), nullable=False, default=ServiceMode.WALK_IN
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=OrderStatus.PENDING, index=True
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=PaymentStatus.PENDING
    )
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)
    order_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    @declared_attr
    def client(cls) -> Mapped["Client"]:
        return relationship("Client", lazy="joined")

    @declared_attr
    def stay(cls) -> Mapped[Optional["Stay"]]:
        return relationship("Stay")

    @property
    def active_items(self) -> list:
        return [item for item in self.items if not item.is_deleted]

    @property
    def balance(self) -> Decimal:
        return (self.total or Decimal("0")) - (self.paid_amount or Decimal("0"))


class OrderLineMixin:
    """Order line. unit_price is copied from the product when the line is added."""

    @declared_attr
    def product_id(cls) -> Mapped[int]:
        return mapped_column(IdType, ForeignKey("product.id"), nullable=False, index=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)

    @declared_attr
    def product(cls) -> Mapped["Product"]:
        return relationship("Product", lazy="joined")
