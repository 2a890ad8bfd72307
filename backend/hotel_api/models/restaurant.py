"""
Restaurant Models: RestaurantTable, RestaurantOrder, RestaurantOrderItem, RestaurantPayment.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.config.constants import TableStatus

from .base import AuditMixin, Base, IdType, TenantMixin
from .order import OrderLineMixin, OutletOrderMixin


class RestaurantTable(TenantMixin, AuditMixin, Base):
    """
    Dining table. table_number is unique per company.
    current_order_id is set while an order is seated at the table.
    """

    __tablename__ = "restaurant_table"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    table_number: Mapped[str] = mapped_column(String(20), nullable=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[Optional[str]] = mapped_column(String(100))
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TableStatus.AVAILABLE
    )
    current_order_id: Mapped[Optional[int]] = mapped_column(
        IdType, ForeignKey("restaurant_order.id"), index=True
    )

    current_order: Mapped[Optional["RestaurantOrder"]] = relationship(
        foreign_keys=[current_order_id], lazy="joined"
    )


class RestaurantOrder(OutletOrderMixin, TenantMixin, AuditMixin, Base):
    """
    Restaurant order with line items and payments.

    status: PENDING -> PREPARING -> READY -> DELIVERED -> COMPLETED, or CANCELLED.
    """

    __tablename__ = "restaurant_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    table_number: Mapped[Optional[str]] = mapped_column(String(20))

    items: Mapped[list["RestaurantOrderItem"]] = relationship(
        back_populates="order", lazy="selectin", order_by="RestaurantOrderItem.id"
    )
    payments: Mapped[list["RestaurantPayment"]] = relationship(
        back_populates="order", lazy="selectin", order_by="RestaurantPayment.id"
    )

    @property
    def active_payments(self) -> list["RestaurantPayment"]:
        return [payment for payment in self.payments if not payment.is_deleted]


class RestaurantOrderItem(OrderLineMixin, TenantMixin, AuditMixin, Base):
    __tablename__ = "restaurant_order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("restaurant_order.id"), nullable=False, index=True
    )

    order: Mapped["RestaurantOrder"] = relationship(back_populates="items")


class RestaurantPayment(TenantMixin, AuditMixin, Base):
    """Payment recorded against a restaurant order."""

    __tablename__ = "restaurant_payment"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("restaurant_order.id"), nullable=False, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    reference: Mapped[Optional[str]] = mapped_column(String(100))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    order: Mapped["RestaurantOrder"] = relationship(back_populates="payments")
