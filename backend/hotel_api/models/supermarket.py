"""
Supermarket Models: SupermarketOrder, SupermarketOrderItem.
"""

from __future__ import annotations

from sqlalchemy import ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType, TenantMixin
from .order import OrderLineMixin, OutletOrderMixin


class SupermarketOrder(OutletOrderMixin, TenantMixin, AuditMixin, Base):
    """
    Shop sale. Goes PENDING -> COMPLETED through the complete action, or CANCELLED.
    payment_status is maintained by hand at the till.
    """

    __tablename__ = "supermarket_order"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)

    items: Mapped[list["SupermarketOrderItem"]] = relationship(
        back_populates="order", lazy="selectin", order_by="SupermarketOrderItem.id"
    )


class SupermarketOrderItem(OrderLineMixin, TenantMixin, AuditMixin, Base):
    __tablename__ = "supermarket_order_item"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    order_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("supermarket_order.id"), nullable=False, index=True
    )

    order: Mapped["SupermarketOrder"] = relationship(back_populates="items")
