"""
Inventory Models: Category, Product.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import AuditMixin, Base, IdType, TenantMixin


class Category(TenantMixin, AuditMixin, Base):
    """
    Product category. category_type says which outlet sells it
    (MINIBAR, RESTAURANT, ...). Name is unique per company.
    """

    __tablename__ = "category"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_type: Mapped[str] = mapped_column(String(32), nullable=False)
    # Free-form sub-classification inside the outlet
    type: Mapped[Optional[str]] = mapped_column(String(50))
    description: Mapped[Optional[str]] = mapped_column(Text)

    products: Mapped[list["Product"]] = relationship(back_populates="category")

    @property
    def product_count(self) -> int:
        return sum(1 for product in self.products if not product.is_deleted)


class Product(TenantMixin, AuditMixin, Base):
    """
    Sellable product with stock.

    Stock never goes below zero; adjustments go through a single
    conditional UPDATE (see ProductService.adjust_stock).
    """

    __tablename__ = "product"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    category_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("category.id"), nullable=False, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    unit: Mapped[Optional[str]] = mapped_column(String(30))
    description: Mapped[Optional[str]] = mapped_column(Text)
    barcode: Mapped[Optional[str]] = mapped_column(String(64), index=True)
    stock: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    category: Mapped["Category"] = relationship(back_populates="products", lazy="joined")
