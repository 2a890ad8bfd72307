"""
Category Service - product categories per outlet.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from hotel_api.models import Category, Product, not_deleted
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from shared.utils.admin_schemas import CategoryOutput
from shared.utils.exceptions import ForbiddenError


class CategoryService(BaseCRUDService[Category, CategoryOutput]):
    """
    Business rules:
    - Name unique per company among non-deleted categories
    - category_type must be a known outlet
    - A category with non-deleted products cannot be deleted
    """

    search_fields = ("name", "description", "type")
    sortable_fields = ("created_at", "updated_at", "name", "category_type")
    filter_fields = ("category_type", "type")
    unique_fields = (("name",),)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Category,
            output_schema=CategoryOutput,
            entity_name="Category",
        )

    def list(self, tenant_id: int, **kwargs: Any) -> dict[str, Any]:
        filters = kwargs.get("filters") or {}
        if filters.get("category_type"):
            filters["category_type"] = lookup.validate("category_type", filters["category_type"])
        kwargs["filters"] = filters
        return super().list(tenant_id, **kwargs)

    def statistics(self, category_id: int, tenant_id: int) -> dict[str, Any]:
        """Product counts of one category."""
        category = self.get_entity(category_id, tenant_id)
        total, in_stock = self._db.execute(
            select(
                func.count(Product.id),
                func.coalesce(func.sum(case((Product.stock > 0, 1), else_=0)), 0),
            ).where(Product.category_id == category.id, not_deleted(Product))
        ).one()
        return {
            "categoryId": category.id,
            "name": category.name,
            "totalProducts": total,
            "activeProducts": in_stock,
            "outOfStockProducts": total - in_stock,
        }

    def _default_order(self) -> list[Any]:
        return [Category.name.asc(), Category.id.asc()]

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        data["category_type"] = lookup.validate("category_type", data.get("category_type"))

    def _validate_update(self, entity: Category, data: dict[str, Any], tenant_id: int) -> None:
        if data.get("category_type") is not None:
            data["category_type"] = lookup.validate("category_type", data["category_type"])
        for name in ("name", "category_type"):
            if name in data and data[name] is None:
                data.pop(name)

    def _validate_delete(self, entity: Category, tenant_id: int) -> None:
        product_count = self._db.scalar(
            select(func.count())
            .select_from(Product)
            .where(
                Product.category_id == entity.id,
                Product.company_id == tenant_id,
                not_deleted(Product),
            )
        ) or 0
        if product_count > 0:
            raise ForbiddenError(
                f"Cannot delete category. There are {product_count} product(s) in this category.",
                category_id=entity.id,
                product_count=product_count,
            )
