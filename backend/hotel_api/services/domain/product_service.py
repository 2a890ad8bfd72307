"""
Product Service - catalog and stock.

Stock changes never read-modify-write: ``apply_stock_delta`` issues one
conditional UPDATE that only matches while the result stays >= 0, so two
concurrent sales cannot both take the last unit.

Usage:
    from hotel_api.services.domain import ProductService

    service = ProductService(db)
    service.adjust_stock(product_id, -2, tenant_id, actor_id)
    low = service.low_stock(tenant_id, threshold=5)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from hotel_api.models import Category, Product, not_deleted, utcnow
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from shared.config.constants import ErrorMessages, Limits
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.admin_schemas import ProductOutput
from shared.utils.exceptions import NotFoundError, ValidationError

logger = get_logger(__name__)


def apply_stock_delta(
    db: Session,
    product_id: int,
    delta: int,
    tenant_id: int,
    actor_id: int | None = None,
) -> bool:
    """
    Add ``delta`` to a product's stock in a single UPDATE.

    Does not commit. Returns False when nothing matched, either because the
    product is missing or because the stock would go negative.
    """
    result = db.execute(
        update(Product)
        .where(
            Product.id == product_id,
            Product.company_id == tenant_id,
            not_deleted(Product),
            Product.stock + delta >= 0,
        )
        .values(stock=Product.stock + delta, updated_by_id=actor_id, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


class ProductService(BaseCRUDService[Product, ProductOutput]):
    """
    Business rules:
    - category_id must reference a non-deleted category of the company
    - Name unique per category, barcode unique per company
    - Stock is never negative
    """

    search_fields = ("name", "description", "barcode")
    sortable_fields = ("created_at", "updated_at", "name", "price", "stock")
    filter_fields = ("category_id",)
    unique_fields = (("category_id", "name"), ("barcode",))
    blank_as_null = ("barcode",)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Product,
            output_schema=ProductOutput,
            entity_name="Product",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list(
        self,
        tenant_id: int,
        *,
        category_type: str | None = None,
        in_stock: bool | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        filters = dict(kwargs.pop("filters", None) or {})
        if category_type:
            filters["category_type"] = lookup.validate("category_type", category_type)
        filters["in_stock"] = in_stock
        return super().list(tenant_id, filters=filters, **kwargs)

    def low_stock(
        self, tenant_id: int, threshold: int = Limits.DEFAULT_LOW_STOCK_THRESHOLD
    ) -> list[ProductOutput]:
        """Products at or below ``threshold`` units, lowest stock first."""
        products = self._repo.find_all(
            tenant_id,
            Product.stock <= threshold,
            order_by=[Product.stock.asc(), Product.name.asc()],
        )
        return [self.to_output(p) for p in products]

    def out_of_stock(self, tenant_id: int) -> list[ProductOutput]:
        products = self._repo.find_all(
            tenant_id, Product.stock <= 0, order_by=[Product.name.asc()]
        )
        return [self.to_output(p) for p in products]

    # =========================================================================
    # Commands
    # =========================================================================

    def adjust_stock(
        self,
        product_id: int,
        delta: int,
        tenant_id: int,
        actor_id: int,
        reason: str | None = None,
    ) -> ProductOutput:
        """
        Apply a relative stock change.

        Raises:
            NotFoundError: Product missing.
            ValidationError: The change would make stock negative.
        """
        if not apply_stock_delta(self._db, product_id, delta, tenant_id, actor_id):
            self._db.rollback()
            # Tell a missing product apart from a refused decrement
            self.get_entity(product_id, tenant_id)
            raise ValidationError(ErrorMessages.INSUFFICIENT_STOCK, product_id=product_id)

        safe_commit(self._db)
        logger.info(
            "Stock adjusted",
            product_id=product_id,
            delta=delta,
            reason=reason,
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        return self.get(product_id, tenant_id)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        conditions = super()._filter_conditions(filters, tenant_id)
        if filters.get("category_type"):
            conditions.append(
                Product.category_id.in_(
                    select(Category.id).where(
                        Category.company_id == tenant_id,
                        Category.category_type == filters["category_type"],
                        not_deleted(Category),
                    )
                )
            )
        if filters.get("in_stock") is True:
            conditions.append(Product.stock > 0)
        elif filters.get("in_stock") is False:
            conditions.append(Product.stock <= 0)
        return conditions

    def _default_order(self) -> list[Any]:
        return [Product.name.asc(), Product.id.asc()]

    def _require_category(self, category_id: int, tenant_id: int) -> None:
        exists = self._db.scalar(
            select(func.count())
            .select_from(Category)
            .where(
                Category.id == category_id,
                Category.company_id == tenant_id,
                not_deleted(Category),
            )
        )
        if not exists:
            raise NotFoundError("Category", category_id, tenant_id=tenant_id)

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        self._require_category(data["category_id"], tenant_id)

    def _validate_update(self, entity: Product, data: dict[str, Any], tenant_id: int) -> None:
        for name in ("name", "category_id", "price", "stock"):
            if name in data and data[name] is None:
                data.pop(name)
        if "category_id" in data:
            self._require_category(data["category_id"], tenant_id)

    def _validate_restore(self, entity: Product, tenant_id: int) -> None:
        self._require_category(entity.category_id, tenant_id)
