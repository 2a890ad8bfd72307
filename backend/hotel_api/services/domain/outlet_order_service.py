"""
Outlet Order Service - what restaurant and supermarket orders have in common.

An outlet order belongs to a client, may be charged to the client's active
stay and holds lines priced from products of the outlet's category type.
Every operation that touches stock runs in one unit of work with the order
write, using the conditional stock UPDATE from ``product_service``.

Subclasses set ``outlet`` (a category type) and ``line_model`` and add the
outlet's own actions.
"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Iterable

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from hotel_api.models import Category, Client, Product, Stay, not_deleted, utcnow
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService, ModelT, OutputT
from hotel_api.services.domain.product_service import apply_stock_delta
from shared.config.constants import ErrorMessages, OrderStatus, PaymentStatus, ServiceMode, StayStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import unit_of_work
from shared.utils.exceptions import InvalidStateError, NotFoundError, ValidationError
from shared.utils.validators import to_money

logger = get_logger(__name__)


class OutletOrderService(BaseCRUDService[ModelT, OutputT]):
    """
    Business rules:
    - Client must exist; a stay, when given, must be active and the client's
    - Only products of the outlet's categories can be ordered
    - Line price is the product price at the time the line is added
    - total is the sum of the active lines' subtotals
    - Paid orders cannot be cancelled or deleted
    """

    outlet: ClassVar[str]
    line_model: ClassVar[type]

    sortable_fields = ("created_at", "updated_at", "order_date", "total", "status")
    filter_fields = ("client_id", "status", "service_mode", "payment_status", "stay_id")

    # =========================================================================
    # Queries
    # =========================================================================

    def list(
        self,
        tenant_id: int,
        *,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        filters = dict(kwargs.pop("filters", None) or {})
        for name, field in (
            ("status", "order_status"),
            ("service_mode", "service_mode"),
            ("payment_status", "payment_status"),
        ):
            if filters.get(name):
                filters[name] = lookup.validate(field, filters[name])
        filters["start_date"] = start_date
        filters["end_date"] = end_date
        return super().list(tenant_id, filters=filters, **kwargs)

    def stats(
        self,
        tenant_id: int,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> dict[str, Any]:
        model = self._model
        conditions = [model.company_id == tenant_id, not_deleted(model)]
        conditions += self._date_conditions(start_date, end_date)

        total, revenue, pending, completed, cancelled = self._db.execute(
            select(
                func.count(model.id),
                func.coalesce(func.sum(case((self._revenue_condition(), model.total), else_=0)), 0),
                func.coalesce(func.sum(case((model.status == OrderStatus.PENDING, 1), else_=0)), 0),
                func.coalesce(func.sum(case((model.status == OrderStatus.COMPLETED, 1), else_=0)), 0),
                func.coalesce(func.sum(case((model.status == OrderStatus.CANCELLED, 1), else_=0)), 0),
            ).where(*conditions)
        ).one()

        return {
            "totalOrders": total,
            "totalRevenue": float(to_money(revenue)),
            "pendingOrders": pending,
            "completedOrders": completed,
            "cancelledOrders": cancelled,
        }

    # =========================================================================
    # Commands
    # =========================================================================

    def create(self, data: dict[str, Any], tenant_id: int, actor_id: int) -> OutputT:
        """
        Place an order with its lines and take the stock.

        Raises:
            NotFoundError: Client, stay or product missing.
            ValidationError: Empty order, stay of another client, not enough stock.
        """
        items = data.pop("items", None) or []
        if not items:
            raise ValidationError("Order must contain at least one item")

        self._require_client(data["client_id"], tenant_id)
        if data.get("stay_id") is not None:
            self._require_stay(data["stay_id"], data["client_id"], tenant_id)
        data["service_mode"] = lookup.validate(
            "service_mode", data.get("service_mode") or ServiceMode.WALK_IN
        )
        data["order_date"] = data.get("order_date") or utcnow()

        order = self._model(
            **data,
            company_id=tenant_id,
            status=OrderStatus.PENDING,
            payment_status=PaymentStatus.PENDING,
            paid_amount=Decimal("0"),
        )
        order.set_created_by(actor_id)
        lines = self._build_lines(items, tenant_id, actor_id)
        order.items.extend(lines)
        order.total = sum((line.subtotal for line in lines), Decimal("0"))

        with unit_of_work(self._db):
            self._db.add(order)
            self._take_stock(lines, tenant_id, actor_id)

        self._db.refresh(order)
        logger.info(
            f"{self._entity_name} created",
            order_id=order.id,
            total=str(order.total),
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        return self.to_output(order)

    def add_items(
        self,
        order_id: int,
        items: list[dict[str, Any]],
        tenant_id: int,
        actor_id: int,
    ) -> OutputT:
        order = self._get_open_order(order_id, tenant_id, "Cannot add items to cancelled or completed orders")
        if not items:
            raise ValidationError("Order must contain at least one item")

        lines = self._build_lines(items, tenant_id, actor_id)
        with unit_of_work(self._db):
            order.items.extend(lines)
            order.total = to_money(order.total) + sum((line.subtotal for line in lines), Decimal("0"))
            order.set_updated_by(actor_id)
            self._take_stock(lines, tenant_id, actor_id)

        self._db.refresh(order)
        return self.to_output(order)

    def remove_item(self, order_id: int, item_id: int, tenant_id: int, actor_id: int) -> OutputT:
        """Drop one line, give its stock back and lower the total."""
        order = self._get_open_order(
            order_id, tenant_id, "Cannot remove items from cancelled or completed orders"
        )
        active = order.active_items
        item = self._find_line(active, item_id, tenant_id)
        if len(active) == 1:
            raise ValidationError("Cannot remove the last item. Cancel the order instead.")

        with unit_of_work(self._db):
            item.soft_delete(actor_id)
            apply_stock_delta(self._db, item.product_id, item.quantity, tenant_id, actor_id)
            order.total = to_money(order.total) - to_money(item.subtotal)
            order.set_updated_by(actor_id)

        self._db.refresh(order)
        return self.to_output(order)

    def cancel(self, order_id: int, tenant_id: int, actor_id: int) -> OutputT:
        """Cancel an unpaid order and return its stock."""
        order = self.get_entity(order_id, tenant_id)
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateError(
                "Order is already cancelled", entity=self._model.__name__, current_state=order.status
            )
        if order.status == OrderStatus.COMPLETED:
            raise InvalidStateError(
                "Cannot cancel completed orders", entity=self._model.__name__, current_state=order.status
            )
        if to_money(order.paid_amount) > 0:
            raise ValidationError("Cannot cancel orders with payments. Process refund first.")

        with unit_of_work(self._db):
            for item in order.active_items:
                apply_stock_delta(self._db, item.product_id, item.quantity, tenant_id, actor_id)
            order.status = OrderStatus.CANCELLED
            order.set_updated_by(actor_id)

        self._db.refresh(order)
        return self.to_output(order)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        conditions = super()._filter_conditions(filters, tenant_id)
        conditions += self._date_conditions(filters.get("start_date"), filters.get("end_date"))
        return conditions

    def _date_conditions(self, start_date: datetime | None, end_date: datetime | None) -> list[Any]:
        conditions = []
        if start_date is not None:
            conditions.append(self._model.order_date >= start_date)
        if end_date is not None:
            conditions.append(self._model.order_date <= end_date)
        return conditions

    def _revenue_condition(self) -> Any:
        return self._model.status != OrderStatus.CANCELLED

    def _default_order(self) -> list[Any]:
        return [self._model.order_date.desc(), self._model.id.desc()]

    def _validate_update(self, entity: ModelT, data: dict[str, Any], tenant_id: int) -> None:
        if entity.status in OrderStatus.CLOSED:
            raise InvalidStateError(
                "Cannot update cancelled or completed orders",
                entity=self._model.__name__,
                current_state=entity.status,
            )
        for name in ("service_mode", "status", "payment_status"):
            if name in data and data[name] is None:
                data.pop(name)
        if "service_mode" in data:
            data["service_mode"] = lookup.validate("service_mode", data["service_mode"])
        if "payment_status" in data:
            data["payment_status"] = lookup.validate("payment_status", data["payment_status"])
        if "status" in data:
            data["status"] = lookup.validate("order_status", data["status"])
            if data["status"] == OrderStatus.CANCELLED:
                raise ValidationError("Orders are cancelled through the cancel action")
        if data.get("stay_id") is not None:
            self._require_stay(data["stay_id"], entity.client_id, tenant_id)

    def _validate_delete(self, entity: ModelT, tenant_id: int) -> None:
        if to_money(entity.paid_amount) > 0:
            raise ValidationError("Cannot delete orders with payments", order_id=entity.id)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get_open_order(self, order_id: int, tenant_id: int, message: str) -> ModelT:
        order = self.get_entity(order_id, tenant_id)
        if order.status in OrderStatus.CLOSED:
            raise InvalidStateError(message, entity=self._model.__name__, current_state=order.status)
        return order

    @staticmethod
    def _find_line(lines: Iterable[Any], item_id: int, tenant_id: int) -> Any:
        item = next((line for line in lines if line.id == item_id), None)
        if item is None:
            raise NotFoundError("Order item", item_id, tenant_id=tenant_id)
        return item

    def _require_client(self, client_id: int, tenant_id: int) -> None:
        exists = self._db.scalar(
            select(func.count()).select_from(Client).where(
                Client.id == client_id, Client.company_id == tenant_id, not_deleted(Client)
            )
        )
        if not exists:
            raise NotFoundError("Client", client_id, tenant_id=tenant_id)

    def _require_stay(self, stay_id: int, client_id: int, tenant_id: int) -> None:
        stay = self._db.scalar(
            select(Stay).where(
                Stay.id == stay_id,
                Stay.company_id == tenant_id,
                Stay.status.in_(StayStatus.ACTIVE),
                not_deleted(Stay),
            )
        )
        if stay is None:
            raise NotFoundError("Active stay", stay_id, tenant_id=tenant_id)
        if stay.client_id != client_id:
            raise ValidationError("Stay does not belong to this client", stay_id=stay_id)

    def _require_product(self, product_id: int, tenant_id: int) -> Product:
        """A non-deleted product of one of the outlet's categories."""
        product = self._db.scalar(
            select(Product)
            .join(Category, Category.id == Product.category_id)
            .where(
                Product.id == product_id,
                Product.company_id == tenant_id,
                not_deleted(Product),
                Category.category_type == self.outlet,
                not_deleted(Category),
            )
        )
        if product is None:
            raise NotFoundError("Product", product_id, tenant_id=tenant_id)
        return product

    def _build_lines(self, items: Iterable[dict[str, Any]], tenant_id: int, actor_id: int) -> list[Any]:
        """Price each requested line from an outlet product with enough stock."""
        lines = []
        for item in items:
            product = self._require_product(item["product_id"], tenant_id)

            quantity = int(item["quantity"])
            if quantity < 1:
                raise ValidationError("Quantity must be at least 1", product_id=product.id)
            if product.stock < quantity:
                raise ValidationError(f"Insufficient stock for product: {product.name}")

            unit_price = to_money(product.price)
            line = self.line_model(
                company_id=tenant_id,
                product_id=product.id,
                quantity=quantity,
                unit_price=unit_price,
                subtotal=unit_price * quantity,
            )
            line.set_created_by(actor_id)
            lines.append(line)
        return lines

    def _take_stock(self, lines: list[Any], tenant_id: int, actor_id: int) -> None:
        for line in lines:
            if not apply_stock_delta(self._db, line.product_id, -line.quantity, tenant_id, actor_id):
                raise ValidationError(ErrorMessages.INSUFFICIENT_STOCK, product_id=line.product_id)
