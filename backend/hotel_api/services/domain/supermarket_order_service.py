"""
Supermarket Order Service - shop sales.

A sale stays PENDING while lines are edited at the till and is closed with
``complete`` or ``cancel``. Quantity changes move stock in the same unit of
work as the line.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from hotel_api.models import SupermarketOrder, SupermarketOrderItem
from hotel_api.services.domain.outlet_order_service import OutletOrderService
from hotel_api.services.domain.product_service import apply_stock_delta
from shared.config.constants import CategoryType, ErrorMessages, OrderStatus
from shared.infrastructure.db import safe_commit, unit_of_work
from shared.utils.admin_schemas import OutletOrderOutput
from shared.utils.exceptions import InvalidStateError, ValidationError
from shared.utils.validators import to_money


class SupermarketOrderService(OutletOrderService[SupermarketOrder, OutletOrderOutput]):
    """
    Business rules (on top of OutletOrderService):
    - Only products of SUPERMARKET categories can be sold
    - Revenue counts completed sales only
    """

    outlet = CategoryType.SUPERMARKET
    line_model = SupermarketOrderItem

    search_fields = ("notes",)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=SupermarketOrder,
            output_schema=OutletOrderOutput,
            entity_name="Supermarket order",
        )

    def update_item(
        self,
        order_id: int,
        item_id: int,
        quantity: int,
        tenant_id: int,
        actor_id: int,
    ) -> OutletOrderOutput:
        """
        Change the quantity of one line at its original unit price.

        Raises:
            InvalidStateError: Order cancelled or completed.
            NotFoundError: No such line on the order.
            ValidationError: Not enough stock for the increase.
        """
        order = self._get_open_order(
            order_id, tenant_id, "Cannot update items in cancelled or completed orders"
        )
        item = self._find_line(order.active_items, item_id, tenant_id)
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1", item_id=item_id)

        delta = quantity - item.quantity
        new_subtotal = to_money(item.unit_price) * quantity

        with unit_of_work(self._db):
            if delta and not apply_stock_delta(self._db, item.product_id, -delta, tenant_id, actor_id):
                raise ValidationError(ErrorMessages.INSUFFICIENT_STOCK, product_id=item.product_id)
            order.total = to_money(order.total) - to_money(item.subtotal) + new_subtotal
            item.quantity = quantity
            item.subtotal = new_subtotal
            item.set_updated_by(actor_id)
            order.set_updated_by(actor_id)

        self._db.refresh(order)
        return self.to_output(order)

    def complete(self, order_id: int, tenant_id: int, actor_id: int) -> OutletOrderOutput:
        order = self.get_entity(order_id, tenant_id)
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateError(
                "Cannot complete cancelled orders", entity="SupermarketOrder", current_state=order.status
            )
        if order.status == OrderStatus.COMPLETED:
            raise InvalidStateError(
                "Order is already completed", entity="SupermarketOrder", current_state=order.status
            )

        order.status = OrderStatus.COMPLETED
        order.set_updated_by(actor_id)
        safe_commit(self._db)
        self._db.refresh(order)
        return self.to_output(order)

    def _revenue_condition(self) -> Any:
        return self._model.status == OrderStatus.COMPLETED
