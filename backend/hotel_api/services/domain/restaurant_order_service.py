"""
Restaurant Order Service - orders, line items and payments.

Order lifecycle:
    PENDING -> PREPARING -> READY -> DELIVERED -> COMPLETED
    any active status -> CANCELLED (only while nothing has been paid)

Payment status follows the paid amount: PENDING, PARTIAL, then PAID, which
also completes the order.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from hotel_api.models import RestaurantOrder, RestaurantOrderItem, RestaurantPayment
from hotel_api.services import lookup
from hotel_api.services.domain.outlet_order_service import OutletOrderService
from shared.config.constants import CategoryType, OrderStatus, PaymentStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import unit_of_work
from shared.utils.admin_schemas import OrderOutput
from shared.utils.exceptions import InvalidStateError, ValidationError
from shared.utils.validators import to_money

logger = get_logger(__name__)


class RestaurantOrderService(OutletOrderService[RestaurantOrder, OrderOutput]):
    """
    Business rules (on top of OutletOrderService):
    - Only products of RESTAURANT categories can be ordered
    - A payment never exceeds the remaining balance
    """

    outlet = CategoryType.RESTAURANT
    line_model = RestaurantOrderItem

    search_fields = ("notes", "table_number")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=RestaurantOrder,
            output_schema=OrderOutput,
            entity_name="Restaurant order",
        )

    def pay(self, order_id: int, data: dict[str, Any], tenant_id: int, actor_id: int) -> OrderOutput:
        """
        Record a payment.

        Raises:
            InvalidStateError: Order cancelled.
            ValidationError: Amount above the remaining balance.
        """
        order = self.get_entity(order_id, tenant_id)
        if order.status == OrderStatus.CANCELLED:
            raise InvalidStateError(
                "Cannot pay for cancelled orders", entity="RestaurantOrder", current_state=order.status
            )

        amount = to_money(data["amount"])
        if amount <= 0:
            raise ValidationError("Payment amount must be greater than zero")
        new_paid = to_money(order.paid_amount) + amount
        if new_paid > to_money(order.total):
            raise ValidationError("Payment amount exceeds order balance")

        payment = RestaurantPayment(
            order_id=order.id,
            company_id=tenant_id,
            amount=amount,
            payment_method=lookup.validate("payment_method", data.get("payment_method")),
            reference=data.get("reference"),
            notes=data.get("notes"),
        )
        payment.set_created_by(actor_id)

        with unit_of_work(self._db):
            self._db.add(payment)
            order.paid_amount = new_paid
            if new_paid == to_money(order.total):
                order.payment_status = PaymentStatus.PAID
                order.status = OrderStatus.COMPLETED
            else:
                order.payment_status = PaymentStatus.PARTIAL
            order.set_updated_by(actor_id)

        self._db.refresh(order)
        logger.info(
            "Payment recorded",
            order_id=order.id,
            amount=str(amount),
            payment_status=order.payment_status,
            tenant_id=tenant_id,
        )
        return self.to_output(order)
