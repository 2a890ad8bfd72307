"""
Restaurant order endpoints: ordering, line items, payments and cancellation.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_management,
    require_restaurant,
)
from hotel_api.services.domain import RestaurantOrderService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    OrderCreate,
    OrderItemsAdd,
    OrderOutput,
    OrderUpdate,
    PaymentCreate,
)
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/restaurant-orders", tags=["restaurant-orders"])


@router.post("", response_model=OrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    """
    Place an order. Every item must be a RESTAURANT product with enough
    stock; the order, its lines and the stock decrements commit together.
    """
    return RestaurantOrderService(db).create(
        body.model_dump(), get_tenant_id(user), get_user_id(user)
    )


@router.get("", response_model=Page[OrderOutput])
def list_orders(
    client_id: int | None = Query(default=None, alias="clientId"),
    order_status: str | None = Query(default=None, alias="status"),
    service_mode: str | None = Query(default=None, alias="serviceMode"),
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
):
    return RestaurantOrderService(db).list(
        get_tenant_id(user),
        start_date=start_date,
        end_date=end_date,
        filters={
            "client_id": client_id,
            "status": order_status,
            "service_mode": service_mode,
            "payment_status": payment_status,
        },
        **params.to_kwargs(),
    )


@router.get("/statistics")
def order_statistics(
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> dict:
    return RestaurantOrderService(db).stats(get_tenant_id(user), start_date, end_date)


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    return RestaurantOrderService(db).get(order_id, get_tenant_id(user))


@router.patch("/{order_id}", response_model=OrderOutput)
def update_order(
    order_id: int,
    body: OrderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    return RestaurantOrderService(db).update(
        order_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.post("/{order_id}/items", response_model=OrderOutput)
def add_order_items(
    order_id: int,
    body: OrderItemsAdd,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    return RestaurantOrderService(db).add_items(
        order_id,
        [item.model_dump() for item in body.items],
        get_tenant_id(user),
        get_user_id(user),
    )


@router.delete("/{order_id}/items/{item_id}", response_model=OrderOutput)
def remove_order_item(
    order_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    """Remove one line and give its stock back. The last line cannot be removed."""
    return RestaurantOrderService(db).remove_item(
        order_id, item_id, get_tenant_id(user), get_user_id(user)
    )


@router.post("/{order_id}/pay", response_model=OrderOutput)
def pay_order(
    order_id: int,
    body: PaymentCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    """Record a payment. Paying the full balance completes the order."""
    return RestaurantOrderService(db).pay(
        order_id, body.model_dump(), get_tenant_id(user), get_user_id(user)
    )


@router.post("/{order_id}/cancel", response_model=OrderOutput)
def cancel_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> OrderOutput:
    return RestaurantOrderService(db).cancel(order_id, get_tenant_id(user), get_user_id(user))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    RestaurantOrderService(db).remove(order_id, get_tenant_id(user), get_user_id(user))
