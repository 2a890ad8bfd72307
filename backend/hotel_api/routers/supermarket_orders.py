"""
Supermarket order endpoints: sales, line edits, completion and cancellation.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_front_desk,
    require_management,
    require_shop,
)
from hotel_api.services.domain import SupermarketOrderService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    OrderItemQuantity,
    OrderItemsAdd,
    OutletOrderOutput,
    SupermarketOrderCreate,
    SupermarketOrderUpdate,
)
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/supermarket-orders", tags=["supermarket-orders"])


@router.post("", response_model=OutletOrderOutput, status_code=status.HTTP_201_CREATED)
def create_order(
    body: SupermarketOrderCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    """
    Ring up a sale. Every item must be a SUPERMARKET product with enough
    stock; the sale, its lines and the stock decrements commit together.
    """
    return SupermarketOrderService(db).create(
        body.model_dump(), get_tenant_id(user), get_user_id(user)
    )


@router.get("", response_model=Page[OutletOrderOutput])
def list_orders(
    client_id: int | None = Query(default=None, alias="clientId"),
    stay_id: int | None = Query(default=None, alias="stayId"),
    order_status: str | None = Query(default=None, alias="status"),
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    service_mode: str | None = Query(default=None, alias="serviceMode"),
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
):
    return SupermarketOrderService(db).list(
        get_tenant_id(user),
        start_date=start_date,
        end_date=end_date,
        filters={
            "client_id": client_id,
            "stay_id": stay_id,
            "status": order_status,
            "payment_status": payment_status,
            "service_mode": service_mode,
        },
        **params.to_kwargs(),
    )


@router.get("/statistics")
def order_statistics(
    start_date: datetime | None = Query(default=None, alias="startDate"),
    end_date: datetime | None = Query(default=None, alias="endDate"),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> dict:
    return SupermarketOrderService(db).stats(get_tenant_id(user), start_date, end_date)


@router.get("/{order_id}", response_model=OutletOrderOutput)
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).get(order_id, get_tenant_id(user))


@router.patch("/{order_id}", response_model=OutletOrderOutput)
def update_order(
    order_id: int,
    body: SupermarketOrderUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).update(
        order_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.post("/{order_id}/items", response_model=OutletOrderOutput)
def add_order_items(
    order_id: int,
    body: OrderItemsAdd,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).add_items(
        order_id,
        [item.model_dump() for item in body.items],
        get_tenant_id(user),
        get_user_id(user),
    )


@router.patch("/{order_id}/items/{item_id}", response_model=OutletOrderOutput)
def update_order_item(
    order_id: int,
    item_id: int,
    body: OrderItemQuantity,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).update_item(
        order_id, item_id, body.quantity, get_tenant_id(user), get_user_id(user)
    )


@router.delete("/{order_id}/items/{item_id}", response_model=OutletOrderOutput)
def remove_order_item(
    order_id: int,
    item_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).remove_item(
        order_id, item_id, get_tenant_id(user), get_user_id(user)
    )


@router.post("/{order_id}/complete", response_model=OutletOrderOutput)
def complete_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_shop),
) -> OutletOrderOutput:
    return SupermarketOrderService(db).complete(order_id, get_tenant_id(user), get_user_id(user))


@router.post("/{order_id}/cancel", response_model=OutletOrderOutput)
def cancel_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> OutletOrderOutput:
    """Cancel a sale and put its stock back on the shelf."""
    return SupermarketOrderService(db).cancel(order_id, get_tenant_id(user), get_user_id(user))


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order(
    order_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    SupermarketOrderService(db).remove(order_id, get_tenant_id(user), get_user_id(user))
