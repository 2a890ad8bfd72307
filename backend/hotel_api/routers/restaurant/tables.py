"""
Restaurant table endpoints: seating, clearing and reservations.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    current_user,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_management,
    require_restaurant,
)
from hotel_api.services.domain import RestaurantTableService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import TableAssign, TableCreate, TableOutput, TableUpdate
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/restaurant-tables", tags=["restaurant-tables"])


@router.post("", response_model=TableOutput, status_code=status.HTTP_201_CREATED)
def create_table(
    body: TableCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> TableOutput:
    return RestaurantTableService(db).create(
        body.model_dump(), get_tenant_id(user), get_user_id(user)
    )


@router.get("", response_model=Page[TableOutput])
def list_tables(
    table_status: str | None = Query(default=None, alias="status"),
    min_capacity: int | None = Query(default=None, alias="minCapacity", ge=1),
    location: str | None = None,
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return RestaurantTableService(db).list(
        get_tenant_id(user),
        min_capacity=min_capacity,
        filters={"status": table_status, "location": location},
        **params.to_kwargs(),
    )


@router.get("/statistics")
def table_statistics(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    """Counts per status and the occupancy rate as a percentage string."""
    return RestaurantTableService(db).stats(get_tenant_id(user))


@router.get("/{table_id}", response_model=TableOutput)
def get_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> TableOutput:
    return RestaurantTableService(db).get(table_id, get_tenant_id(user))


@router.patch("/{table_id}", response_model=TableOutput)
def update_table(
    table_id: int,
    body: TableUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> TableOutput:
    return RestaurantTableService(db).update(
        table_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.post("/{table_id}/assign", response_model=TableOutput)
def assign_table(
    table_id: int,
    body: TableAssign,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> TableOutput:
    """Seat an active order at the table; the table becomes OCCUPIED."""
    return RestaurantTableService(db).assign(
        table_id, body.order_id, get_tenant_id(user), get_user_id(user)
    )


@router.post("/{table_id}/clear", response_model=TableOutput)
def clear_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> TableOutput:
    """Free the table once its order is completed or cancelled."""
    return RestaurantTableService(db).clear(table_id, get_tenant_id(user), get_user_id(user))


@router.post("/{table_id}/reserve", response_model=TableOutput)
def reserve_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> TableOutput:
    return RestaurantTableService(db).reserve(table_id, get_tenant_id(user), get_user_id(user))


@router.post("/{table_id}/unreserve", response_model=TableOutput)
def unreserve_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_restaurant),
) -> TableOutput:
    return RestaurantTableService(db).unreserve(table_id, get_tenant_id(user), get_user_id(user))


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(
    table_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    RestaurantTableService(db).remove(table_id, get_tenant_id(user), get_user_id(user))
