"""
Room endpoints, including availability for a date range.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    current_user,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_front_desk,
    require_management,
)
from hotel_api.services.domain import RoomService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import RoomCreate, RoomOutput, RoomStatusUpdate, RoomUpdate
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/rooms", tags=["rooms"])


@router.post("", response_model=RoomOutput, status_code=status.HTTP_201_CREATED)
def create_room(
    body: RoomCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> RoomOutput:
    return RoomService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[RoomOutput])
def list_rooms(
    room_status: str | None = Query(default=None, alias="status"),
    room_type_id: int | None = Query(default=None, alias="roomTypeId"),
    floor: int | None = None,
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return RoomService(db).list(
        get_tenant_id(user),
        filters={"status": room_status, "room_type_id": room_type_id, "floor": floor},
        **params.to_kwargs(),
    )


@router.get("/available", response_model=list[RoomOutput])
def available_rooms(
    check_in: date = Query(alias="checkIn"),
    check_out: date = Query(alias="checkOut"),
    room_type_id: int | None = Query(default=None, alias="roomTypeId"),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[RoomOutput]:
    """Rooms with no confirmed or checked-in stay overlapping [checkIn, checkOut)."""
    return RoomService(db).available(get_tenant_id(user), check_in, check_out, room_type_id)


@router.get("/{room_id}", response_model=RoomOutput)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> RoomOutput:
    return RoomService(db).get(room_id, get_tenant_id(user))


@router.patch("/{room_id}", response_model=RoomOutput)
def update_room(
    room_id: int,
    body: RoomUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> RoomOutput:
    return RoomService(db).update(
        room_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.patch("/{room_id}/status", response_model=RoomOutput)
def update_room_status(
    room_id: int,
    body: RoomStatusUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> RoomOutput:
    """Housekeeping and front desk status changes (CLEANING, MAINTENANCE, ...)."""
    return RoomService(db).update_status(
        room_id, body.status, get_tenant_id(user), get_user_id(user)
    )


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    RoomService(db).remove(room_id, get_tenant_id(user), get_user_id(user))
