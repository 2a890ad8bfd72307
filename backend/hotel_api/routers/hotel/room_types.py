"""
Room type endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    current_user,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_management,
)
from hotel_api.services.domain import RoomTypeService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import RoomTypeCreate, RoomTypeOutput, RoomTypeUpdate
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/room-types", tags=["room-types"])


@router.post("", response_model=RoomTypeOutput, status_code=status.HTTP_201_CREATED)
def create_room_type(
    body: RoomTypeCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> RoomTypeOutput:
    """Create a room type. Name must be unique within the company."""
    return RoomTypeService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[RoomTypeOutput])
def list_room_types(
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return RoomTypeService(db).list(get_tenant_id(user), **params.to_kwargs())


@router.get("/stats")
def room_type_stats(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    """Room type totals and rooms per type."""
    return RoomTypeService(db).stats(get_tenant_id(user))


@router.get("/{room_type_id}", response_model=RoomTypeOutput)
def get_room_type(
    room_type_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> RoomTypeOutput:
    return RoomTypeService(db).get(room_type_id, get_tenant_id(user))


@router.patch("/{room_type_id}", response_model=RoomTypeOutput)
def update_room_type(
    room_type_id: int,
    body: RoomTypeUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> RoomTypeOutput:
    return RoomTypeService(db).update(
        room_type_id,
        body.model_dump(exclude_unset=True),
        get_tenant_id(user),
        get_user_id(user),
    )


@router.delete("/{room_type_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room_type(
    room_type_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    """Soft delete a room type. Refused while rooms still use it."""
    RoomTypeService(db).remove(room_type_id, get_tenant_id(user), get_user_id(user))
