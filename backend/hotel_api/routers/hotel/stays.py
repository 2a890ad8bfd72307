"""
Stay endpoints: bookings, check-in, check-out and cancellation.
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
from hotel_api.services.domain import StayService
from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    StayCheckIn,
    StayCheckOut,
    StayCreate,
    StayOutput,
    StayUpdate,
)
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/stays", tags=["stays"])


@router.post("", response_model=StayOutput, status_code=status.HTTP_201_CREATED)
def create_stay(
    body: StayCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> StayOutput:
    """Book a room. total_amount defaults to nights x the room type's base price."""
    return StayService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[StayOutput])
def list_stays(
    stay_status: str | None = Query(default=None, alias="status"),
    room_id: int | None = Query(default=None, alias="roomId"),
    client_id: int | None = Query(default=None, alias="clientId"),
    start_date: date | None = Query(default=None, alias="startDate"),
    end_date: date | None = Query(default=None, alias="endDate"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return StayService(db).list(
        get_tenant_id(user),
        start_date=start_date,
        end_date=end_date,
        filters={"status": stay_status, "room_id": room_id, "client_id": client_id},
        **params.to_kwargs(),
    )


@router.get("/active", response_model=list[StayOutput])
def active_stays(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[StayOutput]:
    """Guests currently checked in."""
    return StayService(db).active(get_tenant_id(user))


@router.get("/upcoming", response_model=list[StayOutput])
def upcoming_stays(
    days: int = Query(default=Limits.DEFAULT_UPCOMING_DAYS, ge=1, le=365),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[StayOutput]:
    return StayService(db).upcoming(get_tenant_id(user), days)


@router.get("/{stay_id}", response_model=StayOutput)
def get_stay(
    stay_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> StayOutput:
    return StayService(db).get(stay_id, get_tenant_id(user))


@router.get("/{stay_id}/statistics")
def stay_statistics(
    stay_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    """Room charge, restaurant spend and outstanding balance of the stay."""
    return StayService(db).statistics(stay_id, get_tenant_id(user))


@router.patch("/{stay_id}", response_model=StayOutput)
def update_stay(
    stay_id: int,
    body: StayUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> StayOutput:
    return StayService(db).update(
        stay_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.post("/{stay_id}/check-in", response_model=StayOutput)
def check_in(
    stay_id: int,
    body: StayCheckIn | None = None,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> StayOutput:
    return StayService(db).check_in(
        stay_id,
        get_tenant_id(user),
        get_user_id(user),
        body.actual_check_in if body else None,
    )


@router.post("/{stay_id}/check-out", response_model=StayOutput)
def check_out(
    stay_id: int,
    body: StayCheckOut | None = None,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> StayOutput:
    return StayService(db).check_out(
        stay_id,
        get_tenant_id(user),
        get_user_id(user),
        body.actual_check_out if body else None,
    )


@router.post("/{stay_id}/cancel", response_model=StayOutput)
def cancel_stay(
    stay_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_front_desk),
) -> StayOutput:
    return StayService(db).cancel(stay_id, get_tenant_id(user), get_user_id(user))


@router.delete("/{stay_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stay(
    stay_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    StayService(db).remove(stay_id, get_tenant_id(user), get_user_id(user))
