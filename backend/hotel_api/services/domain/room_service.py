"""
Room Service.

Rooms belong to a room type of the same company. Availability for a date
range excludes rooms holding an overlapping confirmed or checked-in stay.
"""

from __future__ import annotations

from datetime import date
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hotel_api.models import Room, RoomType, Stay, not_deleted
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from shared.config.constants import RoomStatus, StayStatus
from shared.infrastructure.db import safe_commit
from shared.utils.admin_schemas import RoomOutput
from shared.utils.exceptions import ForbiddenError, NotFoundError, ValidationError


def overlapping_stays(start: date, end: date):
    """Conditions matching stays that hold their room for part of [start, end)."""
    return [
        Stay.status.in_(StayStatus.ACTIVE),
        Stay.check_in_date < end,
        Stay.check_out_date > start,
        not_deleted(Stay),
    ]


class RoomService(BaseCRUDService[Room, RoomOutput]):
    """
    Business rules:
    - room_number unique per company among non-deleted rooms
    - room_type_id must reference a non-deleted room type of the company
    - A room with confirmed or checked-in stays cannot be deleted
    """

    search_fields = ("room_number", "name", "description")
    sortable_fields = ("created_at", "updated_at", "room_number", "floor", "status")
    filter_fields = ("status", "room_type_id", "floor")
    unique_fields = (("room_number",),)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Room,
            output_schema=RoomOutput,
            entity_name="Room",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def available(
        self,
        tenant_id: int,
        check_in: date,
        check_out: date,
        room_type_id: int | None = None,
    ) -> list[RoomOutput]:
        """Rooms free for the whole range, ordered by room number."""
        if check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date")

        busy = (
            select(Stay.room_id)
            .where(Stay.company_id == tenant_id, *overlapping_stays(check_in, check_out))
        )
        conditions = [Room.id.not_in(busy)]
        if room_type_id is not None:
            conditions.append(Room.room_type_id == room_type_id)

        rooms = self._repo.find_all(tenant_id, *conditions, order_by=Room.room_number)
        return [self.to_output(r) for r in rooms]

    def list(self, tenant_id: int, **kwargs: Any) -> dict[str, Any]:
        filters = kwargs.get("filters") or {}
        if filters.get("status"):
            filters["status"] = lookup.validate("room_status", filters["status"])
        kwargs["filters"] = filters
        return super().list(tenant_id, **kwargs)

    # =========================================================================
    # Commands
    # =========================================================================

    def update_status(self, room_id: int, status: str, tenant_id: int, actor_id: int) -> RoomOutput:
        room = self.get_entity(room_id, tenant_id)
        room.status = lookup.validate("room_status", status)
        room.set_updated_by(actor_id)
        safe_commit(self._db)
        self._db.refresh(room)
        return self.to_output(room)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _require_room_type(self, room_type_id: int, tenant_id: int) -> None:
        exists = self._db.scalar(
            select(func.count())
            .select_from(RoomType)
            .where(
                RoomType.id == room_type_id,
                RoomType.company_id == tenant_id,
                not_deleted(RoomType),
            )
        )
        if not exists:
            raise NotFoundError("Room type", room_type_id, tenant_id=tenant_id)

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        self._require_room_type(data["room_type_id"], tenant_id)
        data["status"] = lookup.validate("room_status", data.get("status") or RoomStatus.AVAILABLE)

    def _validate_update(self, entity: Room, data: dict[str, Any], tenant_id: int) -> None:
        if data.get("room_type_id") is not None:
            self._require_room_type(data["room_type_id"], tenant_id)
        if data.get("status") is not None:
            data["status"] = lookup.validate("room_status", data["status"])
        for name in ("room_number", "room_type_id", "status"):
            if name in data and data[name] is None:
                data.pop(name)

    def _validate_delete(self, entity: Room, tenant_id: int) -> None:
        stay_count = self._db.scalar(
            select(func.count())
            .select_from(Stay)
            .where(
                Stay.room_id == entity.id,
                Stay.status.in_(StayStatus.ACTIVE),
                not_deleted(Stay),
            )
        ) or 0
        if stay_count > 0:
            raise ForbiddenError(
                f"Cannot delete room. There are {stay_count} active stay(s) for this room.",
                room_id=entity.id,
            )

    def _validate_restore(self, entity: Room, tenant_id: int) -> None:
        self._require_room_type(entity.room_type_id, tenant_id)
