"""
Room Type Service - Clean Architecture Implementation.

Usage:
    from hotel_api.services.domain import RoomTypeService

    service = RoomTypeService(db)
    suite = service.create({"name": "Suite", "base_price": 150, "max_occupancy": 2}, tenant_id, actor_id)
    page = service.list(tenant_id, search="suite")
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hotel_api.models import Room, RoomType, not_deleted
from hotel_api.services.base_service import BaseCRUDService
from shared.utils.admin_schemas import RoomTypeOutput
from shared.utils.exceptions import ForbiddenError


class RoomTypeService(BaseCRUDService[RoomType, RoomTypeOutput]):
    """
    Service for room type management.

    Business rules:
    - Name is unique per company among non-deleted room types
    - A room type in use by non-deleted rooms cannot be deleted
    """

    search_fields = ("name", "description", "bed_type")
    sortable_fields = ("created_at", "updated_at", "name", "base_price", "max_occupancy")
    unique_fields = (("name",),)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=RoomType,
            output_schema=RoomTypeOutput,
            entity_name="Room type",
        )

    def stats(self, tenant_id: int) -> dict[str, Any]:
        """
        Room type totals and rooms per type.

        avgRoomsPerType is 0 when the company has no room types.
        """
        rows = self._db.execute(
            select(RoomType.id, RoomType.name, func.count(Room.id))
            .outerjoin(Room, (Room.room_type_id == RoomType.id) & not_deleted(Room))
            .where(RoomType.company_id == tenant_id, not_deleted(RoomType))
            .group_by(RoomType.id, RoomType.name)
            .order_by(RoomType.name)
        ).all()

        total_types = len(rows)
        total_rooms = sum(count for _, _, count in rows)
        return {
            "totalRoomTypes": total_types,
            "totalRooms": total_rooms,
            "avgRoomsPerType": round(total_rooms / total_types, 2) if total_types else 0,
            "roomTypeBreakdown": [
                {"id": type_id, "name": name, "roomCount": count}
                for type_id, name, count in rows
            ],
        }

    def _validate_delete(self, entity: RoomType, tenant_id: int) -> None:
        room_count = self._db.scalar(
            select(func.count())
            .select_from(Room)
            .where(
                Room.room_type_id == entity.id,
                Room.company_id == tenant_id,
                not_deleted(Room),
            )
        ) or 0

        if room_count > 0:
            raise ForbiddenError(
                f"Cannot delete room type. There are {room_count} active room(s) using this type.",
                room_type_id=entity.id,
                room_count=room_count,
            )
