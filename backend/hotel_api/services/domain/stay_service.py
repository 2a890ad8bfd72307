"""
Stay Service - room bookings and the front-desk workflow.

State machine:
    confirmed -> checked_in -> checked_out
    confirmed | checked_in -> cancelled

Every transition that also changes the room status runs in one unit of work.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from hotel_api.models import Client, RestaurantOrder, Room, Stay, not_deleted, utcnow
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from hotel_api.services.domain.room_service import overlapping_stays
from shared.config.constants import Limits, OrderStatus, RoomStatus, StayStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import unit_of_work
from shared.utils.admin_schemas import StayOutput
from shared.utils.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from shared.utils.validators import to_money

logger = get_logger(__name__)


class StayService(BaseCRUDService[Stay, StayOutput]):
    """
    Business rules:
    - Room and client must be non-deleted and belong to the company
    - Check-out date strictly after check-in date
    - A room holds at most one confirmed/checked-in stay per night
    - Creating a stay reserves an AVAILABLE room; check-in occupies it;
      check-out and cancellation free it unless another stay still holds it
    """

    search_fields = ("notes",)
    sortable_fields = ("created_at", "updated_at", "check_in_date", "check_out_date", "status")
    filter_fields = ("status", "room_id", "client_id")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Stay,
            output_schema=StayOutput,
            entity_name="Stay",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list(
        self,
        tenant_id: int,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Stays ordered by check-in date, newest first, unless sort_by is given."""
        filters = dict(kwargs.pop("filters", None) or {})
        if filters.get("status"):
            filters["status"] = lookup.validate("stay_status", filters["status"])
        filters["start_date"] = start_date
        filters["end_date"] = end_date
        return super().list(tenant_id, filters=filters, **kwargs)

    def active(self, tenant_id: int) -> list[StayOutput]:
        """Guests currently in house."""
        stays = self._repo.find_all(
            tenant_id,
            Stay.status == StayStatus.CHECKED_IN,
            order_by=[Stay.check_in_date.desc(), Stay.id.desc()],
        )
        return [self.to_output(s) for s in stays]

    def upcoming(self, tenant_id: int, days: int = Limits.DEFAULT_UPCOMING_DAYS) -> list[StayOutput]:
        """Confirmed arrivals from today through ``days`` ahead, soonest first."""
        today = utcnow().date()
        stays = self._repo.find_all(
            tenant_id,
            Stay.status == StayStatus.CONFIRMED,
            Stay.check_in_date >= today,
            Stay.check_in_date <= today + timedelta(days=days),
            order_by=[Stay.check_in_date.asc(), Stay.id.asc()],
        )
        return [self.to_output(s) for s in stays]

    def statistics(self, stay_id: int, tenant_id: int) -> dict[str, Any]:
        """Room charge, restaurant spend and balance of one stay."""
        stay = self.get_entity(stay_id, tenant_id)

        order_count, order_amount = self._db.execute(
            select(func.count(RestaurantOrder.id), func.coalesce(func.sum(RestaurantOrder.total), 0))
            .where(
                RestaurantOrder.stay_id == stay.id,
                RestaurantOrder.status != OrderStatus.CANCELLED,
                not_deleted(RestaurantOrder),
            )
        ).one()

        room_charge = to_money(stay.total_amount)
        orders_amount = to_money(order_amount)
        grand_total = room_charge + orders_amount
        paid = to_money(stay.paid_amount)

        return {
            "stayId": stay.id,
            "nights": stay.nights,
            "roomCharge": float(room_charge),
            "totalRestaurantOrders": order_count,
            "restaurantOrdersAmount": float(orders_amount),
            "grandTotal": float(grand_total),
            "paidAmount": float(paid),
            "balance": float(grand_total - paid),
        }

    # =========================================================================
    # Commands
    # =========================================================================

    def create(self, data: dict[str, Any], tenant_id: int, actor_id: int) -> StayOutput:
        """
        Book a room. The stay and the room's RESERVED status are written together.

        Raises:
            NotFoundError: Room or client missing.
            ValidationError: Check-out not after check-in.
            ConflictError: Room already booked for part of the range.
        """
        room = self._require_room(data["room_id"], tenant_id)
        self._require_client(data["client_id"], tenant_id)
        self._check_dates(data["check_in_date"], data["check_out_date"])
        self._check_overlap(room.id, data["check_in_date"], data["check_out_date"], tenant_id)

        if data.get("total_amount") is None:
            nights = (data["check_out_date"] - data["check_in_date"]).days
            data["total_amount"] = to_money(room.room_type.base_price) * nights

        stay = Stay(
            **data,
            company_id=tenant_id,
            status=StayStatus.CONFIRMED,
        )
        stay.set_created_by(actor_id)

        with unit_of_work(self._db):
            self._db.add(stay)
            if room.status == RoomStatus.AVAILABLE:
                room.status = RoomStatus.RESERVED
                room.set_updated_by(actor_id)

        self._db.refresh(stay)
        logger.info("Stay booked", stay_id=stay.id, room_id=room.id, tenant_id=tenant_id)
        return self.to_output(stay)

    def check_in(
        self,
        stay_id: int,
        tenant_id: int,
        actor_id: int,
        actual_check_in: datetime | None = None,
    ) -> StayOutput:
        stay = self.get_entity(stay_id, tenant_id)
        if stay.status != StayStatus.CONFIRMED:
            raise InvalidStateError(
                "Only confirmed stays can be checked in", entity="Stay", current_state=stay.status
            )

        with unit_of_work(self._db):
            stay.status = StayStatus.CHECKED_IN
            stay.actual_check_in = actual_check_in or utcnow()
            stay.set_updated_by(actor_id)
            stay.room.status = RoomStatus.OCCUPIED
            stay.room.set_updated_by(actor_id)

        self._db.refresh(stay)
        return self.to_output(stay)

    def check_out(
        self,
        stay_id: int,
        tenant_id: int,
        actor_id: int,
        actual_check_out: datetime | None = None,
    ) -> StayOutput:
        stay = self.get_entity(stay_id, tenant_id)
        if stay.status != StayStatus.CHECKED_IN:
            raise InvalidStateError(
                "Only checked-in stays can be checked out", entity="Stay", current_state=stay.status
            )

        with unit_of_work(self._db):
            stay.status = StayStatus.CHECKED_OUT
            stay.actual_check_out = actual_check_out or utcnow()
            stay.set_updated_by(actor_id)
            self._release_room(stay, tenant_id, actor_id)

        self._db.refresh(stay)
        return self.to_output(stay)

    def cancel(self, stay_id: int, tenant_id: int, actor_id: int) -> StayOutput:
        stay = self.get_entity(stay_id, tenant_id)
        if stay.status == StayStatus.CHECKED_OUT:
            raise InvalidStateError(
                "Cannot cancel a checked-out stay", entity="Stay", current_state=stay.status
            )
        if stay.status == StayStatus.CANCELLED:
            raise InvalidStateError(
                "Stay is already cancelled", entity="Stay", current_state=stay.status
            )

        with unit_of_work(self._db):
            stay.status = StayStatus.CANCELLED
            stay.set_updated_by(actor_id)
            self._release_room(stay, tenant_id, actor_id)

        self._db.refresh(stay)
        return self.to_output(stay)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        conditions = super()._filter_conditions(filters, tenant_id)
        if filters.get("start_date") is not None:
            conditions.append(Stay.check_in_date >= filters["start_date"])
        if filters.get("end_date") is not None:
            conditions.append(Stay.check_out_date <= filters["end_date"])
        return conditions

    def _default_order(self) -> list[Any]:
        return [Stay.check_in_date.desc(), Stay.id.desc()]

    def _validate_update(self, entity: Stay, data: dict[str, Any], tenant_id: int) -> None:
        for name in ("room_id", "client_id", "check_in_date", "check_out_date", "adults",
                     "children", "total_amount", "paid_amount"):
            if name in data and data[name] is None:
                data.pop(name)

        if entity.status in (StayStatus.CHECKED_OUT, StayStatus.CANCELLED):
            raise InvalidStateError(
                f"Cannot modify a {entity.status.replace('_', '-')} stay",
                entity="Stay",
                current_state=entity.status,
            )

        room_id = data.get("room_id", entity.room_id)
        if room_id != entity.room_id:
            self._require_room(room_id, tenant_id)
        if data.get("client_id", entity.client_id) != entity.client_id:
            self._require_client(data["client_id"], tenant_id)

        check_in = data.get("check_in_date", entity.check_in_date)
        check_out = data.get("check_out_date", entity.check_out_date)
        if {"room_id", "check_in_date", "check_out_date"} & data.keys():
            self._check_dates(check_in, check_out)
            self._check_overlap(room_id, check_in, check_out, tenant_id, exclude_id=entity.id)

    def _validate_delete(self, entity: Stay, tenant_id: int) -> None:
        if entity.status in StayStatus.ACTIVE:
            raise InvalidStateError(
                "Cancel or check out the stay before deleting it",
                entity="Stay",
                current_state=entity.status,
            )

    def _validate_restore(self, entity: Stay, tenant_id: int) -> None:
        if entity.status in StayStatus.ACTIVE:
            self._check_overlap(
                entity.room_id, entity.check_in_date, entity.check_out_date, tenant_id,
                exclude_id=entity.id,
            )

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _require_room(self, room_id: int, tenant_id: int) -> Room:
        room = self._db.scalar(
            select(Room).where(Room.id == room_id, Room.company_id == tenant_id, not_deleted(Room))
        )
        if room is None:
            raise NotFoundError("Room", room_id, tenant_id=tenant_id)
        return room

    def _require_client(self, client_id: int, tenant_id: int) -> Client:
        client = self._db.scalar(
            select(Client).where(
                Client.id == client_id, Client.company_id == tenant_id, not_deleted(Client)
            )
        )
        if client is None:
            raise NotFoundError("Client", client_id, tenant_id=tenant_id)
        return client

    def _release_room(self, stay: Stay, tenant_id: int, actor_id: int) -> None:
        """
        Hand the room back once ``stay`` stops holding it. Another guest in
        house keeps it OCCUPIED, another booking keeps it RESERVED.
        Rooms under MAINTENANCE or CLEANING are left alone.
        """
        room = stay.room
        if room.status not in (RoomStatus.RESERVED, RoomStatus.OCCUPIED):
            return

        def held_by(status: str) -> bool:
            return self._repo.exists_where(
                tenant_id, Stay.room_id == room.id, Stay.status == status, exclude_id=stay.id
            )

        if held_by(StayStatus.CHECKED_IN):
            status = RoomStatus.OCCUPIED
        elif held_by(StayStatus.CONFIRMED):
            status = RoomStatus.RESERVED
        else:
            status = RoomStatus.AVAILABLE
        if room.status != status:
            room.status = status
            room.set_updated_by(actor_id)

    @staticmethod
    def _check_dates(check_in: date, check_out: date) -> None:
        if check_out <= check_in:
            raise ValidationError("Check-out date must be after check-in date")

    def _check_overlap(
        self,
        room_id: int,
        check_in: date,
        check_out: date,
        tenant_id: int,
        *,
        exclude_id: int | None = None,
    ) -> None:
        if self._repo.exists_where(
            tenant_id,
            Stay.room_id == room_id,
            *overlapping_stays(check_in, check_out),
            exclude_id=exclude_id,
        ):
            raise ConflictError("Room is already booked for the selected dates", room_id=room_id)
