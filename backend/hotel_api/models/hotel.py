"""
Hotel Models: RoomType, Room, Stay.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import JSON, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, foreign, mapped_column, relationship

from shared.config.constants import RoomStatus, StayStatus

from .base import AuditMixin, Base, IdType, TenantMixin
from .user import User

if TYPE_CHECKING:
    from .client import Client


class RoomType(TenantMixin, AuditMixin, Base):
    """
    Room category with pricing and capacity.
    Name is unique per company among non-deleted rows.
    """

    __tablename__ = "room_type"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    base_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    max_occupancy: Mapped[int] = mapped_column(Integer, nullable=False)
    bed_type: Mapped[Optional[str]] = mapped_column(String(50))
    size: Mapped[Optional[Decimal]] = mapped_column(Numeric(8, 2))
    amenities: Mapped[Optional[list]] = mapped_column(JSON)
    images: Mapped[Optional[list]] = mapped_column(JSON)

    rooms: Mapped[list["Room"]] = relationship(back_populates="room_type")

    # Audit users, read-only (the audit columns carry no FK)
    creator: Mapped[Optional["User"]] = relationship(
        primaryjoin=lambda: foreign(RoomType.created_by_id) == User.id,
        viewonly=True,
        lazy="selectin",
    )
    updater: Mapped[Optional["User"]] = relationship(
        primaryjoin=lambda: foreign(RoomType.updated_by_id) == User.id,
        viewonly=True,
        lazy="selectin",
    )

    @property
    def active_rooms(self) -> list["Room"]:
        return [room for room in self.rooms if not room.is_deleted]


class Room(TenantMixin, AuditMixin, Base):
    """
    Physical room. room_number is unique per company among non-deleted rows.
    """

    __tablename__ = "room"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    room_number: Mapped[str] = mapped_column(String(20), nullable=False)
    name: Mapped[Optional[str]] = mapped_column(String(100))
    floor: Mapped[Optional[int]] = mapped_column(Integer)
    room_type_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("room_type.id"), nullable=False, index=True
    )
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RoomStatus.AVAILABLE
    )
    description: Mapped[Optional[str]] = mapped_column(Text)

    room_type: Mapped["RoomType"] = relationship(back_populates="rooms", lazy="joined")
    stays: Mapped[list["Stay"]] = relationship(back_populates="room")


class Stay(TenantMixin, AuditMixin, Base):
    """
    Guest booking of a room between two dates.

    confirmed -> checked_in -> checked_out, or confirmed/checked_in -> cancelled.
    """

    __tablename__ = "stay"

    id: Mapped[int] = mapped_column(IdType, primary_key=True)
    room_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("room.id"), nullable=False, index=True
    )
    client_id: Mapped[int] = mapped_column(
        IdType, ForeignKey("client.id"), nullable=False, index=True
    )
    check_in_date: Mapped[date] = mapped_column(Date, nullable=False)
    check_out_date: Mapped[date] = mapped_column(Date, nullable=False)
    actual_check_in: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    actual_check_out: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=StayStatus.CONFIRMED, index=True
    )
    adults: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_amount: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2))
    paid_amount: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    notes: Mapped[Optional[str]] = mapped_column(Text)

    room: Mapped["Room"] = relationship(back_populates="stays", lazy="joined")
    client: Mapped["Client"] = relationship(back_populates="stays", lazy="joined")

    @property
    def nights(self) -> int:
        return (self.check_out_date - self.check_in_date).days
