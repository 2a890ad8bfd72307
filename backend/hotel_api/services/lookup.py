"""
Lookup / validation registry.

Central allow-lists for every string-enum field of the domain. Services call
``validate`` before persisting an enum-valued field; the lookup router exposes
the same lists read-only so clients can populate selection widgets.

Usage:
    from hotel_api.services import lookup

    role = lookup.validate("user_role", "manager")   # -> "MANAGER"
    lookup.is_valid("room_status", "BROKEN")        # -> False
    lookup.get_values("payment_method")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from shared.config.constants import (
    CategoryType,
    CustomerType,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    Roles,
    RoomKind,
    RoomStatus,
    ServiceMode,
    StayStatus,
    TableStatus,
    UserStatus,
)
from shared.utils.exceptions import ValidationError


@dataclass(frozen=True)
class LookupField:
    """One allow-list and the case convention of its values."""

    label: str
    values: tuple[str, ...]
    upper: bool = True

    def normalize(self, value: str) -> str:
        value = value.strip()
        return value.upper() if self.upper else value.lower()


REGISTRY: Final[dict[str, LookupField]] = {
    "user_role": LookupField("user role", tuple(Roles.ALL)),
    "user_status": LookupField("user status", tuple(UserStatus.ALL), upper=False),
    "room_kind": LookupField("room kind", tuple(RoomKind.ALL)),
    "room_status": LookupField("room status", tuple(RoomStatus.ALL)),
    "stay_status": LookupField("stay status", tuple(StayStatus.ALL), upper=False),
    "payment_method": LookupField("payment method", tuple(PaymentMethod.ALL)),
    "category_type": LookupField("category type", tuple(CategoryType.ALL)),
    "customer_type": LookupField("customer type", tuple(CustomerType.ALL)),
    "service_mode": LookupField("service mode", tuple(ServiceMode.ALL)),
    "order_status": LookupField("order status", tuple(OrderStatus.ALL)),
    "payment_status": LookupField("payment status", tuple(PaymentStatus.ALL)),
    "table_status": LookupField("table status", tuple(TableStatus.ALL)),
}

DEFAULTS: Final[dict[str, str]] = {
    "user_role": Roles.STAFF,
    "user_status": UserStatus.ACTIVE,
    "room_status": RoomStatus.AVAILABLE,
    "stay_status": StayStatus.CONFIRMED,
    "customer_type": CustomerType.WALK_IN,
    "service_mode": ServiceMode.WALK_IN,
    "order_status": OrderStatus.PENDING,
    "payment_status": PaymentStatus.PENDING,
    "table_status": TableStatus.AVAILABLE,
}


def _field(field: str) -> LookupField:
    try:
        return REGISTRY[field]
    except KeyError:
        raise ValidationError(f"Unknown lookup field: {field}", field=field)


def fields() -> list[str]:
    """Names of every registered field."""
    return list(REGISTRY)


def is_valid(field: str, value: str | None) -> bool:
    """Membership test after case normalization. None is never valid."""
    if value is None:
        return False
    entry = _field(field)
    return entry.normalize(value) in entry.values


def validate(field: str, value: str) -> str:
    """
    Normalize ``value`` to the field's case convention and check membership.

    Returns:
        The normalized value.

    Raises:
        ValidationError: listing the valid values when ``value`` is not one.
    """
    entry = _field(field)
    normalized = entry.normalize(value) if isinstance(value, str) else value
    if normalized not in entry.values:
        raise ValidationError(
            f"Invalid {entry.label}: {value}. Valid values: {', '.join(entry.values)}",
            field=field,
        )
    return normalized


def validate_optional(field: str, value: str | None) -> str | None:
    return None if value is None else validate(field, value)


def get_values(field: str) -> list[str]:
    """Full allow-list for a field."""
    return list(_field(field).values)


def get_all() -> dict[str, list[str]]:
    return {name: list(entry.values) for name, entry in REGISTRY.items()}


def get_defaults() -> dict[str, str]:
    """Default value of each field that has one."""
    return dict(DEFAULTS)
