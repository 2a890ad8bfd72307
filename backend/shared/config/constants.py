"""
Centralized constants for the backend application.

Every string-enum field of the domain has an allow-list here. The lookup
registry (``hotel_api.services.lookup``) is built on top of these classes.

Usage:
    from shared.config.constants import Roles, MANAGEMENT_ROLES, RoomStatus

    if role in MANAGEMENT_ROLES:
        ...

    if room.status == RoomStatus.AVAILABLE:
        ...
"""

from typing import Final


# =============================================================================
# User Roles
# =============================================================================


class Roles:
    """User role constants."""

    ADMIN: Final[str] = "ADMIN"
    MANAGER: Final[str] = "MANAGER"
    RECEPTIONIST: Final[str] = "RECEPTIONIST"
    STAFF: Final[str] = "STAFF"
    CASHIER: Final[str] = "CASHIER"
    WAITER: Final[str] = "WAITER"

    ALL: Final[list[str]] = [ADMIN, MANAGER, RECEPTIONIST, STAFF, CASHIER, WAITER]


# Role groups for common access patterns
MANAGEMENT_ROLES: Final[frozenset[str]] = frozenset({Roles.ADMIN, Roles.MANAGER})
FRONT_DESK_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.ADMIN, Roles.MANAGER, Roles.RECEPTIONIST}
)
RESTAURANT_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.ADMIN, Roles.MANAGER, Roles.CASHIER, Roles.WAITER, Roles.STAFF}
)
SHOP_ROLES: Final[frozenset[str]] = frozenset(
    {Roles.ADMIN, Roles.MANAGER, Roles.RECEPTIONIST, Roles.CASHIER, Roles.STAFF}
)


class UserStatus:
    """User account status (lowercase by convention)."""

    ACTIVE: Final[str] = "active"
    INACTIVE: Final[str] = "inactive"
    SUSPENDED: Final[str] = "suspended"

    ALL: Final[list[str]] = [ACTIVE, INACTIVE, SUSPENDED]


# =============================================================================
# Hotel
# =============================================================================


class RoomKind:
    """Standard room classifications."""

    SINGLE: Final[str] = "SINGLE"
    DOUBLE: Final[str] = "DOUBLE"
    SUITE: Final[str] = "SUITE"
    DELUXE: Final[str] = "DELUXE"
    PRESIDENTIAL: Final[str] = "PRESIDENTIAL"

    ALL: Final[list[str]] = [SINGLE, DOUBLE, SUITE, DELUXE, PRESIDENTIAL]


class RoomStatus:
    """Room status constants."""

    AVAILABLE: Final[str] = "AVAILABLE"
    OCCUPIED: Final[str] = "OCCUPIED"
    MAINTENANCE: Final[str] = "MAINTENANCE"
    CLEANING: Final[str] = "CLEANING"
    RESERVED: Final[str] = "RESERVED"

    ALL: Final[list[str]] = [AVAILABLE, OCCUPIED, MAINTENANCE, CLEANING, RESERVED]


class StayStatus:
    """Stay (booking) status constants (lowercase by convention)."""

    CONFIRMED: Final[str] = "confirmed"
    CHECKED_IN: Final[str] = "checked_in"
    CHECKED_OUT: Final[str] = "checked_out"
    CANCELLED: Final[str] = "cancelled"
    NO_SHOW: Final[str] = "no_show"

    ALL: Final[list[str]] = [CONFIRMED, CHECKED_IN, CHECKED_OUT, CANCELLED, NO_SHOW]
    # Stays that hold the room
    ACTIVE: Final[list[str]] = [CONFIRMED, CHECKED_IN]


# =============================================================================
# Inventory and clients
# =============================================================================


class CategoryType:
    """Which outlet a product category belongs to."""

    MINIBAR: Final[str] = "MINIBAR"
    RESTAURANT: Final[str] = "RESTAURANT"
    SUPERMARKET: Final[str] = "SUPERMARKET"
    LAUNDRY: Final[str] = "LAUNDRY"
    SPORT: Final[str] = "SPORT"
    BARBER: Final[str] = "BARBER"

    ALL: Final[list[str]] = [MINIBAR, RESTAURANT, SUPERMARKET, LAUNDRY, SPORT, BARBER]


class CustomerType:
    """Client classification."""

    WALK_IN: Final[str] = "WALK_IN"
    CORPORATE: Final[str] = "CORPORATE"
    REGULAR: Final[str] = "REGULAR"

    ALL: Final[list[str]] = [WALK_IN, CORPORATE, REGULAR]


# =============================================================================
# Restaurant
# =============================================================================


class TableStatus:
    """Restaurant table status constants."""

    AVAILABLE: Final[str] = "AVAILABLE"
    OCCUPIED: Final[str] = "OCCUPIED"
    RESERVED: Final[str] = "RESERVED"

    ALL: Final[list[str]] = [AVAILABLE, OCCUPIED, RESERVED]


class ServiceMode:
    """How a restaurant order is served."""

    WALK_IN: Final[str] = "WALK_IN"
    ROOM_SERVICE: Final[str] = "ROOM_SERVICE"
    DELIVERY: Final[str] = "DELIVERY"

    ALL: Final[list[str]] = [WALK_IN, ROOM_SERVICE, DELIVERY]


class OrderStatus:
    """Restaurant order status constants."""

    PENDING: Final[str] = "PENDING"
    PREPARING: Final[str] = "PREPARING"
    READY: Final[str] = "READY"
    DELIVERED: Final[str] = "DELIVERED"
    COMPLETED: Final[str] = "COMPLETED"
    CANCELLED: Final[str] = "CANCELLED"

    ALL: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED, COMPLETED, CANCELLED]
    ACTIVE: Final[list[str]] = [PENDING, PREPARING, READY, DELIVERED]
    CLOSED: Final[list[str]] = [COMPLETED, CANCELLED]


class PaymentStatus:
    """Order payment status constants."""

    PENDING: Final[str] = "PENDING"
    PARTIAL: Final[str] = "PARTIAL"
    PAID: Final[str] = "PAID"
    REFUNDED: Final[str] = "REFUNDED"

    ALL: Final[list[str]] = [PENDING, PARTIAL, PAID, REFUNDED]


class PaymentMethod:
    """Accepted payment methods."""

    CASH: Final[str] = "CASH"
    CARD: Final[str] = "CARD"
    MOBILE_MONEY: Final[str] = "MOBILE_MONEY"
    BANK_TRANSFER: Final[str] = "BANK_TRANSFER"
    CREDIT: Final[str] = "CREDIT"

    ALL: Final[list[str]] = [CASH, CARD, MOBILE_MONEY, BANK_TRANSFER, CREDIT]


class InvitationStatus:
    """Derived invitation state (never stored)."""

    PENDING: Final[str] = "pending"
    ACCEPTED: Final[str] = "accepted"
    EXPIRED: Final[str] = "expired"

    ALL: Final[list[str]] = [PENDING, ACCEPTED, EXPIRED]


# =============================================================================
# Validation Constants
# =============================================================================


class Limits:
    """Validation limits."""

    # Passwords
    MIN_SIGNUP_PASSWORD_LENGTH: Final[int] = 8
    MIN_PASSWORD_LENGTH: Final[int] = 6

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_NOTES_LENGTH: Final[int] = 500
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults
    DEFAULT_PAGE: Final[int] = 1
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 100

    # Inventory
    DEFAULT_LOW_STOCK_THRESHOLD: Final[int] = 10

    # Quick search results (client lookup by phone/email)
    QUICK_SEARCH_LIMIT: Final[int] = 10

    # Stays
    DEFAULT_UPCOMING_DAYS: Final[int] = 7


class ErrorMessages:
    """Standardized error messages."""

    INVALID_CREDENTIALS: Final[str] = "Invalid credentials"
    NOT_AUTHENTICATED: Final[str] = "Not authenticated"
    INVALID_TOKEN: Final[str] = "Invalid token"
    TOKEN_EXPIRED: Final[str] = "Token has expired"
    INSUFFICIENT_PERMISSIONS: Final[str] = "Insufficient permissions"
    EMAIL_REGISTERED: Final[str] = "Email already registered"
    INSUFFICIENT_STOCK: Final[str] = "Insufficient stock"
