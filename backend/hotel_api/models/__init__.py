"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class, AuditMixin, TenantMixin and the not_deleted predicate
- company: Company (the tenant)
- user: User, Invitation
- hotel: RoomType, Room, Stay
- inventory: Category, Product
- client: Client
- order: OutletOrderMixin, OrderLineMixin (columns shared by outlet orders)
- restaurant: RestaurantTable, RestaurantOrder, RestaurantOrderItem, RestaurantPayment
- supermarket: SupermarketOrder, SupermarketOrderItem
"""

# Base classes
from .base import (
    Base,
    AuditMixin,
    TenantMixin,
    RecordState,
    IdType,
    not_deleted,
    utcnow,
    ensure_utc,
)

# Tenant
from .company import Company

# Users and invitations
from .user import User, Invitation

# Hotel
from .hotel import RoomType, Room, Stay

# Inventory
from .inventory import Category, Product

# Clients
from .client import Client

# Restaurant
from .restaurant import RestaurantTable, RestaurantOrder, RestaurantOrderItem, RestaurantPayment

# Supermarket
from .supermarket import SupermarketOrder, SupermarketOrderItem


__all__ = [
    # Base
    "Base",
    "AuditMixin",
    "TenantMixin",
    "RecordState",
    "IdType",
    "not_deleted",
    "utcnow",
    "ensure_utc",
    # Tenant
    "Company",
    # Users
    "User",
    "Invitation",
    # Hotel
    "RoomType",
    "Room",
    "Stay",
    # Inventory
    "Category",
    "Product",
    # Clients
    "Client",
    # Restaurant
    "RestaurantTable",
    "RestaurantOrder",
    "RestaurantOrderItem",
    "RestaurantPayment",
    # Supermarket
    "SupermarketOrder",
    "SupermarketOrderItem",
]
