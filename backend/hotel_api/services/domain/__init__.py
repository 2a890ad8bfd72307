"""
Domain Services - Clean Architecture Application Layer.

Services contain business logic and orchestrate operations.
They use Repositories for data access.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)  ← YOU ARE HERE
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from hotel_api.services.domain import RoomTypeService

    # In router
    service = RoomTypeService(db)
    page = service.list(tenant_id, search="suite")
"""

from .auth_service import AuthService
from .invitation_service import InvitationService
from .user_service import UserService
from .room_type_service import RoomTypeService
from .room_service import RoomService
from .stay_service import StayService
from .category_service import CategoryService
from .product_service import ProductService
from .client_service import ClientService
from .restaurant_table_service import RestaurantTableService
from .restaurant_order_service import RestaurantOrderService
from .supermarket_order_service import SupermarketOrderService

__all__ = [
    # Auth & provisioning
    "AuthService",
    "InvitationService",
    "UserService",
    # Hotel
    "RoomTypeService",
    "RoomService",
    "StayService",
    # Inventory
    "CategoryService",
    "ProductService",
    # Clients
    "ClientService",
    # Restaurant
    "RestaurantTableService",
    "RestaurantOrderService",
    # Supermarket
    "SupermarketOrderService",
]
