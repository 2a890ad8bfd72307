"""
Entity restoration endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from hotel_api.routers._common import get_tenant_id, get_user_id, require_admin
from hotel_api.services.base_service import BaseCRUDService
from hotel_api.services.domain import (
    CategoryService,
    ClientService,
    ProductService,
    RestaurantOrderService,
    RestaurantTableService,
    RoomService,
    RoomTypeService,
    StayService,
    SupermarketOrderService,
    UserService,
)
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import RestoreOutput
from shared.utils.exceptions import ValidationError


router = APIRouter(prefix="/api", tags=["restore"])

# URL segment -> service owning the entity
RESTORABLE: dict[str, type[BaseCRUDService]] = {
    "room-types": RoomTypeService,
    "rooms": RoomService,
    "stays": StayService,
    "categories": CategoryService,
    "products": ProductService,
    "clients": ClientService,
    "restaurant-tables": RestaurantTableService,
    "restaurant-orders": RestaurantOrderService,
    "supermarket-orders": SupermarketOrderService,
    "users": UserService,
}


@router.post("/{entity_type}/{entity_id}/restore", response_model=RestoreOutput)
def restore_deleted_entity(
    entity_type: str,
    entity_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_admin),
) -> RestoreOutput:
    """
    Restore a soft-deleted entity. Requires ADMIN role.

    Natural keys are checked again: restoring a room type whose name has been
    reused meanwhile answers 409.
    """
    service_class = RESTORABLE.get(entity_type)
    if service_class is None:
        raise ValidationError(
            f"Invalid entity type: {entity_type}. Valid values: {', '.join(RESTORABLE)}"
        )

    service = service_class(db)
    restored = service.restore(entity_id, get_tenant_id(user), get_user_id(user))

    label = (
        getattr(restored, "name", None)
        or getattr(restored, "email", None)
        or getattr(restored, "room_number", None)
        or getattr(restored, "table_number", None)
        or str(entity_id)
    )
    return RestoreOutput(
        success=True,
        message=f"{service.entity_name} '{label}' restored successfully",
        entity_type=entity_type,
        entity_id=entity_id,
    )
