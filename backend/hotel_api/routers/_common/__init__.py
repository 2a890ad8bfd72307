"""
Common utilities shared across routers.

Schemas live in shared/utils/schemas.py and shared/utils/admin_schemas.py
so that services never import from routers.
"""

from .base import (
    current_user,
    get_role,
    get_tenant_id,
    get_user_email,
    get_user_id,
    require_admin,
    require_front_desk,
    require_management,
    require_restaurant,
    require_shop,
)
from .pagination import ListParams, get_list_params

__all__ = [
    # Token context
    "current_user",
    "get_role",
    "get_tenant_id",
    "get_user_email",
    "get_user_id",
    # Role gates
    "require_admin",
    "require_front_desk",
    "require_management",
    "require_restaurant",
    "require_shop",
    # Pagination
    "ListParams",
    "get_list_params",
]
