"""
Shared dependencies for routers: the token context accessors and the
role gates used across the API.
"""

from shared.config.constants import FRONT_DESK_ROLES, RESTAURANT_ROLES, SHOP_ROLES
from shared.security.auth import (
    current_user_context as current_user,
    get_role,
    get_tenant_id,
    get_user_email,
    get_user_id,
    require_admin,
    require_admin_or_manager,
    role_dependency,
)

# Role gates
require_management = require_admin_or_manager
require_front_desk = role_dependency(FRONT_DESK_ROLES)
require_restaurant = role_dependency(RESTAURANT_ROLES)
require_shop = role_dependency(SHOP_ROLES)

__all__ = [
    "current_user",
    "get_role",
    "get_tenant_id",
    "get_user_email",
    "get_user_id",
    "require_admin",
    "require_admin_or_manager",
    "require_management",
    "require_front_desk",
    "require_restaurant",
    "require_shop",
]
