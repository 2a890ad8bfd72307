"""
CRUD building blocks shared by every domain service.

Provides:
- TenantRepository: type-safe data access with tenant isolation
- soft_delete / restore_entity: soft delete with audit trail
"""

from .repository import TenantRepository
from .soft_delete import (
    soft_delete,
    restore_entity,
    set_created_by,
    set_updated_by,
    find_deleted_entity,
)

__all__ = [
    "TenantRepository",
    "soft_delete",
    "restore_entity",
    "set_created_by",
    "set_updated_by",
    "find_deleted_entity",
]
