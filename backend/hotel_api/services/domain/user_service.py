"""
User Service - staff management inside a company.

Usage:
    from hotel_api.services.domain import UserService

    service = UserService(db)
    page = service.list(tenant_id, search="ana", filters={"role": "WAITER"})
    user = service.create(data, tenant_id, actor_id)
"""

from __future__ import annotations

from typing import Any

from sqlalchemy.orm import Session

from hotel_api.models import User
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from hotel_api.services.domain.auth_service import (
    check_password_length,
    find_user_by_email,
    normalize_email,
)
from shared.config.constants import ErrorMessages, Limits, Roles
from shared.security.password import hash_password
from shared.utils.exceptions import ConflictError, ForbiddenError, ValidationError
from shared.utils.schemas import UserOutput


class UserService(BaseCRUDService[User, UserOutput]):
    """
    Business rules:
    - Email unique among non-deleted users of every company
    - Passwords stored as bcrypt hashes only
    - Only an ADMIN can create, promote to, or manage an ADMIN
    - Users cannot delete themselves
    """

    search_fields = ("first_name", "last_name", "email")
    sortable_fields = ("created_at", "updated_at", "email", "first_name", "last_name", "role")
    filter_fields = ("role", "status")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=User,
            output_schema=UserOutput,
            entity_name="User",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_visible(self, user_id: int, tenant_id: int, actor_id: int, actor_role: str) -> UserOutput:
        """A user can see themselves; an ADMIN can see anyone in the company."""
        if user_id != actor_id and actor_role != Roles.ADMIN:
            raise ForbiddenError("Access denied")
        return self.get(user_id, tenant_id)

    def list(self, tenant_id: int, **kwargs: Any) -> dict[str, Any]:
        filters = kwargs.get("filters") or {}
        for name in ("role", "status"):
            if filters.get(name):
                filters[name] = lookup.validate(f"user_{name}", filters[name])
        kwargs["filters"] = filters
        return super().list(tenant_id, **kwargs)

    # =========================================================================
    # Commands
    # =========================================================================

    def create_user(
        self, data: dict[str, Any], tenant_id: int, actor_id: int, actor_role: str
    ) -> UserOutput:
        self._guard_admin_role(data.get("role"), actor_role)
        return self.create(data, tenant_id, actor_id)

    def update_user(
        self,
        user_id: int,
        data: dict[str, Any],
        tenant_id: int,
        actor_id: int,
        actor_role: str,
    ) -> UserOutput:
        target = self.get_entity(user_id, tenant_id)
        if data.get("role") is not None:
            data["role"] = lookup.validate("user_role", data["role"])
        if actor_role != Roles.ADMIN and (
            target.role == Roles.ADMIN or data.get("role") == Roles.ADMIN
        ):
            raise ForbiddenError("Only administrators can manage administrators")
        if user_id == actor_id and data.get("role") not in (None, target.role):
            raise ValidationError("You cannot change your own role")
        return self.update(user_id, data, tenant_id, actor_id)

    def remove_user(self, user_id: int, tenant_id: int, actor_id: int, actor_role: str) -> None:
        if user_id == actor_id:
            raise ValidationError("You cannot delete your own account")
        target = self.get_entity(user_id, tenant_id)
        if target.role == Roles.ADMIN and actor_role != Roles.ADMIN:
            raise ForbiddenError("Only administrators can manage administrators")
        self.remove(user_id, tenant_id, actor_id)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        data["email"] = normalize_email(data["email"])
        if find_user_by_email(self._db, data["email"]) is not None:
            raise ConflictError(ErrorMessages.EMAIL_REGISTERED)

        check_password_length(data.get("password", ""), Limits.MIN_PASSWORD_LENGTH)
        data["password"] = hash_password(data["password"])
        data["role"] = lookup.validate("user_role", data.get("role") or Roles.STAFF)
        data["status"] = lookup.validate("user_status", data.get("status") or "active")

    def _validate_update(self, entity: User, data: dict[str, Any], tenant_id: int) -> None:
        # Passwords change only through the change-password flow
        data.pop("password", None)

        if data.get("email") is not None:
            data["email"] = normalize_email(data["email"])
            if find_user_by_email(self._db, data["email"], exclude_id=entity.id) is not None:
                raise ConflictError(ErrorMessages.EMAIL_REGISTERED)
        if data.get("role") is not None:
            data["role"] = lookup.validate("user_role", data["role"])
        if data.get("status") is not None:
            data["status"] = lookup.validate("user_status", data["status"])
        for name in ("email", "first_name", "last_name", "role", "status"):
            if name in data and data[name] is None:
                data.pop(name)

    def _validate_restore(self, entity: User, tenant_id: int) -> None:
        if find_user_by_email(self._db, entity.email, exclude_id=entity.id) is not None:
            raise ConflictError(ErrorMessages.EMAIL_REGISTERED)

    @staticmethod
    def _guard_admin_role(role: str | None, actor_role: str) -> None:
        if role and role.strip().upper() == Roles.ADMIN and actor_role != Roles.ADMIN:
            raise ForbiddenError("Only administrators can manage administrators")
