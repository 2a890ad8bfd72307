"""
User management endpoints.

Thin router that delegates to UserService. ADMIN and MANAGER manage the
company's users; only an ADMIN can touch another ADMIN.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    current_user,
    get_list_params,
    get_role,
    get_tenant_id,
    get_user_id,
    require_management,
)
from hotel_api.services.domain import UserService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import UserCreate, UserUpdate
from shared.utils.schemas import Page, UserOutput


router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=Page[UserOutput])
def list_users(
    role: str | None = None,
    user_status: str | None = Query(default=None, alias="status"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
):
    """List users of the company, optionally filtered by role and status."""
    return UserService(db).list(
        get_tenant_id(user),
        filters={"role": role, "status": user_status},
        **params.to_kwargs(),
    )


@router.get("/{user_id}", response_model=UserOutput)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> UserOutput:
    """Anyone can read themselves; ADMIN can read any user of the company."""
    return UserService(db).get_visible(
        user_id, get_tenant_id(user), get_user_id(user), get_role(user)
    )


@router.post("", response_model=UserOutput, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> UserOutput:
    return UserService(db).create_user(
        body.model_dump(), get_tenant_id(user), get_user_id(user), get_role(user)
    )


@router.patch("/{user_id}", response_model=UserOutput)
def update_user(
    user_id: int,
    body: UserUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> UserOutput:
    """Update a user. Passwords change only through /api/auth/change-password."""
    return UserService(db).update_user(
        user_id,
        body.model_dump(exclude_unset=True),
        get_tenant_id(user),
        get_user_id(user),
        get_role(user),
    )


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    """Soft delete a user. Users cannot delete themselves."""
    UserService(db).remove_user(user_id, get_tenant_id(user), get_user_id(user), get_role(user))
