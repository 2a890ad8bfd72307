"""
Product category endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    current_user,
    get_list_params,
    get_tenant_id,
    get_user_id,
    require_management,
)
from hotel_api.services.domain import CategoryService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import CategoryCreate, CategoryOutput, CategoryUpdate
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.post("", response_model=CategoryOutput, status_code=status.HTTP_201_CREATED)
def create_category(
    body: CategoryCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> CategoryOutput:
    return CategoryService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[CategoryOutput])
def list_categories(
    category_type: str | None = Query(default=None, alias="categoryType"),
    subtype: str | None = Query(default=None, alias="type"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    """List categories ordered by name, optionally filtered by outlet."""
    return CategoryService(db).list(
        get_tenant_id(user),
        filters={"category_type": category_type, "type": subtype},
        **params.to_kwargs(),
    )


@router.get("/{category_id}", response_model=CategoryOutput)
def get_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> CategoryOutput:
    return CategoryService(db).get(category_id, get_tenant_id(user))


@router.get("/{category_id}/statistics")
def category_statistics(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    return CategoryService(db).statistics(category_id, get_tenant_id(user))


@router.patch("/{category_id}", response_model=CategoryOutput)
def update_category(
    category_id: int,
    body: CategoryUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> CategoryOutput:
    return CategoryService(db).update(
        category_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(
    category_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    """Soft delete a category. Refused while it still has products."""
    CategoryService(db).remove(category_id, get_tenant_id(user), get_user_id(user))
