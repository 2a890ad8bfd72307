"""
Product endpoints, including stock adjustments and stock reports.
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
from hotel_api.services.domain import ProductService
from shared.config.constants import Limits
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    ProductCreate,
    ProductOutput,
    ProductUpdate,
    StockAdjustment,
)
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/products", tags=["products"])


@router.post("", response_model=ProductOutput, status_code=status.HTTP_201_CREATED)
def create_product(
    body: ProductCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> ProductOutput:
    return ProductService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[ProductOutput])
def list_products(
    category_id: int | None = Query(default=None, alias="categoryId"),
    category_type: str | None = Query(default=None, alias="categoryType"),
    in_stock: bool | None = Query(default=None, alias="inStock"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return ProductService(db).list(
        get_tenant_id(user),
        category_type=category_type,
        in_stock=in_stock,
        filters={"category_id": category_id},
        **params.to_kwargs(),
    )


@router.get("/low-stock", response_model=list[ProductOutput])
def low_stock_products(
    threshold: int = Query(default=Limits.DEFAULT_LOW_STOCK_THRESHOLD, ge=0),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ProductOutput]:
    return ProductService(db).low_stock(get_tenant_id(user), threshold)


@router.get("/out-of-stock", response_model=list[ProductOutput])
def out_of_stock_products(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ProductOutput]:
    return ProductService(db).out_of_stock(get_tenant_id(user))


@router.get("/{product_id}", response_model=ProductOutput)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ProductOutput:
    return ProductService(db).get(product_id, get_tenant_id(user))


@router.patch("/{product_id}", response_model=ProductOutput)
def update_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> ProductOutput:
    return ProductService(db).update(
        product_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.patch("/{product_id}/stock", response_model=ProductOutput)
def adjust_stock(
    product_id: int,
    body: StockAdjustment,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> ProductOutput:
    """
    Add ``delta`` units (negative to remove). Answers 400 "Insufficient stock"
    when the result would be negative; stock is left unchanged.
    """
    return ProductService(db).adjust_stock(
        product_id, body.delta, get_tenant_id(user), get_user_id(user), reason=body.reason
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    ProductService(db).remove(product_id, get_tenant_id(user), get_user_id(user))
