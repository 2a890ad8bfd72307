"""
Client endpoints: guests and restaurant customers.

Any authenticated user can register and edit clients (front desk and POS
both do); deleting one requires ADMIN or MANAGER.
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
from hotel_api.services.domain import ClientService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import (
    ClientBalance,
    ClientCreate,
    ClientOutput,
    ClientSummary,
    ClientUpdate,
)
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/clients", tags=["clients"])


@router.post("", response_model=ClientOutput, status_code=status.HTTP_201_CREATED)
def create_client(
    body: ClientCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ClientOutput:
    return ClientService(db).create(body.model_dump(), get_tenant_id(user), get_user_id(user))


@router.get("", response_model=Page[ClientOutput])
def list_clients(
    customer_type: str | None = Query(default=None, alias="customerType"),
    has_account: bool | None = Query(default=None, alias="hasAccount"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
):
    return ClientService(db).list(
        get_tenant_id(user),
        filters={"customer_type": customer_type, "has_account": has_account},
        **params.to_kwargs(),
    )


@router.get("/stats")
def client_stats(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    """Totals per customer type, accounts and outstanding balance."""
    return ClientService(db).stats(get_tenant_id(user))


@router.get("/corporate", response_model=list[ClientOutput])
def corporate_clients(
    sponsor_company_id: int | None = Query(default=None, alias="sponsorCompanyId"),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ClientOutput]:
    return ClientService(db).corporate(get_tenant_id(user), sponsor_company_id)


@router.get("/search", response_model=list[ClientSummary])
def search_clients(
    q: str = Query(min_length=1),
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> list[ClientSummary]:
    """Quick lookup by name, phone, email or document number (10 results max)."""
    return ClientService(db).search_by_phone_or_email(get_tenant_id(user), q)


@router.get("/{client_id}", response_model=ClientOutput)
def get_client(
    client_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ClientOutput:
    return ClientService(db).get(client_id, get_tenant_id(user))


@router.get("/{client_id}/statistics")
def client_statistics(
    client_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> dict:
    return ClientService(db).statistics(client_id, get_tenant_id(user))


@router.get("/{client_id}/balance", response_model=ClientBalance)
def client_balance(
    client_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ClientBalance:
    return ClientService(db).balance(client_id, get_tenant_id(user))


@router.patch("/{client_id}", response_model=ClientOutput)
def update_client(
    client_id: int,
    body: ClientUpdate,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ClientOutput:
    return ClientService(db).update(
        client_id, body.model_dump(exclude_unset=True), get_tenant_id(user), get_user_id(user)
    )


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_client(
    client_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    ClientService(db).remove(client_id, get_tenant_id(user), get_user_id(user))
