"""
Client Service - hotel guests and restaurant customers.

Usage:
    from hotel_api.services.domain import ClientService

    service = ClientService(db)
    client = service.create({"first_name": "Ana", "last_name": "Diaz"}, tenant_id, actor_id)
    matches = service.search_by_phone_or_email(tenant_id, "555")
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from sqlalchemy import case, func, or_, select
from sqlalchemy.orm import Session

from hotel_api.models import Client, RestaurantOrder, Stay, not_deleted
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from shared.config.constants import CustomerType, Limits
from shared.utils.admin_schemas import ClientBalance, ClientOutput, ClientSummary
from shared.utils.exceptions import NotFoundError, ValidationError
from shared.utils.validators import escape_like_pattern, sanitize_search_term


class ClientService(BaseCRUDService[Client, ClientOutput]):
    """
    Business rules:
    - Email and phone, when given, unique per company among non-deleted clients
    - customer_type defaults to WALK_IN
    - sponsor_company_id must reference a CORPORATE client of the company
    """

    search_fields = ("first_name", "last_name", "email", "phone", "id_number", "employee_id")
    sortable_fields = ("created_at", "updated_at", "first_name", "last_name", "current_balance")
    filter_fields = ("customer_type", "has_account", "sponsor_company_id")
    unique_fields = (("email",), ("phone",))
    blank_as_null = ("phone", "id_number", "employee_id")

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Client,
            output_schema=ClientOutput,
            entity_name="Client",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list(self, tenant_id: int, **kwargs: Any) -> dict[str, Any]:
        filters = kwargs.get("filters") or {}
        if filters.get("customer_type"):
            filters["customer_type"] = lookup.validate("customer_type", filters["customer_type"])
        kwargs["filters"] = filters
        return super().list(tenant_id, **kwargs)

    def search_by_phone_or_email(self, tenant_id: int, term: str) -> list[ClientSummary]:
        """Quick lookup used at the front desk and the POS."""
        term = sanitize_search_term(term)
        if not term:
            return []
        pattern = f"%{escape_like_pattern(term)}%"
        clients = self._repo.find_all(
            tenant_id,
            or_(*(
                getattr(Client, name).ilike(pattern, escape="\\")
                for name in self.search_fields
            )),
            order_by=[Client.last_name, Client.first_name],
            limit=Limits.QUICK_SEARCH_LIMIT,
        )
        return [ClientSummary.model_validate(c) for c in clients]

    def corporate(self, tenant_id: int, sponsor_company_id: int | None = None) -> list[ClientOutput]:
        """CORPORATE clients, optionally only those under one sponsor."""
        conditions = [Client.customer_type == CustomerType.CORPORATE]
        if sponsor_company_id is not None:
            conditions.append(Client.sponsor_company_id == sponsor_company_id)
        clients = self._repo.find_all(
            tenant_id, *conditions, order_by=[Client.created_at.desc(), Client.id.desc()]
        )
        return [self.to_output(c) for c in clients]

    def balance(self, client_id: int, tenant_id: int) -> ClientBalance:
        client = self.get_entity(client_id, tenant_id)
        return ClientBalance(
            client_id=client.id,
            full_name=client.full_name,
            has_account=client.has_account,
            credit_limit=client.credit_limit,
            current_balance=client.current_balance,
            available_credit=client.available_credit,
        )

    def statistics(self, client_id: int, tenant_id: int) -> dict[str, Any]:
        """Activity of one client: stays, restaurant orders, account figures."""
        client = self.get_entity(client_id, tenant_id)

        total_stays = self._db.scalar(
            select(func.count()).select_from(Stay).where(
                Stay.client_id == client.id, not_deleted(Stay)
            )
        ) or 0
        total_orders = self._db.scalar(
            select(func.count()).select_from(RestaurantOrder).where(
                RestaurantOrder.client_id == client.id, not_deleted(RestaurantOrder)
            )
        ) or 0
        last_stay = self._db.scalars(
            select(Stay)
            .where(Stay.client_id == client.id, not_deleted(Stay))
            .order_by(Stay.check_in_date.desc())
            .limit(1)
        ).first()

        return {
            "totalStays": total_stays,
            "totalRestaurantOrders": total_orders,
            "currentBalance": float(client.current_balance),
            "creditLimit": float(client.credit_limit),
            "hasAccount": client.has_account,
            "lastStay": None if last_stay is None else {
                "id": last_stay.id,
                "roomNumber": last_stay.room.room_number,
                "checkInDate": last_stay.check_in_date.isoformat(),
                "checkOutDate": last_stay.check_out_date.isoformat(),
                "status": last_stay.status,
            },
        }

    def stats(self, tenant_id: int) -> dict[str, Any]:
        """Company-wide client figures."""
        row = self._db.execute(
            select(
                func.count(Client.id),
                func.sum(case((Client.customer_type == CustomerType.WALK_IN, 1), else_=0)),
                func.sum(case((Client.customer_type == CustomerType.CORPORATE, 1), else_=0)),
                func.sum(case((Client.customer_type == CustomerType.REGULAR, 1), else_=0)),
                func.sum(case((Client.has_account.is_(True), 1), else_=0)),
                func.coalesce(func.sum(Client.current_balance), 0),
            ).where(Client.company_id == tenant_id, not_deleted(Client))
        ).one()

        total, walk_in, corporate, regular, with_account, outstanding = row
        return {
            "totalClients": total or 0,
            "walkInClients": walk_in or 0,
            "corporateClients": corporate or 0,
            "regularClients": regular or 0,
            "clientsWithAccount": with_account or 0,
            "totalOutstandingBalance": float(Decimal(str(outstanding or 0))),
        }

    # =========================================================================
    # Hooks
    # =========================================================================

    def _require_sponsor(self, sponsor_id: int, tenant_id: int, own_id: int | None = None) -> None:
        if own_id is not None and sponsor_id == own_id:
            raise ValidationError("A client cannot sponsor itself", field="sponsor_company_id")
        sponsor = self._repo.find_by_id(sponsor_id, tenant_id)
        if sponsor is None:
            raise NotFoundError("Sponsor company", sponsor_id, tenant_id=tenant_id)
        if sponsor.customer_type != CustomerType.CORPORATE:
            raise ValidationError("Sponsor must be a corporate client", field="sponsor_company_id")

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        data["customer_type"] = lookup.validate(
            "customer_type", data.get("customer_type") or CustomerType.WALK_IN
        )
        if data.get("sponsor_company_id") is not None:
            self._require_sponsor(data["sponsor_company_id"], tenant_id)

    def _validate_update(self, entity: Client, data: dict[str, Any], tenant_id: int) -> None:
        if data.get("customer_type") is not None:
            data["customer_type"] = lookup.validate("customer_type", data["customer_type"])
        if data.get("sponsor_company_id") is not None:
            self._require_sponsor(data["sponsor_company_id"], tenant_id, own_id=entity.id)
        for name in ("first_name", "last_name", "customer_type", "has_account", "credit_limit"):
            if name in data and data[name] is None:
                data.pop(name)
