"""
Restaurant Table Service.

A table is OCCUPIED exactly while ``current_order_id`` points at an order.
Seating and clearing write the table and the order in one unit of work.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from hotel_api.models import RestaurantOrder, RestaurantTable, not_deleted
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from shared.config.constants import OrderStatus, TableStatus
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit, unit_of_work
from shared.utils.admin_schemas import TableOutput
from shared.utils.exceptions import InvalidStateError, NotFoundError, ValidationError

logger = get_logger(__name__)


class RestaurantTableService(BaseCRUDService[RestaurantTable, TableOutput]):
    """
    Business rules:
    - table_number unique per company among non-deleted tables
    - Only AVAILABLE tables can be seated or reserved
    - A table with an assigned order cannot be freed by hand or deleted
    """

    search_fields = ("table_number", "location", "description")
    sortable_fields = ("created_at", "updated_at", "table_number", "capacity", "status")
    filter_fields = ("status", "location")
    unique_fields = (("table_number",),)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=RestaurantTable,
            output_schema=TableOutput,
            entity_name="Restaurant table",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def list(self, tenant_id: int, *, min_capacity: int | None = None, **kwargs: Any) -> dict[str, Any]:
        filters = dict(kwargs.pop("filters", None) or {})
        if filters.get("status"):
            filters["status"] = lookup.validate("table_status", filters["status"])
        filters["min_capacity"] = min_capacity
        return super().list(tenant_id, filters=filters, **kwargs)

    def stats(self, tenant_id: int) -> dict[str, Any]:
        total, available, occupied, reserved = self._db.execute(
            select(
                func.count(RestaurantTable.id),
                func.coalesce(func.sum(case((RestaurantTable.status == TableStatus.AVAILABLE, 1), else_=0)), 0),
                func.coalesce(func.sum(case((RestaurantTable.status == TableStatus.OCCUPIED, 1), else_=0)), 0),
                func.coalesce(func.sum(case((RestaurantTable.status == TableStatus.RESERVED, 1), else_=0)), 0),
            ).where(RestaurantTable.company_id == tenant_id, not_deleted(RestaurantTable))
        ).one()
        rate = occupied / total * 100 if total else 0
        return {
            "totalTables": total,
            "availableTables": available,
            "occupiedTables": occupied,
            "reservedTables": reserved,
            "occupancyRate": f"{rate:.2f}",
        }

    # =========================================================================
    # Commands
    # =========================================================================

    def assign(self, table_id: int, order_id: int, tenant_id: int, actor_id: int) -> TableOutput:
        """
        Seat an active order at a table.

        Raises:
            InvalidStateError: Table reserved or occupied, or order already seated.
            NotFoundError: No active order with that id.
        """
        table = self.get_entity(table_id, tenant_id)
        if table.status in (TableStatus.RESERVED, TableStatus.OCCUPIED):
            raise InvalidStateError(
                "Table is not available", entity="RestaurantTable", current_state=table.status
            )

        order = self._db.scalar(
            select(RestaurantOrder).where(
                RestaurantOrder.id == order_id,
                RestaurantOrder.company_id == tenant_id,
                RestaurantOrder.status.in_(OrderStatus.ACTIVE),
                not_deleted(RestaurantOrder),
            )
        )
        if order is None:
            raise NotFoundError("Active order", order_id, tenant_id=tenant_id)

        if self._repo.exists_where(tenant_id, RestaurantTable.current_order_id == order.id):
            raise InvalidStateError(
                "Order is already assigned to a table. Clear the current table first.",
                entity="RestaurantOrder",
                current_state=order.status,
            )

        with unit_of_work(self._db):
            table.current_order_id = order.id
            table.status = TableStatus.OCCUPIED
            table.set_updated_by(actor_id)
            order.table_number = table.table_number
            order.set_updated_by(actor_id)

        self._db.refresh(table)
        logger.info("Table assigned", table_id=table.id, order_id=order.id, tenant_id=tenant_id)
        return self.to_output(table)

    def clear(self, table_id: int, tenant_id: int, actor_id: int) -> TableOutput:
        """Free a table whose order is completed or cancelled."""
        table = self.get_entity(table_id, tenant_id)
        if table.current_order_id is None:
            raise InvalidStateError(
                "Table has no active order", entity="RestaurantTable", current_state=table.status
            )

        order = table.current_order
        if order is not None and order.status not in OrderStatus.CLOSED:
            raise InvalidStateError(
                "Cannot clear table with active order. Complete or cancel the order first.",
                entity="RestaurantOrder",
                current_state=order.status,
            )

        with unit_of_work(self._db):
            if order is not None:
                order.table_number = None
                order.set_updated_by(actor_id)
            table.current_order_id = None
            table.status = TableStatus.AVAILABLE
            table.set_updated_by(actor_id)

        self._db.refresh(table)
        return self.to_output(table)

    def reserve(self, table_id: int, tenant_id: int, actor_id: int) -> TableOutput:
        table = self.get_entity(table_id, tenant_id)
        if table.status != TableStatus.AVAILABLE:
            raise InvalidStateError(
                "Table is not available for reservation",
                entity="RestaurantTable",
                current_state=table.status,
            )
        return self._set_status(table, TableStatus.RESERVED, actor_id)

    def unreserve(self, table_id: int, tenant_id: int, actor_id: int) -> TableOutput:
        table = self.get_entity(table_id, tenant_id)
        if table.status != TableStatus.RESERVED:
            raise InvalidStateError(
                "Table is not reserved", entity="RestaurantTable", current_state=table.status
            )
        return self._set_status(table, TableStatus.AVAILABLE, actor_id)

    def _set_status(self, table: RestaurantTable, status: str, actor_id: int) -> TableOutput:
        table.status = status
        table.set_updated_by(actor_id)
        safe_commit(self._db)
        self._db.refresh(table)
        return self.to_output(table)

    # =========================================================================
    # Hooks
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        conditions = super()._filter_conditions(filters, tenant_id)
        if filters.get("min_capacity") is not None:
            conditions.append(RestaurantTable.capacity >= filters["min_capacity"])
        return conditions

    def _default_order(self) -> list[Any]:
        return [RestaurantTable.table_number.asc(), RestaurantTable.id.asc()]

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        data["status"] = lookup.validate("table_status", data.get("status") or TableStatus.AVAILABLE)

    def _validate_update(self, entity: RestaurantTable, data: dict[str, Any], tenant_id: int) -> None:
        for name in ("table_number", "capacity", "status"):
            if name in data and data[name] is None:
                data.pop(name)
        if "status" in data:
            data["status"] = lookup.validate("table_status", data["status"])
            if data["status"] == TableStatus.AVAILABLE and entity.current_order_id is not None:
                raise ValidationError(
                    "Cannot mark table as available while it has an active order"
                )

    def _validate_delete(self, entity: RestaurantTable, tenant_id: int) -> None:
        if entity.current_order_id is not None:
            raise ValidationError("Cannot delete table with active order", table_id=entity.id)
