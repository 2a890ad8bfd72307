"""
Base Service Classes for Clean Architecture.

Provides abstract base classes for application services that:
- Use TenantRepository for data access (not direct queries)
- Use the output schema for DTO transformation
- Handle business logic and orchestration

Architecture:
    Router (thin) → Service (business logic) → Repository (data access) → Model

Every public method takes the tenant id and, for mutations, the acting
user id as explicit arguments. Both come from the session token.

Usage:
    from hotel_api.services.base_service import BaseCRUDService

    class RoomTypeService(BaseCRUDService[RoomType, RoomTypeOutput]):
        search_fields = ("name", "description", "bed_type")
        unique_fields = (("name",),)

        def __init__(self, db: Session):
            super().__init__(
                db=db,
                model=RoomType,
                output_schema=RoomTypeOutput,
                entity_name="Room type",
            )
"""

from __future__ import annotations

import math
import re
from abc import ABC
from typing import Any, Generic, Sequence, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from hotel_api.models import Base
from hotel_api.services.crud.repository import TenantRepository
from hotel_api.services.crud.soft_delete import (
    find_deleted_entity,
    restore_entity,
    set_created_by,
    set_updated_by,
    soft_delete,
)
from shared.config.constants import Limits
from shared.config.logging import get_logger
from shared.infrastructure.db import safe_commit
from shared.utils.exceptions import ConflictError, DatabaseError, NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)
OutputT = TypeVar("OutputT", bound=BaseModel)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def normalize_page(page: int | None, limit: int | None) -> tuple[int, int]:
    """Clamp page to >= 1 and limit to 1..MAX_PAGE_SIZE."""
    page = max(1, page or Limits.DEFAULT_PAGE)
    limit = min(max(1, limit or Limits.DEFAULT_PAGE_SIZE), Limits.MAX_PAGE_SIZE)
    return page, limit


def build_page(items: Sequence[Any], total: int, page: int, limit: int) -> dict[str, Any]:
    """The list response shape shared by every list endpoint."""
    return {
        "data": list(items),
        "meta": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": math.ceil(total / limit) if limit else 0,
        },
    }


class BaseService(ABC, Generic[ModelT]):
    """
    Abstract base service for domain operations.

    Subclasses implement specific business logic while this class
    provides common infrastructure (repository access, logging).
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self._db = db
        self._model = model
        self._repo = TenantRepository(model, db)

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def repo(self) -> TenantRepository[ModelT]:
        """Repository for data access."""
        return self._repo


class BaseCRUDService(BaseService[ModelT], Generic[ModelT, OutputT]):
    """
    Base service for tenant-scoped entities with CRUD operations.

    Class attributes configure the generic behaviour:
    - search_fields: text columns matched by the ``search`` term
    - sortable_fields: columns accepted as ``sort_by``
    - filter_fields: columns accepted as equality filters
    - unique_fields: natural keys, each a tuple of columns, unique per tenant
      among non-deleted rows
    - blank_as_null: optional columns where an empty string means "not given"
    """

    search_fields: tuple[str, ...] = ()
    sortable_fields: tuple[str, ...] = ("created_at", "updated_at")
    filter_fields: tuple[str, ...] = ()
    unique_fields: tuple[tuple[str, ...], ...] = ()
    blank_as_null: tuple[str, ...] = ()

    def __init__(
        self,
        db: Session,
        model: Type[ModelT],
        output_schema: Type[OutputT],
        entity_name: str,
    ):
        super().__init__(db, model)
        self._output_schema = output_schema
        self._entity_name = entity_name

    @property
    def entity_name(self) -> str:
        """Human-readable entity name for messages."""
        return self._entity_name

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(
        self,
        entity_id: int,
        tenant_id: int,
        *,
        options: list[Any] | None = None,
    ) -> ModelT:
        """
        Get raw entity (for internal use).

        Raises:
            NotFoundError: If missing, deleted or owned by another tenant.
        """
        entity = self._repo.find_by_id(entity_id, tenant_id, options=options)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id, tenant_id=tenant_id)
        return entity

    def get(self, entity_id: int, tenant_id: int) -> OutputT:
        """Get one entity with relations expanded."""
        return self.to_output(self.get_entity(entity_id, tenant_id))

    def list(
        self,
        tenant_id: int,
        *,
        page: int | None = None,
        limit: int | None = None,
        search: str | None = None,
        sort_by: str | None = None,
        sort_order: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """
        Page of non-deleted entities of the tenant.

        Returns:
            {"data": [...], "meta": {"total", "page", "limit", "totalPages"}}
        """
        page, limit = normalize_page(page, limit)
        items, total = self._repo.paginate(
            tenant_id,
            page=page,
            limit=limit,
            search=search,
            search_fields=[getattr(self._model, name) for name in self.search_fields],
            conditions=self._filter_conditions(filters or {}, tenant_id),
            order_by=self._order_by(sort_by, sort_order),
        )
        return build_page([self.to_output(e) for e in items], total, page, limit)

    def count(self, tenant_id: int) -> int:
        """Count non-deleted entities for tenant."""
        return self._repo.count(tenant_id)

    def stats(self, tenant_id: int) -> dict[str, Any]:
        """Aggregates over non-deleted rows. Override for richer figures."""
        return {"total": self.count(tenant_id)}

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, data: dict[str, Any], tenant_id: int, actor_id: int) -> OutputT:
        """
        Create new entity owned by ``tenant_id`` and attributed to ``actor_id``.

        Raises:
            ConflictError: If a natural key collides.
            NotFoundError: If a referenced entity is missing.
            ValidationError: If data is invalid.
            DatabaseError: If creation fails.
        """
        self._blank_to_null(data)
        self._check_unique(data, tenant_id)
        self._validate_create(data, tenant_id)

        entity = self._model(**data)
        entity.company_id = tenant_id
        set_created_by(entity, actor_id)
        self._db.add(entity)

        try:
            safe_commit(self._db)
            self._db.refresh(entity)
        except Exception as e:
            logger.error(
                f"Failed to create {self._entity_name}",
                error=str(e),
                tenant_id=tenant_id,
            )
            raise DatabaseError(f"create {self._entity_name.lower()}")

        self._after_create(entity, actor_id)

        return self.to_output(entity)

    def update(
        self,
        entity_id: int,
        data: dict[str, Any],
        tenant_id: int,
        actor_id: int,
    ) -> OutputT:
        """
        Apply the provided fields to an existing entity.

        Raises:
            NotFoundError: If entity not found.
            ConflictError: If a changed natural key collides.
            DatabaseError: If update fails.
        """
        entity = self.get_entity(entity_id, tenant_id)

        self._blank_to_null(data)
        self._check_unique(data, tenant_id, entity=entity)
        self._validate_update(entity, data, tenant_id)

        old_values = {k: getattr(entity, k) for k in data if hasattr(entity, k)}

        for field_name, value in data.items():
            if hasattr(entity, field_name):
                setattr(entity, field_name, value)

        set_updated_by(entity, actor_id)

        try:
            safe_commit(self._db)
            self._db.refresh(entity)
        except Exception as e:
            logger.error(
                f"Failed to update {self._entity_name}",
                error=str(e),
                entity_id=entity_id,
            )
            raise DatabaseError(f"update {self._entity_name.lower()}")

        self._after_update(entity, old_values, actor_id)

        return self.to_output(entity)

    def remove(self, entity_id: int, tenant_id: int, actor_id: int) -> None:
        """
        Soft delete an entity.

        Raises:
            NotFoundError: If entity not found.
            ForbiddenError: If non-deleted children still reference it.
        """
        entity = self.get_entity(entity_id, tenant_id)

        self._validate_delete(entity, tenant_id)

        soft_delete(self._db, entity, actor_id)

        self._after_delete(entity, actor_id)

    def restore(self, entity_id: int, tenant_id: int, actor_id: int) -> OutputT:
        """
        Undelete a soft-deleted entity.

        Raises:
            NotFoundError: If there is no deleted entity with that id.
            ConflictError: If a live row has taken its natural key meanwhile.
        """
        entity = find_deleted_entity(self._db, self._model, entity_id, tenant_id)
        if entity is None:
            raise NotFoundError(self._entity_name, entity_id, tenant_id=tenant_id)

        snapshot = {
            name: getattr(entity, name) for key in self.unique_fields for name in key
        }
        self._check_unique(snapshot, tenant_id, entity=entity)
        self._validate_restore(entity, tenant_id)

        restore_entity(self._db, entity, actor_id)
        return self.to_output(entity)

    # =========================================================================
    # Transformation
    # =========================================================================

    def to_output(self, entity: ModelT) -> OutputT:
        """
        Convert entity to output DTO.

        Override this method for custom transformation logic.
        """
        return self._output_schema.model_validate(entity)

    # =========================================================================
    # Query helpers (override in subclasses)
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        """Equality filters on ``filter_fields``; None values are ignored."""
        return [
            getattr(self._model, name) == value
            for name, value in filters.items()
            if value is not None and name in self.filter_fields
        ]

    def _default_order(self) -> list[Any]:
        return [self._model.created_at.desc(), self._model.id.desc()]

    def _order_by(self, sort_by: str | None, sort_order: str | None) -> list[Any]:
        """
        Resolve ``sort_by`` (snake_case or camelCase) against ``sortable_fields``.
        Unknown fields fall back to the default order.
        """
        if sort_by:
            name = _CAMEL_BOUNDARY.sub("_", sort_by).lower()
            if name in self.sortable_fields:
                column = getattr(self._model, name)
                direction = column.asc() if (sort_order or "").lower() == "asc" else column.desc()
                return [direction, self._model.id.desc()]
        return self._default_order()

    def _blank_to_null(self, data: dict[str, Any]) -> None:
        for name in self.blank_as_null:
            if isinstance(data.get(name), str) and not data[name].strip():
                data[name] = None

    def _check_unique(
        self,
        data: dict[str, Any],
        tenant_id: int,
        *,
        entity: ModelT | None = None,
    ) -> None:
        """
        Raise ConflictError when a natural key would collide with another
        non-deleted row of the tenant. On update only keys touched by
        ``data`` are checked, using the entity's current values for the rest.
        """
        for key in self.unique_fields:
            if entity is not None and not any(name in data for name in key):
                continue
            values = {
                name: data[name] if name in data else getattr(entity, name, None)
                for name in key
            }
            if any(value is None for value in values.values()):
                continue
            if entity is not None and all(
                getattr(entity, name) == value for name, value in values.items()
            ) and not entity.is_deleted:
                continue
            conditions = [getattr(self._model, name) == value for name, value in values.items()]
            if self._repo.exists_where(
                tenant_id, *conditions, exclude_id=entity.id if entity is not None else None
            ):
                label = key[-1].replace("_", " ")
                raise ConflictError(
                    f"{self._entity_name} with this {label} already exists",
                    tenant_id=tenant_id,
                )

    # =========================================================================
    # Validation Hooks (override in subclasses)
    # =========================================================================

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        """
        Validate data before create. May normalize values in place.

        Raises:
            ValidationError / NotFoundError: If validation fails.
        """
        pass

    def _validate_update(
        self, entity: ModelT, data: dict[str, Any], tenant_id: int
    ) -> None:
        """
        Validate data before update. May normalize values in place.

        Raises:
            ValidationError / NotFoundError: If validation fails.
        """
        pass

    def _validate_delete(self, entity: ModelT, tenant_id: int) -> None:
        """
        Validate before delete.

        Override to check for dependent entities.

        Raises:
            ForbiddenError: If deletion is not allowed.
        """
        pass

    def _validate_restore(self, entity: ModelT, tenant_id: int) -> None:
        """Validate before restore."""
        pass

    # =========================================================================
    # Lifecycle Hooks (override in subclasses)
    # =========================================================================

    def _after_create(self, entity: ModelT, actor_id: int) -> None:
        """Hook called after entity creation. Override for side effects."""
        pass

    def _after_update(
        self,
        entity: ModelT,
        old_values: dict[str, Any],
        actor_id: int,
    ) -> None:
        """Hook called after entity update. Override for side effects."""
        pass

    def _after_delete(self, entity: ModelT, actor_id: int) -> None:
        """Hook called after entity deletion."""
        logger.info(
            f"{self._entity_name} deleted",
            entity_id=entity.id,
            tenant_id=getattr(entity, "company_id", None),
            actor_id=actor_id,
        )
