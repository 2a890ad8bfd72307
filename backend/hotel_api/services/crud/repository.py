"""
Repository Pattern for database access.

Provides a clean abstraction layer between business logic and data access,
with built-in multi-tenant isolation and soft-delete filtering.

Usage:
    from hotel_api.services.crud.repository import TenantRepository

    room_repo = TenantRepository(Room, db)

    rooms = room_repo.find_all(tenant_id=1)
    room = room_repo.find_by_id(42, tenant_id=1)
    taken = room_repo.exists_where(1, Room.room_number == "101")

    # Paginated search
    items, total = room_repo.paginate(
        tenant_id=1,
        page=2,
        limit=10,
        search="sea",
        search_fields=[Room.name, Room.description],
    )
"""

from __future__ import annotations

from typing import Any, Generic, Sequence, TypeVar

from sqlalchemy import ColumnElement, func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from hotel_api.models import Base, not_deleted
from shared.utils.validators import escape_like_pattern, sanitize_search_term

ModelT = TypeVar("ModelT", bound=Base)


class TenantRepository(Generic[ModelT]):
    """
    Repository with automatic multi-tenant isolation.

    Every query is filtered by ``company_id`` and, unless asked otherwise,
    by ``not_deleted(model)``. Looking up an id that belongs to another
    tenant therefore behaves exactly like looking up a missing id.
    """

    def __init__(self, model: type[ModelT], session: Session):
        self._model = model
        self._session = session

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def session(self) -> Session:
        """The database session."""
        return self._session

    # =========================================================================
    # Query building
    # =========================================================================

    def _tenant_query(self, tenant_id: int) -> Select:
        """Create tenant-filtered base query."""
        if not hasattr(self._model, "company_id"):
            raise AttributeError(
                f"Model {self._model.__name__} does not have company_id column."
            )
        return select(self._model).where(self._model.company_id == tenant_id)

    def _scoped_query(self, tenant_id: int, include_deleted: bool = False) -> Select:
        query = self._tenant_query(tenant_id)
        if not include_deleted:
            query = query.where(not_deleted(self._model))
        return query

    @staticmethod
    def _apply_options(query: Select, options: list[Any] | None) -> Select:
        """Apply eager loading options."""
        if options:
            query = query.options(*options)
        return query

    # =========================================================================
    # Reads
    # =========================================================================

    def find_by_id(
        self,
        entity_id: int,
        tenant_id: int,
        *,
        options: list[Any] | None = None,
        include_deleted: bool = False,
    ) -> ModelT | None:
        """
        Find entity by ID within tenant scope.

        Returns:
            Entity or None if not found, deleted or owned by another tenant.
        """
        query = self._scoped_query(tenant_id, include_deleted).where(
            self._model.id == entity_id
        )
        query = self._apply_options(query, options)
        return self._session.scalar(query)

    def find_one_by(
        self,
        tenant_id: int,
        *conditions: ColumnElement[bool],
        options: list[Any] | None = None,
    ) -> ModelT | None:
        """First non-deleted entity of the tenant matching all conditions."""
        query = self._scoped_query(tenant_id).where(*conditions)
        query = self._apply_options(query, options)
        return self._session.scalars(query.limit(1)).first()

    def find_all(
        self,
        tenant_id: int,
        *conditions: ColumnElement[bool],
        options: list[Any] | None = None,
        include_deleted: bool = False,
        limit: int | None = None,
        offset: int | None = None,
        order_by: Any | None = None,
    ) -> Sequence[ModelT]:
        """
        Find all entities within tenant scope.

        Args:
            tenant_id: The tenant ID for isolation.
            conditions: Extra WHERE clauses.
            options: SQLAlchemy loader options.
            include_deleted: Include soft-deleted entities.
            limit: Maximum results.
            offset: Skip count.
            order_by: Order expression or list of expressions.

        Returns:
            Sequence of entities.
        """
        query = self._scoped_query(tenant_id, include_deleted).where(*conditions)
        query = self._apply_options(query, options)

        if order_by is not None:
            if isinstance(order_by, (list, tuple)):
                query = query.order_by(*order_by)
            else:
                query = query.order_by(order_by)
        if offset is not None:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)

        return self._session.scalars(query).all()

    def count(self, tenant_id: int, *conditions: ColumnElement[bool]) -> int:
        """Count non-deleted entities within tenant scope."""
        query = (
            select(func.count())
            .select_from(self._model)
            .where(
                self._model.company_id == tenant_id,
                not_deleted(self._model),
                *conditions,
            )
        )
        return self._session.scalar(query) or 0

    def exists(self, entity_id: int, tenant_id: int) -> bool:
        """Check if a non-deleted entity exists within tenant scope."""
        return self.count(tenant_id, self._model.id == entity_id) > 0

    def exists_where(
        self,
        tenant_id: int,
        *conditions: ColumnElement[bool],
        exclude_id: int | None = None,
    ) -> bool:
        """
        Uniqueness check: is there another non-deleted row of the tenant
        matching the conditions? ``exclude_id`` skips the row being updated.
        """
        if exclude_id is not None:
            conditions = (*conditions, self._model.id != exclude_id)
        return self.count(tenant_id, *conditions) > 0

    def paginate(
        self,
        tenant_id: int,
        *,
        page: int,
        limit: int,
        search: str | None = None,
        search_fields: Sequence[Any] = (),
        conditions: Sequence[ColumnElement[bool]] = (),
        order_by: Sequence[Any] = (),
        options: list[Any] | None = None,
    ) -> tuple[Sequence[ModelT], int]:
        """
        One page of non-deleted rows plus the total matching count.

        ``search`` is matched as a case-insensitive substring against any of
        ``search_fields``; LIKE wildcards in the term are matched literally.
        """
        query = self._scoped_query(tenant_id).where(*conditions)

        term = sanitize_search_term(search)
        if term and search_fields:
            pattern = f"%{escape_like_pattern(term)}%"
            query = query.where(
                or_(*(field.ilike(pattern, escape="\\") for field in search_fields))
            )

        total = self._session.scalar(
            select(func.count()).select_from(query.order_by(None).subquery())
        ) or 0

        query = self._apply_options(query, options)
        if order_by:
            query = query.order_by(*order_by)
        query = query.offset((page - 1) * limit).limit(limit)

        return self._session.scalars(query).all(), total

    # =========================================================================
    # Writes (not committed)
    # =========================================================================

    def add(self, entity: ModelT) -> ModelT:
        """Add entity to session (not committed)."""
        self._session.add(entity)
        return entity

    def refresh(self, entity: ModelT) -> ModelT:
        """Refresh entity from database."""
        self._session.refresh(entity)
        return entity
