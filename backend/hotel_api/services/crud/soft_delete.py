"""
Soft delete helpers for consistent soft delete operations across all entities.

This module provides functions to:
- Soft delete entities (set deleted_at/deleted_by_id)
- Restore soft-deleted entities
- Set created_by/updated_by audit fields
"""

from typing import Type, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from hotel_api.models import AuditMixin
from shared.infrastructure.db import safe_commit


T = TypeVar("T", bound=AuditMixin)


def soft_delete(db: Session, entity: T, actor_id: int | None) -> T:
    """
    Perform soft delete on an entity with audit trail.

    The row stays in the table with deleted_at/deleted_by_id set.

    Raises:
        Exception: Re-raises any exception after rollback
    """
    entity.soft_delete(actor_id)
    safe_commit(db)
    db.refresh(entity)
    return entity


def restore_entity(db: Session, entity: T, actor_id: int) -> T:
    """
    Restore a soft-deleted entity.

    Raises:
        ValueError: If entity is None
        Exception: Re-raises any exception after rollback
    """
    if entity is None:
        raise ValueError("Cannot restore None entity")

    entity.restore(actor_id)
    safe_commit(db)
    db.refresh(entity)
    return entity


def set_created_by(entity: T, actor_id: int | None) -> T:
    """Set created_by/updated_by on a new entity."""
    entity.set_created_by(actor_id)
    return entity


def set_updated_by(entity: T, actor_id: int | None) -> T:
    """Set updated_by on an entity being updated."""
    entity.set_updated_by(actor_id)
    return entity


def find_deleted_entity(
    db: Session, model_class: Type[T], entity_id: int, tenant_id: int
) -> T | None:
    """Find a soft-deleted entity by ID within the tenant."""
    return db.scalar(
        select(model_class).where(
            model_class.id == entity_id,
            model_class.company_id == tenant_id,
            model_class.deleted_at.is_not(None),
        )
    )
