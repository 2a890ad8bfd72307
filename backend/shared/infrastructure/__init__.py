"""
Infrastructure module: Database sessions and request correlation.
"""

from shared.infrastructure.db import (
    engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
    unit_of_work,
)
from shared.infrastructure.correlation import (
    CorrelationIdMiddleware,
    CorrelationIdFilter,
    get_request_id,
)

__all__ = [
    # db
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    "unit_of_work",
    # correlation
    "CorrelationIdMiddleware",
    "CorrelationIdFilter",
    "get_request_id",
]
