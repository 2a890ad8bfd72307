"""
Utilities module: Exceptions, validators, schemas.
"""

from shared.utils.exceptions import (
    NotFoundError,
    ForbiddenError,
    ValidationError,
    ConflictError,
)
from shared.utils.validators import (
    escape_like_pattern,
    sanitize_search_term,
    to_money,
)
from shared.utils.schemas import Page, PageMeta, MessageResponse

__all__ = [
    # exceptions
    "NotFoundError",
    "ForbiddenError",
    "ValidationError",
    "ConflictError",
    # validators
    "escape_like_pattern",
    "sanitize_search_term",
    "to_money",
    # schemas
    "Page",
    "PageMeta",
    "MessageResponse",
]
