"""
Centralized HTTP exceptions for consistent error handling.

Services raise these directly; FastAPI renders them as
``{"detail": "<message>"}`` with the matching status code.

Usage:
    from shared.utils.exceptions import NotFoundError, ConflictError, ValidationError

    raise NotFoundError("Room type", room_type_id)
    raise ConflictError("Room type with this name already exists")
    raise ValidationError("Insufficient stock")
"""

from typing import Any

from fastapi import HTTPException, status

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def __str__(self) -> str:
        return str(self.detail)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Also raised when the id exists under another tenant, so callers
    can never tell the two cases apart.

    Usage:
        raise NotFoundError("Product", 123)
        raise NotFoundError("Room", room_id, tenant_id=tenant_id)
    """

    def __init__(self, entity: str, entity_id: int | str | None = None, **log_context: Any):
        detail = f"{entity} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail,
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 401 / 403 Errors
# =============================================================================


class UnauthorizedError(AppException):
    """
    Missing, invalid or expired session, or bad credentials (401).

    Usage:
        raise UnauthorizedError("Invalid credentials")
    """

    def __init__(self, detail: str = "Not authenticated", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            log_level="warning",
            headers={"WWW-Authenticate": "Bearer"},
            **log_context,
        )


class ForbiddenError(AppException):
    """
    Authorization error or blocked operation (403).

    Usage:
        raise ForbiddenError("Insufficient permissions")
        raise ForbiddenError("Cannot delete category with 3 active product(s)", category_id=7)
    """

    def __init__(self, detail: str = "Access denied", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InsufficientRoleError(ForbiddenError):
    """User doesn't have the required role."""

    def __init__(self, required_roles: list[str] | frozenset[str], **log_context: Any):
        roles_str = ", ".join(sorted(required_roles))
        super().__init__(
            f"Insufficient permissions. Required role: one of {roles_str}",
            required_roles=sorted(required_roles),
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Price must be positive")
        raise ValidationError("Invalid quantity", field="quantity", value=-1)
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class InvalidStateError(ValidationError):
    """Entity is in an invalid state for the operation."""

    def __init__(self, detail: str, entity: str, current_state: str, **log_context: Any):
        super().__init__(detail, entity=entity, current_state=current_state, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409), e.g. a unique key collision.

    Usage:
        raise ConflictError("User with this email already exists")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to record payment", order_id=123)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class DatabaseError(InternalError):
    """Database operation failed."""

    def __init__(self, operation: str, **log_context: Any):
        detail = f"Database error while trying to {operation}. Please try again."
        super().__init__(detail, operation=operation, **log_context)
