"""
Authentication and authorization utilities.

Session tokens are HS256 JWTs carrying:
- sub: user id (string)
- email
- company_id: tenant id
- role
plus the standard iss/aud/iat/exp claims, a token type and a unique jti.

The tenant id and actor id handed to every service call come from these
claims, never from the request body.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Iterable

import jwt
from fastapi import Depends, Header

from shared.config.constants import ErrorMessages, MANAGEMENT_ROLES, Roles
from shared.config.settings import JWT_SECRET, JWT_ISSUER, JWT_AUDIENCE, settings
from shared.config.logging import get_logger
from shared.utils.exceptions import InsufficientRoleError, UnauthorizedError

logger = get_logger(__name__)


# =============================================================================
# JWT Functions
# =============================================================================


def sign_jwt(
    payload: dict[str, Any],
    ttl_seconds: int | None = None,
    token_type: str = "access",
) -> str:
    """
    Sign a JWT token with the given payload.

    Args:
        payload: Claims to include in the token (sub, email, company_id, role).
        ttl_seconds: Token lifetime in seconds. Defaults to access token expiry.
        token_type: Type of token.

    Returns:
        Signed JWT token string.
    """
    if ttl_seconds is None:
        ttl_seconds = settings.jwt_access_token_expire_minutes * 60

    now = int(time.time())
    data = {
        **payload,
        "iss": JWT_ISSUER,
        "aud": JWT_AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "type": token_type,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(data, JWT_SECRET, algorithm="HS256")


def issue_session_token(user_id: int, email: str, company_id: int, role: str) -> str:
    """Mint the access token for an authenticated user."""
    return sign_jwt(
        {
            "sub": str(user_id),
            "email": email,
            "company_id": company_id,
            "role": role,
        }
    )


def verify_jwt(token: str) -> dict[str, Any]:
    """
    Verify and decode a JWT token.

    Returns:
        Decoded token claims.

    Raises:
        UnauthorizedError: If token is invalid, expired or lacks required claims.
    """
    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=["HS256"],
            audience=JWT_AUDIENCE,
            issuer=JWT_ISSUER,
        )
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError(ErrorMessages.TOKEN_EXPIRED)
    except jwt.InvalidTokenError as e:
        # Actual reason goes to the log only
        logger.warning("JWT validation failed", error=str(e))
        raise UnauthorizedError(ErrorMessages.INVALID_TOKEN)

    if payload.get("type") != "access":
        raise UnauthorizedError("Invalid token: invalid type claim")

    try:
        int(payload["sub"])
    except (KeyError, ValueError, TypeError):
        raise UnauthorizedError("Invalid token: malformed subject claim")

    if not isinstance(payload.get("company_id"), int):
        raise UnauthorizedError("Invalid token: malformed company_id claim")

    if payload.get("role") not in Roles.ALL:
        raise UnauthorizedError("Invalid token: malformed role claim")

    return payload


def get_bearer_token(authorization: str | None) -> str:
    """
    Extract bearer token from Authorization header.

    Raises:
        UnauthorizedError: If header is missing or malformed.
    """
    if not authorization:
        raise UnauthorizedError("Missing Authorization header")
    if not authorization.startswith("Bearer "):
        raise UnauthorizedError(
            "Invalid Authorization header format. Expected: Bearer <token>"
        )
    return authorization.split(" ", 1)[1].strip()


def current_user_context(
    authorization: str | None = Header(default=None, alias="Authorization"),
) -> dict[str, Any]:
    """
    FastAPI dependency to get the current user context from JWT.

    Usage:
        @router.get("/protected")
        def protected_endpoint(ctx = Depends(current_user_context)):
            user_id = get_user_id(ctx)
            tenant_id = get_tenant_id(ctx)

    Returns:
        Dict with: sub (user id), email, company_id, role
    """
    token = get_bearer_token(authorization)
    return verify_jwt(token)


# =============================================================================
# Context accessors
# =============================================================================


def get_user_id(ctx: dict[str, Any]) -> int:
    """Acting user id from the token context."""
    return int(ctx["sub"])


def get_tenant_id(ctx: dict[str, Any]) -> int:
    """Tenant (company) id from the token context."""
    return int(ctx["company_id"])


def get_user_email(ctx: dict[str, Any]) -> str:
    return ctx.get("email", "")


def get_role(ctx: dict[str, Any]) -> str:
    return ctx.get("role", "")


# =============================================================================
# Role checks
# =============================================================================


def require_roles(ctx: dict[str, Any], allowed: Iterable[str]) -> None:
    """
    Verify that the user's role is one of the allowed roles.

    Raises:
        InsufficientRoleError: If user lacks required role.
    """
    allowed_set = frozenset(allowed)
    if get_role(ctx) not in allowed_set:
        raise InsufficientRoleError(
            allowed_set, user_id=ctx.get("sub"), role=get_role(ctx)
        )


def role_dependency(allowed: Iterable[str]) -> Callable[..., dict[str, Any]]:
    """
    Build a FastAPI dependency that authenticates and checks the role.

    Usage:
        require_front_desk = role_dependency(FRONT_DESK_ROLES)

        @router.post("/stays")
        def create_stay(ctx: dict = Depends(require_front_desk)): ...
    """
    allowed_set = frozenset(allowed)

    def dependency(ctx: dict[str, Any] = Depends(current_user_context)) -> dict[str, Any]:
        require_roles(ctx, allowed_set)
        return ctx

    return dependency


def require_admin(ctx: dict[str, Any] = Depends(current_user_context)) -> dict[str, Any]:
    """Dependency that requires ADMIN role."""
    require_roles(ctx, [Roles.ADMIN])
    return ctx


def require_admin_or_manager(
    ctx: dict[str, Any] = Depends(current_user_context),
) -> dict[str, Any]:
    """Dependency that requires ADMIN or MANAGER role."""
    require_roles(ctx, MANAGEMENT_ROLES)
    return ctx
