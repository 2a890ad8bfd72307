"""
Security module: Authentication, role checks, password hashing.
"""

from shared.security.auth import (
    sign_jwt,
    issue_session_token,
    verify_jwt,
    get_bearer_token,
    current_user_context,
    require_roles,
    role_dependency,
    require_admin,
    require_admin_or_manager,
)
from shared.security.password import hash_password, verify_password

__all__ = [
    # auth
    "sign_jwt",
    "issue_session_token",
    "verify_jwt",
    "get_bearer_token",
    "current_user_context",
    "require_roles",
    "role_dependency",
    "require_admin",
    "require_admin_or_manager",
    # password
    "hash_password",
    "verify_password",
]
