"""
Shared module for common utilities of the hotel back office API.

STRUCTURE:
- shared.security: Authentication and authorization
  - auth.py: JWT signing/verification, current_user_context, role dependencies
  - password.py: Bcrypt hashing

- shared.infrastructure: Database and request plumbing
  - db.py: SQLAlchemy sessions, safe_commit(), unit_of_work()
  - correlation.py: X-Request-ID middleware and log filter

- shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Roles, status enums, limits

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Search term sanitizing, money rounding
  - schemas.py / admin_schemas.py: Pydantic request and response models

IMPORT EXAMPLES:
    from shared.security.auth import verify_jwt, current_user_context
    from shared.infrastructure.db import get_db, safe_commit, unit_of_work
    from shared.config.settings import settings
    from shared.config.constants import Roles, StayStatus
    from shared.utils.exceptions import NotFoundError, ForbiddenError
"""
