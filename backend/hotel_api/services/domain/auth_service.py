"""
Auth Service - company provisioning and authentication.

Handles:
- Company signup (company + first ADMIN user in one transaction)
- Login with identical failure messages for every bad-credential case
- Invitation acceptance (user creation + invitation update in one transaction)
- Profile and password change

Usage:
    from hotel_api.services.domain import AuthService

    service = AuthService(db)
    result = service.signup_company("Acme", "owner@acme.test", "s3cretpass")
    result = service.login("owner@acme.test", "s3cretpass")
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hotel_api.models import Company, Invitation, User, not_deleted, utcnow
from shared.config.constants import ErrorMessages, Limits, Roles, UserStatus
from shared.config.logging import audit_auth_event, get_logger, mask_email
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit, unit_of_work
from shared.security.auth import issue_session_token
from shared.security.password import hash_password, needs_rehash, verify_password
from shared.utils.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from shared.utils.schemas import AuthResponse, CompanyOutput, ProfileOutput, UserOutput

logger = get_logger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def find_user_by_email(
    db: Session, email: str, *, exclude_id: int | None = None
) -> User | None:
    """
    Non-deleted user with this email in any company.
    Emails are unique across tenants.
    """
    query = select(User).where(
        func.lower(User.email) == normalize_email(email),
        not_deleted(User),
    )
    if exclude_id is not None:
        query = query.where(User.id != exclude_id)
    return db.scalars(query.limit(1)).first()


def check_password_length(password: str, minimum: int) -> None:
    if len(password or "") < minimum:
        raise ValidationError(
            f"Password must be at least {minimum} characters long", field="password"
        )


class AuthService:
    """
    Service for authentication and tenant provisioning.

    Business rules:
    - Email is globally unique among non-deleted users
    - Signup creates the company and its ADMIN atomically
    - Invitations are accepted at most once and only before they expire
    """

    def __init__(self, db: Session):
        self._db = db

    # =========================================================================
    # Provisioning
    # =========================================================================

    def signup_company(
        self,
        company_name: str,
        admin_email: str,
        admin_password: str,
        first_name: str | None = None,
        last_name: str | None = None,
        company_address: str | None = None,
        company_email: str | None = None,
        company_phone: str | None = None,
    ) -> AuthResponse:
        """
        Create a company and its first administrator, then sign them in.

        Raises:
            ValidationError: If the password is too short.
            ConflictError: If the email belongs to any non-deleted user.
        """
        check_password_length(admin_password, Limits.MIN_SIGNUP_PASSWORD_LENGTH)
        email = normalize_email(admin_email)

        if find_user_by_email(self._db, email) is not None:
            audit_auth_event("SIGNUP", email=email, success=False, reason="email_registered")
            raise ConflictError(ErrorMessages.EMAIL_REGISTERED)

        try:
            with unit_of_work(self._db):
                company = Company(
                    name=company_name.strip(),
                    address=company_address,
                    email=company_email,
                    phone=company_phone,
                )
                self._db.add(company)
                self._db.flush()

                user = User(
                    company_id=company.id,
                    email=email,
                    password=hash_password(admin_password),
                    first_name=first_name or "Admin",
                    last_name=last_name or "User",
                    role=Roles.ADMIN,
                    status=UserStatus.ACTIVE,
                )
                self._db.add(user)
                self._db.flush()

                # The admin is the actor of its own provisioning
                company.set_created_by(user.id)
                user.set_created_by(user.id)
        except SQLAlchemyError as e:
            logger.error("Company signup failed", error=str(e), email=mask_email(email))
            raise DatabaseError("create company")

        self._db.refresh(user)
        self._db.refresh(company)

        audit_auth_event("SIGNUP", user_id=user.id, email=email, company_id=company.id)
        return self._token_response(user, company)

    def accept_invitation(
        self,
        token: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> AuthResponse:
        """
        Create the invited user and mark the invitation accepted.

        Raises:
            NotFoundError: Unknown or cancelled token.
            ValidationError: Already accepted, expired, or password too short.
            ConflictError: The invited email has registered meanwhile.
        """
        check_password_length(password, Limits.MIN_PASSWORD_LENGTH)

        invitation = self._db.scalar(
            select(Invitation).where(Invitation.token == token, not_deleted(Invitation))
        )
        if invitation is None:
            raise NotFoundError("Invitation")
        if invitation.is_accepted:
            raise ValidationError("Invitation has already been accepted")
        if invitation.is_expired:
            audit_auth_event(
                "INVITATION_ACCEPTED",
                email=invitation.email,
                success=False,
                reason="expired",
            )
            raise ValidationError("Invitation has expired")
        if find_user_by_email(self._db, invitation.email) is not None:
            raise ConflictError(ErrorMessages.EMAIL_REGISTERED)

        try:
            with unit_of_work(self._db):
                user = User(
                    company_id=invitation.company_id,
                    email=normalize_email(invitation.email),
                    password=hash_password(password),
                    first_name=first_name.strip(),
                    last_name=last_name.strip(),
                    role=invitation.role,
                    status=UserStatus.ACTIVE,
                )
                user.set_created_by(invitation.created_by_id)
                self._db.add(user)
                self._db.flush()

                invitation.accepted_at = utcnow()
                invitation.set_updated_by(user.id)
        except SQLAlchemyError as e:
            logger.error("Invitation acceptance failed", error=str(e), invitation_id=invitation.id)
            raise DatabaseError("accept invitation")

        self._db.refresh(user)

        audit_auth_event(
            "INVITATION_ACCEPTED",
            user_id=user.id,
            email=user.email,
            company_id=user.company_id,
        )
        return self._token_response(user, user.company)

    # =========================================================================
    # Authentication
    # =========================================================================

    def login(self, email: str, password: str) -> AuthResponse:
        """
        Authenticate by email and password.

        Unknown email, wrong password and non-active accounts all raise the
        same UnauthorizedError so callers cannot tell them apart.
        """
        user = find_user_by_email(self._db, email)

        if user is None:
            logger.warning("LOGIN_FAILED: User not found", email=mask_email(email))
            audit_auth_event("LOGIN", email=email, success=False, reason="unknown_email")
            raise UnauthorizedError(ErrorMessages.INVALID_CREDENTIALS)

        if not verify_password(password, user.password):
            logger.warning("LOGIN_FAILED: Invalid password", email=mask_email(email), user_id=user.id)
            audit_auth_event("LOGIN", user_id=user.id, email=email, success=False, reason="bad_password")
            raise UnauthorizedError(ErrorMessages.INVALID_CREDENTIALS)

        if user.status != UserStatus.ACTIVE or user.company.is_deleted:
            logger.warning("LOGIN_FAILED: Inactive account", email=mask_email(email), user_id=user.id)
            audit_auth_event("LOGIN", user_id=user.id, email=email, success=False, reason="inactive")
            raise UnauthorizedError(ErrorMessages.INVALID_CREDENTIALS)

        if needs_rehash(user.password):
            user.password = hash_password(password)
            safe_commit(self._db)

        logger.info("LOGIN_SUCCESS", email=mask_email(user.email), user_id=user.id, role=user.role)
        audit_auth_event("LOGIN", user_id=user.id, email=user.email, company_id=user.company_id)
        return self._token_response(user, user.company)

    # =========================================================================
    # Profile
    # =========================================================================

    def get_profile(self, user_id: int) -> ProfileOutput:
        """Sanitized user with the company expanded."""
        return ProfileOutput.model_validate(self._get_user(user_id))

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        """
        Replace the user's password after checking the current one.

        Raises:
            ValidationError: Wrong current password or new password too short.
        """
        user = self._get_user(user_id)

        if not verify_password(current_password, user.password):
            audit_auth_event(
                "PASSWORD_CHANGED", user_id=user.id, email=user.email,
                success=False, reason="bad_current_password",
            )
            raise ValidationError("Current password is incorrect", field="current_password")
        check_password_length(new_password, Limits.MIN_PASSWORD_LENGTH)

        user.password = hash_password(new_password)
        user.set_updated_by(user.id)
        safe_commit(self._db)

        audit_auth_event("PASSWORD_CHANGED", user_id=user.id, email=user.email)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    def _get_user(self, user_id: int) -> User:
        user = self._db.scalar(select(User).where(User.id == user_id, not_deleted(User)))
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    @staticmethod
    def _token_response(user: User, company: Company) -> AuthResponse:
        token = issue_session_token(user.id, user.email, user.company_id, user.role)
        return AuthResponse(
            access_token=token,
            token_type="Bearer",
            expires_in=settings.jwt_access_token_expire_minutes * 60,
            user=UserOutput.model_validate(user),
            company=CompanyOutput.model_validate(company),
        )
