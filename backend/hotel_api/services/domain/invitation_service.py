"""
Invitation Service.

An invitation lets an ADMIN or MANAGER bring a new user into their company.
State is derived, never stored: pending until accepted_at is set or
expires_at passes. Cancelling soft-deletes the row.
"""

from __future__ import annotations

import secrets
from datetime import timedelta
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from hotel_api.models import Invitation, not_deleted, utcnow
from hotel_api.services import lookup
from hotel_api.services.base_service import BaseCRUDService
from hotel_api.services.domain.auth_service import find_user_by_email, normalize_email
from shared.config.constants import ErrorMessages, InvitationStatus, Roles
from shared.config.logging import get_logger, mask_email
from shared.config.settings import settings
from shared.infrastructure.db import safe_commit
from shared.utils.admin_schemas import InvitationOutput, InvitationPreview
from shared.utils.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError

logger = get_logger(__name__)


def generate_invitation_token() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)


class InvitationService(BaseCRUDService[Invitation, InvitationOutput]):
    """
    Business rules:
    - Only emails that are neither registered nor already invited (pending)
    - MANAGER cannot invite an ADMIN
    - Accepted invitations can be neither resent nor cancelled
    """

    search_fields = ("email",)
    sortable_fields = ("created_at", "expires_at", "email")
    filter_fields = ("role",)

    def __init__(self, db: Session):
        super().__init__(
            db=db,
            model=Invitation,
            output_schema=InvitationOutput,
            entity_name="Invitation",
        )

    # =========================================================================
    # Commands
    # =========================================================================

    def invite(
        self,
        email: str,
        role: str,
        tenant_id: int,
        actor_id: int,
        actor_role: str,
    ) -> InvitationOutput:
        """
        Create a pending invitation.

        Raises:
            ForbiddenError: MANAGER inviting an ADMIN.
            ConflictError: Email registered or already invited.
        """
        role = lookup.validate("user_role", role)
        if role == Roles.ADMIN and actor_role != Roles.ADMIN:
            raise ForbiddenError("Only administrators can invite administrators")

        data = {
            "email": normalize_email(email),
            "role": role,
            "token": generate_invitation_token(),
            "expires_at": utcnow() + timedelta(days=settings.invitation_expire_days),
        }
        invitation = self.create(data, tenant_id, actor_id)
        logger.info(
            "Invitation created",
            email=mask_email(invitation.email),
            tenant_id=tenant_id,
            actor_id=actor_id,
        )
        return invitation

    def resend(self, invitation_id: int, tenant_id: int, actor_id: int) -> InvitationOutput:
        """New token and a fresh expiry for a not yet accepted invitation."""
        invitation = self.get_entity(invitation_id, tenant_id)
        if invitation.is_accepted:
            raise ValidationError("Invitation has already been accepted")

        invitation.token = generate_invitation_token()
        invitation.expires_at = utcnow() + timedelta(days=settings.invitation_expire_days)
        invitation.set_updated_by(actor_id)
        safe_commit(self._db)
        self._db.refresh(invitation)
        return self.to_output(invitation)

    def cancel(self, invitation_id: int, tenant_id: int, actor_id: int) -> None:
        """Soft delete; the token stops resolving."""
        self.remove(invitation_id, tenant_id, actor_id)

    # =========================================================================
    # Queries
    # =========================================================================

    def get_by_token(self, token: str) -> InvitationPreview:
        """Public preview of an invitation. No session needed."""
        invitation = self._db.scalar(
            select(Invitation).where(Invitation.token == token, not_deleted(Invitation))
        )
        if invitation is None:
            raise NotFoundError("Invitation")
        return InvitationPreview(
            email=invitation.email,
            role=invitation.role,
            status=invitation.status,
            company_name=invitation.company.name,
            expires_at=invitation.expires_at,
        )

    def list(self, tenant_id: int, *, status: str | None = None, **kwargs: Any) -> dict[str, Any]:
        """
        Paginated invitations. ``status`` filters on the derived state.
        """
        filters = dict(kwargs.pop("filters", None) or {})
        filters["status"] = status
        return super().list(tenant_id, filters=filters, **kwargs)

    def to_output(self, entity: Invitation) -> InvitationOutput:
        output = InvitationOutput.model_validate(entity)
        output.invitation_link = (
            f"{settings.frontend_url.rstrip('/')}/accept-invitation?token={entity.token}"
        )
        return output

    # =========================================================================
    # Hooks
    # =========================================================================

    def _filter_conditions(self, filters: dict[str, Any], tenant_id: int) -> list[Any]:
        conditions = super()._filter_conditions(filters, tenant_id)
        status = filters.get("status")
        now = utcnow()
        if status == InvitationStatus.ACCEPTED:
            conditions.append(Invitation.accepted_at.is_not(None))
        elif status == InvitationStatus.PENDING:
            conditions += [Invitation.accepted_at.is_(None), Invitation.expires_at >= now]
        elif status == InvitationStatus.EXPIRED:
            conditions += [Invitation.accepted_at.is_(None), Invitation.expires_at < now]
        return conditions

    def _validate_create(self, data: dict[str, Any], tenant_id: int) -> None:
        email = data["email"]
        if find_user_by_email(self._db, email) is not None:
            raise ConflictError(ErrorMessages.EMAIL_REGISTERED)

        pending = self._repo.exists_where(
            tenant_id,
            Invitation.email == email,
            Invitation.accepted_at.is_(None),
            Invitation.expires_at >= utcnow(),
        )
        if pending:
            raise ConflictError("A pending invitation already exists for this email")

    def _validate_delete(self, entity: Invitation, tenant_id: int) -> None:
        if entity.is_accepted:
            raise ValidationError("Cannot cancel an accepted invitation")
