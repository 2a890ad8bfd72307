"""
Invitation endpoints.

The verify endpoint is public: it is what the accept-invitation page calls
before the invited person has an account.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import (
    ListParams,
    get_list_params,
    get_role,
    get_tenant_id,
    get_user_id,
    require_management,
)
from hotel_api.services.domain import InvitationService
from shared.infrastructure.db import get_db
from shared.utils.admin_schemas import InvitationCreate, InvitationOutput, InvitationPreview
from shared.utils.schemas import Page


router = APIRouter(prefix="/api/invitations", tags=["invitations"])


@router.post("", response_model=InvitationOutput, status_code=status.HTTP_201_CREATED)
def create_invitation(
    body: InvitationCreate,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> InvitationOutput:
    """Invite someone to join the company with a role. Only an ADMIN can invite an ADMIN."""
    return InvitationService(db).invite(
        email=body.email,
        role=body.role,
        tenant_id=get_tenant_id(user),
        actor_id=get_user_id(user),
        actor_role=get_role(user),
    )


@router.get("", response_model=Page[InvitationOutput])
def list_invitations(
    invitation_status: str | None = Query(default=None, alias="status"),
    params: ListParams = Depends(get_list_params),
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
):
    """List invitations; ``status`` is one of pending, accepted, expired."""
    return InvitationService(db).list(
        get_tenant_id(user), status=invitation_status, **params.to_kwargs()
    )


@router.get("/verify/{token}", response_model=InvitationPreview)
def verify_invitation(token: str, db: Session = Depends(get_db)) -> InvitationPreview:
    return InvitationService(db).get_by_token(token)


@router.post("/resend/{invitation_id}", response_model=InvitationOutput)
def resend_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> InvitationOutput:
    """Issue a new token with a fresh expiry."""
    return InvitationService(db).resend(invitation_id, get_tenant_id(user), get_user_id(user))


@router.delete("/{invitation_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_invitation(
    invitation_id: int,
    db: Session = Depends(get_db),
    user: dict = Depends(require_management),
) -> None:
    InvitationService(db).cancel(invitation_id, get_tenant_id(user), get_user_id(user))
