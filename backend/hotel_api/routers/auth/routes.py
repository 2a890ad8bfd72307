"""
Authentication router.
Handles company signup, login, invitation acceptance and the profile.

Signup, login and accept-invitation are public; everything else needs a
Bearer session token.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hotel_api.routers._common import current_user, get_user_id
from hotel_api.services.domain import AuthService
from shared.infrastructure.db import get_db
from shared.utils.schemas import (
    AcceptInvitationRequest,
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    MessageResponse,
    ProfileOutput,
    SignupRequest,
)


router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/signup-company", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup_company(body: SignupRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Create a company together with its first ADMIN user and return a session.

    Both rows are written in one transaction: if the user cannot be created
    the company is not created either.
    """
    return AuthService(db).signup_company(**body.model_dump())


@router.post("/login", response_model=AuthResponse)
def login(body: LoginRequest, db: Session = Depends(get_db)) -> AuthResponse:
    """
    Authenticate a user and return an access token.

    The token contains:
    - sub: user ID
    - email: user's email
    - company_id: tenant ID
    - role: the user's role

    Unknown email, wrong password, inactive user and deleted company all
    answer with the same 401.
    """
    return AuthService(db).login(body.email, body.password)


@router.post(
    "/accept-invitation", response_model=AuthResponse, status_code=status.HTTP_201_CREATED
)
def accept_invitation(
    body: AcceptInvitationRequest, db: Session = Depends(get_db)
) -> AuthResponse:
    """Create the invited user inside the inviting company and return a session."""
    return AuthService(db).accept_invitation(
        token=body.token,
        first_name=body.first_name,
        last_name=body.last_name,
        password=body.password,
    )


@router.get("/profile", response_model=ProfileOutput)
def get_profile(
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> ProfileOutput:
    """Current user with its company. Password is never included."""
    return AuthService(db).get_profile(get_user_id(user))


@router.post("/change-password", response_model=MessageResponse)
def change_password(
    body: ChangePasswordRequest,
    db: Session = Depends(get_db),
    user: dict = Depends(current_user),
) -> MessageResponse:
    AuthService(db).change_password(get_user_id(user), body.current_password, body.new_password)
    return MessageResponse(message="Password updated")
