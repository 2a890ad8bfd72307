"""
Shared Pydantic schemas used across the application.

Authentication/provisioning schemas and the common list envelope live here;
entity schemas live in ``shared.utils.admin_schemas``.
"""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, EmailStr, Field


T = TypeVar("T")


# =============================================================================
# Common Types
# =============================================================================


class PageMeta(BaseModel):
    """Pagination metadata of a list response."""

    total: int
    page: int
    limit: int
    totalPages: int


class Page(BaseModel, Generic[T]):
    """List response: ``{"data": [...], "meta": {...}}``."""

    data: list[T]
    meta: PageMeta


class ActorSummary(BaseModel):
    """Creator/updater expanded on audited entities."""

    id: int
    email: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# Authentication Schemas
# =============================================================================


class SignupRequest(BaseModel):
    """Create a company and its first administrator."""

    company_name: str = Field(min_length=1, max_length=200)
    admin_email: EmailStr
    admin_password: str
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    company_address: str | None = None
    company_email: EmailStr | None = None
    company_phone: str | None = Field(default=None, max_length=50)


class LoginRequest(BaseModel):
    """Login request body."""

    email: EmailStr
    password: str


class AcceptInvitationRequest(BaseModel):
    """Join a company through an invitation token."""

    token: str = Field(min_length=1)
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    password: str


class ChangePasswordRequest(BaseModel):
    current_password: str
    new_password: str


class CompanyOutput(BaseModel):
    id: int
    name: str
    address: str | None = None
    email: str | None = None
    phone: str | None = None
    created_at: datetime

    class Config:
        from_attributes = True


class UserOutput(BaseModel):
    """Sanitized user. The password hash is never part of any response."""

    id: int
    company_id: int
    email: str
    first_name: str
    last_name: str
    role: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


class ProfileOutput(UserOutput):
    """Current user with the company expanded."""

    company: CompanyOutput


class AuthResponse(BaseModel):
    """Token response of signup, login and invitation acceptance."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int  # seconds
    user: UserOutput
    company: CompanyOutput
