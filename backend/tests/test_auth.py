"""
Tests for authentication and provisioning endpoints.
"""

from datetime import timedelta

import jwt
import pytest
from sqlalchemy import func, select

from hotel_api.models import Company, Invitation, User, utcnow
from shared.config.settings import settings
from shared.security.auth import issue_session_token, sign_jwt, verify_jwt
from shared.security.password import hash_password, needs_rehash, verify_password
from shared.utils.exceptions import UnauthorizedError


class TestPasswordHashing:
    """Test password hashing utilities."""

    def test_hash_password_returns_bcrypt_hash(self):
        """Hash should return bcrypt format."""
        hashed = hash_password("mypassword")
        assert hashed.startswith("$2b$")

    def test_verify_password_correct(self):
        """Correct password should verify."""
        hashed = hash_password("mypassword")
        assert verify_password("mypassword", hashed) is True

    def test_verify_password_incorrect(self):
        """Incorrect password should not verify."""
        hashed = hash_password("mypassword")
        assert verify_password("wrongpassword", hashed) is False

    def test_verify_password_rejects_plain_text(self):
        """A stored value that is not a bcrypt hash never verifies."""
        assert verify_password("plaintext", "plaintext") is False
        assert verify_password("anything", None) is False

    def test_needs_rehash(self):
        """Non-bcrypt values need rehashing, current hashes don't."""
        assert needs_rehash("plaintext") is True
        assert needs_rehash(hash_password("mypassword")) is False


class TestSessionToken:
    """Test JWT issuing and verification."""

    def test_token_carries_identity_claims(self):
        """A session token decodes to user id, email, company and role."""
        token = issue_session_token(7, "a@test.com", 3, "MANAGER")
        claims = verify_jwt(token)
        assert claims["sub"] == "7"
        assert claims["email"] == "a@test.com"
        assert claims["company_id"] == 3
        assert claims["role"] == "MANAGER"

    def test_expired_token_rejected(self):
        """Expired tokens raise 401."""
        token = sign_jwt(
            {"sub": "1", "email": "a@test.com", "company_id": 1, "role": "ADMIN"},
            ttl_seconds=-60,
        )
        with pytest.raises(UnauthorizedError) as exc_info:
            verify_jwt(token)
        assert exc_info.value.status_code == 401

    def test_tampered_token_rejected(self):
        """A token signed with another secret is invalid."""
        token = jwt.encode({"sub": "1"}, "another-secret", algorithm="HS256")
        with pytest.raises(UnauthorizedError):
            verify_jwt(token)


class TestSignup:
    """Test company provisioning."""

    def test_signup_creates_company_and_admin(self, client, db_session):
        """Signup returns a token for a new ADMIN of a new company."""
        response = client.post(
            "/api/auth/signup-company",
            json={
                "company_name": "Sea View",
                "admin_email": "Owner@SeaView.com",
                "admin_password": "longenough",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == settings.jwt_access_token_expire_minutes * 60
        assert data["user"]["role"] == "ADMIN"
        assert data["user"]["email"] == "owner@seaview.com"
        assert data["company"]["name"] == "Sea View"
        assert "password" not in data["user"]

        claims = verify_jwt(data["access_token"])
        assert claims["company_id"] == data["company"]["id"]

    def test_signup_short_password(self, client, db_session):
        """Signup passwords need at least 8 characters."""
        response = client.post(
            "/api/auth/signup-company",
            json={"company_name": "X", "admin_email": "x@test.com", "admin_password": "short"},
        )
        assert response.status_code == 400
        assert db_session.scalar(select(func.count()).select_from(Company)) == 0

    def test_signup_duplicate_email_creates_nothing(self, client, db_session, seed_company):
        """A taken email is a conflict and no second company is written."""
        response = client.post(
            "/api/auth/signup-company",
            json={
                "company_name": "Copycat",
                "admin_email": "ADMIN@test.com",
                "admin_password": "testpass123",
            },
        )
        assert response.status_code == 409
        assert response.json()["detail"] == "Email already registered"
        assert db_session.scalar(select(func.count()).select_from(Company)) == 1


class TestLogin:
    """Test authentication endpoints."""

    def test_login_success(self, client, seed_company):
        """Valid credentials should return a token and the user."""
        response = client.post(
            "/api/auth/login",
            json={"email": "admin@test.com", "password": "testpass123"},
        )
        assert response.status_code == 200
        data = response.json()
        assert "access_token" in data
        assert data["user"]["email"] == "admin@test.com"
        assert data["company"]["id"] == seed_company["company"]["id"]

    def test_login_failures_are_indistinguishable(self, client, seed_company, db_session):
        """Unknown email, wrong password and inactive account give the same 401."""
        unknown = client.post(
            "/api/auth/login", json={"email": "nobody@test.com", "password": "testpass123"}
        )
        wrong = client.post(
            "/api/auth/login", json={"email": "admin@test.com", "password": "wrongpassword"}
        )

        user = db_session.scalar(select(User).where(User.email == "admin@test.com"))
        user.status = "inactive"
        db_session.commit()
        inactive = client.post(
            "/api/auth/login", json={"email": "admin@test.com", "password": "testpass123"}
        )

        for response in (unknown, wrong, inactive):
            assert response.status_code == 401
            assert response.json()["detail"] == "Invalid credentials"

    def test_profile_authenticated(self, client, auth_headers):
        """Profile returns the user with the company expanded."""
        response = client.get("/api/auth/profile", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "admin@test.com"
        assert data["company"]["name"] == "Test Hotel"
        assert "password" not in data

    def test_profile_unauthenticated(self, client):
        """Requests without a bearer token fail with 401."""
        assert client.get("/api/auth/profile").status_code == 401
        assert client.get(
            "/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"}
        ).status_code == 401

    def test_change_password(self, client, auth_headers):
        """The new password works and the old one stops working."""
        response = client.post(
            "/api/auth/change-password",
            json={"current_password": "testpass123", "new_password": "brandnew1"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Password updated"

        old = client.post("/api/auth/login", json={"email": "admin@test.com", "password": "testpass123"})
        new = client.post("/api/auth/login", json={"email": "admin@test.com", "password": "brandnew1"})
        assert old.status_code == 401
        assert new.status_code == 200

    def test_change_password_wrong_current(self, client, auth_headers):
        """The current password must match."""
        response = client.post(
            "/api/auth/change-password",
            json={"current_password": "nope", "new_password": "brandnew1"},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestInvitations:
    """Test invitation lifecycle."""

    def _invite(self, client, headers, email="new@test.com", role="RECEPTIONIST"):
        return client.post("/api/invitations", json={"email": email, "role": role}, headers=headers)

    def test_invite_and_accept(self, client, auth_headers, seed_company):
        """The invitee joins the inviting company with the invited role."""
        invitation = self._invite(client, auth_headers).json()
        assert invitation["status"] == "pending"

        preview = client.get(f"/api/invitations/verify/{invitation['token']}")
        assert preview.status_code == 200
        assert preview.json()["company_name"] == "Test Hotel"

        response = client.post(
            "/api/auth/accept-invitation",
            json={
                "token": invitation["token"],
                "first_name": "New",
                "last_name": "Hire",
                "password": "secret1",
            },
        )
        assert response.status_code == 201
        data = response.json()
        assert data["user"]["role"] == "RECEPTIONIST"
        assert data["user"]["company_id"] == seed_company["company"]["id"]

        again = client.post(
            "/api/auth/accept-invitation",
            json={"token": invitation["token"], "first_name": "N", "last_name": "H", "password": "secret1"},
        )
        assert again.status_code == 400

        listed = client.get("/api/invitations?status=accepted", headers=auth_headers).json()
        assert listed["meta"]["total"] == 1

    def test_expired_invitation_creates_no_user(self, client, db_session, auth_headers):
        """Accepting after expiry fails and writes nothing."""
        invitation = self._invite(client, auth_headers).json()
        row = db_session.get(Invitation, invitation["id"])
        row.expires_at = utcnow() - timedelta(minutes=1)
        db_session.commit()

        response = client.post(
            "/api/auth/accept-invitation",
            json={"token": invitation["token"], "first_name": "N", "last_name": "H", "password": "secret1"},
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Invitation has expired"
        assert db_session.scalar(select(User).where(User.email == "new@test.com")) is None

    def test_invite_registered_email_conflicts(self, client, auth_headers):
        """Emails of existing users cannot be invited."""
        response = self._invite(client, auth_headers, email="admin@test.com")
        assert response.status_code == 409

    def test_duplicate_pending_invitation_conflicts(self, client, auth_headers):
        """Only one pending invitation per email."""
        assert self._invite(client, auth_headers).status_code == 201
        assert self._invite(client, auth_headers).status_code == 409

    def test_manager_cannot_invite_admin(self, client, user_headers):
        """Only an ADMIN can hand out the ADMIN role."""
        manager = user_headers("MANAGER")
        assert self._invite(client, manager, role="ADMIN").status_code == 403
        assert self._invite(client, manager, role="WAITER").status_code == 201

    def test_staff_cannot_invite(self, client, user_headers):
        """Invitations need a management role."""
        staff = user_headers("STAFF")
        assert self._invite(client, staff).status_code == 403

    def test_cancelled_invitation_stops_resolving(self, client, auth_headers):
        """Cancelling soft-deletes the invitation and its token."""
        invitation = self._invite(client, auth_headers).json()
        assert client.delete(f"/api/invitations/{invitation['id']}", headers=auth_headers).status_code == 204
        assert client.get(f"/api/invitations/verify/{invitation['token']}").status_code == 404

    def test_resend_issues_new_token(self, client, auth_headers):
        """Resending replaces the token."""
        invitation = self._invite(client, auth_headers).json()
        response = client.post(f"/api/invitations/resend/{invitation['id']}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["token"] != invitation["token"]
        assert client.get(f"/api/invitations/verify/{invitation['token']}").status_code == 404

    def test_invitations_are_tenant_scoped(self, client, auth_headers, other_headers):
        """Invitations of company A are invisible to company B."""
        invitation = self._invite(client, auth_headers).json()
        assert client.delete(f"/api/invitations/{invitation['id']}", headers=other_headers).status_code == 404
        assert client.get("/api/invitations", headers=other_headers).json()["meta"]["total"] == 0
