"""
Tests for user management.
"""


def _create_user(client, headers, email="waiter@test.com", role="WAITER", password="secret1"):
    return client.post(
        "/api/users",
        json={"email": email, "password": password, "first_name": "W", "last_name": "User", "role": role},
        headers=headers,
    )


class TestUserManagement:
    """Test user CRUD and role guards."""

    def test_create_user(self, client, auth_headers, seed_company):
        """Users join the creator's company; the hash never leaves the API."""
        response = _create_user(client, auth_headers, email="Waiter@Test.com", role="waiter")
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "waiter@test.com"
        assert data["role"] == "WAITER"
        assert data["status"] == "active"
        assert data["company_id"] == seed_company["company"]["id"]
        assert "password" not in data

    def test_email_unique_across_companies(self, client, auth_headers, other_headers):
        """One email, one live account, whatever the company."""
        assert _create_user(client, auth_headers).status_code == 201
        response = _create_user(client, other_headers)
        assert response.status_code == 409

    def test_short_password_rejected(self, client, auth_headers):
        """Passwords need six characters."""
        assert _create_user(client, auth_headers, password="12345").status_code == 400

    def test_invalid_role_rejected(self, client, auth_headers):
        """Roles come from the registry."""
        assert _create_user(client, auth_headers, role="OWNER").status_code == 400

    def test_manager_cannot_create_admin(self, client, user_headers):
        """Only an ADMIN hands out ADMIN."""
        manager = user_headers("MANAGER")
        assert _create_user(client, manager, role="admin").status_code == 403
        assert _create_user(client, manager).status_code == 201

    def test_manager_cannot_touch_admin(self, client, user_headers, seed_company):
        """Managers cannot edit or delete administrators."""
        manager = user_headers("MANAGER")
        admin_id = seed_company["user"]["id"]
        assert client.patch(f"/api/users/{admin_id}", json={"first_name": "X"}, headers=manager).status_code == 403
        assert client.delete(f"/api/users/{admin_id}", headers=manager).status_code == 403

    def test_cannot_delete_self_or_change_own_role(self, client, auth_headers, seed_company):
        """Self-service is limited to harmless fields."""
        admin_id = seed_company["user"]["id"]
        assert client.delete(f"/api/users/{admin_id}", headers=auth_headers).status_code == 400
        response = client.patch(f"/api/users/{admin_id}", json={"role": "STAFF"}, headers=auth_headers)
        assert response.status_code == 400
        response = client.patch(f"/api/users/{admin_id}", json={"first_name": "Boss"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["first_name"] == "Boss"

    def test_deleted_user_cannot_login_and_frees_email(self, client, auth_headers):
        """Soft-deleted users lose access and their address can be reused."""
        user = _create_user(client, auth_headers).json()
        assert client.delete(f"/api/users/{user['id']}", headers=auth_headers).status_code == 204

        login = client.post("/api/auth/login", json={"email": "waiter@test.com", "password": "secret1"})
        assert login.status_code == 401
        assert _create_user(client, auth_headers).status_code == 201

    def test_visibility(self, client, auth_headers, user_headers, seed_company):
        """Non-admins see only themselves."""
        staff = user_headers("STAFF")
        me = client.get("/api/auth/profile", headers=staff).json()
        assert client.get(f"/api/users/{me['id']}", headers=staff).status_code == 200
        assert client.get(f"/api/users/{seed_company['user']['id']}", headers=staff).status_code == 403
        assert client.get(f"/api/users/{me['id']}", headers=auth_headers).status_code == 200

    def test_list_requires_management(self, client, auth_headers, user_headers):
        """Staff cannot list users; admins can filter by role."""
        staff = user_headers("STAFF")
        assert client.get("/api/users", headers=staff).status_code == 403
        body = client.get("/api/users?role=staff", headers=auth_headers).json()
        assert [u["email"] for u in body["data"]] == ["staff@test.com"]

    def test_users_are_tenant_scoped(self, client, auth_headers, other_headers):
        """Company B sees none of company A's users."""
        user = _create_user(client, auth_headers).json()
        assert client.get(f"/api/users/{user['id']}", headers=other_headers).status_code == 404
        assert client.get("/api/users", headers=other_headers).json()["meta"]["total"] == 1
