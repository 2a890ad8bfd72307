"""
Tests for client endpoints.
"""


def _create_client(client, headers, **fields):
    payload = {"first_name": "Luis", "last_name": "Perez", **fields}
    return client.post("/api/clients", json=payload, headers=headers)


class TestClientCrud:
    """Test client creation and uniqueness."""

    def test_defaults(self, seed_client):
        """New clients are WALK_IN without an account."""
        assert seed_client["customer_type"] == "WALK_IN"
        assert seed_client["full_name"] == "Ana Guest"
        assert seed_client["has_account"] is False
        assert float(seed_client["current_balance"]) == 0

    def test_email_and_phone_unique(self, client, auth_headers, seed_client):
        """Email and phone may each belong to one live client."""
        assert _create_client(client, auth_headers, email="ana@guest.com").status_code == 409
        assert _create_client(client, auth_headers, phone="+15550001").status_code == 409
        assert _create_client(client, auth_headers).status_code == 201
        assert _create_client(client, auth_headers).status_code == 201

    def test_blank_phone_means_no_phone(self, client, auth_headers, seed_client):
        """Empty phone and id number are stored as missing, so they never collide."""
        first = _create_client(client, auth_headers, phone="", id_number="")
        second = _create_client(client, auth_headers, phone="", id_number="")
        assert first.status_code == 201
        assert second.status_code == 201
        assert second.json()["phone"] is None
        assert second.json()["id_number"] is None

        cleared = client.patch(
            f"/api/clients/{seed_client['id']}", json={"phone": ""}, headers=auth_headers
        )
        assert cleared.status_code == 200
        assert cleared.json()["phone"] is None

    def test_any_user_can_edit_only_management_deletes(self, client, user_headers, seed_client):
        """Front office staff edit clients; deletion needs management."""
        waiter = user_headers("WAITER")
        response = client.patch(
            f"/api/clients/{seed_client['id']}", json={"phone": "+15559999"}, headers=waiter
        )
        assert response.status_code == 200
        assert response.json()["phone"] == "+15559999"
        assert client.delete(f"/api/clients/{seed_client['id']}", headers=waiter).status_code == 403

    def test_invalid_customer_type(self, client, auth_headers):
        """customer_type is checked against the registry."""
        assert _create_client(client, auth_headers, customer_type="VIP").status_code == 400


class TestCorporateClients:
    """Test sponsor relationships."""

    def test_employee_of_corporate_sponsor(self, client, auth_headers):
        """Employees reference a CORPORATE client as sponsor."""
        sponsor = _create_client(
            client, auth_headers, first_name="Acme", last_name="Corp", customer_type="corporate"
        ).json()
        employee = _create_client(
            client,
            auth_headers,
            customer_type="CORPORATE",
            sponsor_company_id=sponsor["id"],
            employee_id="E-7",
        )
        assert employee.status_code == 201
        assert employee.json()["sponsor_company"]["id"] == sponsor["id"]

        listed = client.get(
            f"/api/clients/corporate?sponsorCompanyId={sponsor['id']}", headers=auth_headers
        ).json()
        assert [c["employee_id"] for c in listed] == ["E-7"]

    def test_sponsor_must_be_corporate(self, client, auth_headers, seed_client):
        """Walk-in clients cannot sponsor."""
        response = _create_client(client, auth_headers, sponsor_company_id=seed_client["id"])
        assert response.status_code == 400

    def test_client_cannot_sponsor_itself(self, client, auth_headers):
        """Self-sponsorship is rejected."""
        sponsor = _create_client(client, auth_headers, customer_type="CORPORATE").json()
        response = client.patch(
            f"/api/clients/{sponsor['id']}",
            json={"sponsor_company_id": sponsor["id"]},
            headers=auth_headers,
        )
        assert response.status_code == 400


class TestClientQueries:
    """Test search, stats and balances."""

    def test_quick_search(self, client, auth_headers, seed_client):
        """Search matches email or phone fragments."""
        by_phone = client.get("/api/clients/search?q=0001", headers=auth_headers).json()
        assert [c["id"] for c in by_phone] == [seed_client["id"]]
        by_email = client.get("/api/clients/search?q=GUEST.com", headers=auth_headers).json()
        assert len(by_email) == 1
        assert client.get("/api/clients/search?q=zzz", headers=auth_headers).json() == []

    def test_stats(self, client, auth_headers, seed_client):
        """Company-wide counts per customer type."""
        _create_client(client, auth_headers, customer_type="REGULAR", has_account=True, credit_limit=500)
        stats = client.get("/api/clients/stats", headers=auth_headers).json()
        assert stats["totalClients"] == 2
        assert stats["walkInClients"] == 1
        assert stats["regularClients"] == 1
        assert stats["clientsWithAccount"] == 1
        assert stats["totalOutstandingBalance"] == 0

    def test_balance(self, client, auth_headers):
        """Available credit is the limit minus the balance."""
        account = _create_client(client, auth_headers, has_account=True, credit_limit="250.00").json()
        balance = client.get(f"/api/clients/{account['id']}/balance", headers=auth_headers).json()
        assert float(balance["credit_limit"]) == 250
        assert float(balance["available_credit"]) == 250

    def test_statistics_without_activity(self, client, auth_headers, seed_client):
        """A new client has no stays or orders."""
        stats = client.get(f"/api/clients/{seed_client['id']}/statistics", headers=auth_headers).json()
        assert stats["totalStays"] == 0
        assert stats["totalRestaurantOrders"] == 0
        assert stats["lastStay"] is None

    def test_filter_by_customer_type(self, client, auth_headers, seed_client):
        """customerType filters the list."""
        _create_client(client, auth_headers, customer_type="REGULAR")
        body = client.get("/api/clients?customerType=regular", headers=auth_headers).json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["customer_type"] == "REGULAR"
