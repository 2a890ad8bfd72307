"""
Tests for restaurant tables, orders, items and payments.
"""

import pytest


@pytest.fixture
def place_order(client, auth_headers, seed_client, seed_product):
    """Factory: place an order of the seeded product."""
    def _place_order(quantity=2, headers=None, **extra):
        return client.post(
            "/api/restaurant-orders",
            json={
                "client_id": seed_client["id"],
                "items": [{"product_id": seed_product["id"], "quantity": quantity}],
                **extra,
            },
            headers=headers or auth_headers,
        )

    return _place_order


@pytest.fixture
def seed_order(place_order):
    response = place_order()
    assert response.status_code == 201, response.text
    return response.json()


def _stock(client, headers, product_id):
    return client.get(f"/api/products/{product_id}", headers=headers).json()["stock"]


class TestOrders:
    """Test order placement and stock."""

    def test_order_takes_stock_and_prices_lines(self, client, auth_headers, seed_order, seed_product):
        """Lines use the current product price; stock goes down."""
        assert seed_order["status"] == "PENDING"
        assert seed_order["payment_status"] == "PENDING"
        assert seed_order["service_mode"] == "WALK_IN"
        assert float(seed_order["total"]) == 25.0
        assert float(seed_order["balance"]) == 25.0
        [line] = seed_order["items"]
        assert line["quantity"] == 2
        assert float(line["unit_price"]) == 12.5
        assert _stock(client, auth_headers, seed_product["id"]) == 3

    def test_insufficient_stock_writes_nothing(self, client, auth_headers, place_order, seed_product):
        """An order larger than the stock is refused as a whole."""
        response = place_order(quantity=6)
        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]
        assert _stock(client, auth_headers, seed_product["id"]) == 5
        assert client.get("/api/restaurant-orders", headers=auth_headers).json()["meta"]["total"] == 0

    def test_empty_order_rejected(self, client, auth_headers, seed_client):
        """Orders need at least one line."""
        response = client.post(
            "/api/restaurant-orders",
            json={"client_id": seed_client["id"], "items": []},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_non_restaurant_product_not_found(self, client, auth_headers, seed_client):
        """Only RESTAURANT products can be ordered."""
        category = client.post(
            "/api/categories", json={"name": "Bar", "category_type": "MINIBAR"}, headers=auth_headers
        ).json()
        product = client.post(
            "/api/products",
            json={"name": "Soda", "category_id": category["id"], "price": 2, "stock": 10},
            headers=auth_headers,
        ).json()
        response = client.post(
            "/api/restaurant-orders",
            json={"client_id": seed_client["id"], "items": [{"product_id": product["id"], "quantity": 1}]},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_stay_of_other_client_rejected(self, client, auth_headers, place_order, seed_room):
        """Room charges must match the stay's guest."""
        other = client.post(
            "/api/clients", json={"first_name": "Other", "last_name": "Guest"}, headers=auth_headers
        ).json()
        stay = client.post(
            "/api/stays",
            json={
                "room_id": seed_room["id"],
                "client_id": other["id"],
                "check_in_date": "2030-01-01",
                "check_out_date": "2030-01-03",
            },
            headers=auth_headers,
        ).json()
        response = place_order(stay_id=stay["id"], service_mode="ROOM_SERVICE")
        assert response.status_code == 400

    def test_add_and_remove_items(self, client, auth_headers, seed_order, seed_product):
        """Adding and removing lines keeps total and stock in step."""
        url = f"/api/restaurant-orders/{seed_order['id']}"
        added = client.post(
            f"{url}/items",
            json={"items": [{"product_id": seed_product["id"], "quantity": 1}]},
            headers=auth_headers,
        ).json()
        assert float(added["total"]) == 37.5
        assert len(added["items"]) == 2
        assert _stock(client, auth_headers, seed_product["id"]) == 2

        first_line = added["items"][0]["id"]
        removed = client.delete(f"{url}/items/{first_line}", headers=auth_headers)
        assert removed.status_code == 200
        assert float(removed.json()["total"]) == 12.5
        assert _stock(client, auth_headers, seed_product["id"]) == 4

        last_line = removed.json()["items"][0]["id"]
        response = client.delete(f"{url}/items/{last_line}", headers=auth_headers)
        assert response.status_code == 400
        assert "Cancel the order instead" in response.json()["detail"]

    def test_cancel_restores_stock(self, client, auth_headers, seed_order, seed_product):
        """Cancelling gives every line's stock back."""
        url = f"/api/restaurant-orders/{seed_order['id']}/cancel"
        response = client.post(url, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert _stock(client, auth_headers, seed_product["id"]) == 5
        assert client.post(url, headers=auth_headers).status_code == 400

    def test_status_update_cannot_cancel(self, client, auth_headers, seed_order):
        """Cancellation only goes through the cancel action."""
        response = client.patch(
            f"/api/restaurant-orders/{seed_order['id']}", json={"status": "CANCELLED"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_status_progression(self, client, auth_headers, seed_order):
        """Kitchen statuses can be set by PATCH."""
        response = client.patch(
            f"/api/restaurant-orders/{seed_order['id']}", json={"status": "preparing"}, headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "PREPARING"

    def test_receptionist_cannot_order(self, place_order, user_headers):
        """Order taking needs a restaurant role."""
        receptionist = user_headers("RECEPTIONIST")
        assert place_order(headers=receptionist).status_code == 403

    def test_waiter_can_order(self, place_order, user_headers):
        """Waiters take orders."""
        waiter = user_headers("WAITER")
        assert place_order(headers=waiter).status_code == 201


class TestPayments:
    """Test payments and their effect on order state."""

    def _pay(self, client, headers, order_id, amount, method="CASH"):
        return client.post(
            f"/api/restaurant-orders/{order_id}/pay",
            json={"amount": amount, "payment_method": method},
            headers=headers,
        )

    def test_partial_then_full_payment(self, client, auth_headers, seed_order):
        """Partial payments accumulate; settling completes the order."""
        partial = self._pay(client, auth_headers, seed_order["id"], "10.00").json()
        assert partial["payment_status"] == "PARTIAL"
        assert float(partial["balance"]) == 15.0

        paid = self._pay(client, auth_headers, seed_order["id"], "15.00", method="card").json()
        assert paid["payment_status"] == "PAID"
        assert paid["status"] == "COMPLETED"
        assert [p["payment_method"] for p in paid["payments"]] == ["CASH", "CARD"]

    def test_overpayment_rejected(self, client, auth_headers, seed_order):
        """Payments cannot exceed the balance."""
        response = self._pay(client, auth_headers, seed_order["id"], "25.01")
        assert response.status_code == 400
        assert response.json()["detail"] == "Payment amount exceeds order balance"

    def test_unknown_payment_method(self, client, auth_headers, seed_order):
        """Payment methods come from the registry."""
        assert self._pay(client, auth_headers, seed_order["id"], "5", method="BARTER").status_code == 400

    def test_paid_order_cannot_be_cancelled(self, client, auth_headers, seed_order):
        """Orders with payments need a refund first."""
        self._pay(client, auth_headers, seed_order["id"], "5")
        response = client.post(f"/api/restaurant-orders/{seed_order['id']}/cancel", headers=auth_headers)
        assert response.status_code == 400
        assert "refund" in response.json()["detail"]
        assert client.delete(f"/api/restaurant-orders/{seed_order['id']}", headers=auth_headers).status_code == 400

    def test_statistics_exclude_cancelled_revenue(self, client, auth_headers, seed_order, place_order):
        """Revenue counts every order except cancelled ones."""
        second = place_order(quantity=1).json()
        client.post(f"/api/restaurant-orders/{second['id']}/cancel", headers=auth_headers)
        self._pay(client, auth_headers, seed_order["id"], "25")

        stats = client.get("/api/restaurant-orders/statistics", headers=auth_headers).json()
        assert stats["totalOrders"] == 2
        assert stats["totalRevenue"] == 25.0
        assert stats["completedOrders"] == 1
        assert stats["pendingOrders"] == 0


class TestTables:
    """Test table seating and reservations."""

    def test_assign_and_clear(self, client, auth_headers, seed_table, seed_order):
        """A seated table is OCCUPIED until its closed order is cleared."""
        url = f"/api/restaurant-tables/{seed_table['id']}"
        assigned = client.post(f"{url}/assign", json={"order_id": seed_order["id"]}, headers=auth_headers)
        assert assigned.status_code == 200
        assert assigned.json()["status"] == "OCCUPIED"
        assert assigned.json()["current_order"]["id"] == seed_order["id"]

        order = client.get(f"/api/restaurant-orders/{seed_order['id']}", headers=auth_headers).json()
        assert order["table_number"] == "T1"

        busy = client.post(f"{url}/clear", headers=auth_headers)
        assert busy.status_code == 400
        assert "Complete or cancel the order first" in busy.json()["detail"]

        client.post(f"/api/restaurant-orders/{seed_order['id']}/cancel", headers=auth_headers)
        cleared = client.post(f"{url}/clear", headers=auth_headers)
        assert cleared.status_code == 200
        assert cleared.json()["status"] == "AVAILABLE"
        assert cleared.json()["current_order_id"] is None

    def test_order_seated_once(self, client, auth_headers, seed_table, seed_order):
        """An order occupies at most one table."""
        other = client.post(
            "/api/restaurant-tables", json={"table_number": "T2", "capacity": 2}, headers=auth_headers
        ).json()
        client.post(f"/api/restaurant-tables/{seed_table['id']}/assign", json={"order_id": seed_order["id"]}, headers=auth_headers)
        response = client.post(
            f"/api/restaurant-tables/{other['id']}/assign", json={"order_id": seed_order["id"]}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "already assigned" in response.json()["detail"]
        assert client.get(f"/api/restaurant-tables/{other['id']}", headers=auth_headers).json()["status"] == "AVAILABLE"

    def test_occupied_table_guards(self, client, auth_headers, seed_table, seed_order):
        """Occupied tables cannot be freed by hand or deleted."""
        url = f"/api/restaurant-tables/{seed_table['id']}"
        client.post(f"{url}/assign", json={"order_id": seed_order["id"]}, headers=auth_headers)
        assert client.patch(url, json={"status": "AVAILABLE"}, headers=auth_headers).status_code == 400
        assert client.delete(url, headers=auth_headers).status_code == 400

    def test_reserve_and_unreserve(self, client, auth_headers, seed_table):
        """Reservations toggle between AVAILABLE and RESERVED."""
        url = f"/api/restaurant-tables/{seed_table['id']}"
        assert client.post(f"{url}/reserve", headers=auth_headers).json()["status"] == "RESERVED"
        assert client.post(f"{url}/reserve", headers=auth_headers).status_code == 400
        assert client.post(f"{url}/unreserve", headers=auth_headers).json()["status"] == "AVAILABLE"
        assert client.post(f"{url}/unreserve", headers=auth_headers).status_code == 400

    def test_reserved_table_cannot_be_assigned(self, client, auth_headers, seed_table, seed_order):
        """Reserved tables are not available for seating."""
        url = f"/api/restaurant-tables/{seed_table['id']}"
        client.post(f"{url}/reserve", headers=auth_headers)
        response = client.post(f"{url}/assign", json={"order_id": seed_order["id"]}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Table is not available"

    def test_statistics(self, client, auth_headers, seed_table):
        """Occupancy rate is formatted with two decimals."""
        client.post("/api/restaurant-tables", json={"table_number": "T2", "capacity": 2}, headers=auth_headers)
        client.post(f"/api/restaurant-tables/{seed_table['id']}/reserve", headers=auth_headers)
        stats = client.get("/api/restaurant-tables/statistics", headers=auth_headers).json()
        assert stats == {
            "totalTables": 2,
            "availableTables": 1,
            "occupiedTables": 0,
            "reservedTables": 1,
            "occupancyRate": "0.00",
        }

    def test_min_capacity_filter(self, client, auth_headers, seed_table):
        """minCapacity keeps tables that seat at least that many."""
        client.post("/api/restaurant-tables", json={"table_number": "T2", "capacity": 2}, headers=auth_headers)
        body = client.get("/api/restaurant-tables?minCapacity=3", headers=auth_headers).json()
        assert [t["table_number"] for t in body["data"]] == ["T1"]
