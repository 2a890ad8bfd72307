"""
Tests for supermarket sales: lines, stock, completion and statistics.
"""

import pytest


@pytest.fixture
def shop_product(client, auth_headers):
    category = client.post(
        "/api/categories", json={"name": "Groceries", "category_type": "supermarket"}, headers=auth_headers
    ).json()
    response = client.post(
        "/api/products",
        json={"name": "Water", "category_id": category["id"], "price": "1.50", "stock": 10},
        headers=auth_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def ring_up(client, auth_headers, seed_client, shop_product):
    """Factory: sell the shop product to the seeded client."""
    def _ring_up(quantity=3, headers=None, **extra):
        return client.post(
            "/api/supermarket-orders",
            json={
                "client_id": seed_client["id"],
                "items": [{"product_id": shop_product["id"], "quantity": quantity}],
                **extra,
            },
            headers=headers or auth_headers,
        )

    return _ring_up


@pytest.fixture
def sale(ring_up):
    response = ring_up()
    assert response.status_code == 201, response.text
    return response.json()


def _stock(client, headers, product_id):
    return client.get(f"/api/products/{product_id}", headers=headers).json()["stock"]


class TestSales:
    """Test sale creation."""

    def test_sale_takes_stock(self, client, auth_headers, sale, shop_product):
        """Lines are priced from the product and stock goes down."""
        assert sale["status"] == "PENDING"
        assert sale["payment_status"] == "PENDING"
        assert float(sale["total"]) == 4.5
        assert "table_number" not in sale
        [line] = sale["items"]
        assert line["quantity"] == 3
        assert float(line["unit_price"]) == 1.5
        assert _stock(client, auth_headers, shop_product["id"]) == 7

    def test_restaurant_products_not_sold(self, client, auth_headers, seed_client, seed_product):
        """Only SUPERMARKET products can be rung up."""
        response = client.post(
            "/api/supermarket-orders",
            json={"client_id": seed_client["id"], "items": [{"product_id": seed_product["id"], "quantity": 1}]},
            headers=auth_headers,
        )
        assert response.status_code == 404

    def test_insufficient_stock(self, ring_up):
        """A sale cannot take more than is on the shelf."""
        assert ring_up(quantity=11).status_code == 400

    def test_order_date_kept(self, ring_up):
        """A back-dated sale keeps its order date."""
        response = ring_up(order_date="2026-01-15T10:00:00Z")
        assert response.status_code == 201
        assert response.json()["order_date"].startswith("2026-01-15")

    def test_roles(self, ring_up, user_headers):
        """Cashiers sell; waiters do not."""
        assert ring_up(headers=user_headers("CASHIER")).status_code == 201
        assert ring_up(headers=user_headers("WAITER")).status_code == 403

    def test_other_tenant_cannot_see_sale(self, client, other_headers, sale):
        """Sales are tenant scoped."""
        response = client.get(f"/api/supermarket-orders/{sale['id']}", headers=other_headers)
        assert response.status_code == 404


class TestSaleLines:
    """Test line edits and their stock effects."""

    def test_change_quantity_moves_stock(self, client, auth_headers, sale, shop_product):
        """Raising and lowering a quantity takes and returns stock."""
        url = f"/api/supermarket-orders/{sale['id']}/items/{sale['items'][0]['id']}"

        raised = client.patch(url, json={"quantity": 5}, headers=auth_headers)
        assert raised.status_code == 200
        assert float(raised.json()["total"]) == 7.5
        assert _stock(client, auth_headers, shop_product["id"]) == 5

        lowered = client.patch(url, json={"quantity": 1}, headers=auth_headers)
        assert float(lowered.json()["total"]) == 1.5
        assert _stock(client, auth_headers, shop_product["id"]) == 9

    def test_quantity_above_stock_rejected(self, client, auth_headers, sale, shop_product):
        """A refused increase changes neither the line nor the stock."""
        url = f"/api/supermarket-orders/{sale['id']}/items/{sale['items'][0]['id']}"
        response = client.patch(url, json={"quantity": 20}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient stock"
        assert _stock(client, auth_headers, shop_product["id"]) == 7
        order = client.get(f"/api/supermarket-orders/{sale['id']}", headers=auth_headers).json()
        assert order["items"][0]["quantity"] == 3

    def test_remove_line(self, client, auth_headers, sale, shop_product):
        """Removing a line returns its stock; the last line stays."""
        url = f"/api/supermarket-orders/{sale['id']}"
        added = client.post(
            f"{url}/items", json={"items": [{"product_id": shop_product["id"], "quantity": 2}]}, headers=auth_headers
        ).json()
        assert float(added["total"]) == 7.5
        assert _stock(client, auth_headers, shop_product["id"]) == 5

        second = added["items"][1]["id"]
        removed = client.delete(f"{url}/items/{second}", headers=auth_headers)
        assert float(removed.json()["total"]) == 4.5
        assert _stock(client, auth_headers, shop_product["id"]) == 7

        last = client.delete(f"{url}/items/{sale['items'][0]['id']}", headers=auth_headers)
        assert last.status_code == 400

    def test_unknown_line_not_found(self, client, auth_headers, sale):
        """Line ids must belong to the sale."""
        response = client.patch(
            f"/api/supermarket-orders/{sale['id']}/items/9999", json={"quantity": 2}, headers=auth_headers
        )
        assert response.status_code == 404


class TestSaleLifecycle:
    """Test completion, cancellation and statistics."""

    def test_complete_closes_sale(self, client, auth_headers, sale):
        """Completed sales are read-only."""
        url = f"/api/supermarket-orders/{sale['id']}"
        assert client.post(f"{url}/complete", headers=auth_headers).json()["status"] == "COMPLETED"
        assert client.post(f"{url}/complete", headers=auth_headers).status_code == 400
        assert client.post(f"{url}/cancel", headers=auth_headers).status_code == 400
        assert client.patch(url, json={"notes": "late"}, headers=auth_headers).status_code == 400

    def test_cancel_returns_stock(self, client, auth_headers, sale, shop_product):
        """Cancelling puts every line back on the shelf."""
        response = client.post(f"/api/supermarket-orders/{sale['id']}/cancel", headers=auth_headers)
        assert response.json()["status"] == "CANCELLED"
        assert _stock(client, auth_headers, shop_product["id"]) == 10

    def test_patch_cannot_cancel(self, client, auth_headers, sale):
        """Cancellation goes through the cancel action."""
        response = client.patch(
            f"/api/supermarket-orders/{sale['id']}", json={"status": "cancelled"}, headers=auth_headers
        )
        assert response.status_code == 400

    def test_payment_status_set_by_hand(self, client, auth_headers, sale):
        """Payment status is normalized against the registry."""
        url = f"/api/supermarket-orders/{sale['id']}"
        assert client.patch(url, json={"payment_status": "paid"}, headers=auth_headers).json()["payment_status"] == "PAID"
        assert client.patch(url, json={"payment_status": "owed"}, headers=auth_headers).status_code == 400

    def test_statistics_count_completed_revenue(self, client, auth_headers, sale, ring_up):
        """Revenue counts completed sales only."""
        pending = ring_up(quantity=1).json()
        cancelled = ring_up(quantity=2).json()
        client.post(f"/api/supermarket-orders/{sale['id']}/complete", headers=auth_headers)
        client.post(f"/api/supermarket-orders/{cancelled['id']}/cancel", headers=auth_headers)

        stats = client.get("/api/supermarket-orders/statistics", headers=auth_headers).json()
        assert stats == {
            "totalOrders": 3,
            "totalRevenue": 4.5,
            "pendingOrders": 1,
            "completedOrders": 1,
            "cancelledOrders": 1,
        }
        assert pending["status"] == "PENDING"

    def test_delete_and_restore(self, client, auth_headers, sale):
        """Deleted sales disappear and can be restored by an admin."""
        url = f"/api/supermarket-orders/{sale['id']}"
        assert client.delete(url, headers=auth_headers).status_code == 204
        assert client.get(url, headers=auth_headers).status_code == 404
        assert client.post(f"{url}/restore", headers=auth_headers).status_code == 200
        assert client.get(url, headers=auth_headers).status_code == 200
