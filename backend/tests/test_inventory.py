"""
Tests for categories, products and stock.
"""

import pytest

from hotel_api.services.domain import ProductService
from hotel_api.services.domain.product_service import apply_stock_delta
from shared.utils.exceptions import NotFoundError, ValidationError


class TestCategories:
    """Test category endpoints."""

    def test_create_normalizes_category_type(self, client, auth_headers):
        """Outlet names are validated and upper-cased."""
        response = client.post(
            "/api/categories", json={"name": "Drinks", "category_type": "minibar"}, headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["category_type"] == "MINIBAR"

    def test_unknown_category_type_rejected(self, client, auth_headers):
        """Only registered outlets are accepted."""
        response = client.post(
            "/api/categories", json={"name": "Cars", "category_type": "GARAGE"}, headers=auth_headers
        )
        assert response.status_code == 400
        assert "Valid values" in response.json()["detail"]

    def test_filter_by_category_type(self, client, auth_headers, seed_category):
        """categoryType narrows the list."""
        client.post("/api/categories", json={"name": "Snacks", "category_type": "MINIBAR"}, headers=auth_headers)
        body = client.get("/api/categories?categoryType=RESTAURANT", headers=auth_headers).json()
        assert [c["name"] for c in body["data"]] == ["Mains"]

    def test_delete_blocked_with_products(self, client, auth_headers, seed_product):
        """Categories holding live products cannot be deleted."""
        url = f"/api/categories/{seed_product['category_id']}"
        response = client.delete(url, headers=auth_headers)
        assert response.status_code == 403
        assert "1 product(s)" in response.json()["detail"]

        client.delete(f"/api/products/{seed_product['id']}", headers=auth_headers)
        assert client.delete(url, headers=auth_headers).status_code == 204

    def test_statistics(self, client, auth_headers, seed_product):
        """Per-category product counts split by stock."""
        client.post(
            "/api/products",
            json={"name": "Soup", "category_id": seed_product["category_id"], "price": 4, "stock": 0},
            headers=auth_headers,
        )
        stats = client.get(
            f"/api/categories/{seed_product['category_id']}/statistics", headers=auth_headers
        ).json()
        assert stats["totalProducts"] == 2
        assert stats["activeProducts"] == 1
        assert stats["outOfStockProducts"] == 1


class TestProducts:
    """Test product endpoints."""

    def test_create_product(self, seed_product):
        """Products expand their category; prices serialize as decimals."""
        assert seed_product["category"]["name"] == "Mains"
        assert float(seed_product["price"]) == 12.5
        assert seed_product["stock"] == 5

    def test_name_unique_per_category(self, client, auth_headers, seed_product):
        """The same name may not appear twice in one category."""
        response = client.post(
            "/api/products",
            json={"name": "Burger", "category_id": seed_product["category_id"], "price": 1},
            headers=auth_headers,
        )
        assert response.status_code == 409

    def test_same_name_other_category_allowed(self, client, auth_headers, seed_product):
        """Name uniqueness is per category."""
        other = client.post(
            "/api/categories", json={"name": "Kids", "category_type": "RESTAURANT"}, headers=auth_headers
        ).json()
        response = client.post(
            "/api/products",
            json={"name": "Burger", "category_id": other["id"], "price": 8},
            headers=auth_headers,
        )
        assert response.status_code == 201

    def test_blank_barcode_never_collides(self, client, auth_headers, seed_category):
        """Products without a barcode may share an empty value."""
        for name in ("Fries", "Salad"):
            response = client.post(
                "/api/products",
                json={"name": name, "category_id": seed_category["id"], "price": 3, "barcode": ""},
                headers=auth_headers,
            )
            assert response.status_code == 201
            assert response.json()["barcode"] is None

    def test_negative_stock_rejected_on_create(self, client, auth_headers, seed_category):
        """Stock starts at zero or more."""
        response = client.post(
            "/api/products",
            json={"name": "Bad", "category_id": seed_category["id"], "price": 1, "stock": -1},
            headers=auth_headers,
        )
        assert response.status_code == 422

    def test_missing_category_not_found(self, client, auth_headers):
        """category_id must exist in the company."""
        response = client.post(
            "/api/products", json={"name": "Ghost", "category_id": 9999, "price": 1}, headers=auth_headers
        )
        assert response.status_code == 404

    def test_filters(self, client, auth_headers, seed_product):
        """Products filter by outlet and stock."""
        minibar = client.post(
            "/api/categories", json={"name": "Bar", "category_type": "MINIBAR"}, headers=auth_headers
        ).json()
        client.post(
            "/api/products",
            json={"name": "Water", "category_id": minibar["id"], "price": 2, "stock": 0},
            headers=auth_headers,
        )

        restaurant = client.get("/api/products?categoryType=restaurant", headers=auth_headers).json()
        assert [p["name"] for p in restaurant["data"]] == ["Burger"]
        empty = client.get("/api/products?inStock=false", headers=auth_headers).json()
        assert [p["name"] for p in empty["data"]] == ["Water"]

    def test_low_and_out_of_stock(self, client, auth_headers, seed_product):
        """Threshold reports, lowest stock first."""
        low = client.get("/api/products/low-stock?threshold=5", headers=auth_headers).json()
        assert [p["name"] for p in low] == ["Burger"]
        assert client.get("/api/products/low-stock?threshold=4", headers=auth_headers).json() == []
        assert client.get("/api/products/out-of-stock", headers=auth_headers).json() == []


class TestStockAdjustment:
    """Test relative stock changes."""

    def test_adjust_stock(self, client, auth_headers, seed_product):
        """Deltas add to the current stock."""
        url = f"/api/products/{seed_product['id']}/stock"
        assert client.patch(url, json={"delta": 10, "reason": "delivery"}, headers=auth_headers).json()["stock"] == 15
        assert client.patch(url, json={"delta": -15}, headers=auth_headers).json()["stock"] == 0

    def test_stock_never_negative(self, client, auth_headers, seed_product):
        """A decrement past zero is refused and changes nothing."""
        url = f"/api/products/{seed_product['id']}/stock"
        response = client.patch(url, json={"delta": -6}, headers=auth_headers)
        assert response.status_code == 400
        assert response.json()["detail"] == "Insufficient stock"
        assert client.get(f"/api/products/{seed_product['id']}", headers=auth_headers).json()["stock"] == 5

    def test_missing_product_is_not_found(self, client, auth_headers):
        """Unknown ids are told apart from refused decrements."""
        response = client.patch("/api/products/9999/stock", json={"delta": -1}, headers=auth_headers)
        assert response.status_code == 404

    def test_foreign_product_is_not_found(self, client, other_headers, seed_product):
        """Stock of another company's product cannot be touched."""
        response = client.patch(
            f"/api/products/{seed_product['id']}/stock", json={"delta": 1}, headers=other_headers
        )
        assert response.status_code == 404

    def test_apply_stock_delta_is_conditional(self, db_session, seed_company, seed_product):
        """The single-statement update refuses to cross zero."""
        tenant_id = seed_company["company"]["id"]
        assert apply_stock_delta(db_session, seed_product["id"], -5, tenant_id) is True
        assert apply_stock_delta(db_session, seed_product["id"], -1, tenant_id) is False
        db_session.commit()

        product = ProductService(db_session).get(seed_product["id"], tenant_id)
        assert product.stock == 0

    def test_service_raises_domain_errors(self, db_session, seed_company, seed_product):
        """ProductService.adjust_stock reports 404 and insufficient stock."""
        tenant_id = seed_company["company"]["id"]
        actor_id = seed_company["user"]["id"]
        service = ProductService(db_session)

        with pytest.raises(ValidationError):
            service.adjust_stock(seed_product["id"], -100, tenant_id, actor_id)
        with pytest.raises(NotFoundError):
            service.adjust_stock(seed_product["id"], 1, tenant_id + 1000, actor_id)
