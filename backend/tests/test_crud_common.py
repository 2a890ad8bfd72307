"""
Tests for the behaviour every tenant-scoped resource shares:
pagination, search, sorting, tenant isolation and restore.
"""

import pytest


def _create_room_types(client, headers, count, prefix="Type"):
    for i in range(count):
        response = client.post(
            "/api/room-types",
            json={"name": f"{prefix} {i:02d}", "base_price": 10 + i, "max_occupancy": 1 + i % 4},
            headers=headers,
        )
        assert response.status_code == 201


class TestPagination:
    """Test the list envelope."""

    def test_last_page_is_partial(self, client, auth_headers):
        """25 rows, limit 10: page 3 holds the last 5."""
        _create_room_types(client, auth_headers, 25)

        response = client.get("/api/room-types?page=3&limit=10", headers=auth_headers)
        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 5
        assert body["meta"] == {"total": 25, "page": 3, "limit": 10, "totalPages": 3}

    def test_defaults(self, client, auth_headers):
        """Page 1 with 10 rows unless asked otherwise."""
        _create_room_types(client, auth_headers, 12)
        body = client.get("/api/room-types", headers=auth_headers).json()
        assert len(body["data"]) == 10
        assert body["meta"]["page"] == 1
        assert body["meta"]["limit"] == 10

    def test_page_past_the_end_is_empty(self, client, auth_headers):
        """Out-of-range pages return no rows, not an error."""
        _create_room_types(client, auth_headers, 3)
        body = client.get("/api/room-types?page=5", headers=auth_headers).json()
        assert body["data"] == []
        assert body["meta"]["total"] == 3

    def test_empty_list(self, client, auth_headers):
        """No rows: zero pages."""
        body = client.get("/api/room-types", headers=auth_headers).json()
        assert body["meta"]["total"] == 0
        assert body["meta"]["totalPages"] == 0

    @pytest.mark.parametrize("query", ["limit=0", "limit=101", "page=0"])
    def test_out_of_range_params_rejected(self, client, auth_headers, query):
        """limit is 1..100, page starts at 1."""
        assert client.get(f"/api/room-types?{query}", headers=auth_headers).status_code == 422


class TestSearchAndSort:
    """Test free-text search and sorting."""

    def test_search_is_case_insensitive(self, client, auth_headers):
        """Search matches a substring of the search fields."""
        _create_room_types(client, auth_headers, 3, prefix="Deluxe")
        _create_room_types(client, auth_headers, 2, prefix="Budget")
        body = client.get("/api/room-types?search=deLUXE", headers=auth_headers).json()
        assert body["meta"]["total"] == 3

    def test_search_treats_wildcards_literally(self, client, auth_headers):
        """% and _ in the term do not act as LIKE wildcards."""
        _create_room_types(client, auth_headers, 2)
        body = client.get("/api/room-types?search=%25", headers=auth_headers).json()
        assert body["meta"]["total"] == 0

    def test_sort_by_camel_case_field(self, client, auth_headers):
        """sortBy accepts camelCase names."""
        _create_room_types(client, auth_headers, 3)
        body = client.get(
            "/api/room-types?sortBy=basePrice&sortOrder=desc", headers=auth_headers
        ).json()
        prices = [float(row["base_price"]) for row in body["data"]]
        assert prices == sorted(prices, reverse=True)

    def test_unknown_sort_field_uses_default_order(self, client, auth_headers):
        """Columns outside the sortable list fall back to newest first."""
        _create_room_types(client, auth_headers, 3)
        response = client.get("/api/room-types?sortBy=password", headers=auth_headers)
        assert response.status_code == 200
        names = [row["name"] for row in response.json()["data"]]
        assert names == ["Type 02", "Type 01", "Type 00"]


class TestTenantIsolation:
    """Rows of one company never reach another."""

    def test_lists_are_scoped(self, client, auth_headers, other_headers):
        """Each company only sees its own rows."""
        _create_room_types(client, auth_headers, 2)
        _create_room_types(client, other_headers, 1, prefix="Other")

        assert client.get("/api/room-types", headers=auth_headers).json()["meta"]["total"] == 2
        other = client.get("/api/room-types", headers=other_headers).json()
        assert [row["name"] for row in other["data"]] == ["Other 00"]

    @pytest.mark.parametrize("method", ["get", "patch", "delete"])
    def test_foreign_id_is_not_found(self, client, other_headers, seed_room_type, method):
        """Another company's id behaves exactly like a missing id."""
        url = f"/api/room-types/{seed_room_type['id']}"
        kwargs = {"json": {"name": "Hijack"}} if method == "patch" else {}
        response = getattr(client, method)(url, headers=other_headers, **kwargs)
        assert response.status_code == 404
        assert response.json()["detail"] == "Room type not found"

    def test_foreign_parent_reference_is_not_found(self, client, other_headers, seed_room_type):
        """A child cannot point at another company's parent."""
        response = client.post(
            "/api/rooms",
            json={"room_number": "999", "room_type_id": seed_room_type["id"]},
            headers=other_headers,
        )
        assert response.status_code == 404

    def test_foreign_rows_untouched(self, client, auth_headers, other_headers, seed_room_type):
        """A refused foreign delete leaves the row alive."""
        client.delete(f"/api/room-types/{seed_room_type['id']}", headers=other_headers)
        assert client.get(f"/api/room-types/{seed_room_type['id']}", headers=auth_headers).status_code == 200


class TestRestore:
    """Test the generic restore endpoint."""

    def test_restore_room_type(self, client, auth_headers, seed_room_type):
        """A restored row is readable again."""
        room_type_id = seed_room_type["id"]
        client.delete(f"/api/room-types/{room_type_id}", headers=auth_headers)

        response = client.post(f"/api/room-types/{room_type_id}/restore", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["entity_type"] == "room-types"
        assert data["entity_id"] == room_type_id
        assert client.get(f"/api/room-types/{room_type_id}", headers=auth_headers).status_code == 200

    def test_restore_rechecks_natural_key(self, client, auth_headers, seed_room_type):
        """Restoring a row whose name was reused meanwhile conflicts."""
        client.delete(f"/api/room-types/{seed_room_type['id']}", headers=auth_headers)
        client.post(
            "/api/room-types",
            json={"name": "Suite", "base_price": 150, "max_occupancy": 2},
            headers=auth_headers,
        )
        response = client.post(f"/api/room-types/{seed_room_type['id']}/restore", headers=auth_headers)
        assert response.status_code == 409

    def test_restore_live_row_is_not_found(self, client, auth_headers, seed_room_type):
        """Only deleted rows can be restored."""
        response = client.post(f"/api/room-types/{seed_room_type['id']}/restore", headers=auth_headers)
        assert response.status_code == 404

    def test_restore_unknown_entity_type(self, client, auth_headers):
        """Unknown entity types are a validation error."""
        response = client.post("/api/widgets/1/restore", headers=auth_headers)
        assert response.status_code == 400

    def test_restore_requires_admin(self, client, auth_headers, user_headers, seed_room_type):
        """Managers cannot restore."""
        manager = user_headers("MANAGER")
        client.delete(f"/api/room-types/{seed_room_type['id']}", headers=auth_headers)
        response = client.post(f"/api/room-types/{seed_room_type['id']}/restore", headers=manager)
        assert response.status_code == 403

    def test_restore_is_tenant_scoped(self, client, auth_headers, other_headers, seed_room_type):
        """Company B cannot restore company A's rows."""
        client.delete(f"/api/room-types/{seed_room_type['id']}", headers=auth_headers)
        response = client.post(f"/api/room-types/{seed_room_type['id']}/restore", headers=other_headers)
        assert response.status_code == 404
