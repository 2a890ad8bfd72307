"""
Tests for the lookup registry and its endpoints.
"""

import pytest

from hotel_api.services import lookup
from shared.utils.exceptions import ValidationError


class TestLookupRegistry:
    """Test validation helpers."""

    def test_validate_normalizes_case(self):
        """Values are stored upper or lower case per field."""
        assert lookup.validate("user_role", " manager ") == "MANAGER"
        assert lookup.validate("stay_status", "CHECKED_IN") == "checked_in"

    def test_validate_lists_valid_values(self):
        """The error names every allowed value."""
        with pytest.raises(ValidationError) as exc_info:
            lookup.validate("payment_method", "BARTER")
        assert "CASH" in exc_info.value.detail
        assert exc_info.value.status_code == 400

    def test_is_valid(self):
        """Membership test without raising."""
        assert lookup.is_valid("room_status", "cleaning") is True
        assert lookup.is_valid("room_status", "BROKEN") is False
        assert lookup.is_valid("room_status", None) is False

    def test_unknown_field(self):
        """Unregistered fields are a validation error."""
        with pytest.raises(ValidationError):
            lookup.get_values("favourite_colour")

    def test_defaults_are_valid_values(self):
        """Every default belongs to its field's allow-list."""
        for field, default in lookup.get_defaults().items():
            assert default in lookup.get_values(field)


class TestLookupEndpoints:
    """Test the read-only lookup API."""

    def test_all_lookups(self, client, auth_headers):
        """All fields with their values and defaults."""
        body = client.get("/api/lookup", headers=auth_headers).json()
        assert "MANAGER" in body["values"]["user_role"]
        assert body["defaults"]["room_status"] == "AVAILABLE"

    def test_single_field(self, client, auth_headers):
        """One field with its default."""
        body = client.get("/api/lookup/customer_type", headers=auth_headers).json()
        assert body == {
            "field": "customer_type",
            "values": ["WALK_IN", "CORPORATE", "REGULAR"],
            "default": "WALK_IN",
        }

    def test_unknown_field_not_found(self, client, auth_headers):
        """Unknown fields 404."""
        response = client.get("/api/lookup/nope", headers=auth_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Lookup field not found"

    def test_requires_authentication(self, client):
        """Lookups are only for signed-in users."""
        assert client.get("/api/lookup").status_code == 401
