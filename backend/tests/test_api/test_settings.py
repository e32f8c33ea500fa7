"""
API tests for /api/stores/{subdomain}/settings
"""
import pytest

from store_admin.models import StoreSettings


class TestGetSettings:

    def test_defaults_without_settings_row(self, client, owner_headers, store):
        response = client.get("/api/stores/demo/settings", headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["subdomain"] == "demo"
        settings = data["settings"]
        assert settings["defaultCurrency"] == "USD"
        assert settings["checkoutSettings"] == {}
        assert len(settings["currencies"]) == 1
        assert settings["currencies"][0]["code"] == "USD"
        assert settings["currencies"][0]["rate"] == 1

    def test_foreign_store(self, client, owner_headers, foreign_store):
        response = client.get(f"/api/stores/{foreign_store.subdomain}/settings", headers=owner_headers)

        assert response.status_code == 404


class TestUpdateSettings:

    def test_store_fields_and_blobs_are_saved(self, client, owner_headers, store, db_session):
        body = {
            "name": "Renamed Store",
            "description": "Now with plants",
            "defaultCurrency": "EUR",
            "timeZone": "Europe/Berlin",
            "weightUnit": "kg",
            "businessEmail": "billing@example.com",
            "orderSettings": {"orderNumberPrefix": "#", "orderNumberFormat": "sequential"},
            "stockSettings": {"trackInventory": True},
            "shippingZones": [{"name": "EU", "countries": ["DE", "FR"], "rates": []}],
            "giftCardSettings": {"enabled": True, "denominations": [25, 50]},
        }

        response = client.put("/api/stores/demo/settings", json=body, headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed Store"
        assert data["description"] == "Now with plants"
        assert data["currency"] == "EUR"

        settings = data["settings"]
        assert settings["timeZone"] == "Europe/Berlin"
        assert settings["weightUnit"] == "kg"
        assert settings["orderSettings"]["orderNumberPrefix"] == "#"
        assert settings["stockSettings"]["trackInventory"] is True
        assert settings["shippingZones"][0]["countries"] == ["DE", "FR"]
        assert settings["giftCardSettings"] == {"enabled": True, "denominations": [25, 50]}

        row = db_session.query(StoreSettings).filter_by(store_id=store.id).one()
        assert row.order_settings["orderNumberPrefix"] == "#"

    def test_get_reflects_saved_settings(self, client, owner_headers, store):
        client.put(
            "/api/stores/demo/settings",
            json={"defaultCurrency": "GBP", "checkoutSettings": {"requirePhone": True}},
            headers=owner_headers,
        )

        response = client.get("/api/stores/demo/settings", headers=owner_headers)

        settings = response.json()["settings"]
        assert settings["defaultCurrency"] == "GBP"
        assert settings["currencies"][0]["code"] == "GBP"
        assert settings["checkoutSettings"] == {"requirePhone": True}

    def test_payments_key_is_stored_as_payment_methods(self, client, owner_headers, store):
        response = client.put(
            "/api/stores/demo/settings",
            json={"payments": {"stripe": {"enabled": True}}},
            headers=owner_headers,
        )

        assert response.status_code == 200
        assert response.json()["settings"]["paymentMethods"] == {"stripe": {"enabled": True}}

    def test_partial_update_keeps_other_fields(self, client, owner_headers, store):
        client.put("/api/stores/demo/settings", json={"weightUnit": "lb"}, headers=owner_headers)
        client.put("/api/stores/demo/settings", json={"lengthUnit": "in"}, headers=owner_headers)

        settings = client.get("/api/stores/demo/settings", headers=owner_headers).json()["settings"]

        assert settings["weightUnit"] == "lb"
        assert settings["lengthUnit"] == "in"

    @pytest.mark.parametrize("body", [
        {"weightUnit": "stone"},
        {"businessEmail": "not-an-email"},
        {"defaultCurrency": "EURO"},
        {"currencies": [{"code": "USD", "rate": 0}]},
        {"orderSettings": {"orderNumberFormat": "alphabetical"}},
        {"stockSettings": {"stockDisplayFormat": "vague"}},
    ])
    def test_invalid_input(self, client, owner_headers, store, body):
        response = client.put("/api/stores/demo/settings", json=body, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"
        assert response.json()["details"]
