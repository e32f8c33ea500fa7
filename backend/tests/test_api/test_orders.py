"""
API tests for /api/stores/{subdomain}/orders
"""
import pytest

from store_admin.models import Order, StoreSettings


def order_body(**overrides):
    body = {
        "email": "buyer@example.com",
        "lineItems": [
            {"sku": "MUG-1", "title": "Ceramic Mug", "quantity": 2, "price": 12},
            {"sku": "CARD-1", "title": "Gift Card", "quantity": 1, "price": 25},
        ],
        "shippingAddress": {
            "firstName": "Ada",
            "lastName": "Lovelace",
            "address1": "12 Analytical St",
            "city": "London",
            "country": "GB",
            "zip": "N1 9GU",
        },
        "subtotalPrice": 49,
        "totalPrice": 49,
    }
    body.update(overrides)
    return body


@pytest.fixture
def tracked_settings(db_session, store):
    settings = StoreSettings(
        store_id=store.id,
        stock_settings={"trackInventory": True},
        inventory=[
            {"sku": "MUG-1", "quantity": 10, "reservedQuantity": 0, "trackQuantity": True},
            {"sku": "CARD-1", "quantity": 100, "reservedQuantity": 0, "trackQuantity": False},
        ],
    )
    db_session.add(settings)
    db_session.commit()
    return settings


def inventory_by_sku(db_session, store):
    db_session.expire_all()
    settings = db_session.query(StoreSettings).filter_by(store_id=store.id).one()
    return {item["sku"]: item for item in settings.inventory}


class TestCreateOrder:

    def test_sequential_numbers(self, client, owner_headers, store):
        first = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)
        second = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)

        assert first.status_code == 201
        assert first.json()["message"] == "Order created successfully"
        assert first.json()["order"]["orderNumber"] == "01000"
        assert second.json()["order"]["orderNumber"] == "01001"

    def test_number_uses_prefix_and_start_value(self, client, owner_headers, store, db_session):
        db_session.add(StoreSettings(
            store_id=store.id,
            order_settings={"orderNumberPrefix": "#", "orderNumberStartValue": 5000},
        ))
        db_session.commit()

        first = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)
        second = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)

        assert first.json()["order"]["orderNumber"] == "#05000"
        assert second.json()["order"]["orderNumber"] == "#05001"

    def test_order_fields(self, client, owner_headers, store):
        response = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)

        order = response.json()["order"]
        assert order["customerName"] == "Ada Lovelace"
        assert order["currency"] == "USD"
        assert order["status"] == "open"
        assert order["financialStatus"] == "pending"
        assert order["fulfillmentStatus"] == "unfulfilled"
        assert order["billingAddress"] == order["shippingAddress"]
        assert [item["position"] for item in order["lineItems"]] == [1, 2]
        assert order["lineItems"][0]["totalPrice"] == 24

    def test_reserves_tracked_inventory(self, client, owner_headers, store, tracked_settings, db_session):
        response = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)

        assert response.status_code == 201
        inventory = inventory_by_sku(db_session, store)
        assert inventory["MUG-1"]["quantity"] == 8
        assert inventory["MUG-1"]["reservedQuantity"] == 2
        # untracked SKU is left alone
        assert inventory["CARD-1"]["quantity"] == 100

    @pytest.mark.parametrize("overrides", [
        {"email": "not-an-email"},
        {"lineItems": []},
        {"totalPrice": -1},
        {"shippingAddress": {"firstName": "Ada"}},
    ])
    def test_invalid_input(self, client, owner_headers, store, overrides):
        response = client.post("/api/stores/demo/orders", json=order_body(**overrides), headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"


class TestListOrders:

    def test_filters_and_pagination(self, client, owner_headers, store):
        for email in ("a@example.com", "b@example.com", "c@example.com"):
            client.post("/api/stores/demo/orders", json=order_body(email=email), headers=owner_headers)

        response = client.get("/api/stores/demo/orders?limit=2", headers=owner_headers)

        data = response.json()
        assert len(data["orders"]) == 2
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
        # newest first
        assert data["orders"][0]["customerEmail"] == "c@example.com"

        filtered = client.get("/api/stores/demo/orders?email=b@example.com", headers=owner_headers).json()
        assert [o["customerEmail"] for o in filtered["orders"]] == ["b@example.com"]

        searched = client.get("/api/stores/demo/orders?search=01002", headers=owner_headers).json()
        assert searched["pagination"]["total"] == 1

    def test_status_filter(self, client, owner_headers, store):
        created = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers).json()
        client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers)
        client.delete(f"/api/stores/demo/orders?orderId={created['order']['id']}", headers=owner_headers)

        response = client.get("/api/stores/demo/orders?status=cancelled", headers=owner_headers)

        assert [o["id"] for o in response.json()["orders"]] == [created["order"]["id"]]


class TestUpdateOrder:

    def test_update_fields(self, client, owner_headers, store):
        order = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers).json()["order"]

        response = client.put(
            "/api/stores/demo/orders",
            json={
                "orderId": order["id"],
                "email": "new@example.com",
                "fulfillmentStatus": "fulfilled",
                "note": "Left at the door",
            },
            headers=owner_headers,
        )

        assert response.status_code == 200
        updated = response.json()["order"]
        assert response.json()["message"] == "Order updated successfully"
        assert updated["customerEmail"] == "new@example.com"
        assert updated["fulfillmentStatus"] == "fulfilled"
        assert updated["note"] == "Left at the door"
        assert updated["financialStatus"] == "pending"

    def test_order_id_is_required(self, client, owner_headers, store):
        response = client.put("/api/stores/demo/orders", json={"note": "x"}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Order ID is required"}

    def test_unknown_order(self, client, owner_headers, store):
        response = client.put("/api/stores/demo/orders", json={"orderId": "nope"}, headers=owner_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Order not found"}


class TestCancelOrder:

    def test_cancel_releases_inventory(self, client, owner_headers, store, tracked_settings, db_session):
        order = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers).json()["order"]

        response = client.delete(
            f"/api/stores/demo/orders?orderId={order['id']}&reason=inventory",
            headers=owner_headers,
        )

        assert response.status_code == 200
        cancelled = response.json()["order"]
        assert response.json()["message"] == "Order cancelled successfully"
        assert cancelled["status"] == "cancelled"
        assert cancelled["cancelReason"] == "inventory"
        assert cancelled["cancelledAt"] is not None

        inventory = inventory_by_sku(db_session, store)
        assert inventory["MUG-1"]["quantity"] == 10
        assert inventory["MUG-1"]["reservedQuantity"] == 0

    def test_default_reason_is_other(self, client, owner_headers, store):
        order = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers).json()["order"]

        response = client.delete(f"/api/stores/demo/orders?orderId={order['id']}", headers=owner_headers)

        assert response.json()["order"]["cancelReason"] == "other"

    def test_invalid_reason(self, client, owner_headers, store):
        order = client.post("/api/stores/demo/orders", json=order_body(), headers=owner_headers).json()["order"]

        response = client.delete(
            f"/api/stores/demo/orders?orderId={order['id']}&reason=boredom",
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid cancel reason: boredom"}

    def test_order_id_is_required(self, client, owner_headers, store):
        response = client.delete("/api/stores/demo/orders", headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Order ID is required"}

    def test_unknown_order(self, client, owner_headers, store, db_session):
        response = client.delete("/api/stores/demo/orders?orderId=nope", headers=owner_headers)

        assert response.status_code == 404
        assert db_session.query(Order).count() == 0
