"""
API tests for /api/stores and session handling
"""
from jose import jwt

from store_admin.models import Store


class TestAuthentication:
    """Session token handling shared by every store route"""

    def test_missing_token_is_unauthorized(self, client, store):
        response = client.get("/api/stores")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_expired_token_is_rejected(self, client, owner, headers_for):
        response = client.get("/api/stores", headers=headers_for(owner.id, owner.email, expires_in=-60))

        assert response.status_code == 401
        assert response.json()["error"] == "Token has expired"

    def test_token_signed_with_other_secret_is_rejected(self, client, owner):
        token = jwt.encode({"id": owner.id, "email": owner.email}, "not-the-secret", algorithm="HS256")

        response = client.get("/api/stores", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json()["error"].startswith("Invalid token")

    def test_session_cookie_is_accepted(self, client, owner_headers, store):
        token = owner_headers["Authorization"].split(" ", 1)[1]
        client.cookies.set("next-auth.session-token", token)

        response = client.get("/api/stores")

        assert response.status_code == 200
        assert [s["subdomain"] for s in response.json()["stores"]] == ["demo"]


class TestStoresAPI:

    def test_list_only_returns_owned_stores(self, client, owner_headers, store, foreign_store):
        response = client.get("/api/stores", headers=owner_headers)

        assert response.status_code == 200
        subdomains = [s["subdomain"] for s in response.json()["stores"]]
        assert subdomains == ["demo"]

    def test_create_store(self, client, owner_headers, db_session):
        response = client.post(
            "/api/stores",
            json={"name": "Plant Shop", "subdomain": "plants"},
            headers=owner_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["subdomain"] == "plants"
        assert data["userId"] == "user-owner"
        assert data["currency"] == "USD"
        assert db_session.query(Store).filter_by(subdomain="plants").count() == 1

    def test_create_requires_name_and_subdomain(self, client, owner_headers):
        response = client.post("/api/stores", json={"name": "No Subdomain"}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Name and subdomain are required"}

    def test_create_rejects_taken_subdomain(self, client, owner_headers, foreign_store):
        response = client.post(
            "/api/stores",
            json={"name": "Copycat", "subdomain": foreign_store.subdomain},
            headers=owner_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "This subdomain is already taken"}

    def test_create_for_unknown_user(self, client, headers_for):
        response = client.post(
            "/api/stores",
            json={"name": "Ghost", "subdomain": "ghost"},
            headers=headers_for("ghost", "ghost@example.com"),
        )

        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}

    def test_foreign_store_is_not_found(self, client, owner_headers, foreign_store):
        response = client.get(f"/api/stores/{foreign_store.subdomain}", headers=owner_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Store not found"}

    def test_update_store(self, client, owner_headers, store):
        response = client.put(
            "/api/stores/demo",
            json={"name": "Renamed", "primaryColor": "#ff0000"},
            headers=owner_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Renamed"
        assert data["primaryColor"] == "#ff0000"

    def test_delete_store(self, client, owner_headers, store, db_session):
        response = client.delete("/api/stores/demo", headers=owner_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Store deleted successfully"}
        assert db_session.query(Store).filter_by(subdomain="demo").first() is None

    def test_cannot_delete_foreign_store(self, client, owner_headers, foreign_store, db_session):
        response = client.delete(f"/api/stores/{foreign_store.subdomain}", headers=owner_headers)

        assert response.status_code == 404
        assert db_session.query(Store).filter_by(subdomain=foreign_store.subdomain).count() == 1
