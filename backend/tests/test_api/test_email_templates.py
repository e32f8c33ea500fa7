"""
API tests for /api/stores/{subdomain}/email-templates
"""
import pytest

from store_admin.models import StoreSettings

URL = "/api/stores/demo/email-templates"


def custom_template(**overrides):
    body = {
        "type": "custom",
        "name": "Spring Sale",
        "subject": "Hello {{customer_name}}",
        "htmlContent": "<p>20% off until {{end_date}}</p>",
    }
    body.update(overrides)
    return body


class TestListTemplates:

    def test_empty_store_lists_library(self, client, owner_headers, store):
        response = client.get(URL, headers=owner_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["templates"] == []
        assert len(data["defaultTemplates"]) == 13
        assert "order_confirmation" in data["defaultTemplates"]
        assert "new_order_notification" in data["defaultTemplates"]

    def test_filters(self, client, owner_headers, store):
        client.post(URL, json={"fromTemplate": "order_shipped"}, headers=owner_headers)
        client.post(URL, json=custom_template(enabled=False), headers=owner_headers)

        by_type = client.get(f"{URL}?type=order_shipped", headers=owner_headers).json()["templates"]
        disabled = client.get(f"{URL}?enabled=false", headers=owner_headers).json()["templates"]

        assert [t["type"] for t in by_type] == ["order_shipped"]
        assert [t["name"] for t in disabled] == ["Spring Sale"]


class TestCreateTemplate:

    def test_from_library_template(self, client, owner_headers, store, db_session):
        response = client.post(URL, json={"fromTemplate": "order_confirmation"}, headers=owner_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Email template created successfully"
        template = data["template"]
        assert template["id"].startswith("template_")
        assert template["type"] == "order_confirmation"
        assert template["name"] == "Order Confirmation"
        assert template["enabled"] is True
        assert template["createdBy"] == "owner@example.com"
        assert "order_number" in template["variables"]
        assert "items" in template["variables"]
        assert "{{order_number}}" in template["htmlContent"]

        settings = db_session.query(StoreSettings).filter_by(store_id=store.id).one()
        assert [t["id"] for t in settings.email_settings["templates"]] == [template["id"]]

    def test_custom_template(self, client, owner_headers, store):
        response = client.post(URL, json=custom_template(), headers=owner_headers)

        assert response.status_code == 201
        assert response.json()["template"]["subject"] == "Hello {{customer_name}}"

    def test_custom_templates_may_repeat(self, client, owner_headers, store):
        first = client.post(URL, json=custom_template(), headers=owner_headers).json()["template"]
        second = client.post(URL, json=custom_template(name="Other"), headers=owner_headers).json()["template"]

        assert first["id"] != second["id"]

    def test_duplicate_type_is_rejected(self, client, owner_headers, store):
        client.post(URL, json={"fromTemplate": "welcome_email"}, headers=owner_headers)

        response = client.post(URL, json={"fromTemplate": "welcome_email"}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "A template of this type already exists"}

    def test_unknown_library_template(self, client, owner_headers, store):
        response = client.post(URL, json={"fromTemplate": "birthday"}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"].startswith("Default template not found: birthday")

    @pytest.mark.parametrize("body", [
        custom_template(name=""),
        custom_template(type="postcard"),
        {"type": "custom", "name": "No subject"},
    ])
    def test_invalid_body(self, client, owner_headers, store, body):
        response = client.post(URL, json=body, headers=owner_headers)

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"


class TestUpdateTemplate:

    def test_update_merges_fields(self, client, owner_headers, store):
        created = client.post(URL, json=custom_template(), headers=owner_headers).json()["template"]

        response = client.put(
            URL,
            json={"id": created["id"], "subject": "New subject", "enabled": False},
            headers=owner_headers,
        )

        assert response.status_code == 200
        template = response.json()["template"]
        assert template["subject"] == "New subject"
        assert template["enabled"] is False
        assert template["name"] == "Spring Sale"
        assert template["createdAt"] == created["createdAt"]

    def test_unknown_template(self, client, owner_headers, store):
        client.post(URL, json=custom_template(), headers=owner_headers)

        response = client.put(URL, json={"id": "template_1", "name": "X"}, headers=owner_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Template not found"}


class TestDeleteTemplate:

    def test_delete(self, client, owner_headers, store):
        created = client.post(URL, json=custom_template(), headers=owner_headers).json()["template"]

        response = client.delete(f"{URL}?id={created['id']}", headers=owner_headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Email template deleted successfully"}
        assert client.get(URL, headers=owner_headers).json()["templates"] == []

    def test_id_is_required(self, client, owner_headers, store):
        response = client.delete(URL, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Template ID is required"}

    def test_unknown_id(self, client, owner_headers, store):
        client.post(URL, json=custom_template(), headers=owner_headers)

        response = client.delete(f"{URL}?id=template_1", headers=owner_headers)

        assert response.status_code == 404
