"""
API tests for /api/ai/generate and /api/ai/translate
"""
from conftest import GENERATED_TEXT

from store_admin.core.config import settings
from store_admin.main import app
from store_admin.services.content_generation_service import (
    FALLBACK_RESPONSES,
    ContentGenerationService,
    get_generation_service,
)
from store_admin.services.translation_service import FALLBACK_WARNING, TranslationService, get_translation_service


class TestGenerate:

    def test_requires_session(self, client):
        response = client.post("/api/ai/generate", json={"prompt": "Hi"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_generates_with_session(self, client, owner_headers, generation_service):
        response = client.post(
            "/api/ai/generate",
            json={
                "prompt": "Ceramic Mug",
                "task": "product_description",
                "data": {"tone": "friendly", "keywords": "handmade"},
            },
            headers=owner_headers,
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["result"] == GENERATED_TEXT
        assert body["data"]["model"] == "claude-test"
        assert body["data"]["task"] == "product_description"
        assert body["data"]["usage"]["tokens_used"] == 42

        call = generation_service.client.messages.create.call_args.kwargs
        assert "Ceramic Mug" in call["messages"][0]["content"]
        assert "handmade" in call["messages"][0]["content"]

    def test_internal_call_needs_no_session(self, client, internal_headers):
        response = client.post("/api/ai/generate", json={"prompt": "Hi"}, headers=internal_headers)

        assert response.status_code == 200
        assert response.json()["data"]["result"] == GENERATED_TEXT

    def test_wrong_internal_token_is_rejected(self, client):
        response = client.post(
            "/api/ai/generate",
            json={"prompt": "Hi"},
            headers={"x-internal-api-call": "guess"},
        )

        assert response.status_code == 401

    def test_unconfigured_service_uses_fallback(self, client, owner_headers):
        app.dependency_overrides[get_generation_service] = lambda: ContentGenerationService(api_key="")

        response = client.post(
            "/api/ai/generate",
            json={"prompt": "Spring", "task": "email_campaign"},
            headers=owner_headers,
        )

        data = response.json()["data"]
        assert data["model"] == "fallback"
        assert data["result"] == FALLBACK_RESPONSES["email_campaign"]

    def test_status(self, client):
        response = client.get("/api/ai/generate")

        assert response.status_code == 200
        data = response.json()
        assert data["configured"] is True
        assert data["service"] == "anthropic"
        assert "store_analysis" in data["tasks"]


class TestTranslate:

    def test_text_is_required(self, client, owner_headers):
        response = client.post("/api/ai/translate", json={"toLanguage": "de"}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Text is required"}

    def test_batch_needs_texts(self, client, owner_headers):
        response = client.post("/api/ai/translate", json={"batch": True}, headers=owner_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Texts array is required for batch translation"}

    def test_single_text(self, client, owner_headers):
        response = client.post("/api/ai/translate", json={"text": "Hello"}, headers=owner_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "translation": "[tr] Hello",
            "fromLanguage": "en",
            "toLanguage": "tr",
        }

    def test_batch(self, client, internal_headers):
        response = client.post(
            "/api/ai/translate",
            json={
                "batch": True,
                "toLanguage": "de",
                "context": "product",
                "texts": [{"field": "name", "text": "Mug"}, {"field": "description", "text": "Big mug"}],
            },
            headers=internal_headers,
        )

        assert response.status_code == 200
        assert response.json()["translations"] == [
            {"field": "name", "translation": "[de] Mug"},
            {"field": "description", "translation": "[de] Big mug"},
        ]

    def test_placeholder_with_warning_when_unconfigured(self, client, owner_headers):
        app.dependency_overrides[get_translation_service] = lambda: TranslationService(api_key="")

        response = client.post(
            "/api/ai/translate",
            json={"text": "Hello", "toLanguage": "de"},
            headers=owner_headers,
        )

        body = response.json()
        assert response.status_code == 200
        assert body["translation"] == "[Translation to German]: Hello"
        assert body["warning"] == FALLBACK_WARNING

    def test_status(self, client):
        data = client.get("/api/ai/translate").json()

        assert data["status"] == "active"
        assert "tr" in data["supportedLanguages"]
        assert "product" in data["contexts"]


class TestRateLimit:

    def test_session_calls_are_limited(self, client, owner_headers, monkeypatch):
        monkeypatch.setattr(settings, "AI_RATE_LIMIT_PER_MINUTE", 2)

        statuses = [
            client.post("/api/ai/generate", json={"prompt": "Hi"}, headers=owner_headers).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 429]

    def test_limited_response(self, client, owner_headers, monkeypatch):
        monkeypatch.setattr(settings, "AI_RATE_LIMIT_PER_MINUTE", 1)
        client.post("/api/ai/generate", json={"prompt": "Hi"}, headers=owner_headers)

        response = client.post("/api/ai/generate", json={"prompt": "Hi"}, headers=owner_headers)

        assert response.status_code == 429
        assert response.json() == {"error": "Rate limit exceeded. Please slow down."}
        assert int(response.headers["Retry-After"]) >= 1

    def test_internal_calls_are_exempt(self, client, internal_headers, monkeypatch):
        monkeypatch.setattr(settings, "AI_RATE_LIMIT_PER_MINUTE", 1)

        statuses = [
            client.post("/api/ai/generate", json={"prompt": "Hi"}, headers=internal_headers).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 200]
