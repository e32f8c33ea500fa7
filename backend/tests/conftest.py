"""
Pytest fixtures and configuration for Store Admin Backend tests

The application runs against an in-memory SQLite database created fresh for
every test. Session tokens are minted with the same secret the app validates
them with, and the Claude-backed services are swapped for offline doubles.
"""
import os
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

# Must be set before store_admin.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTH_SECRET"] = "test-auth-secret"
os.environ["INTERNAL_API_TOKEN"] = "test-internal-token"
os.environ["ANTHROPIC_API_KEY"] = ""

import httpx
import pytest
from fastapi import Depends, Request
from fastapi.testclient import TestClient
from jose import jwt

from store_admin.core.auth import INTERNAL_CALL_HEADER, extract_session_token, security
from store_admin.core.database import Base, SessionLocal, engine, get_db
from store_admin.core.rate_limit import rate_limiter
from store_admin.main import app
from store_admin.models import Store, User
from store_admin.services.content_generation_service import ContentGenerationService, get_generation_service
from store_admin.services.internal_api_client import InternalApiClient, get_internal_client
from store_admin.services.translation_service import TranslationService, get_translation_service

AUTH_SECRET = os.environ["AUTH_SECRET"]
INTERNAL_TOKEN = os.environ["INTERNAL_API_TOKEN"]

GENERATED_TEXT = "Generated copy for your store"


def make_token(user_id: str, email: str, name: str = None, expires_in: int = 3600) -> str:
    """NextAuth-style HS256 session token"""
    now = int(time.time())
    payload = {
        "id": user_id,
        "sub": user_id,
        "email": email,
        "name": name,
        "iat": now,
        "exp": now + expires_in,
    }
    return jwt.encode(payload, AUTH_SECRET, algorithm="HS256")


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


class EchoTranslationService(TranslationService):
    """Deterministic translations: "[<to>] <text>" """

    def __init__(self):
        super().__init__(api_key="")

    def _complete(self, text, from_language, to_language, context):
        return f"[{to_language}] {text}"


def build_generation_service() -> ContentGenerationService:
    """Generation service whose Claude client is a mock"""
    service = ContentGenerationService(api_key="", model="claude-test")
    service.client = MagicMock()
    service.client.messages.create.return_value = SimpleNamespace(
        content=[SimpleNamespace(text=GENERATED_TEXT)],
        usage=SimpleNamespace(input_tokens=12, output_tokens=30),
    )
    return service


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def db_session():
    """
    Fresh schema per test

    Scope: function (tables are dropped after each test)
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def owner(db_session):
    user = User(id="user-owner", email="owner@example.com", name="Store Owner")
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def store(db_session, owner):
    store = Store(user_id=owner.id, subdomain="demo", name="Demo Store", currency="USD")
    db_session.add(store)
    db_session.commit()
    return store


@pytest.fixture
def foreign_store(db_session):
    """A store owned by another user"""
    other = User(id="user-other", email="other@example.com", name="Someone Else")
    db_session.add(other)
    db_session.commit()

    store = Store(user_id=other.id, subdomain="elsewhere", name="Other Store", currency="EUR")
    db_session.add(store)
    db_session.commit()
    return store


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def generation_service():
    return build_generation_service()


@pytest.fixture
def translation_service():
    return EchoTranslationService()


@pytest.fixture
def client(db_session, generation_service, translation_service):
    """
    TestClient with the database and AI services overridden

    Internal calls made by the actions dispatcher are routed back into the
    same app in-process.
    """
    def override_get_db():
        yield db_session

    def override_internal_client(request: Request, credentials=Depends(security)):
        return InternalApiClient(
            base_url="http://testserver",
            transport=httpx.ASGITransport(app=app),
            session_token=extract_session_token(request, credentials),
        )

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_generation_service] = lambda: generation_service
    app.dependency_overrides[get_translation_service] = lambda: translation_service
    app.dependency_overrides[get_internal_client] = override_internal_client
    rate_limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()
    rate_limiter.reset()


@pytest.fixture
def headers_for():
    """Factory: Authorization headers for an arbitrary user id/email"""
    def _headers(user_id: str, email: str, expires_in: int = 3600) -> dict:
        return bearer(make_token(user_id, email, expires_in=expires_in))
    return _headers


@pytest.fixture
def owner_headers(owner):
    return bearer(make_token(owner.id, owner.email, owner.name))


@pytest.fixture
def internal_headers():
    return {INTERNAL_CALL_HEADER: INTERNAL_TOKEN}
