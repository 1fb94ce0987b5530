"""
Shared test setup: environment, in-memory database and fake collaborators.

Environment variables are set before the app is imported because
configuration is read at import time.
"""
import hashlib
import hmac
import json
import os
import tempfile
import time

_tmp_root = tempfile.mkdtemp(prefix="careerpath-tests-")
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test_secret"
os.environ["STRIPE_SECRET_KEY"] = ""
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"
os.environ["SUPABASE_URL"] = ""
os.environ["SUPABASE_SERVICE_ROLE_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["LOG_DIR"] = os.path.join(_tmp_root, "logs")
os.environ["MEDIA_ROOT"] = os.path.join(_tmp_root, "media")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from careerpath.main import app
from careerpath.api.deps import get_db, get_storage, get_llm_provider
from careerpath.db.base import Base
from careerpath.db.models.user import User
from careerpath.db.session import enable_sqlite_foreign_keys
from careerpath.llm.provider import LLMProvider, LLMResponse
from careerpath.services.storage import StorageBackend, StorageError

WEBHOOK_SECRET = "whsec_test_secret"
JWT_SECRET = "test-jwt-secret"


# Setup in-memory SQLite database for testing
TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
event.listen(test_engine, "connect", enable_sqlite_foreign_keys)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeStorage(StorageBackend):
    """In-memory storage that records uploads and can be told to fail."""

    def __init__(self):
        self.objects = {}
        self.fail = False

    def upload(self, bucket, path, data, content_type, upsert=False):
        if self.fail:
            raise StorageError("storage unavailable")
        key = (bucket, path)
        if key in self.objects and not upsert:
            raise StorageError(f"Object already exists: {bucket}/{path}")
        self.objects[key] = (data, content_type)
        return path

    def get_public_url(self, bucket, path):
        return f"https://storage.test/public/{bucket}/{path}"

    def create_signed_url(self, bucket, path, expires_in):
        return f"https://storage.test/signed/{bucket}/{path}?expires_in={expires_in}"


class FakeLLM(LLMProvider):
    """Returns a canned completion and records the calls it received."""

    def __init__(self, content="", error=None):
        self.content = content
        self.error = error
        self.calls = []

    def chat(self, messages, model, temperature=0.7, max_tokens=None, json_mode=False, **kwargs):
        self.calls.append({"messages": messages, "model": model, "json_mode": json_mode, "max_tokens": max_tokens})
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model=model)


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def storage():
    fake = FakeStorage()
    app.dependency_overrides[get_storage] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture
def client(storage):
    """Create test client."""
    return TestClient(app)


@pytest.fixture
def use_llm():
    """Install a fake LLM provider: `use_llm(content=..., error=...)`."""
    def install(content="", error=None, provider=...):
        llm = FakeLLM(content, error) if provider is ... else provider
        app.dependency_overrides[get_llm_provider] = lambda: llm
        return llm
    yield install
    app.dependency_overrides.pop(get_llm_provider, None)


def make_token(user_id: str, audience: str = "authenticated", secret: str = JWT_SECRET) -> str:
    return jwt.encode(
        {"sub": user_id, "aud": audience, "exp": int(time.time()) + 3600},
        secret,
        algorithm="HS256",
    )


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Build a Stripe-Signature header for `payload`."""
    timestamp = timestamp or int(time.time())
    signed = f"{timestamp}.{payload}".encode("utf-8")
    signature = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={signature}"


def stripe_event(event_type: str, data_object: dict, event_id: str = "evt_test_1") -> str:
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": data_object},
    })


def seed_users(db, *user_ids: str) -> None:
    """Insert bare user rows so foreign keys to `users` resolve."""
    for user_id in user_ids:
        db.add(User(id=user_id))
    db.commit()
