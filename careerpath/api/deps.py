"""
Request-scoped dependencies. Per-process clients live on `app.state` and are
built once at startup in careerpath.main.
"""
from fastapi import HTTPException, Request

from careerpath.db.session import SessionLocal
from careerpath.llm.provider import LLMProvider
from careerpath.services.storage import StorageBackend


def get_db():
    """Database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_storage(request: Request) -> StorageBackend:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise HTTPException(status_code=503, detail="Storage not configured")
    return storage


def get_llm_provider(request: Request):
    """The configured LLM provider, or None when no API key is set."""
    provider: LLMProvider = getattr(request.app.state, "llm_provider", None)
    return provider
