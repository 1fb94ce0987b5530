import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from careerpath.core.config import (
    CORS_ALLOW_ORIGINS,
    DATABASE_URL,
    LOG_DIR,
    LOG_LEVEL,
    MEDIA_ROOT,
    PUBLIC_BASE_URL,
    RUN_MIGRATIONS,
    SUPABASE_SERVICE_ROLE_KEY,
    SUPABASE_URL,
)
from careerpath.core.logging_config import setup_logging
from careerpath.llm.router import is_model_available
from careerpath.services.storage import LocalStorage, StorageBackend, SupabaseStorage

# ✅ Import All API Routes
from careerpath.api.routes import billing, billing_webhook, health, linkedin, resumes, roadmaps

setup_logging(LOG_LEVEL, LOG_DIR)
logger = logging.getLogger(__name__)


def build_storage() -> StorageBackend:
    if SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY:
        return SupabaseStorage(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY)
    logger.warning(f"Supabase storage not configured - writing assets to {MEDIA_ROOT}")
    return LocalStorage(MEDIA_ROOT, PUBLIC_BASE_URL)


def build_llm_provider():
    if not is_model_available():
        logger.warning("OPENAI_API_KEY not configured - roadmap generation disabled")
        return None
    from careerpath.llm.openai_provider import OpenAIProvider
    return OpenAIProvider()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if RUN_MIGRATIONS:
        from careerpath.db.migrate import run_migrations
        run_migrations()
    elif DATABASE_URL.startswith("sqlite"):
        # Local development without Alembic
        from careerpath.db.init_db import init_db
        init_db()
    yield
    app.state.storage.close()


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="CareerPath API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in CORS_ALLOW_ORIGINS.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["Authorization", "Content-Type"],
)

# Per-process clients, read by careerpath.api.deps
app.state.storage = build_storage()
app.state.llm_provider = build_llm_provider()

if isinstance(app.state.storage, LocalStorage):
    app.mount("/media", StaticFiles(directory=MEDIA_ROOT), name="media")


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(billing_webhook.router)
app.include_router(billing.router)
app.include_router(roadmaps.router)
app.include_router(resumes.router)
app.include_router(linkedin.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "CareerPath API running"}
