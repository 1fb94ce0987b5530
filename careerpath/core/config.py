import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./careerpath.db")
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Identity provider (JWT verification only)
SUPABASE_URL = os.getenv("SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
SUPABASE_JWT_SECRET = os.getenv("SUPABASE_JWT_SECRET")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
RESUME_PRICE_CENTS = int(os.getenv("RESUME_PRICE_CENTS", "900"))
ROADMAP_PRICE_CENTS = int(os.getenv("ROADMAP_PRICE_CENTS", "999"))
CURRENCY = os.getenv("CURRENCY", "usd")

# ✅ Storage
RESUME_BUCKET = os.getenv("RESUME_BUCKET", "resume-assets")
RESUME_BUCKET_PUBLIC = os.getenv("RESUME_BUCKET_PUBLIC", "0") == "1"
ROADMAP_BUCKET = os.getenv("ROADMAP_BUCKET", "roadmaps")
ROADMAP_BUCKET_PUBLIC = os.getenv("ROADMAP_BUCKET_PUBLIC", "1") == "1"
SIGNED_URL_TTL_SECONDS = int(os.getenv("SIGNED_URL_TTL_SECONDS", str(60 * 60 * 24 * 365)))
STORAGE_TIMEOUT_SECONDS = float(os.getenv("STORAGE_TIMEOUT_SECONDS", "30"))
MEDIA_ROOT = os.getenv("MEDIA_ROOT", "media")

# ✅ URLs
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:8000")
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
CORS_ALLOW_ORIGINS = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", "logs")
