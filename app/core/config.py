import os

# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./placement.db")
DB_TIMEOUT_SECONDS = int(os.getenv("DB_TIMEOUT_SECONDS", "10"))
RUN_MIGRATIONS = os.getenv("RUN_MIGRATIONS", "0") == "1"

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
AI_TIMEOUT_SECONDS = float(os.getenv("AI_TIMEOUT_SECONDS", "30"))

# "synthesized" or "delegated"
ANALYSIS_STRATEGY = os.getenv("ANALYSIS_STRATEGY", "synthesized")

# ✅ Frontend (interview room links + CORS)
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")

# ✅ Uploads
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

# ✅ Moderation
AUTO_APPROVE_USERS = os.getenv("AUTO_APPROVE_USERS", "true").lower() == "true"
AUTO_APPROVE_JOBS = os.getenv("AUTO_APPROVE_JOBS", "false").lower() == "true"

# ✅ Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_TO_FILE = os.getenv("LOG_TO_FILE", "false").lower() == "true"


def startup_settings() -> dict:
    """Effective settings, logged once at startup after sanitizing."""
    return {
        "database_url": DATABASE_URL,
        "secret_key": SECRET_KEY,
        "openai_api_key": OPENAI_API_KEY,
        "analysis_strategy": ANALYSIS_STRATEGY,
        "frontend_url": FRONTEND_URL,
        "auto_approve_users": AUTO_APPROVE_USERS,
        "auto_approve_jobs": AUTO_APPROVE_JOBS,
        "run_migrations": RUN_MIGRATIONS,
    }
