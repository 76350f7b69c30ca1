import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core import config
from app.core.config import FRONTEND_URL, LOG_LEVEL, LOG_TO_FILE, RUN_MIGRATIONS
from app.core.errors import DomainError, StoreError
from app.core.logging_config import setup_logging, sanitize_log_data

# ✅ Import All API Routes
from app.api.routes import (
    admin,
    ai_chat,
    application,
    auth,
    health,
    interviews,
    jobs,
    recruiter,
    resume,
    resume_parser,
    student,
)

setup_logging(log_level=LOG_LEVEL, log_to_file=LOG_TO_FILE)
logger = logging.getLogger(__name__)


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

app = FastAPI(title="Campus Placement API")

# ✅ CORS: only the configured frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        FRONTEND_URL,
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ ERROR HANDLERS
# ============================================

@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    if exc.status_code >= 500:
        logger.error(f"{exc.kind} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {type(exc).__name__}", exc_info=exc)
    error = StoreError("A database error occurred. Please try again later.")
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(jobs.router)
app.include_router(student.router)
app.include_router(recruiter.router)
app.include_router(admin.router)
app.include_router(application.router)
app.include_router(interviews.router)
app.include_router(resume.router)
app.include_router(resume_parser.router)
app.include_router(ai_chat.router)
app.include_router(health.router)


# ============================================
# ✅ DATABASE ON STARTUP
# ============================================

@app.on_event("startup")
def prepare_database():
    logger.info(f"Starting with settings: {sanitize_log_data(config.startup_settings())}")
    if RUN_MIGRATIONS:
        from app.db.migrate import run_migrations
        run_migrations()
    else:
        from app.db.init_db import init_db
        init_db()


# ============================================
# ✅ HEALTH CHECK ROOT ENDPOINT
# ============================================

@app.get("/")
def root():
    return {"status": "Campus Placement API running"}
