from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from app.core import config
DATABASE_URL = config.DATABASE_URL


def _engine_kwargs(url: str) -> dict:
    """Bound every store wait by DB_TIMEOUT_SECONDS."""
    if url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False, "timeout": config.DB_TIMEOUT_SECONDS}}
    return {"pool_pre_ping": True, "pool_timeout": config.DB_TIMEOUT_SECONDS}


engine = create_engine(DATABASE_URL, **_engine_kwargs(DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
