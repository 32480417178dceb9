from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from typing import Generator
import redis
from .config import settings


def _engine_options(url: str) -> dict:
    """Connection options for the configured backend."""
    if url.startswith("sqlite"):
        # SQLite is only used for tests. get_db opens the session on a threadpool
        # thread and async routes use it on the event loop thread
        return {"connect_args": {"check_same_thread": False}}

    options = {
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": settings.STORE_TIMEOUT_SECONDS,
        "pool_recycle": 1800,  # Recycle connections after 30 minutes
        "pool_pre_ping": True,
    }
    if url.startswith("postgresql"):
        timeout_ms = settings.STORE_TIMEOUT_SECONDS * 1000
        options["connect_args"] = {
            "connect_timeout": settings.STORE_TIMEOUT_SECONDS,
            "options": f"-c statement_timeout={timeout_ms}",
        }
    return options


engine = create_engine(
    settings.get_database_url,
    **_engine_options(settings.get_database_url)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Connections are opened lazily, on first command
redis_client = redis.from_url(settings.REDIS_URL, decode_responses=True)

# Database dependency
def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

# Redis dependency
def get_redis():
    """Get Redis client."""
    return redis_client

# Database initialization
def init_db():
    """Initialize database tables."""
    # Register every model on the metadata before creating tables
    from ..models import anamnesis, patient, queue_entry, user  # noqa: F401

    Base.metadata.create_all(bind=engine)
