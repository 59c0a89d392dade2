"""Database session factory and configuration.

Provides the engine and session factory used by the read-only governance
repository. The governance engine never writes through these sessions.
"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from config import settings


def build_engine(database_url: str) -> Engine:
    """Create an engine for the given URL.

    Pool settings only apply to server databases; in-memory SQLite shares a
    single connection across threads so threadpool reads see the same data.
    """
    engine_kwargs = {
        "pool_pre_ping": True,  # Verify connections before using
        "echo": False,  # Set to True for SQL query logging
    }

    if database_url.startswith("sqlite"):
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in database_url or database_url in ("sqlite://", "sqlite:///"):
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_size"] = 5
        engine_kwargs["max_overflow"] = 10

    return create_engine(database_url, **engine_kwargs)


engine = build_engine(settings.DATABASE_URL)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


def get_db() -> Generator[Session, None, None]:
    """Dependency for FastAPI endpoints.

    Usage:
        @app.get("/health")
        def health(db: Session = Depends(get_db)):
            db.execute(text("SELECT 1"))
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
