"""Pytest fixtures for governance testing.

Provides reusable test fixtures for:
- A fixed evaluation clock
- An in-memory governance data port and evaluation contexts over it
- An in-memory SQLite session with the read-model tables
- A TestClient for the app wired to the in-memory port

Usage:
    @pytest.mark.asyncio
    async def test_rule(fake_port, make_context):
        fake_port.add_customer("cust-1", org_id="org-1")
        context = make_context({"customerId": "cust-1", "orgId": "org-1"})
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("ENV", "test")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))
sys.path.insert(0, str(Path(__file__).parent))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from database import build_engine
from domain.governance.models import EvaluationContext
from models.base import Base
from fixtures.fake_port import InMemoryGovernancePort


FIXED_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    """Fixed, timezone-aware evaluation clock."""
    return FIXED_NOW


@pytest.fixture
def fake_port() -> InMemoryGovernancePort:
    return InMemoryGovernancePort()


@pytest.fixture
def make_context(fake_port, now):
    """Factory building an EvaluationContext over the fake port."""
    def _make(payload, entity_id=None, actor=None, data=None):
        return EvaluationContext(
            payload=payload,
            data=data or fake_port,
            actor=actor,
            entity_id=entity_id,
            now=now,
        )
    return _make


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Fresh in-memory SQLite database for each test.

    Creates all tables before the test and drops them after.
    """
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def app(fake_port):
    """Application wired to the in-memory port."""
    from main import create_app

    return create_app(port_factory=fake_port.scope)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client
