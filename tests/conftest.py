"""
Pytest fixtures for testing
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session

from gropact.config import get_settings
from gropact.domain.pact import MicroGoal, Pact
from gropact.infrastructure.db import models  # noqa: F401  (register tables)
from gropact.infrastructure.db.session import Base


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Settings are cached; tests that patch env need a clean instance"""
    monkeypatch.delenv("REQUIRE_PASSWORD_MATCH", raising=False)
    monkeypatch.delenv("SEED_DEMO_DATA", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def db_engine():
    """Create in-memory SQLite engine for tests"""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(db_engine) -> Session:
    """Create database session for tests"""
    SessionLocal = sessionmaker(bind=db_engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def sample_user_id():
    return "user-test"


@pytest.fixture
def make_pact(sample_user_id):
    """Factory: pact with N micro-goals, none completed"""
    def _make(pact_id: str = "pact-1", goals: int = 0, **overrides) -> Pact:
        fields = dict(
            id=pact_id,
            user_id=sample_user_id,
            title="Meditate daily",
            identity_statement="I am a calm person.",
            start_date="2026-10-01",
            end_date="2026-12-31",
            created_at="2026-10-01T08:00:00+00:00",
            updated_at="2026-10-01T08:00:00+00:00",
            micro_goals=[
                MicroGoal(id=f"mg-{i + 1}", goal_text=f"Goal {i + 1}", difficulty="easy")
                for i in range(goals)
            ],
        )
        fields.update(overrides)
        return Pact(**fields)

    return _make
