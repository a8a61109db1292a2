"""
Tests for database session helpers.
"""

import pytest

from app.db import database
from app.db.models import SavedScenario


@pytest.fixture
def script_sessions(monkeypatch, session_factory):
    """Point the session factory used by scripts at the test database."""
    monkeypatch.setattr(database, "SessionLocal", session_factory)


class TestDbContext:
    """Test the script-level session context manager."""

    def test_commits_on_success(self, script_sessions, db_session):
        """Test work inside the context is committed."""
        with database.get_db_context() as db:
            db.add(SavedScenario(id="seeded", name="Demo", inputs={}, result={}))

        assert db_session.query(SavedScenario).filter_by(id="seeded").count() == 1

    def test_rolls_back_on_error(self, script_sessions, db_session):
        """Test an exception discards the work and is re-raised."""
        with pytest.raises(RuntimeError):
            with database.get_db_context() as db:
                db.add(SavedScenario(id="discarded", name="Demo", inputs={}, result={}))
                db.flush()
                raise RuntimeError("boom")

        assert db_session.query(SavedScenario).filter_by(id="discarded").count() == 0
