"""
Shared fixtures for incentives tests.
"""
import json
import os
import tempfile
from datetime import datetime, timezone

os.environ.setdefault("INCENTIVES_DATABASE_URL", "sqlite://")
os.environ.setdefault("INCENTIVES_TIMEZONE", "UTC")
os.environ.setdefault("INCENTIVES_LOG_DIR", os.path.join(tempfile.gettempdir(), "incentives-test-logs"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from incentives.database import Base
from incentives.models import Goal, Submission, Profile


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_goal(**overrides) -> Goal:
    """Build a transient goal with every field populated"""
    fields = dict(
        id=1,
        title="Daily calls",
        description=None,
        scope="individual",
        sector="TI",
        assigned_user_id="alice",
        goal_type="task_completion",
        target_value=0.0,
        period="monthly",
        has_monetary_reward=True,
        monetary_value=10000,
        is_active=True,
        created_at=datetime(2024, 1, 1, 9, 0, 0),
    )
    fields.update(overrides)
    return Goal(**fields)


def make_submission(created_at: datetime, checklist, user_id: str = "alice", id: int = None) -> Submission:
    """Build a transient submission; dict checklists are JSON-encoded"""
    if not isinstance(checklist, str):
        checklist = json.dumps(checklist)
    return Submission(
        id=id,
        user_id=user_id,
        date=created_at,
        checklist=checklist,
        created_at=created_at,
    )


def create_profile(db, user_id: str, sector: str = "TI", role: str = "collaborator") -> Profile:
    profile = Profile(user_id=user_id, name=user_id.title(), sector=sector, role=role)
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def end_of_january():
    """Wednesday 2024-01-31 at noon"""
    return utc(2024, 1, 31, 12, 0, 0)
