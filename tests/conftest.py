"""Pytest bootstrap for project imports and shared fixtures."""

import os
from pathlib import Path
import sys

# Settings are read at import time; give tests a throwaway configuration.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ.setdefault("DEFAULT_ALLOWED_DOMAINS", "gmail.com")

# Ensure project root is on sys.path so `import teamup` works without install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamup import models
from teamup.crud import profile as profile_crud
from teamup.database import Base
from teamup.schemas.user import ProfileUpdate


@pytest.fixture
def db_session():
    # StaticPool keeps one connection so TestClient worker threads see the same data.
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
        engine.dispose()


@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(
        name=None,
        *,
        skills=None,
        interests=None,
        role="student",
        with_profile=True,
        is_blocked=False,
    ) -> models.User:
        counter["n"] += 1
        name = name or f"user{counter['n']}"
        user = models.User(
            email=f"{name.lower()}@college.edu",
            password_hash="hash",
            role=role,
            is_verified=True,
            is_blocked=is_blocked,
            college_domain="college.edu",
        )
        db_session.add(user)
        db_session.flush()
        if with_profile:
            db_session.add(models.Profile(user_id=user.id, display_name=name, open_for=[]))
        db_session.commit()
        db_session.refresh(user)

        if with_profile and (skills or interests):
            profile_crud.update_profile(
                db_session,
                user.id,
                ProfileUpdate(skills=skills or [], interests=interests or []),
            )
        return user

    return _make_user


@pytest.fixture
def connect(db_session):
    def _connect(requester, target):
        db_session.add(models.Connection(user_id=requester.id, target_user_id=target.id))
        db_session.commit()

    return _connect
