"""
Pytest fixtures for the test suite.

Data-layer and gate tests use an in-memory SQLite engine and a session that
rolls back after each test, so tests do not affect each other. Engine tests
use `fake_store`, an in-memory `AuthzStore` that records every lookup.
"""
from __future__ import annotations

import secrets
from collections.abc import Sequence
from datetime import datetime, timedelta

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from submission_authz.authz import ResourceRef, StoreError, SubmissionsFilter


TEST_DB_URL = "sqlite:///:memory:"


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from submission_authz.db.base import Base
    from submission_authz.models import security, submission  # noqa: F401 (register tables)

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """
    Provide a Session bound to the test DB; roll back after each test.

    The transaction is rolled back so the next test gets a clean state.
    """
    connection = tables.connect()
    transaction = connection.begin()
    TestSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )
    session = TestSession()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


# ---- ORM factories -------------------------------------------------------------------


@pytest.fixture
def make_user(db_session):
    """Create a user holding the given role labels (roles are created on demand)."""
    from sqlalchemy import select

    from submission_authz.models.security import Role, User

    counter = {"n": 0}

    def _make(*role_names: str, username: str | None = None) -> User:
        counter["n"] += 1
        user = User(username=username or f"user{counter['n']}")
        for name in role_names:
            role = db_session.scalars(select(Role).where(Role.name == name)).first()
            if role is None:
                role = Role(name=name)
                db_session.add(role)
                db_session.flush()
            user.roles.append(role)
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_session(db_session):
    """Create a login session row and return its secret."""
    from submission_authz.models.security import UserSession

    def _make(user_id: int, *, expires_in: timedelta = timedelta(hours=1)) -> str:
        secret = secrets.token_hex(16)
        db_session.add(UserSession(secret=secret, user_id=user_id, expires_at=datetime.utcnow() + expires_in))
        db_session.commit()
        return secret

    return _make


@pytest.fixture
def make_submission(db_session):
    from submission_authz.models.submission import Submission

    def _make(submitter_id: int, title: str = "Submission") -> Submission:
        submission = Submission(submitter_id=submitter_id, title=title)
        db_session.add(submission)
        db_session.commit()
        return submission

    return _make


@pytest.fixture
def make_file(db_session):
    from submission_authz.models.submission import SubmissionFile

    def _make(submission_id: int, submitter_id: int, filename: str = "game.7z") -> SubmissionFile:
        submission_file = SubmissionFile(
            submission_id=submission_id,
            submitter_id=submitter_id,
            original_filename=filename,
        )
        db_session.add(submission_file)
        db_session.commit()
        return submission_file

    return _make


# ---- In-memory store -----------------------------------------------------------------


class FakeStore:
    """`AuthzStore` over plain dicts. Methods named in `failing` raise StoreError."""

    def __init__(self) -> None:
        self.sessions: dict[str, int] = {}
        self.roles: dict[int, set[str]] = {}
        self.submissions: dict[int, int] = {}
        self.files: dict[int, int] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple] = []

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.failing:
            raise StoreError(f"{name} unavailable")

    def get_uid_from_session(self, secret: str) -> int | None:
        self._record("get_uid_from_session", secret)
        return self.sessions.get(secret)

    def get_user_roles(self, user_id: int) -> frozenset[str]:
        self._record("get_user_roles", user_id)
        return frozenset(self.roles.get(user_id, ()))

    def search_submissions(self, filter: SubmissionsFilter) -> list[ResourceRef]:
        self._record("search_submissions", filter)
        refs = [ResourceRef(id=sid, submitter_id=owner) for sid, owner in sorted(self.submissions.items())]
        if filter.submission_id is not None:
            refs = [r for r in refs if r.id == filter.submission_id]
        if filter.submitter_id is not None:
            refs = [r for r in refs if r.submitter_id == filter.submitter_id]
        return refs

    def get_submission_files(self, file_ids: Sequence[int]) -> list[ResourceRef]:
        self._record("get_submission_files", tuple(file_ids))
        return [ResourceRef(id=fid, submitter_id=self.files[fid]) for fid in file_ids if fid in self.files]

    def lookups(self, name: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == name]


@pytest.fixture
def fake_store() -> FakeStore:
    return FakeStore()


@pytest.fixture
def authorizer(fake_store):
    from submission_authz.authz import ActionRules, Authorizer

    return Authorizer(fake_store, ActionRules.default())
