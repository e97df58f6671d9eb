from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from submission_authz.authz import ResourceRef, StoreError, SubmissionsFilter
from submission_authz.models.security import Role, UserSession, user_roles
from submission_authz.models.submission import Submission, SubmissionFile

logger = logging.getLogger(__name__)


class SqlAuthzStore:
    """
    `AuthzStore` backed by the request's SQLAlchemy session.

    Every SQLAlchemyError is re-raised as StoreError so the engine reports it
    as an internal failure rather than a deny.
    """

    def __init__(self, db: Session) -> None:
        self._db = db

    def get_uid_from_session(self, secret: str) -> int | None:
        stmt = select(UserSession.user_id).where(
            UserSession.secret == secret,
            UserSession.expires_at > datetime.utcnow(),
        )
        try:
            return self._db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StoreError("failed to load session") from exc

    def get_user_roles(self, user_id: int) -> frozenset[str]:
        stmt = select(Role.name).join(user_roles, user_roles.c.role_id == Role.id).where(user_roles.c.user_id == user_id)
        try:
            return frozenset(self._db.scalars(stmt).all())
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to get roles of user {user_id}") from exc

    def search_submissions(self, filter: SubmissionsFilter) -> list[ResourceRef]:
        stmt = select(Submission.id, Submission.submitter_id).order_by(Submission.id)
        if filter.submission_id is not None:
            stmt = stmt.where(Submission.id == filter.submission_id)
        if filter.submitter_id is not None:
            stmt = stmt.where(Submission.submitter_id == filter.submitter_id)

        try:
            rows = self._db.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to search submissions filter={filter}") from exc
        return [ResourceRef(id=row.id, submitter_id=row.submitter_id) for row in rows]

    def get_submission_files(self, file_ids: Sequence[int]) -> list[ResourceRef]:
        if not file_ids:
            return []
        stmt = (
            select(SubmissionFile.id, SubmissionFile.submitter_id)
            .where(SubmissionFile.id.in_(list(file_ids)))
            .order_by(SubmissionFile.id)
        )
        try:
            rows = self._db.execute(stmt).all()
        except SQLAlchemyError as exc:
            raise StoreError(f"failed to load submission files ids={list(file_ids)}") from exc
        return [ResourceRef(id=row.id, submitter_id=row.submitter_id) for row in rows]
