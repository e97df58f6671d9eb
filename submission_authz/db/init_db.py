from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from submission_authz.authz import roles as role_labels
from submission_authz.db.base import Base
from submission_authz.db.session import SessionLocal, engine
from submission_authz.models.security import Role, User
from submission_authz.models.submission import Submission, SubmissionFile


def init_db() -> None:
    """
    Create tables + seed demo users, roles and submissions.

    Sessions are not seeded; they are created by the login flow.
    """

    Base.metadata.create_all(bind=engine)

    with SessionLocal() as db:
        if _has_seed_data(db):
            return
        _seed(db)


def _has_seed_data(db: Session) -> bool:
    return db.execute(select(Role.id).limit(1)).first() is not None


def _seed(db: Session) -> None:
    # Roles
    labels = [
        role_labels.ROLE_ADMINISTRATOR,
        role_labels.ROLE_MODERATOR,
        role_labels.ROLE_CURATOR,
        role_labels.ROLE_TESTER,
        role_labels.ROLE_MECHANIC,
        role_labels.ROLE_HUNTER,
        role_labels.ROLE_HACKER,
        role_labels.ROLE_ARCHIVIST,
        role_labels.ROLE_TRIAL_CURATOR,
    ]
    roles = {label: Role(name=label) for label in labels}
    db.add_all(roles.values())
    db.flush()

    # Users
    ada = User(username="ada_admin")
    ada.roles.append(roles[role_labels.ROLE_ADMINISTRATOR])

    carl = User(username="carl_curator")
    carl.roles.append(roles[role_labels.ROLE_CURATOR])

    arne = User(username="arne_archivist")
    arne.roles.append(roles[role_labels.ROLE_ARCHIVIST])

    tina = User(username="tina_trial")
    tina.roles.append(roles[role_labels.ROLE_TRIAL_CURATOR])

    sam = User(username="sam_submitter")

    db.add_all([ada, carl, arne, tina, sam])
    db.flush()

    # Submissions and their files
    s1 = Submission(submitter_id=sam.id, title="Flash game pack")
    s2 = Submission(submitter_id=sam.id, title="Animation collection")
    s3 = Submission(submitter_id=tina.id, title="Trial curation")
    db.add_all([s1, s2, s3])
    db.flush()

    db.add_all(
        [
            SubmissionFile(submission_id=s1.id, submitter_id=sam.id, original_filename="pack.7z", size=1024),
            SubmissionFile(submission_id=s2.id, submitter_id=sam.id, original_filename="anim.zip", size=2048),
            SubmissionFile(submission_id=s3.id, submitter_id=tina.id, original_filename="trial.7z", size=512),
        ]
    )

    db.commit()
