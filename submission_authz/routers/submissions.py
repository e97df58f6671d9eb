from __future__ import annotations

from fastapi import APIRouter, Depends, Form, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from submission_authz.authz import CanPerformAction, HasAnyRole, Identity, OwnsResource, ResourceKind, WithinLimit
from submission_authz.authz.engine import parse_id_list
from submission_authz.authz.roles import DECIDER_ROLES
from submission_authz.db.session import get_db
from submission_authz.models.submission import Comment, Submission, SubmissionFile
from submission_authz.schemas.submission import CommentOut, SubmissionFileOut, SubmissionIn, SubmissionOut
from submission_authz.security.decorators import protect
from submission_authz.security.dependencies import get_identity
from submission_authz.settings import get_settings

router = APIRouter(tags=["submissions"])

_settings = get_settings()


@router.post("/submission-receiver", response_model=SubmissionOut, status_code=status.HTTP_201_CREATED)
@protect(WithinLimit(ResourceKind.SUBMISSION_ID, _settings.max_submissions))
def receive_submission(
    payload: SubmissionIn,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> Submission:
    submission = Submission(submitter_id=identity.user_id, title=payload.title)
    db.add(submission)
    db.commit()
    db.refresh(submission)
    return submission


@router.get("/submissions/{submission_id}", response_model=SubmissionOut)
@protect(OwnsResource(ResourceKind.SUBMISSION_ID))
def get_submission(submission_id: int, db: Session = Depends(get_db)) -> Submission:
    submission = db.get(Submission, submission_id)
    if submission is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")
    return submission


@router.post("/submissions/{submission_id}/comment", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
@protect(CanPerformAction())
def comment_submission(
    submission_id: int,
    action: str = Form(""),
    message: str | None = Form(None),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> Comment:
    if db.get(Submission, submission_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission not found")

    comment = Comment(submission_id=submission_id, author_id=identity.user_id, action=action, message=message)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment


@router.post(
    "/submission-batch/{submission_ids}/comment",
    response_model=list[CommentOut],
    status_code=status.HTTP_201_CREATED,
)
@protect(OwnsResource(ResourceKind.SUBMISSION_IDS), CanPerformAction())
def comment_submission_batch(
    submission_ids: str,
    action: str = Form(""),
    message: str | None = Form(None),
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> list[Comment]:
    # Already validated by the ownership check.
    sids = parse_id_list(submission_ids, ResourceKind.SUBMISSION_IDS.path_key)

    comments = [
        Comment(submission_id=sid, author_id=identity.user_id, action=action, message=message) for sid in sids
    ]
    db.add_all(comments)
    db.commit()
    for comment in comments:
        db.refresh(comment)
    return comments


@router.get("/files/{file_id}", response_model=SubmissionFileOut)
@protect(OwnsResource(ResourceKind.FILE_ID))
def get_submission_file(file_id: int, db: Session = Depends(get_db)) -> SubmissionFile:
    submission_file = db.get(SubmissionFile, file_id)
    if submission_file is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Submission file not found")
    return submission_file


@router.get("/staff/submissions", response_model=list[SubmissionOut])
@protect(HasAnyRole(DECIDER_ROLES))
def list_all_submissions(db: Session = Depends(get_db)) -> list[Submission]:
    return list(db.scalars(select(Submission).order_by(Submission.id)).all())
