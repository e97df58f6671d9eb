from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class SubmissionIn(BaseModel):
    title: str = Field(min_length=1, max_length=200)


class SubmissionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submitter_id: int
    title: str
    created_at: datetime


class SubmissionFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: int
    submitter_id: int
    original_filename: str
    size: int


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    submission_id: int
    author_id: int
    action: str
    message: str | None
    created_at: datetime
