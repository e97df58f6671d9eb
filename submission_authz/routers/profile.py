from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from submission_authz.authz import Identity
from submission_authz.db.session import get_db
from submission_authz.models.security import User
from submission_authz.schemas.security import ProfileOut
from submission_authz.security.decorators import protect
from submission_authz.security.dependencies import get_identity

router = APIRouter(tags=["profile"])


@router.get("/profile", response_model=ProfileOut)
@protect()
def profile(identity: Identity = Depends(get_identity), db: Session = Depends(get_db)) -> ProfileOut:
    user = db.scalars(select(User).where(User.id == identity.user_id).options(selectinload(User.roles))).first()
    if user is None:
        # Session points at a user that no longer exists.
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return ProfileOut(user_id=user.id, username=user.username, roles=sorted(r.name for r in user.roles))
