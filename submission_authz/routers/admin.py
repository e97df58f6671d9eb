from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from submission_authz.authz import HasAllRoles
from submission_authz.authz.roles import ROLE_ADMINISTRATOR
from submission_authz.db.session import get_db
from submission_authz.models.security import User
from submission_authz.schemas.security import UserOut
from submission_authz.security.decorators import protect

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/users", response_model=list[UserOut])
@protect(HasAllRoles({ROLE_ADMINISTRATOR}))
def list_users(db: Session = Depends(get_db)) -> list[User]:
    stmt = select(User).options(selectinload(User.roles)).order_by(User.id)
    return list(db.scalars(stmt).all())
