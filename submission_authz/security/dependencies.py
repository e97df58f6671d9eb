from __future__ import annotations

import logging
from typing import NoReturn

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from submission_authz.authz import ActionRules, Authorizer, AuthzDecision, DenyReason, Identity
from submission_authz.db.session import get_db
from submission_authz.security.auth import extract_request_params, extract_session_secret
from submission_authz.security.cookies import LoginCookie, MalformedCredentialError
from submission_authz.security.decorators import declared_predicates
from submission_authz.security.store import SqlAuthzStore

logger = logging.getLogger(__name__)

# User-facing messages; details stay in the server log.
_DENY_DETAIL: dict[DenyReason, str] = {
    DenyReason.UNAUTHENTICATED: "session expired, please log in to continue",
    DenyReason.FORBIDDEN: "you do not have the proper authorization to access this page",
    DenyReason.INVALID_INPUT: "invalid request parameters",
    DenyReason.NOT_FOUND: "resource not found",
    DenyReason.INTERNAL_ERROR: "failed to verify authority",
}
_MALFORMED_COOKIE_DETAIL = "failed to parse cookie, please clear your cookies and try again"


def get_action_rules(request: Request) -> ActionRules:
    rules = getattr(request.app.state, "action_rules", None)
    if rules is None:
        raise RuntimeError("Action rules not loaded. Did app startup run?")
    return rules


def get_login_cookie(request: Request) -> LoginCookie:
    cookie = getattr(request.app.state, "login_cookie", None)
    if cookie is None:
        raise RuntimeError("Login cookie codec not loaded. Did app startup run?")
    return cookie


def get_authorizer(
    rules: ActionRules = Depends(get_action_rules),
    db: Session = Depends(get_db),
) -> Authorizer:
    return Authorizer(SqlAuthzStore(db), rules)


def get_identity(request: Request) -> Identity:
    identity = getattr(request.state, "identity", None)
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Authentication required")
    return identity


async def enforce_authorization(
    request: Request,
    cookie: LoginCookie = Depends(get_login_cookie),
    authorizer: Authorizer = Depends(get_authorizer),
) -> None:
    """
    Global authorization dependency.

    Runs after routing, so it can read the checks `protect` attached to the
    matched endpoint. Endpoints without `protect` are public.
    """

    predicates = declared_predicates(request.scope.get("endpoint"))
    if predicates is None:
        return

    try:
        secret = extract_session_secret(request, cookie)
    except MalformedCredentialError as exc:
        logger.warning("Malformed login cookie path=%s method=%s", request.url.path, request.method)
        _raise_for(
            request,
            AuthzDecision.denied(DenyReason.UNAUTHENTICATED, error=exc, status_code=status.HTTP_400_BAD_REQUEST),
            detail=_MALFORMED_COOKIE_DETAIL,
        )

    params = await extract_request_params(request, predicates)

    # Lookups are blocking; keep them off the event loop.
    decision = await run_in_threadpool(authorizer.authorize, secret, params, predicates)
    if not decision.admit:
        _raise_for(request, decision)

    request.state.identity = decision.identity


def _raise_for(request: Request, decision: AuthzDecision, detail: str | None = None) -> NoReturn:
    logger.info(
        "Request denied path=%s method=%s reason=%s status=%s user_id=%s",
        request.url.path,
        request.method,
        decision.reason,
        decision.status_code,
        decision.identity.user_id if decision.identity else None,
    )
    raise HTTPException(
        status_code=decision.status_code,
        detail=detail or _DENY_DETAIL[decision.reason],
    ) from decision.error
