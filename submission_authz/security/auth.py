from __future__ import annotations

import logging
from collections.abc import Sequence

from fastapi import Request
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException
from starlette.requests import ClientDisconnect

from submission_authz.authz import AuthorizerPredicate, RequestParams
from submission_authz.security.cookies import LoginCookie

logger = logging.getLogger(__name__)


def extract_session_secret(request: Request, cookie: LoginCookie) -> str | None:
    """
    Read the session secret from the login cookie.

    - Returns None when the cookie is absent (caller must log in).
    - Raises MalformedCredentialError when the cookie cannot be decoded.
    """

    if cookie.name not in request.cookies:
        logger.info("Missing login cookie path=%s method=%s", request.url.path, request.method)
        return None

    return cookie.read(request.cookies)


async def extract_request_params(request: Request, predicates: Sequence[AuthorizerPredicate]) -> RequestParams:
    """
    Collect what the declared checks need from the request.

    The form body is only decoded when some check reads it. A decode failure is
    kept on the params instead of raised, so it denies through the check.
    """

    path = {key: str(value) for key, value in request.path_params.items()}

    if not any(p.requires_form for p in predicates):
        return RequestParams(path=path)

    try:
        form = await request.form()
    except (MultiPartException, HTTPException, ClientDisconnect) as exc:
        # Inside an app Starlette reports multipart errors as a 400 HTTPException.
        logger.warning("Failed to decode form path=%s method=%s", request.url.path, request.method)
        return RequestParams(path=path, form_error=exc)

    return RequestParams(path=path, form={key: value for key, value in form.items()})
