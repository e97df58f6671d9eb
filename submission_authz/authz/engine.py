"""
Authorization decision engine.

An `Authorizer` is built per request around a request-scoped `AuthzStore` and
the process-wide, immutable `ActionRules`. It answers:

    resolve_identity(secret)           -> Identity | None
    authorize(secret, params, checks)  -> AuthzDecision

plus the individual role, ownership, quota and action checks that the
predicates in `predicates.py` dispatch to.

This module is pure Python and has no FastAPI dependency.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence

from .errors import (
    ActionDecodeError,
    AuthorizationError,
    DenyReason,
    InvalidInputError,
    InvalidResourceError,
    NotFoundError,
)
from .predicates import AuthorizerPredicate
from .roles import ActionRules, has_all_roles, has_any_role
from .store import AuthzStore
from .types import ACTION_FIELD, AuthzDecision, Identity, RequestParams, ResourceKind, SubmissionsFilter

logger = logging.getLogger(__name__)

_ID_RE = re.compile(r"[+-]?0*[0-9]{1,19}")
_ID_MIN = -(2**63)
_ID_MAX = 2**63 - 1


def parse_id(raw: str | None, key: str) -> int:
    if raw is None or not _ID_RE.fullmatch(raw):
        raise InvalidInputError(f"invalid {key}: {raw and raw[:32]!r}")
    try:
        value = int(raw)
    except ValueError as exc:
        raise InvalidInputError(f"invalid {key}: out of range") from exc
    # Ids are signed 64-bit in storage.
    if not _ID_MIN <= value <= _ID_MAX:
        raise InvalidInputError(f"invalid {key}: out of range")
    return value


def parse_id_list(raw: str | None, key: str) -> list[int]:
    """Parse a comma-joined id list; every entry must be an integer."""
    if raw is None:
        raise InvalidInputError(f"missing {key}")
    return [parse_id(part, key) for part in raw.split(",")]


class Authorizer:
    def __init__(self, store: AuthzStore, rules: ActionRules) -> None:
        self._store = store
        self._rules = rules

    # ---- Identity -------------------------------------------------------------------

    def resolve_identity(self, secret: str) -> Identity | None:
        """
        Turn a session secret into an identity.

        Returns None when no session exists or it has expired. Lookup failures
        raise `StoreError`.
        """
        user_id = self._store.get_uid_from_session(secret)
        if user_id is None:
            return None
        return Identity(user_id=user_id)

    # ---- Combinator -----------------------------------------------------------------

    def authorize(
        self,
        secret: str | None,
        params: RequestParams,
        predicates: Sequence[AuthorizerPredicate] = (),
    ) -> AuthzDecision:
        """
        Resolve the caller, then require every predicate to pass.

        Predicates run in order. The first one that raises stops evaluation and
        its error decides the deny reason; the first one returning False stops
        evaluation with FORBIDDEN.
        """

        if secret is None:
            logger.info("No session credential")
            return AuthzDecision.denied(DenyReason.UNAUTHENTICATED)

        try:
            identity = self.resolve_identity(secret)
        except AuthorizationError as exc:
            logger.error("Failed to load session", exc_info=exc)
            return AuthzDecision.denied(DenyReason.INTERNAL_ERROR, error=exc)

        if identity is None:
            logger.info("Session missing or expired")
            return AuthzDecision.denied(DenyReason.UNAUTHENTICATED)

        for predicate in predicates:
            try:
                ok = predicate.evaluate(self, params, identity.user_id)
            except AuthorizationError as exc:
                if exc.reason is DenyReason.INTERNAL_ERROR:
                    logger.error(
                        "Authorization check failed check=%s user_id=%s",
                        predicate,
                        identity.user_id,
                        exc_info=exc,
                    )
                else:
                    logger.info(
                        "Authorization check rejected input check=%s user_id=%s reason=%s: %s",
                        predicate,
                        identity.user_id,
                        exc.reason,
                        exc,
                    )
                return AuthzDecision.denied(exc.reason, identity=identity, error=exc)
            if not ok:
                logger.info("Unauthorized attempt check=%s user_id=%s", predicate, identity.user_id)
                return AuthzDecision.denied(DenyReason.FORBIDDEN, identity=identity)

        return AuthzDecision.admitted(identity)

    # ---- Roles ----------------------------------------------------------------------

    def has_all_roles(self, user_id: int, required_roles: Iterable[str]) -> bool:
        return has_all_roles(self._store.get_user_roles(user_id), required_roles)

    def has_any_role(self, user_id: int, candidate_roles: Iterable[str]) -> bool:
        return has_any_role(self._store.get_user_roles(user_id), candidate_roles)

    # ---- Ownership ------------------------------------------------------------------

    def owns_resource(self, params: RequestParams, user_id: int, kind: ResourceKind) -> bool:
        """
        True when the caller submitted every resource the request references.

        A missing resource raises `NotFoundError`, while a resource owned by
        someone else returns False.
        """

        if kind is ResourceKind.SUBMISSION_ID:
            sid = parse_id(params.path.get(kind.path_key), kind.path_key)
            return self._submission_owner(sid) == user_id

        if kind is ResourceKind.SUBMISSION_IDS:
            # Parse everything before the first lookup.
            sids = parse_id_list(params.path.get(kind.path_key), kind.path_key)
            for sid in sids:
                if self._submission_owner(sid) != user_id:
                    return False
            return True

        if kind is ResourceKind.FILE_ID:
            fid = parse_id(params.path.get(kind.path_key), kind.path_key)
            files = self._store.get_submission_files([fid])
            if not files:
                raise NotFoundError(f"submission file with id {fid} not found")
            return files[0].submitter_id == user_id

        raise InvalidResourceError(f"invalid resource {kind!r}")

    def _submission_owner(self, sid: int) -> int:
        submissions = self._store.search_submissions(SubmissionsFilter(submission_id=sid))
        if not submissions:
            raise NotFoundError(f"submission with id {sid} not found")
        return submissions[0].submitter_id

    # ---- Quota ----------------------------------------------------------------------

    def within_limit(self, user_id: int, kind: ResourceKind, max_count: int) -> bool:
        """True while the caller owns fewer than `max_count` resources of `kind`."""
        if kind is not ResourceKind.SUBMISSION_ID:
            raise InvalidResourceError(f"invalid resource {kind!r}")

        submissions = self._store.search_submissions(SubmissionsFilter(submitter_id=user_id))
        return len(submissions) < max_count

    # ---- Actions --------------------------------------------------------------------

    def can_perform_action(self, params: RequestParams, user_id: int) -> bool:
        if params.form_error is not None:
            raise ActionDecodeError("failed to decode submitted form") from params.form_error
        if params.form is None:
            raise ActionDecodeError("submitted form was not decoded")

        user_roles = self._store.get_user_roles(user_id)
        action = params.form.get(ACTION_FIELD) or ""
        return self._rules.permits(action, user_roles)
