from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum, unique

from .errors import DenyReason


# Path parameter names carrying resource identifiers.
RESOURCE_KEY_SUBMISSION_ID = "submission_id"
RESOURCE_KEY_SUBMISSION_IDS = "submission_ids"
RESOURCE_KEY_FILE_ID = "file_id"

# Form field carrying the requested action.
ACTION_FIELD = "action"


@unique
class ResourceKind(Enum):
    """Resource reference shapes an ownership or quota check understands."""

    SUBMISSION_ID = RESOURCE_KEY_SUBMISSION_ID
    SUBMISSION_IDS = RESOURCE_KEY_SUBMISSION_IDS
    FILE_ID = RESOURCE_KEY_FILE_ID

    @property
    def path_key(self) -> str:
        return self.value


@dataclass(frozen=True)
class Identity:
    """The authenticated caller of one request."""

    user_id: int


@dataclass(frozen=True)
class ResourceRef:
    """Ownership metadata of a submission or submission file."""

    id: int
    submitter_id: int


@dataclass(frozen=True)
class SubmissionsFilter:
    submission_id: int | None = None
    submitter_id: int | None = None


@dataclass(frozen=True)
class RequestParams:
    """
    The parts of an HTTP request that authorization checks may read.

    `form` is only populated when a check asked for it; `form_error` holds the
    decode failure, if any, so the check that needs the form can raise it.
    """

    path: Mapping[str, str] = field(default_factory=dict)
    form: Mapping[str, str] | None = None
    form_error: Exception | None = None


_STATUS_BY_REASON: dict[DenyReason, int] = {
    DenyReason.UNAUTHENTICATED: 401,
    DenyReason.FORBIDDEN: 401,
    DenyReason.INVALID_INPUT: 400,
    DenyReason.NOT_FOUND: 404,
    DenyReason.INTERNAL_ERROR: 500,
}


@dataclass(frozen=True)
class AuthzDecision:
    """Outcome of one authorization pass."""

    admit: bool
    identity: Identity | None = None
    reason: DenyReason | None = None
    error: Exception | None = None
    status_code: int | None = None

    @classmethod
    def admitted(cls, identity: Identity) -> AuthzDecision:
        return cls(admit=True, identity=identity)

    @classmethod
    def denied(
        cls,
        reason: DenyReason,
        *,
        identity: Identity | None = None,
        error: Exception | None = None,
        status_code: int | None = None,
    ) -> AuthzDecision:
        return cls(
            admit=False,
            identity=identity,
            reason=reason,
            error=error,
            status_code=status_code if status_code is not None else _STATUS_BY_REASON[reason],
        )
