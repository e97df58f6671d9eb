"""Authorization failures and the deny reasons they classify to."""

from __future__ import annotations

from enum import Enum, unique


@unique
class DenyReason(str, Enum):
    """Why a request was not admitted."""

    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    INTERNAL_ERROR = "internal_error"

    def __str__(self) -> str:
        return self.value


class AuthorizationError(Exception):
    """
    Hard failure while evaluating an authorization check.

    A raised error always denies, no matter what the check would otherwise
    have returned. Subclasses pin the deny reason used by the combinator.
    """

    reason: DenyReason = DenyReason.INTERNAL_ERROR


class InvalidInputError(AuthorizationError):
    """Request parameters could not be parsed (e.g. a non-integer id)."""

    reason = DenyReason.INVALID_INPUT


class NotFoundError(AuthorizationError):
    """A referenced resource does not exist."""

    reason = DenyReason.NOT_FOUND


class InvalidResourceError(AuthorizationError):
    """A check was configured with a resource kind it cannot handle."""


class StoreError(AuthorizationError):
    """A session, role or resource lookup failed."""


class ActionDecodeError(AuthorizationError):
    """The submitted form carrying the action could not be decoded."""
