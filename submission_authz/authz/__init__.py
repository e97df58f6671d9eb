"""
Authorization decision engine for submission requests.

This package has no dependency on other app packages (db, security, routers).
Build an `Authorizer` around an `AuthzStore` and `ActionRules`, then call
`authorize()` with the session secret, the request parameters and the checks
declared for the route.
"""

from .engine import Authorizer
from .errors import (
    ActionDecodeError,
    AuthorizationError,
    DenyReason,
    InvalidInputError,
    InvalidResourceError,
    NotFoundError,
    StoreError,
)
from .predicates import AuthorizerPredicate, CanPerformAction, HasAllRoles, HasAnyRole, OwnsResource, WithinLimit
from .roles import ActionRules, RoleGroups
from .store import AuthzStore
from .types import AuthzDecision, Identity, RequestParams, ResourceKind, ResourceRef, SubmissionsFilter

__all__ = [
    "ActionDecodeError",
    "ActionRules",
    "AuthorizationError",
    "Authorizer",
    "AuthorizerPredicate",
    "AuthzDecision",
    "AuthzStore",
    "CanPerformAction",
    "DenyReason",
    "HasAllRoles",
    "HasAnyRole",
    "Identity",
    "InvalidInputError",
    "InvalidResourceError",
    "NotFoundError",
    "OwnsResource",
    "RequestParams",
    "ResourceKind",
    "ResourceRef",
    "RoleGroups",
    "StoreError",
    "SubmissionsFilter",
    "WithinLimit",
]
