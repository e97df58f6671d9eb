"""
Composable authorization checks.

Every check shares one interface, `evaluate(authorizer, params, user_id)`,
returning True/False or raising an `AuthorizationError`. The checks carry only
their declared arguments; all lookups go through the `Authorizer`, so a single
instance can be attached to a route at import time and reused by every request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .types import RequestParams, ResourceKind

if TYPE_CHECKING:
    from .engine import Authorizer


class AuthorizerPredicate(ABC):
    # Set when the check reads the submitted form.
    requires_form: bool = False

    @abstractmethod
    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        raise NotImplementedError


@dataclass(frozen=True)
class HasAllRoles(AuthorizerPredicate):
    roles: frozenset[str]

    def __init__(self, roles: Iterable[str]) -> None:
        object.__setattr__(self, "roles", frozenset(roles))

    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        return authorizer.has_all_roles(user_id, self.roles)


@dataclass(frozen=True)
class HasAnyRole(AuthorizerPredicate):
    roles: frozenset[str]

    def __init__(self, roles: Iterable[str]) -> None:
        object.__setattr__(self, "roles", frozenset(roles))

    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        return authorizer.has_any_role(user_id, self.roles)


@dataclass(frozen=True)
class OwnsResource(AuthorizerPredicate):
    kind: ResourceKind

    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        return authorizer.owns_resource(params, user_id, self.kind)


@dataclass(frozen=True)
class WithinLimit(AuthorizerPredicate):
    kind: ResourceKind
    max_count: int

    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        return authorizer.within_limit(user_id, self.kind, self.max_count)


@dataclass(frozen=True)
class CanPerformAction(AuthorizerPredicate):
    requires_form = True

    def evaluate(self, authorizer: Authorizer, params: RequestParams, user_id: int) -> bool:
        return authorizer.can_perform_action(params, user_id)
