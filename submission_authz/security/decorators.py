from __future__ import annotations

from collections.abc import Callable

from submission_authz.authz import AuthorizerPredicate

PREDICATES_ATTR = "__authz_predicates__"


def protect(*predicates: AuthorizerPredicate) -> Callable:
    """
    Gate an endpoint behind authentication plus the given checks.

    Implementation detail:
    - This decorator does NOT perform auth itself.
    - It attaches the checks to the endpoint; the global
      `enforce_authorization` dependency reads them after routing.
    - `@protect()` with no checks admits any authenticated user.
    - Stacked decorators evaluate top to bottom, as read.
    """

    for predicate in predicates:
        if not isinstance(predicate, AuthorizerPredicate):
            raise TypeError(f"protect() expects AuthorizerPredicate instances, got {predicate!r}")

    def decorator(fn: Callable) -> Callable:
        existing = tuple(getattr(fn, PREDICATES_ATTR, ()))
        setattr(fn, PREDICATES_ATTR, tuple(predicates) + existing)
        return fn

    return decorator


def declared_predicates(endpoint: Callable | None) -> tuple[AuthorizerPredicate, ...] | None:
    """Checks attached by `protect`, or None for an unprotected endpoint."""
    if endpoint is None:
        return None
    return getattr(endpoint, PREDICATES_ATTR, None)
