"""
Role groups and the action -> role table.

Both are immutable values built once at startup and handed to every
`Authorizer`. Role labels are matched case-sensitively.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


# ---- Role labels ---------------------------------------------------------------------

ROLE_ADMINISTRATOR = "Administrator"
ROLE_MODERATOR = "Moderator"
ROLE_CURATOR = "Curator"
ROLE_TESTER = "Tester"
ROLE_MECHANIC = "Mechanic"
ROLE_HUNTER = "Hunter"
ROLE_HACKER = "Hacker"
ROLE_ARCHIVIST = "Archivist"
ROLE_TRIAL_CURATOR = "Trial Curator"

DECIDER_ROLES = frozenset(
    {ROLE_ADMINISTRATOR, ROLE_MODERATOR, ROLE_CURATOR, ROLE_TESTER, ROLE_MECHANIC, ROLE_HUNTER, ROLE_HACKER}
)
ADDER_ROLES = frozenset({ROLE_ADMINISTRATOR, ROLE_ARCHIVIST})
TRIAL_CURATOR_ROLES = frozenset({ROLE_TRIAL_CURATOR})

# ---- Actions -------------------------------------------------------------------------

ACTION_COMMENT = "comment"
ACTION_APPROVE = "approve"
ACTION_REJECT = "reject"
ACTION_REQUEST_CHANGES = "request-changes"
ACTION_ACCEPT = "accept"
ACTION_MARK_ADDED = "mark-added"
ACTION_ASSIGN = "assign"
ACTION_UNASSIGN = "unassign"

DECIDER_ACTIONS = (ACTION_APPROVE, ACTION_REJECT, ACTION_REQUEST_CHANGES, ACTION_ACCEPT)
ASSIGNMENT_ACTIONS = (ACTION_ASSIGN, ACTION_UNASSIGN)


def has_all_roles(user_roles: Iterable[str], required_roles: Iterable[str]) -> bool:
    """True when every required role is held. No required roles -> True."""
    return frozenset(required_roles) <= frozenset(user_roles)


def has_any_role(user_roles: Iterable[str], candidate_roles: Iterable[str]) -> bool:
    return not frozenset(user_roles).isdisjoint(candidate_roles)


@dataclass(frozen=True)
class RoleGroups:
    deciders: frozenset[str] = DECIDER_ROLES
    adders: frozenset[str] = ADDER_ROLES
    trial_curators: frozenset[str] = TRIAL_CURATOR_ROLES


@dataclass(frozen=True)
class ActionRules:
    """
    Which roles may perform which form action.

    `grants` maps an action to the role groups allowed to perform it; holding
    any role of any listed group is enough. Actions in `unconditional` are open
    to every authenticated user.
    """

    grants: Mapping[str, tuple[frozenset[str], ...]]
    unconditional: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        frozen = {action: tuple(frozenset(g) for g in groups) for action, groups in self.grants.items()}
        object.__setattr__(self, "grants", MappingProxyType(frozen))
        object.__setattr__(self, "unconditional", frozenset(self.unconditional))

    @classmethod
    def from_role_groups(cls, groups: RoleGroups) -> ActionRules:
        grants: dict[str, tuple[frozenset[str], ...]] = {ACTION_MARK_ADDED: (groups.adders,)}
        for action in DECIDER_ACTIONS:
            grants[action] = (groups.deciders,)
        for action in ASSIGNMENT_ACTIONS:
            grants[action] = (groups.deciders, groups.adders, groups.trial_curators)
        return cls(grants=grants, unconditional=frozenset({ACTION_COMMENT}))

    @classmethod
    def default(cls) -> ActionRules:
        return cls.from_role_groups(RoleGroups())

    def is_unconditional(self, action: str) -> bool:
        return action in self.unconditional

    def permits(self, action: str, user_roles: Iterable[str]) -> bool:
        if self.is_unconditional(action):
            return True
        roles = frozenset(user_roles)
        return any(has_any_role(roles, group) for group in self.grants.get(action, ()))
