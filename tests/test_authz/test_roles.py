"""Tests for role-set helpers and the action -> role table."""

import dataclasses

import pytest

from submission_authz.authz.roles import (
    ACTION_ACCEPT,
    ACTION_APPROVE,
    ACTION_ASSIGN,
    ACTION_COMMENT,
    ACTION_MARK_ADDED,
    ACTION_REQUEST_CHANGES,
    ACTION_UNASSIGN,
    ActionRules,
    RoleGroups,
    has_all_roles,
    has_any_role,
)


def test_has_all_roles_requires_superset():
    assert has_all_roles({"Curator", "Tester"}, {"Curator"}) is True
    assert has_all_roles({"Curator", "Tester"}, {"Curator", "Tester"}) is True
    assert has_all_roles({"Curator"}, {"Curator", "Tester"}) is False


def test_has_all_roles_empty_requirement_is_vacuously_true():
    assert has_all_roles(set(), set()) is True
    assert has_all_roles({"Curator"}, []) is True


def test_has_any_role_requires_intersection():
    assert has_any_role({"Curator", "Tester"}, {"Tester", "Hacker"}) is True
    assert has_any_role({"Curator"}, {"Tester"}) is False
    assert has_any_role(set(), {"Tester"}) is False
    assert has_any_role({"Tester"}, set()) is False


def test_role_matching_is_case_sensitive():
    assert has_any_role({"curator"}, {"Curator"}) is False
    assert has_all_roles({"CURATOR"}, {"Curator"}) is False


def test_default_rules_decider_actions():
    rules = ActionRules.default()
    for action in (ACTION_APPROVE, ACTION_REQUEST_CHANGES, ACTION_ACCEPT):
        assert rules.permits(action, {"Curator"}) is True
        assert rules.permits(action, {"Archivist"}) is False


def test_default_rules_mark_added_is_for_adders_only():
    rules = ActionRules.default()
    assert rules.permits(ACTION_MARK_ADDED, {"Archivist"}) is True
    assert rules.permits(ACTION_MARK_ADDED, {"Curator"}) is False


def test_default_rules_assignment_open_to_three_groups():
    rules = ActionRules.default()
    for action in (ACTION_ASSIGN, ACTION_UNASSIGN):
        assert rules.permits(action, {"Tester"}) is True
        assert rules.permits(action, {"Archivist"}) is True
        assert rules.permits(action, {"Trial Curator"}) is True
        assert rules.permits(action, set()) is False


def test_comment_needs_no_role():
    rules = ActionRules.default()
    assert rules.is_unconditional(ACTION_COMMENT)
    assert rules.permits(ACTION_COMMENT, set()) is True


def test_unknown_action_is_not_permitted():
    rules = ActionRules.default()
    assert rules.permits("delete-everything", {"Administrator"}) is False
    assert rules.permits("", {"Administrator"}) is False


def test_rules_follow_custom_role_groups():
    rules = ActionRules.from_role_groups(
        RoleGroups(deciders=frozenset({"Judge"}), adders=frozenset({"Clerk"}), trial_curators=frozenset({"Intern"}))
    )
    assert rules.permits(ACTION_APPROVE, {"Judge"}) is True
    assert rules.permits(ACTION_APPROVE, {"Curator"}) is False
    assert rules.permits(ACTION_ASSIGN, {"Intern"}) is True


def test_rules_are_immutable():
    rules = ActionRules.default()
    with pytest.raises(TypeError):
        rules.grants["approve"] = ()
    with pytest.raises(dataclasses.FrozenInstanceError):
        rules.unconditional = frozenset()


def test_rules_copy_the_input_mapping():
    grants = {"publish": [{"Editor"}]}
    rules = ActionRules(grants=grants)
    grants["publish"].append({"Anyone"})
    assert rules.permits("publish", {"Editor"}) is True
    assert rules.permits("publish", {"Anyone"}) is False
