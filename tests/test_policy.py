from types import SimpleNamespace

import pytest

from eventnest.models.user import Role
from eventnest.policy import POLICY, Action, can_manage_event, is_allowed


@pytest.mark.parametrize("role, action, allowed", [
    (Role.STUDENT, Action.REGISTER_FOR_EVENT, True),
    (Role.ORGANIZER, Action.REGISTER_FOR_EVENT, False),
    (Role.ADMIN, Action.REGISTER_FOR_EVENT, False),
    (Role.STUDENT, Action.MANAGE_EVENTS, False),
    (Role.ORGANIZER, Action.MANAGE_EVENTS, True),
    (Role.ORGANIZER, Action.ISSUE_CERTIFICATES, True),
    (Role.ORGANIZER, Action.ADMINISTER, False),
    (Role.ADMIN, Action.ADMINISTER, True),
])
def test_policy_table(role, action, allowed):
    assert is_allowed(role, action) is allowed


def test_every_action_has_a_rule():
    assert set(POLICY) == set(Action)


def test_unknown_role_is_denied():
    assert is_allowed("GUEST", Action.REGISTER_FOR_EVENT) is False


def test_role_strings_are_accepted():
    assert is_allowed("ADMIN", Action.ADMINISTER) is True


def test_can_manage_event():
    event = SimpleNamespace(organizer_id="org-1")
    owner = SimpleNamespace(id="org-1", role=Role.ORGANIZER)
    other = SimpleNamespace(id="org-2", role=Role.ORGANIZER)
    admin = SimpleNamespace(id="adm", role=Role.ADMIN)

    assert can_manage_event(owner, event)
    assert not can_manage_event(other, event)
    assert can_manage_event(admin, event)
