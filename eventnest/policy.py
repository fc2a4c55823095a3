# -*- coding: utf-8 -*-
"""
Role based access policy.

Every guarded operation is an ``Action``; ``POLICY`` maps each action to the
roles allowed to perform it. Ownership rules (an organizer may only manage
their own events) live in ``can_manage_event``.
"""

import enum

from eventnest.models.user import Role


class Action(str, enum.Enum):
    REGISTER_FOR_EVENT = "register_for_event"
    VIEW_OWN_REGISTRATIONS = "view_own_registrations"
    MANAGE_EVENTS = "manage_events"
    MANAGE_ATTENDANCE = "manage_attendance"
    ISSUE_CERTIFICATES = "issue_certificates"
    ADMINISTER = "administer"


POLICY = {
    Action.REGISTER_FOR_EVENT: frozenset({Role.STUDENT}),
    Action.VIEW_OWN_REGISTRATIONS: frozenset({Role.STUDENT}),
    Action.MANAGE_EVENTS: frozenset({Role.ORGANIZER, Role.ADMIN}),
    Action.MANAGE_ATTENDANCE: frozenset({Role.ORGANIZER, Role.ADMIN}),
    Action.ISSUE_CERTIFICATES: frozenset({Role.ORGANIZER, Role.ADMIN}),
    Action.ADMINISTER: frozenset({Role.ADMIN}),
}


def is_allowed(role, action: Action) -> bool:
    try:
        role = Role(role)
    except ValueError:
        return False
    return role in POLICY.get(action, frozenset())


def can_manage_event(user, event) -> bool:
    return Role(user.role) == Role.ADMIN or event.organizer_id == user.id
