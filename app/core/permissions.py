"""
Role policy.

A static table maps each role to the capabilities it holds. Checks are pure:
they look only at the role passed in, which callers take from the stored
User row rather than from the session token.
"""
import enum
from typing import Dict, FrozenSet, Union

from app.models.user import UserRole


class Capability(str, enum.Enum):
    VIEW_OWN_RECORDS = "view_own_records"
    VIEW_ALL_RECORDS = "view_all_records"
    APPROVE_LEAVE = "approve_leave"
    MANAGE_PAYROLL = "manage_payroll"
    MANAGE_USERS = "manage_users"


_STAFF = frozenset({
    Capability.VIEW_OWN_RECORDS,
    Capability.VIEW_ALL_RECORDS,
    Capability.APPROVE_LEAVE,
    Capability.MANAGE_PAYROLL,
})

ROLE_CAPABILITIES: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.EMPLOYEE: frozenset({Capability.VIEW_OWN_RECORDS}),
    UserRole.HR: _STAFF,
    UserRole.ADMIN: _STAFF | {Capability.MANAGE_USERS},
}


def is_allowed(role: Union[UserRole, str, None], capability: Capability) -> bool:
    """Return True if ``role`` holds ``capability``. Unknown roles hold nothing."""
    if role is None:
        return False
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return capability in ROLE_CAPABILITIES.get(role, frozenset())
