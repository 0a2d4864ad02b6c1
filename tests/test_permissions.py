import pytest

from app.core.permissions import Capability, is_allowed
from app.models.user import UserRole


@pytest.mark.parametrize("capability", list(Capability))
def test_admin_holds_everything(capability):
    assert is_allowed(UserRole.ADMIN, capability)


def test_hr_is_staff_but_cannot_manage_users():
    assert is_allowed(UserRole.HR, Capability.VIEW_ALL_RECORDS)
    assert is_allowed(UserRole.HR, Capability.APPROVE_LEAVE)
    assert is_allowed(UserRole.HR, Capability.MANAGE_PAYROLL)
    assert not is_allowed(UserRole.HR, Capability.MANAGE_USERS)


def test_employee_sees_only_own_records():
    assert is_allowed(UserRole.EMPLOYEE, Capability.VIEW_OWN_RECORDS)
    assert not is_allowed(UserRole.EMPLOYEE, Capability.VIEW_ALL_RECORDS)
    assert not is_allowed(UserRole.EMPLOYEE, Capability.APPROVE_LEAVE)
    assert not is_allowed(UserRole.EMPLOYEE, Capability.MANAGE_PAYROLL)


def test_plain_string_roles_are_accepted():
    assert is_allowed("hr", Capability.APPROVE_LEAVE)


@pytest.mark.parametrize("role", [None, "", "superuser"])
def test_unknown_roles_hold_nothing(role):
    assert not is_allowed(role, Capability.VIEW_OWN_RECORDS)
