from types import SimpleNamespace

import pytest

from complaintdesk.core.exceptions import AuthorizationError
from complaintdesk.models.base.enums import UserRole
from complaintdesk.services.common.permissions import (
    Principal,
    can_delete_note,
    can_read,
    can_send_message,
    can_write,
    require_read,
    require_role,
    require_write,
)

OWNER = "owner-1"
CATEGORIES = ["cat-a", "cat-b", None]

PRINCIPALS = [
    Principal(user_id=OWNER, role=UserRole.STUDENT),
    Principal(user_id="student-2", role=UserRole.STUDENT),
    Principal(user_id="cat-admin-a", role=UserRole.CATEGORY_ADMIN, category_ids=frozenset({"cat-a"})),
    Principal(user_id="cat-admin-ab", role=UserRole.CATEGORY_ADMIN, category_ids=frozenset({"cat-a", "cat-b"})),
    Principal(user_id="cat-admin-none", role=UserRole.CATEGORY_ADMIN),
    Principal(user_id="admin", role=UserRole.ADMIN),
    Principal(user_id="super", role=UserRole.SUPER_ADMIN),
]


def complaint(category_id, user_id=OWNER):
    return SimpleNamespace(user_id=user_id, category_id=category_id)


@pytest.mark.parametrize("principal", PRINCIPALS, ids=lambda p: p.user_id)
@pytest.mark.parametrize("category_id", CATEGORIES)
def test_write_implies_read(principal, category_id):
    c = complaint(category_id)
    if can_write(principal, c):
        assert can_read(principal, c)


@pytest.mark.parametrize("category_id", CATEGORIES)
def test_category_admin_scope_matches_assignments(category_id):
    for principal in PRINCIPALS:
        if principal.role != UserRole.CATEGORY_ADMIN:
            continue
        c = complaint(category_id)
        in_scope = category_id is not None and category_id in principal.category_ids
        assert can_read(principal, c) is in_scope
        assert can_write(principal, c) is in_scope


def test_owner_reads_but_never_writes():
    owner = PRINCIPALS[0]
    for category_id in CATEGORIES:
        c = complaint(category_id)
        assert can_read(owner, c)
        assert not can_write(owner, c)


def test_other_students_are_denied():
    stranger = PRINCIPALS[1]
    c = complaint("cat-a")
    assert not can_read(stranger, c)
    assert not can_write(stranger, c)


@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.SUPER_ADMIN])
def test_global_admins_read_and_write_everything(role):
    principal = Principal(user_id="staff", role=role)
    for category_id in CATEGORIES:
        assert can_read(principal, complaint(category_id))
        assert can_write(principal, complaint(category_id))


def test_uncategorized_complaints_are_outside_category_admin_scope():
    principal = PRINCIPALS[3]
    assert not can_read(principal, complaint(None))
    assert principal.visible_category_ids() == frozenset({"cat-a", "cat-b"})


def test_note_delete_requires_authorship_regardless_of_role():
    note = SimpleNamespace(admin_id="cat-admin-a")
    assert can_delete_note(PRINCIPALS[2], note)
    assert not can_delete_note(Principal(user_id="super", role=UserRole.SUPER_ADMIN), note)


def test_message_sending_follows_read_access():
    c = complaint("cat-a")
    assert can_send_message(PRINCIPALS[0], c)
    assert can_send_message(PRINCIPALS[2], c)
    assert not can_send_message(PRINCIPALS[1], c)


def test_require_helpers_raise_authorization_error():
    student = PRINCIPALS[1]
    with pytest.raises(AuthorizationError):
        require_read(student, complaint("cat-a"))
    with pytest.raises(AuthorizationError):
        require_write(PRINCIPALS[0], complaint("cat-a"))
    with pytest.raises(AuthorizationError):
        require_role(student, [UserRole.ADMIN, UserRole.SUPER_ADMIN])
    require_role(PRINCIPALS[5], [UserRole.ADMIN])


def test_resolver_loads_role_and_scope(principals, categories, users):
    network_admin = principals["network_admin"]
    assert network_admin.role == UserRole.CATEGORY_ADMIN
    assert network_admin.category_ids == frozenset({categories["network"].id})
    assert principals["admin"].category_ids == frozenset()
    assert principals["student"].user_id == users["student"].id


def test_resolver_returns_none_without_role(make_user, resolve):
    user = make_user("No Role", role=None)
    assert resolve(user) is None
