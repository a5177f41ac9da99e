import pytest

from complaintdesk.models.base.enums import UserRole
from complaintdesk.models.category import AdminCategoryAssignment
from complaintdesk.models.user import User
from complaintdesk.models.user import UserRole as UserRoleRow
from complaintdesk.repositories.category import AdminCategoryAssignmentRepository
from complaintdesk.schemas.admin import CategoryAdminCreate
from complaintdesk.services.admin import AdminProvisioningService
from complaintdesk.services.auth.identity_provider import IdentityProvider
from complaintdesk.services.base import ErrorCode


@pytest.fixture
def request_for(categories):
    def _request(**overrides):
        fields = {
            "name": "Carl Category",
            "email": "carl@example.com",
            "password": "hunter22",
            "category_ids": [categories["network"].id],
        }
        fields.update(overrides)
        return CategoryAdminCreate(**fields)

    return _request


def test_provisions_category_admin(db, principals, categories, request_for, resolve):
    result = AdminProvisioningService(db).create_category_admin(principals["super_admin"], request_for())

    assert result.is_success
    assert result.data.email == "carl@example.com"
    user = db.get(User, result.data.id)
    principal = resolve(user)
    assert principal.role == UserRole.CATEGORY_ADMIN
    assert principal.category_ids == {categories["network"].id}
    assert IdentityProvider(db).authenticate("carl@example.com", "hunter22").id == user.id


def test_only_global_admins_provision(db, principals, request_for):
    result = AdminProvisioningService(db).create_category_admin(principals["network_admin"], request_for())
    assert result.error_code == ErrorCode.UNAUTHORIZED


@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"email": "not-an-email"}, "email"),
        ({"password": "12345"}, "password"),
        ({"category_ids": []}, "category_ids"),
        ({"category_ids": ["missing"]}, "category_ids"),
        ({"name": "  "}, "name"),
    ],
)
def test_invalid_requests_write_nothing(db, principals, request_for, overrides, field):
    users_before = db.query(User).count()

    result = AdminProvisioningService(db).create_category_admin(principals["admin"], request_for(**overrides))

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.error.field == field
    assert db.query(User).count() == users_before


def test_duplicate_email_leaves_no_partial_state(db, principals, users, request_for):
    assignments_before = db.query(AdminCategoryAssignment).count()
    users_before = db.query(User).count()

    result = AdminProvisioningService(db).create_category_admin(
        principals["admin"], request_for(email=users["student"].email.upper())
    )

    assert result.error_code == ErrorCode.VALIDATION_ERROR
    assert result.error.field == "email"
    assert db.query(AdminCategoryAssignment).count() == assignments_before
    assert db.query(User).count() == users_before


def test_failure_after_identity_creation_deletes_identity(db, principals, request_for, monkeypatch):
    def fail_assign(self, *args, **kwargs):
        raise RuntimeError("assignment store unavailable")

    monkeypatch.setattr(AdminCategoryAssignmentRepository, "assign", fail_assign)
    users_before = db.query(User).count()

    result = AdminProvisioningService(db).create_category_admin(principals["admin"], request_for())

    assert result.error_code == ErrorCode.PROVISIONING_FAILED
    assert result.error.details == {"step": "assign_categories"}
    assert "assignment store unavailable" in result.error.message
    assert db.query(User).count() == users_before
    assert db.query(User).filter_by(email="carl@example.com").first() is None
    assert db.query(UserRoleRow).filter_by(role=UserRole.CATEGORY_ADMIN).count() == 2
