from collections import Counter

from complaintdesk.models.base.enums import UserRole
from complaintdesk.models.category import AdminCategoryAssignment, Category
from complaintdesk.models.complaint import Complaint
from complaintdesk.repositories.user import UserRoleRepository
from complaintdesk.services.admin import RoleService
from complaintdesk.services.base import ErrorCode
from complaintdesk.services.category import CategoryService
from complaintdesk.services.complaint import ComplaintService


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def test_categories_are_listed_by_name(db, categories):
    names = [c.name for c in CategoryService(db).list_categories().data]
    assert names == ["Facilities", "Network"]


def test_create_and_rename_category(db, principals):
    service = CategoryService(db)

    created = service.create(principals["admin"], "  Housekeeping ")
    assert created.is_success
    assert created.data.name == "Housekeeping"

    renamed = service.rename(principals["admin"], created.data.id, "Cleaning")
    assert renamed.data.name == "Cleaning"


def test_category_names_are_unique_and_non_empty(db, categories, principals):
    service = CategoryService(db)
    assert service.create(principals["admin"], "network").error_code == ErrorCode.ALREADY_EXISTS
    assert service.create(principals["admin"], "   ").error_code == ErrorCode.VALIDATION_ERROR


def test_category_admins_cannot_manage_categories(db, principals):
    result = CategoryService(db).create(principals["network_admin"], "Security")
    assert result.error_code == ErrorCode.UNAUTHORIZED


def test_deleting_a_category_uncategorizes_its_complaints(db, notifier, file_complaint, categories, principals):
    first = file_complaint(title="Wifi down")
    second = file_complaint(title="Slow network")
    network_id = categories["network"].id

    result = CategoryService(db, notifier).delete(principals["admin"], network_id)

    assert result.is_success
    assert result.data == 2
    assert db.get(Category, network_id) is None
    assert db.query(Complaint).count() == 2
    for complaint_id in (first.id, second.id):
        assert db.get(Complaint, complaint_id).category_id is None
    assert db.query(AdminCategoryAssignment).filter_by(category_id=network_id).count() == 0

    service = ComplaintService(db)
    assert service.get(principals["admin"], first.id).data.category_name is None
    assert service.get(principals["network_admin"], first.id).error_code == ErrorCode.UNAUTHORIZED


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

def test_only_super_admin_sets_roles(db, users, principals):
    service = RoleService(db)
    target = users["other_student"].id

    assert service.set_role(principals["admin"], target, UserRole.ADMIN).error_code == ErrorCode.UNAUTHORIZED

    result = service.set_role(principals["super_admin"], target, UserRole.ADMIN)
    assert result.is_success
    assert result.data.role == UserRole.ADMIN
    assert UserRoleRepository(db).get_role(target) == UserRole.ADMIN


def test_set_role_guards(db, users, principals):
    service = RoleService(db)
    own = service.set_role(principals["super_admin"], users["super_admin"].id, UserRole.STUDENT)
    missing = service.set_role(principals["super_admin"], "nobody", UserRole.ADMIN)
    assert own.error_code == ErrorCode.VALIDATION_ERROR
    assert missing.error_code == ErrorCode.NOT_FOUND


def test_leaving_category_admin_role_clears_scope(db, users, principals):
    admin_id = users["network_admin"].id

    RoleService(db).set_role(principals["super_admin"], admin_id, UserRole.ADMIN)

    assert db.query(AdminCategoryAssignment).filter_by(admin_id=admin_id).count() == 0


def test_list_admins_includes_category_names(db, principals, users):
    result = RoleService(db).list_admins(principals["admin"])

    by_id = {a.id: a for a in result.data}
    assert set(by_id) == {
        users["network_admin"].id,
        users["facilities_admin"].id,
        users["admin"].id,
        users["super_admin"].id,
    }
    assert [c.name for c in by_id[users["network_admin"].id].categories] == ["Network"]
    assert RoleService(db).list_admins(principals["network_admin"]).error_code == ErrorCode.UNAUTHORIZED


def test_list_users_covers_every_account_with_its_role(db, principals, users, make_user):
    make_user("Rita Roleless", role=None)

    result = RoleService(db).list_users(principals["admin"])

    assert result.is_success
    assert [u.name for u in result.data] == [
        "Ada Admin",
        "Alice Student",
        "Bob Student",
        "Fred Facilities",
        "Nora Network",
        "Rita Roleless",
        "Sam Super",
    ]
    assert Counter(u.role for u in result.data) == {
        UserRole.STUDENT: 2,
        UserRole.CATEGORY_ADMIN: 2,
        UserRole.ADMIN: 1,
        UserRole.SUPER_ADMIN: 1,
        None: 1,
    }
    by_id = {u.id: u for u in result.data}
    assert [c.name for c in by_id[users["network_admin"].id].categories] == ["Network"]
    assert by_id[users["student"].id].categories == []


def test_list_users_is_for_global_admins(db, principals):
    assert RoleService(db).list_users(principals["super_admin"]).is_success
    assert RoleService(db).list_users(principals["network_admin"]).error_code == ErrorCode.UNAUTHORIZED
    assert RoleService(db).list_users(principals["student"]).error_code == ErrorCode.UNAUTHORIZED


def test_set_admin_categories_replaces_scope(db, users, categories, principals, resolve):
    admin_id = users["network_admin"].id
    service = RoleService(db)

    result = service.set_admin_categories(
        principals["admin"], admin_id, [categories["facilities"].id, categories["network"].id]
    )

    assert result.is_success
    assert [c.name for c in result.data.categories] == ["Facilities", "Network"]
    assert resolve(users["network_admin"]).category_ids == {
        categories["facilities"].id,
        categories["network"].id,
    }


def test_set_admin_categories_validation(db, users, categories, principals):
    service = RoleService(db)
    not_category_admin = service.set_admin_categories(principals["admin"], users["admin"].id, [categories["network"].id])
    unknown = service.set_admin_categories(principals["admin"], users["network_admin"].id, ["nope"])
    empty = service.set_admin_categories(principals["admin"], users["network_admin"].id, [])

    assert not_category_admin.error_code == ErrorCode.VALIDATION_ERROR
    assert unknown.error_code == ErrorCode.VALIDATION_ERROR
    assert empty.error.field == "category_ids"


def test_remove_admin_demotes_and_clears_scope(db, users, principals):
    admin_id = users["network_admin"].id

    result = RoleService(db).remove_admin(principals["admin"], admin_id)

    assert result.is_success
    assert UserRoleRepository(db).get_role(admin_id) == UserRole.STUDENT
    assert db.query(AdminCategoryAssignment).filter_by(admin_id=admin_id).count() == 0


def test_remove_admin_guards(db, users, principals):
    service = RoleService(db)
    assert service.remove_admin(principals["admin"], users["super_admin"].id).error_code == ErrorCode.UNAUTHORIZED
    assert service.remove_admin(principals["admin"], users["admin"].id).error_code == ErrorCode.VALIDATION_ERROR
    assert service.remove_admin(principals["admin"], users["student"].id).error_code == ErrorCode.VALIDATION_ERROR
