from complaintdesk.models.base.enums import UserRole
from complaintdesk.models.user import User
from complaintdesk.schemas.auth import LoginRequest, StudentRegister
from complaintdesk.services.auth.auth_service import AuthService
from complaintdesk.services.auth.security import decode_token, hash_password, verify_password
from complaintdesk.services.base import ErrorCode


def test_password_hashing_round_trip():
    hashed = hash_password("correct horse")
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)
    assert not verify_password("anything", None)


def test_long_passwords_are_hashed_whole():
    base = "x" * 80
    hashed = hash_password(base + "a")
    assert verify_password(base + "a", hashed)
    assert not verify_password(base + "b", hashed)


def test_register_then_login(db):
    service = AuthService(db)

    registered = service.register_student(
        StudentRegister(name="Dana", email="Dana@Example.com", password="hunter22")
    )
    assert registered.is_success
    assert registered.data.role == UserRole.STUDENT
    assert decode_token(registered.data.access_token)["sub"] == registered.data.user_id

    logged_in = service.login(LoginRequest(email="dana@example.com", password="hunter22"))
    assert logged_in.is_success
    assert logged_in.data.user_id == registered.data.user_id


def test_register_rejects_short_password_and_duplicate_email(db, users):
    service = AuthService(db)

    short = service.register_student(StudentRegister(name="Eve", email="eve@example.com", password="123"))
    duplicate = service.register_student(
        StudentRegister(name="Alice", email=users["student"].email, password="hunter22")
    )

    assert short.error_code == ErrorCode.VALIDATION_ERROR
    assert duplicate.error_code == ErrorCode.ALREADY_EXISTS
    assert db.query(User).filter_by(email="eve@example.com").count() == 0


def test_login_failures(db, make_user):
    make_user("No Role", role=None, password="hunter22")
    make_user("Has Role", password="hunter22")
    service = AuthService(db)

    wrong = service.login(LoginRequest(email="has.role@example.com", password="nope"))
    roleless = service.login(LoginRequest(email="no.role@example.com", password="hunter22"))

    assert wrong.error_code == ErrorCode.AUTHENTICATION_FAILED
    assert roleless.error_code == ErrorCode.AUTHENTICATION_FAILED
