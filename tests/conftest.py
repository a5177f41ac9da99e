import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-for-complaintdesk")
os.environ.setdefault("PASSWORD_BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest

from complaintdesk.core.events import ChangeNotifier
from complaintdesk.db.init_db import init_db
from complaintdesk.db.session import build_engine, build_session_factory
from complaintdesk.models.base.enums import UserRole
from complaintdesk.models.category import AdminCategoryAssignment, Category
from complaintdesk.models.user import User
from complaintdesk.models.user import UserRole as UserRoleRow
from complaintdesk.schemas.complaint import ComplaintCreate
from complaintdesk.services.auth.security import create_access_token, hash_password
from complaintdesk.services.common.permissions import PrincipalResolver
from complaintdesk.services.complaint import ComplaintService

PASSWORD = "secret123"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", echo=False)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    session = build_session_factory(engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return ChangeNotifier(queue_size=50)


@pytest.fixture
def make_user(db):
    def _make(name, role=UserRole.STUDENT, category_ids=(), password=None):
        user = User(
            name=name,
            email=f"{name.lower().replace(' ', '.')}@example.com",
            password_hash=hash_password(password) if password else None,
        )
        db.add(user)
        db.flush()
        if role is not None:
            db.add(UserRoleRow(user_id=user.id, role=role))
        for category_id in category_ids:
            db.add(AdminCategoryAssignment(admin_id=user.id, category_id=category_id))
        db.commit()
        return user

    return _make


@pytest.fixture
def resolve(db):
    resolver = PrincipalResolver(db)

    def _resolve(user):
        return resolver.resolve(user.id)

    return _resolve


@pytest.fixture
def categories(db):
    network = Category(name="Network")
    facilities = Category(name="Facilities")
    db.add_all([network, facilities])
    db.commit()
    return {"network": network, "facilities": facilities}


@pytest.fixture
def users(make_user, categories):
    return {
        "student": make_user("Alice Student"),
        "other_student": make_user("Bob Student"),
        "network_admin": make_user(
            "Nora Network", UserRole.CATEGORY_ADMIN, [categories["network"].id]
        ),
        "facilities_admin": make_user(
            "Fred Facilities", UserRole.CATEGORY_ADMIN, [categories["facilities"].id]
        ),
        "admin": make_user("Ada Admin", UserRole.ADMIN),
        "super_admin": make_user("Sam Super", UserRole.SUPER_ADMIN),
    }


@pytest.fixture
def principals(users, resolve):
    return {key: resolve(user) for key, user in users.items()}


@pytest.fixture
def complaint_service(db, notifier):
    return ComplaintService(db, notifier)


@pytest.fixture
def file_complaint(complaint_service, principals, categories):
    """Create a complaint as the student and return its detail."""

    def _file(title="Wifi down", category="network", principal=None, **fields):
        data = ComplaintCreate(
            title=title,
            description=fields.pop("description", "No connection in block B"),
            category_id=categories[category].id if category else None,
            **fields,
        )
        result = complaint_service.create(principal or principals["student"], data)
        assert result.is_success, result.error
        return result.data

    return _file


@pytest.fixture
def client(db, notifier):
    from fastapi.testclient import TestClient

    from complaintdesk.api import deps
    from complaintdesk.main import app

    def _get_db():
        yield db

    app.dependency_overrides[deps.get_db] = _get_db
    app.dependency_overrides[deps.get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth(users):
    """Bearer headers for one of the seeded users."""

    def _headers(key):
        return {"Authorization": f"Bearer {create_access_token(users[key].id)}"}

    return _headers


@pytest.fixture
def filed(client, auth, categories):
    """A network complaint filed by the student over HTTP."""
    response = client.post(
        "/api/v1/complaints",
        json={
            "title": "Wifi down",
            "description": "No connection in block B",
            "category_id": categories["network"].id,
        },
        headers=auth("student"),
    )
    assert response.status_code == 201
    return response.json()
