import os

# select the test database before the app reads its configuration
os.environ["APP_ENV"] = "test"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from blogmod.main import app
from blogmod.db.database import Base, get_session, SQLITE_TEST_DB
from blogmod.models.user import User, UserRole
from blogmod.models import blog, comment  # noqa: F401

test_engine = create_engine(SQLITE_TEST_DB, connect_args={"check_same_thread": False})
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

VALID_CONTENT = (
    "This blog post walks through a small example in enough detail to be useful. "
    "It is long enough to pass the minimum content length check."
)


@pytest.fixture(autouse=True)
def clean_db():
    """Recreate every table around each test"""
    Base.metadata.drop_all(bind=test_engine)
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session(clean_db):
    session = TestSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client(clean_db):
    """Test client with one database session per request"""
    def override_get_session():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = override_get_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client, username, password="password123"):
    """Register a user and return (user_json, auth headers)"""
    response = client.post("/api/users/register", json={
        "username": username,
        "email": f"{username}@example.com",
        "password": password,
        "bio": f"{username} bio"
    })
    assert response.status_code == 201, response.text
    login = client.post("/api/users/login", json={"username": username, "password": password})
    assert login.status_code == 200, login.text
    return response.json(), {"Authorization": f"Bearer {login.json()['access_token']}"}


def promote_to_admin(db_session, user_id):
    user = db_session.get(User, user_id)
    user.role = UserRole.ADMIN
    db_session.commit()


def blog_payload(title="A valid 20-char title", **overrides):
    payload = {
        "title": title,
        "content": VALID_CONTENT,
        "category": "general",
        "tags": ["python", "fastapi"],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def author(client):
    return register_and_login(client, "author")


@pytest.fixture
def reader(client):
    return register_and_login(client, "reader")


@pytest.fixture
def admin(client, db_session):
    user, headers = register_and_login(client, "admin")
    promote_to_admin(db_session, user["id"])
    return user, headers


@pytest.fixture
def create_blog(client):
    def _create(headers, **overrides):
        response = client.post("/api/blogs", json=blog_payload(**overrides), headers=headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def published_blog(client, author, admin, create_blog):
    """An approved blog owned by `author`"""
    _, author_headers = author
    _, admin_headers = admin
    blog_data = create_blog(author_headers)
    response = client.post(f"/api/admin/blogs/{blog_data['id']}:approveBlog", json={"admin_notes": "ok"}, headers=admin_headers)
    assert response.status_code == 200, response.text
    return response.json()
