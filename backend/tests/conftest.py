import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from company_registry.db import Base, get_db
from company_registry.main import app


def _import_all_models():
    # explicit model imports register the tables on Base.metadata
    # (without them create_all() creates nothing and every test breaks)
    import company_registry.models.user  # noqa: F401
    import company_registry.models.company  # noqa: F401


# Every test gets its own SQLite file; the app's lab.db is never touched.
@pytest.fixture
def engine(tmp_path):
    _import_all_models()
    eng = create_engine(
        f"sqlite:///{tmp_path / 'test.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(client):
    """Register a user and log in; returns `(user_id, auth_headers)`."""

    def _make(email: str, password: str = "correct-horse"):
        r = client.post(
            "/auth/register",
            json={"name": email.split("@")[0], "email": email, "password": password},
        )
        assert r.status_code == 201, r.text
        user_id = r.json()["id"]

        r = client.post("/auth/login", json={"email": email, "password": password})
        assert r.status_code == 200, r.text
        token = r.json()["access_token"]
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture
def user1(make_user):
    return make_user("user1@example.com")


@pytest.fixture
def user2(make_user):
    return make_user("user2@example.com")
