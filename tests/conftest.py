import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from datetime import date  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from app.db.seed import init_db  # noqa: E402
from app.db.session import get_db, make_engine, make_session_factory  # noqa: E402
from app.main import app  # noqa: E402
from app.models.category import Category  # noqa: E402
from app.models.user import User  # noqa: E402

TRAVEL = 2
MEALS = 3
SOFTWARE = 4


@pytest.fixture
def session_factory():
    engine = make_engine("sqlite://")
    init_db(engine, seed=True)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def login(client, email, password="password123"):
    res = client.post("/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["access_token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def employee_headers(client):
    return bearer(login(client, "employee@example.com"))


@pytest.fixture
def manager_headers(client):
    return bearer(login(client, "manager@example.com"))


@pytest.fixture
def register(client):
    def _register(email, role="employee", name="Someone", password="password123"):
        res = client.post(
            "/auth/register",
            json={"email": email, "password": password, "name": name, "role": role},
        )
        assert res.status_code == 201, res.text
        return bearer(login(client, email, password))

    return _register


@pytest.fixture
def submit(client):
    def _submit(headers, category_id=TRAVEL, amount=100.0, description="Taxi", receipt_date=None):
        res = client.post(
            "/expenses",
            headers=headers,
            json={
                "category_id": category_id,
                "amount": amount,
                "description": description,
                "receipt_date": (receipt_date or date.today()).isoformat(),
            },
        )
        assert res.status_code == 201, res.text
        return res.json()

    return _submit


@pytest.fixture
def users(db):
    manager = db.query(User).filter(User.email == "manager@example.com").one()
    employee = db.query(User).filter(User.email == "employee@example.com").one()
    return manager, employee


@pytest.fixture
def categories(db):
    return {c.name: c for c in db.query(Category).all()}
