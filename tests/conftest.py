from typing import Any, Dict, Generator

import pytest
from fastapi.testclient import TestClient

from simulafin.main import app
from simulafin.core.database import Base, get_db
from simulafin.auth.schemas import Actor
from tests.factories import TestingSessionLocal, create_user, engine, login


def override_get_db() -> Generator[Any, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture
def test_db() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session(test_db: None) -> Generator[Any, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(test_db: None) -> TestClient:
    return TestClient(app)


@pytest.fixture
def customer_headers(client: TestClient) -> Dict[str, str]:
    create_user("cliente@simulafin.com.br", name="Maria Souza")
    return login(client, "cliente@simulafin.com.br")


@pytest.fixture
def admin_headers(client: TestClient) -> Dict[str, str]:
    create_user("admin@simulafin.com.br", is_admin=True, name="Admin")
    return login(client, "admin@simulafin.com.br")


@pytest.fixture
def admin_actor() -> Actor:
    return Actor(user_id="admin-1", email="admin@simulafin.com.br", is_admin=True)


@pytest.fixture
def customer_actor() -> Actor:
    return Actor(user_id="user-1", email="joao@simulafin.com.br", is_admin=False)
