import os

# Point the application at SQLite before any application module reads settings
os.environ["DATABASE_URL"] = "sqlite:///:memory:"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from inventory_api.main import app
from inventory_api.database import Base, create_db_engine, get_db


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_db_engine(SQLALCHEMY_DATABASE_URL)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def store(client):
    """A store created through the API."""
    response = client.post(
        "/api/v1/stores",
        json={"name": "Corner Shop", "address": "1 High Street", "phone": "555-0100"}
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def make_product(client, store):
    """Factory creating products in the ``store`` fixture (or another store)."""
    def _make(store_id=None, **fields):
        payload = {"name": "Widget", "category": "General", "price": 9.99, "quantity": 10}
        payload.update(fields)
        response = client.post(
            f"/api/v1/stores/{store_id or store['id']}/products",
            json=payload
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _make
