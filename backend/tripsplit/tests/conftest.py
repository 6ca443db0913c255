"""
Shared fixtures: an in-memory SQLite database behind the API.
"""
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import tripsplit.models  # noqa: F401
from tripsplit.db.base import Base
from tripsplit.db.session import enable_sqlite_foreign_keys, get_db
from tripsplit.main import app


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def trip(client):
    response = client.post("/api/trips", json={"name": "Kyoto weekend"})
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def members(client, trip):
    """Alice, Bob and Carol, in that order."""
    created = []
    for name in ["Alice", "Bob", "Carol"]:
        response = client.post(f"/api/trips/{trip['id']}/members", json={"name": name})
        assert response.status_code == 201
        created.append(response.json())
    return created
