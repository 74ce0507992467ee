import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from crm_backend.db.models import Base
from crm_backend.db.session import create_db_engine, get_db
from crm_backend.main import app


@pytest.fixture
def engine():
    engine = create_db_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_customer(client):
    counter = {"n": 0}

    def _make(first_name="Test", last_name="Customer", phone_number=None):
        counter["n"] += 1
        body = {
            "first_name": first_name,
            "last_name": last_name,
            "phone_number": phone_number or f"80000000{counter['n']:02d}",
        }
        response = client.post("/api/customers", json=body)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make


@pytest.fixture
def make_address(client):
    def _make(customer_id, city="Pune", state="Maharashtra", pin_code="411001", address_details="1 Main Street"):
        body = {
            "address_details": address_details,
            "city": city,
            "state": state,
            "pin_code": pin_code,
        }
        response = client.post(f"/api/customers/{customer_id}/addresses", json=body)
        assert response.status_code == 201, response.text
        return response.json()["id"]

    return _make
