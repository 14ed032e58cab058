import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from pharmacy_platform.pharmacy_service.db import Base, engine
from pharmacy_platform.pharmacy_service.main import app
from pharmacy_platform.pharmacy_service import models  # noqa: F401


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)


@pytest.fixture(scope="session")
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db_session():
    session = Session(bind=engine)
    yield session
    session.close()


@pytest.fixture
def pharmacy_data():
    return {
        "name": "Test Pharmacy",
        "phone": "123456789",
        "city": "Test City",
        "detailed_address": "123 Test St.",
        "latitude": 40.7128,
        "longitude": -74.006,
        "email": "test@example.com",
        "is_on_duty": False,
        "is_on_gard": False,
    }
