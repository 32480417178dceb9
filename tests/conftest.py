import os
from datetime import date
from typing import Optional

# Must be set before the app (and its engine) is imported
os.environ["TESTING"] = "1"
os.environ["TEST_DATABASE_URL"] = "sqlite:///./test.db"

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.api.deps import get_notifier
from app.core.database import Base, SessionLocal, engine, get_redis, init_db
from app.models.patient import Patient
from app.services.queue_cache import QueueCache


class FakeRedis:
    """Dict-backed stand-in for the few redis commands the app uses."""

    def __init__(self):
        self.data = {}

    def setex(self, key, time, value):
        self.data[key] = str(value)
        return True

    def get(self, key):
        return self.data.get(key)

    def incr(self, key):
        self.data[key] = str(int(self.data.get(key, "0")) + 1)
        return int(self.data[key])


class RecordingNotifier:
    def __init__(self, result: bool = True):
        self.result = result
        self.sent = []

    def send(self, email: str, name: Optional[str]) -> bool:
        self.sent.append((email, name))
        return self.result


@pytest.fixture(scope="function")
def test_db():
    init_db()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db(test_db):
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def queue_cache(test_db):
    return QueueCache(SessionLocal)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(test_db, notifier, fake_redis):
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_redis] = lambda: fake_redis
    with TestClient(app, base_url="http://testserver") as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_patient(db):
    def _make_patient(cpf: str, name: str = "Patient", birth_date: Optional[date] = None,
                      email: Optional[str] = None, **fields) -> Patient:
        patient = Patient(cpf=cpf, name=name, birth_date=birth_date, email=email, **fields)
        db.add(patient)
        db.commit()
        db.refresh(patient)
        return patient
    return _make_patient
