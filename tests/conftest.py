import os

# antes de importar o pacote: settings e engine leem o ambiente na importação
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["TIMEZONE"] = "UTC"

import uuid
from datetime import datetime, date, time, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import attendguard.models  # noqa: F401
from attendguard.core.clock import FixedClock
from attendguard.crud.store import SqlAttendanceStore
from attendguard.db.base import Base

NOW = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def db(engine):
    SessionTest = sessionmaker(bind=engine, autoflush=False)
    with SessionTest() as s:
        yield s


@pytest.fixture()
def store(db):
    return SqlAttendanceStore(db)


@pytest.fixture()
def clock():
    return FixedClock(NOW)


@pytest.fixture()
def section_id():
    return new_id()


@pytest.fixture()
def make_session(store, section_id):
    def _make(**overrides):
        data = {
            "course_id": new_id(),
            "section_id": section_id,
            "session_name": "Lecture 1",
            "session_date": date(2025, 3, 10),
            "start_time": time(9, 0),
            "end_time": time(11, 0),
            "status": "active",
        }
        data.update(overrides)
        return store.insert_session(data)
    return _make


@pytest.fixture()
def make_enrollment(store, section_id):
    def _make(student_id=None, **overrides):
        data = {
            "student_id": student_id or new_id(),
            "section_id": section_id,
            "enrollment_date": date(2025, 1, 15),
            "status": "active",
        }
        data.update(overrides)
        return store.insert_enrollment(data)
    return _make


@pytest.fixture()
def client(engine, clock):
    from attendguard.api.deps import get_clock
    from attendguard.db.session import get_db
    from attendguard.main import api

    SessionTest = sessionmaker(bind=engine, autoflush=False)

    def _get_db():
        db = SessionTest()
        try:
            yield db
        finally:
            db.close()

    api.dependency_overrides[get_db] = _get_db
    api.dependency_overrides[get_clock] = lambda: clock
    with TestClient(api) as c:
        yield c
    api.dependency_overrides.clear()
