import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from neontype.app import create_app
from neontype.core import get_session
from neontype.core.time import now_ms


@pytest.fixture()
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture()
def session(engine):
    with Session(engine) as db_session:
        yield db_session


@pytest.fixture()
def client(engine):
    application = create_app()

    def _session_override():
        with Session(engine) as db_session:
            yield db_session

    application.dependency_overrides[get_session] = _session_override
    return TestClient(application)


@pytest.fixture()
def make_payload():
    """Build a plausible submission that finished one second ago."""

    def _make(input_text="hello", target_text="hello", elapsed_ms=2000, username="alice", **overrides):
        end = now_ms() - 1000
        payload = {
            "input": input_text,
            "targetText": target_text,
            "startTime": end - elapsed_ms,
            "endTime": end,
            "username": username,
        }
        payload.update(overrides)
        return payload

    return _make
