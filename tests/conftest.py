import pytest
from fastapi.testclient import TestClient

from container_counter import models  # noqa: F401
from container_counter.database import Base, create_db_engine, create_session_factory
from container_counter.main import create_app
from container_counter.store import ContainerStore


@pytest.fixture
def store():
    engine = create_db_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    return ContainerStore(create_session_factory(engine))


@pytest.fixture
def client():
    with TestClient(create_app("sqlite://")) as c:
        yield c
