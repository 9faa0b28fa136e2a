import asyncio

import pytest

from homehub import models  # noqa: F401
from homehub.database import Base, build_engine, build_session_factory
from homehub.domain.chat import ReplyScheduler
from homehub.hub import HomeHub
from homehub.schemas import Role
from homehub.seed import seed_defaults
from homehub.store import SqlDocumentStore


@pytest.fixture
def engine():
    engine = build_engine("sqlite:///:memory:")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def store(session_factory):
    return SqlDocumentStore(session_factory)


@pytest.fixture
def seeded_store(store):
    seed_defaults(store)
    return store


@pytest.fixture
def loop():
    loop = asyncio.new_event_loop()
    yield loop
    loop.close()


@pytest.fixture
def scheduler(loop):
    return ReplyScheduler(delay_ms=900, loop=loop)


@pytest.fixture
def hub(seeded_store, scheduler):
    return HomeHub(seeded_store, scheduler=scheduler)


@pytest.fixture
def client(hub):
    hub.register("Carla Cliente", "a@x.com", "pw")
    return hub.login("a@x.com", "pw")


@pytest.fixture
def worker_account(hub):
    hub.register("Wendy Worker", "w@x.com", "secret", role=Role.WORKER)
    return hub.accounts.authenticate("w@x.com", "secret")
