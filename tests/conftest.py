import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

import models.models  # noqa: F401  (registers tables)
from core.database import get_session
from core.dependencies import get_gateways
from core.money import Money
from main import app
from scripts.seed import seed_project
from services.gateways import GatewayRegistry
from services.store import SqlStore
from tests.fakes import CountingGateway, InMemoryStore


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session):
    return SqlStore(session)


@pytest.fixture
def memory_store():
    return InMemoryStore()


@pytest.fixture
def project(session):
    """mihai/test on github, holding an active FAKE wallet."""
    return seed_project(session, "mihai/test", "github")


@pytest.fixture
def contract(store, project):
    """john (DEV) at 10,00 € per hour, with its first open invoice."""
    return store.add_contract(project, "john", Money(1000), "DEV")


@pytest.fixture
def gateway():
    return CountingGateway()


@pytest.fixture
def client(engine, gateway):
    def override_session():
        with Session(engine) as session:
            yield session

    registry = GatewayRegistry({"FAKE": gateway, "STRIPE": gateway})
    app.dependency_overrides[get_session] = override_session
    app.dependency_overrides[get_gateways] = lambda: registry
    yield TestClient(app)
    app.dependency_overrides.clear()
