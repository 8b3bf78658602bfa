import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from kasir.core.rate_limiter import limiter
from kasir.database import Base, get_db
from kasir.main import app
from kasir.seed import seed_products


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    limiter.reset()

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def catalog(session_factory):
    with session_factory() as session:
        seed_products(session)


@pytest.fixture
def draft_id(client, catalog):
    return client.get("/drafts").json()["active_draft_id"]
