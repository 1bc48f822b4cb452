"""
Shared test fixtures.

Sets up an isolated SQLite test database so tests never touch
the real database. Tables are created before each test and
dropped after it.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from client_ledger.main import app
from client_ledger.models import Base
from client_ledger.models.base import get_db
from client_ledger.api.deps import get_balance_store
from client_ledger.services.balance_store import build_balance_store
from client_ledger.services.client_service import ClientService
from client_ledger.services.transaction_service import TransactionService


# SQLite, so tests need no database infrastructure.
TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(params=["computed", "persisted"])
def balance_store(request, db_session):
    """Runs the test once per balance strategy."""
    return build_balance_store(db_session, request.param)


@pytest.fixture
def client_service(db_session, balance_store):
    return ClientService(db_session, balance_store)


@pytest.fixture
def transaction_service(db_session, balance_store):
    return TransactionService(db_session, balance_store)


@pytest.fixture(params=["computed", "persisted"])
def client(request, db_session):
    """
    Provide a test client with the test database.

    get_db is overridden so the app uses the test session, and
    the balance store is pinned to each strategy in turn.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    def override_get_balance_store():
        return build_balance_store(db_session, request.param)

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_balance_store] = override_get_balance_store
    yield TestClient(app)
    app.dependency_overrides.clear()

