"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch
the real database. Tables are created before each test
and dropped after it.

Transfers run in their own sessions (and threads), and a
SQLite writer holds the whole database lock until it
commits. Helpers below therefore read and write through
short-lived sessions that are closed right away.
"""

import os
import random
import string
from contextlib import contextmanager

# Must be set before simple_bank is imported: the app engine
# is created from it at import time.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event, func, select
from sqlalchemy.orm import Session, sessionmaker

from simple_bank.main import app
from simple_bank.api.transfers import get_transfer_service
from simple_bank.models import Base, Account
from simple_bank.models.base import create_store_engine, get_db
from simple_bank.schemas.account import AccountCreate, AccountSnapshot
from simple_bank.services.account_service import AccountService
from simple_bank.services.store import Store
from simple_bank.services.transfer_service import TransferService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_store_engine(TEST_DATABASE_URL, busy_timeout=30)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


def random_owner() -> str:
    return "".join(random.choices(string.ascii_lowercase, k=6))


def random_money() -> int:
    return random.randint(100, 1000)


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


@pytest.fixture
def store():
    return Store(TestSessionLocal)


@pytest.fixture
def make_store():
    """Return a helper that builds a store on a custom Session class."""
    def _make(session_class=Session) -> Store:
        return Store(sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            class_=session_class,
        ))
    return _make


@pytest.fixture
def fk_store():
    """
    Provide a store whose engine enforces foreign keys.

    SQLite leaves them off by default; PostgreSQL always
    enforces them.
    """
    fk_engine = create_store_engine(TEST_DATABASE_URL, busy_timeout=30)

    @event.listens_for(fk_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        dbapi_connection.execute("PRAGMA foreign_keys=ON")

    yield Store(sessionmaker(
        bind=fk_engine,
        autocommit=False,
        autoflush=False,
    ))
    fk_engine.dispose()


@pytest.fixture
def postgres_engine():
    """
    Provide an engine on the PostgreSQL database named by
    DATABASE_URL, with fresh tables. Skipped on any other store.
    """
    url = os.getenv("DATABASE_URL", "")
    if not url.startswith("postgresql"):
        pytest.skip("DATABASE_URL does not point at PostgreSQL")

    pg_engine = create_store_engine(url)
    Base.metadata.create_all(bind=pg_engine)
    yield pg_engine
    Base.metadata.drop_all(bind=pg_engine)
    pg_engine.dispose()


@pytest.fixture
def hold_write_lock():
    """Return a context manager that keeps the database write lock."""
    @contextmanager
    def _hold():
        with engine.connect() as conn, conn.begin():
            yield
    return _hold


@pytest.fixture
def transfer_service(store):
    return TransferService(store)


@pytest.fixture
def create_account():
    """Return a helper that commits a new account and returns its snapshot."""
    def _create(balance=None, owner=None, currency="USD") -> AccountSnapshot:
        with TestSessionLocal() as session:
            account = AccountService(session).create_account(AccountCreate(
                owner=owner or random_owner(),
                currency=currency,
                balance=random_money() if balance is None else balance,
            ))
            session.commit()
            return AccountSnapshot.model_validate(account)
    return _create


@pytest.fixture
def fetch_account():
    """Return a helper that reads the committed state of an account."""
    def _fetch(account_id: int) -> AccountSnapshot | None:
        with TestSessionLocal() as session:
            account = session.get(Account, account_id)
            if account is None:
                return None
            return AccountSnapshot.model_validate(account)
    return _fetch


@pytest.fixture
def count_rows():
    """Return a helper that counts committed transfers or entries."""
    def _count(model) -> int:
        with TestSessionLocal() as session:
            return session.execute(
                select(func.count()).select_from(model)
            ).scalar_one()
    return _count


@pytest.fixture
def client(db_session, store):
    """
    Provide a test client wired to the test database.

    Both the session dependency and the transfer service
    dependency are overridden.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            db_session.rollback()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_transfer_service] = lambda: TransferService(store)
    yield TestClient(app)
    app.dependency_overrides.clear()
