"""Pytest fixtures for testing"""

import pytest
from datetime import datetime, timedelta, timezone
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from banking_api.api.main import create_app
from banking_api.domain.accounts import AccountService
from banking_api.domain.limits import LimitPolicy, TypeLimits
from banking_api.domain.processor import TransactionProcessor
from banking_api.infrastructure.database.models import Base
from banking_api.infrastructure.database.repositories import SqlLedgerStore
from banking_api.infrastructure.database.session import build_engine, build_session_factory
from banking_api.infrastructure.memory_store import InMemoryLedgerStore


class FakeClock:
    """Settable clock so tests can cross midnight deliberately"""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 3, 14, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def limits() -> LimitPolicy:
    """Same thresholds as the default configuration"""
    return LimitPolicy(
        deposit=TypeLimits(max_per_transaction=40000, max_daily_count=4, max_daily_amount=150000),
        withdrawal=TypeLimits(max_per_transaction=20000, max_daily_count=3, max_daily_amount=50000),
    )


@pytest.fixture
def store(clock: FakeClock) -> InMemoryLedgerStore:
    return InMemoryLedgerStore(clock=clock)


@pytest.fixture
def processor(store: InMemoryLedgerStore, limits: LimitPolicy) -> TransactionProcessor:
    return TransactionProcessor(store, limits)


@pytest.fixture
def account_service(store: InMemoryLedgerStore) -> AccountService:
    return AccountService(store)


@pytest.fixture
def session_factory(tmp_path) -> Generator[sessionmaker, None, None]:
    """SQLite database file per test, schema created fresh"""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(bind=engine)
    try:
        yield build_session_factory(engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def sql_store(session_factory: sessionmaker, clock: FakeClock) -> SqlLedgerStore:
    return SqlLedgerStore(session_factory, clock=clock)


@pytest.fixture
def client(store: InMemoryLedgerStore, limits: LimitPolicy) -> TestClient:
    """Create FastAPI test client backed by the in-memory store"""
    app = create_app(store=store, limits=limits)
    return TestClient(app)


@pytest.fixture
def sql_client(sql_store: SqlLedgerStore, limits: LimitPolicy) -> Generator[TestClient, None, None]:
    """FastAPI test client backed by SQLite, with the app lifespan running"""
    app = create_app(store=sql_store, limits=limits)
    with TestClient(app) as test_client:
        yield test_client
