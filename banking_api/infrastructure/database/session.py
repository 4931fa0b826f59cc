"""Database engine and session factory construction with connection pooling"""

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from banking_api.infrastructure.database.models import Base


def build_engine(database_url: str) -> Engine:
    """Create an engine; SQLite gets a thread-shareable connection, servers get a pool"""
    if database_url.startswith("sqlite"):
        return create_engine(database_url, connect_args={"check_same_thread": False})

    # Connection pool: max 20 connections, recycle after 1 hour to avoid stale connections
    return create_engine(
        database_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=10,
        pool_recycle=3600,
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_schema(engine: Engine) -> None:
    """Create tables that do not exist yet"""
    Base.metadata.create_all(bind=engine)
