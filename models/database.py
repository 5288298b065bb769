"""Database engine and session factory for the wrestling program simulator."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _is_memory_url(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:")


def create_db_engine(db_url: str):
    if not db_url.startswith("sqlite"):
        return create_engine(db_url, echo=False)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if _is_memory_url(db_url):
        # One shared connection, or each request thread sees an empty database
        kwargs["poolclass"] = StaticPool
    return create_engine(db_url, echo=False, **kwargs)


def create_session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


def init_schema(engine) -> None:
    """Create the wrestlers, league_teams and dual_meets tables if missing."""
    from models import models  # noqa: F401  registers the mapped tables

    Base.metadata.create_all(engine)
