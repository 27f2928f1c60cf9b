"""Engine and session factories for the program catalog store."""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Any, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./quotedesk.db")


def _build_engine(url: str) -> Engine:
    options: dict[str, Any] = {"future": True}
    parsed = make_url(url)

    if parsed.get_backend_name() != "sqlite":
        options["pool_pre_ping"] = True
        return create_engine(url, **options)

    # Request handlers and the image threadpool share SQLite connections.
    options["connect_args"] = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        # One connection, otherwise every checkout sees an empty database.
        options["poolclass"] = StaticPool
    return create_engine(url, **options)


engine = _build_engine(DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Commit on success, roll back on error; used outside request handlers."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
