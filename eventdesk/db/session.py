"""Engine/session helpers for the SQL backend."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


@lru_cache
def get_engine(url: str) -> Engine:
    url = (url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be configured to use the SQL backend.")
    connect_args = {"check_same_thread": False} if url.startswith("sqlite") else {}
    return create_engine(url, future=True, pool_pre_ping=True, connect_args=connect_args)


@lru_cache
def _get_sessionmaker(url: str) -> sessionmaker:
    return sessionmaker(bind=get_engine(url), autoflush=False, autocommit=False, expire_on_commit=False, future=True)


@contextmanager
def get_session(url: str) -> Iterator[Session]:
    session: Session = _get_sessionmaker(url)()
    try:
        yield session
    finally:
        session.close()
