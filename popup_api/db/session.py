"""Engine and session factory for the optional SQL popup store."""
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from popup_api.core.config import get_settings
from popup_api.domain.popups import dumps_strict, loads_strict

Base = declarative_base()


@lru_cache
def get_engine() -> Engine:
    url = (get_settings().database_url or "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL must be set when POPUP_STORAGE=sql.")
    connect_args = {}
    # sync endpoints run on a threadpool; one SQLite connection may cross threads
    if make_url(url).get_backend_name() == "sqlite":
        connect_args["check_same_thread"] = False
    return create_engine(
        url,
        future=True,
        pool_pre_ping=True,
        connect_args=connect_args,
        json_serializer=dumps_strict,
        json_deserializer=loads_strict,
    )


@lru_cache
def _get_sessionmaker() -> sessionmaker:
    return sessionmaker(bind=get_engine(), autoflush=False, expire_on_commit=False, future=True)


@contextmanager
def get_session() -> Iterator[Session]:
    session: Session = _get_sessionmaker()()
    try:
        yield session
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
