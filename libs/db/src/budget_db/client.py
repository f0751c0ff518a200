"""Engine and session access for the ledger store.

One engine is kept per database URL. The ``budget_transactions`` table is
created the first time a URL is used, so callers only ever need
:func:`session_scope`::

    from budget_db.client import session_scope

    with session_scope(database_url="sqlite+pysqlite:///ledger.db") as s:
        s.execute(...)
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from .models.ledger import Base

_engines: dict[str, Engine] = {}


def get_engine(*, database_url: str | None = None) -> Engine:
    """Return the engine for ``database_url`` (default ``DATABASE_URL``)."""

    url = database_url or os.getenv("DATABASE_URL")
    if not url:
        raise RuntimeError("DATABASE_URL is not set; cannot open the ledger store")
    engine = _engines.get(url)
    if engine is None:
        engine = create_engine(url, pool_pre_ping=True)
        Base.metadata.create_all(engine)
        _engines[url] = engine
    return engine


def dispose_engines() -> None:
    """Close every pooled connection and forget the engines."""

    while _engines:
        _, engine = _engines.popitem()
        engine.dispose()


@contextmanager
def session_scope(*, database_url: str | None = None) -> Iterator[Session]:
    """Yield a session whose work commits on exit and rolls back on error."""

    engine = get_engine(database_url=database_url)
    with Session(engine, expire_on_commit=False) as session, session.begin():
        yield session


__all__ = ["dispose_engines", "get_engine", "session_scope"]
