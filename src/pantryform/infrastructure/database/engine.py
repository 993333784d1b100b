"""Database engine setup for the SQLite counter store.

The DB is stored at {root}/.pantryform/pantryform.db. SQLAlchemy Core
(not ORM) is used because pantryform is a short-lived CLI process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event, insert, select
from sqlalchemy.engine import Engine

from pantryform.infrastructure.database.schema import FORM_ID_COUNTER, id_counters, metadata


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL mode enabled."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(state_dir: Path, *, form_id_start: int) -> Engine:
    """Initialize the counter database at ``{state_dir}/pantryform.db``.

    Seeds the form ID counter so the first claimed ID is
    ``form_id_start + 1``. Idempotent: an existing counter is never reset.
    """
    state_dir.mkdir(parents=True, exist_ok=True)
    engine = create_db_engine(state_dir / "pantryform.db")
    metadata.create_all(engine)

    with engine.begin() as conn:
        row = conn.execute(
            select(id_counters.c.name).where(id_counters.c.name == FORM_ID_COUNTER)
        ).first()
        if row is None:
            conn.execute(
                insert(id_counters).values(name=FORM_ID_COUNTER, next_value=form_id_start + 1)
            )
    return engine
