"""Atomic sequential form ID generation.

Uses the ``id_counters`` table inside the caller's transaction so no two
invocations can claim the same value.

The caller owns the transaction; pass a ``Connection`` obtained from
``engine.begin()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from pantryform.domain.ids import FORM_ID_WIDTH, format_form_id
from pantryform.infrastructure.database.schema import FORM_ID_COUNTER, id_counters

if TYPE_CHECKING:
    from sqlalchemy import Connection


def next_form_id(conn: Connection, *, width: int = FORM_ID_WIDTH) -> str:
    """Claim the next form ID.

    Args:
        conn: Active SQLAlchemy connection (caller owns the transaction).
        width: Zero-padded width of the returned ID.

    Returns:
        The new ID string (e.g. ``"100000000543"``).

    Raises:
        LookupError: If the counter row was never seeded.
    """
    row = conn.execute(
        select(id_counters.c.next_value).where(id_counters.c.name == FORM_ID_COUNTER)
    ).first()
    if row is None:
        msg = "Form ID counter is not initialized; run init_database() first"
        raise LookupError(msg)

    current_value: int = row.next_value

    conn.execute(
        update(id_counters)
        .where(id_counters.c.name == FORM_ID_COUNTER)
        .values(next_value=current_value + 1)
    )

    return format_form_id(current_value, width)
