"""Form ID sequences — the injectable source of new form IDs.

Production uses :class:`CounterSequence` over the SQLite counter table.
:class:`InMemorySequence` serves tests and dry runs where no state
should persist.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from pantryform.domain.ids import FORM_ID_WIDTH, format_form_id
from pantryform.infrastructure.database.counters import next_form_id

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class FormIdSequence(Protocol):
    """Anything that hands out monotonically increasing form IDs."""

    def next_id(self) -> str: ...


class CounterSequence:
    """Database-backed sequence; each claim commits immediately."""

    def __init__(self, engine: Engine, *, width: int = FORM_ID_WIDTH) -> None:
        self._engine = engine
        self._width = width

    def next_id(self) -> str:
        with self._engine.begin() as conn:
            return next_form_id(conn, width=self._width)


class InMemorySequence:
    """Process-local sequence starting after *start*."""

    def __init__(self, start: int, *, width: int = FORM_ID_WIDTH) -> None:
        self._last = start
        self._width = width

    def next_id(self) -> str:
        self._last += 1
        return format_form_id(self._last, self._width)
