"""Distribution guidelines — per-item quantity rules loaded from a table.

The guideline sheet has one row per item with a per-pet allotment, an
optional household cap, and display text. Column lookup is by header name
(case-insensitive, trimmed), so column order in the sheet is free.

INVARIANT: a blank or non-numeric amount cell is ``None``, never ``0``.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel

logger = logging.getLogger(__name__)

# field name -> header text in the guideline sheet
REQUIRED_COLUMNS: dict[str, str] = {
    "item": "item",
    "placeholder": "placeholders",
    "per_pet": "per pet",
    "household_max": "household max",
    "notes": "notes",
    "amount_given": "amountgiven",
    "amount_placeholder": "amount placeholder",
}

_LEADING_NUMBER_RE = re.compile(r"^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


class ConfigError(ValueError):
    """The guideline source is missing required columns."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Guideline sheet is missing required columns: {', '.join(missing)}")


class GuidelineRule(BaseModel):
    """Quantity rule and display text for one distributable item."""

    model_config = {"frozen": True}

    item_key: str
    display_name: str
    placeholder: str = ""
    per_pet: float | None = None
    household_max: float | None = None
    notes: str = ""
    amount_given: str = ""
    amount_placeholder: str = ""


GuidelineTable = dict[str, GuidelineRule]


def to_number(value: Any) -> float | None:
    """Leniently parse a cell as a number.

    Numeric cells pass through. Text cells accept a leading numeric prefix
    (``"10 lbs"`` -> 10.0). Blank or non-numeric cells return None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if not text:
        return None
    match = _LEADING_NUMBER_RE.match(text)
    return float(match.group(0)) if match else None


def _cell_text(row: Sequence[Any], idx: int) -> str:
    if idx >= len(row) or row[idx] is None:
        return ""
    return str(row[idx]).strip()


def _parse_amount(
    row: Sequence[Any],
    idx: int,
    label: str,
    item: str,
    warnings: list[str] | None,
) -> float | None:
    raw = row[idx] if idx < len(row) else None
    number = to_number(raw)
    if number is None and _cell_text(row, idx):
        msg = f"Guideline {item!r}: {label} {raw!r} is not numeric"
        logger.debug(msg)
        if warnings is not None:
            warnings.append(msg)
    return number


def column_indexes(header_row: Sequence[Any]) -> dict[str, int]:
    """Map each required field to its column index.

    Raises:
        ConfigError: If any required column is absent.
    """
    headers = [str(h or "").strip().lower() for h in header_row]
    found: dict[str, int] = {}
    missing: list[str] = []
    for field, header in REQUIRED_COLUMNS.items():
        if header in headers:
            found[field] = headers.index(header)
        else:
            missing.append(header)
    if missing:
        raise ConfigError(missing)
    return found


def load_guideline_table(
    rows: Iterable[Sequence[Any]],
    header_row: Sequence[Any],
    *,
    warnings: list[str] | None = None,
) -> GuidelineTable:
    """Build a :data:`GuidelineTable` from raw sheet rows.

    Rows with an empty item name are skipped. When two rows share an item
    name (case-insensitively) the later row wins.

    Raises:
        ConfigError: If the header row lacks a required column. Raised
            before any data row is read.
    """
    idx = column_indexes(header_row)
    table: GuidelineTable = {}

    for row in rows:
        item = _cell_text(row, idx["item"])
        if not item:
            continue
        key = item.lower()
        table[key] = GuidelineRule(
            item_key=key,
            display_name=item,
            placeholder=_cell_text(row, idx["placeholder"]),
            per_pet=_parse_amount(row, idx["per_pet"], "per pet", item, warnings),
            household_max=_parse_amount(row, idx["household_max"], "household max", item, warnings),
            notes=_cell_text(row, idx["notes"]),
            amount_given=_cell_text(row, idx["amount_given"]),
            amount_placeholder=_cell_text(row, idx["amount_placeholder"]),
        )

    logger.debug("Loaded %d guideline items", len(table))
    return table
