"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo


def now_in(timezone: str) -> datetime:
    """Current wall-clock time in *timezone*, returned naive.

    Spreadsheet cells cannot hold tz-aware datetimes, so the offset is
    dropped after conversion.
    """
    return datetime.now(ZoneInfo(timezone)).replace(tzinfo=None)


def output_name(prefix: str, first_name: str, last_name: str, when: datetime) -> str:
    """``{prefix}_{First}_{Last}_{YYYYMMDD_HHMM}`` with ``Unknown`` for a blank first name.

    Examples:
        >>> output_name("PetPantryForm", "Ana", "Diaz", datetime(2025, 3, 7, 9, 5))
        'PetPantryForm_Ana_Diaz_20250307_0905'
        >>> output_name("PetPantryForm", "", "", datetime(2025, 3, 7, 9, 5))
        'PetPantryForm_Unknown__20250307_0905'
    """
    return f"{prefix}_{first_name or 'Unknown'}_{last_name}_{when:%Y%m%d_%H%M}"
