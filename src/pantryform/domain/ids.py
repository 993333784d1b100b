"""Form ID format and validation.

Form IDs are sequential integers rendered as fixed-width, zero-padded
digit strings (``"100000000543"``). The barcode encodes the same string.

INVARIANT: IDs are permanent. Once written to a row, an ID never changes.
"""

from __future__ import annotations

import re

FORM_ID_WIDTH = 12


def format_form_id(value: int, width: int = FORM_ID_WIDTH) -> str:
    """Zero-pad *value* to *width* digits; wider values grow naturally.

    Raises:
        ValueError: If *value* is negative.
    """
    if value < 0:
        msg = f"Form ID must be non-negative, got {value}"
        raise ValueError(msg)
    return str(value).zfill(width)


def validate_form_id(form_id: str, width: int = FORM_ID_WIDTH) -> bool:
    """Check whether *form_id* looks like a generated form ID.

    Generated IDs are ASCII digits, at least *width* of them.

    Examples:
        >>> validate_form_id("100000000543")
        True
        >>> validate_form_id("0042", width=4)
        True
        >>> validate_form_id("legacy-7")
        False
    """
    return re.fullmatch(rf"[0-9]{{{width},}}", form_id) is not None
