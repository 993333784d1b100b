"""Spreadsheet access — response rows and the guideline table (openpyxl).

Rows are addressed the way the form platform lays them out: row 1 holds
the question headers, responses start at row 2, and cells are read and
written by header name. Header text is trimmed on read.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

if TYPE_CHECKING:
    from pathlib import Path

    from openpyxl.workbook.workbook import Workbook
    from openpyxl.worksheet.worksheet import Worksheet

logger = logging.getLogger(__name__)

HEADER_ROW = 1


class WorkbookError(OSError):
    """A workbook file exists but cannot be opened as a spreadsheet."""


class SheetNotFoundError(LookupError):
    """The workbook has no worksheet with the requested name."""


def _open(path: Path, **kwargs: Any) -> Workbook:
    try:
        return load_workbook(path, **kwargs)
    except (InvalidFileException, BadZipFile) as exc:
        msg = f"Cannot read workbook {path}: {exc}"
        raise WorkbookError(msg) from exc


class ResponseSheet:
    """Header-indexed read/write access to one worksheet.

    Writes stay in memory until :meth:`save`.
    """

    def __init__(self, path: Path, sheet_name: str) -> None:
        self.path = path
        self._wb = _open(path)
        if sheet_name not in self._wb.sheetnames:
            self._wb.close()
            msg = f"No sheet named {sheet_name!r} in {path.name}"
            raise SheetNotFoundError(msg)
        self._ws: Worksheet = self._wb[sheet_name]
        self._dirty = False

    @property
    def name(self) -> str:
        return self._ws.title

    @property
    def headers(self) -> list[str]:
        return [str(cell.value or "").strip() for cell in self._ws[HEADER_ROW]]

    @property
    def last_row(self) -> int:
        return self._ws.max_row

    def column(self, header: str) -> int | None:
        """1-based column index of *header*, or None when absent."""
        try:
            return self.headers.index(header) + 1
        except ValueError:
            return None

    def read_row(self, row_index: int) -> dict[str, Any]:
        """Return ``{header: value}`` for *row_index* (1-based)."""
        headers = self.headers
        values = [cell.value for cell in self._ws[row_index]][: len(headers)]
        values += [None] * (len(headers) - len(values))
        return {h: v for h, v in zip(headers, values, strict=True) if h}

    def read_cell(self, row_index: int, header: str) -> Any:
        col = self.column(header)
        if col is None:
            return None
        return self._ws.cell(row=row_index, column=col).value

    def write(self, row_index: int, values: Mapping[str, Any]) -> list[str]:
        """Write *values* by header; absent headers are skipped.

        Returns the headers actually written.
        """
        written: list[str] = []
        for header, value in values.items():
            col = self.column(header)
            if col is None:
                continue
            self._ws.cell(row=row_index, column=col, value=value)
            written.append(header)
        if written:
            self._dirty = True
        return written

    def save(self) -> None:
        if self._dirty:
            self._wb.save(self.path)
            self._dirty = False
            logger.debug("Saved %s", self.path)

    def close(self) -> None:
        self._wb.close()


def read_table(path: Path) -> tuple[list[Any], list[tuple[Any, ...]]]:
    """Read the first worksheet of *path* as ``(header_row, data_rows)``.

    Formulas are read as their cached values.
    """
    wb = _open(path, read_only=True, data_only=True)
    try:
        rows = list(wb.worksheets[0].iter_rows(values_only=True))
    finally:
        wb.close()
    if not rows:
        return [], []
    return list(rows[0]), rows[1:]
