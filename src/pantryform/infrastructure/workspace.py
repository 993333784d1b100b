"""Workspace — the single dependency injected into every service.

A workspace is a directory holding the response workbook, the guideline
workbook, the output folder, and ``.pantryform/`` state (counter database
and template overrides). Collaborators are created lazily so ``--help``
and read-only commands never touch the counter database or the network.

Tests and embedders can inject a form ID sequence or barcode fetcher.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pantryform.infrastructure.barcode import HttpBarcodeFetcher
from pantryform.infrastructure.database.engine import init_database
from pantryform.infrastructure.renderer import DocumentRenderer
from pantryform.infrastructure.sequence import CounterSequence
from pantryform.infrastructure.storage import OutputFolder
from pantryform.infrastructure.templates import load_template_source
from pantryform.infrastructure.workbook import ResponseSheet, read_table

if TYPE_CHECKING:
    from pathlib import Path

    from sqlalchemy.engine import Engine

    from pantryform.config.settings import PantrySettings
    from pantryform.infrastructure.barcode import BarcodeFetcher
    from pantryform.infrastructure.sequence import FormIdSequence

logger = logging.getLogger(__name__)


class Workspace:
    """Lazily-built collaborators for one pantry workspace."""

    def __init__(
        self,
        settings: PantrySettings,
        *,
        sequence: FormIdSequence | None = None,
        barcode: BarcodeFetcher | None = None,
    ) -> None:
        self.settings = settings
        self._sequence = sequence
        self._barcode = barcode
        self._engine: Engine | None = None
        self._renderer: DocumentRenderer | None = None

    @property
    def root(self) -> Path:
        return self.settings.root

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = init_database(
                self.settings.state_dir, form_id_start=self.settings.form_id.start
            )
        return self._engine

    @property
    def sequence(self) -> FormIdSequence:
        if self._sequence is None:
            self._sequence = CounterSequence(self.engine, width=self.settings.form_id.width)
        return self._sequence

    @property
    def barcode(self) -> BarcodeFetcher:
        if self._barcode is None:
            self._barcode = HttpBarcodeFetcher(self.settings.barcode)
        return self._barcode

    @property
    def renderer(self) -> DocumentRenderer:
        if self._renderer is None:
            template = load_template_source(
                self.settings.output.template, state_dir=self.settings.state_dir
            )
            self._renderer = DocumentRenderer(
                template,
                OutputFolder(self.settings.output_folder),
                self.settings.barcode,
                barcode=self.barcode,
            )
        return self._renderer

    def open_responses(self) -> ResponseSheet:
        """Open the response worksheet (caller closes)."""
        return ResponseSheet(self.settings.responses_path, self.settings.sheets.response_sheet_name)

    def guideline_rows(self) -> tuple[list[Any], list[tuple[Any, ...]]]:
        """Read the guideline workbook fresh on every call."""
        return read_table(self.settings.guidelines_path)

    def close(self) -> None:
        """Release the engine and any HTTP client this workspace created."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        if isinstance(self._barcode, HttpBarcodeFetcher):
            self._barcode.close()
