"""BaseService — abstract foundation for all pantryform services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the response sheet, guideline source, form ID
sequence, and document renderer.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pantryform.domain.guidelines import GuidelineTable, load_guideline_table

if TYPE_CHECKING:
    from pantryform.infrastructure.workspace import Workspace

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class IntakeService(BaseService):
            def generate(self, row_index: int) -> ServiceResult:
                sheet = self._workspace.open_responses()
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    def _load_guidelines(self, warnings: list[str]) -> GuidelineTable:
        """Read and parse the guideline workbook.

        Raises:
            ConfigError: If required guideline columns are missing.
        """
        header, rows = self._workspace.guideline_rows()
        return load_guideline_table(rows, header, warnings=warnings)
