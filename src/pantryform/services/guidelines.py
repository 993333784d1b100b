"""GuidelineService — inspect the distribution guideline table."""

from __future__ import annotations

from pantryform.domain.guidelines import ConfigError
from pantryform.services.base import BaseService
from pantryform.services.result import ServiceResult


class GuidelineService(BaseService):
    """Read-only access to the guideline workbook."""

    def list_rules(self) -> ServiceResult:
        """Load the guideline table and list every rule, sheet order."""
        op = "guidelines"
        warnings: list[str] = []
        try:
            table = self._load_guidelines(warnings)
        except ConfigError as exc:
            return ServiceResult.failure(
                op, "GUIDELINE_COLUMNS_MISSING", str(exc), missing=exc.missing
            )
        except OSError as exc:
            return ServiceResult.failure(op, "GUIDELINES_UNAVAILABLE", str(exc))

        items = [rule.model_dump() for rule in table.values()]
        return ServiceResult(
            ok=True,
            op=op,
            data={"count": len(items), "items": items},
            warnings=warnings,
        )
