"""IntakeService — turn a response row into a stored, barcoded order form.

Pipeline: CHECK → ASSIGN ID → SUMMARIZE → RECOMMEND → MERGE → RENDER → WRITE BACK

INVARIANT: One row's failure never blocks another. Every failure becomes a
``ServiceResult(ok=False)``; recommendation and count write-back problems
only add warnings and the form is still produced.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import structlog
from jinja2 import TemplateNotFound
from sqlalchemy.exc import SQLAlchemyError

from pantryform.config.logging import row_context
from pantryform.domain.guidelines import ConfigError
from pantryform.domain.household import HouseholdCounts, summarize
from pantryform.domain.ids import validate_form_id
from pantryform.domain.merge import build_placeholder_map
from pantryform.domain.recommend import parse_requested, resolve
from pantryform.domain.submission import Submission
from pantryform.infrastructure.workbook import HEADER_ROW
from pantryform.services._helpers import now_in, output_name
from pantryform.services.base import BaseService
from pantryform.services.result import ServiceResult

if TYPE_CHECKING:
    from pantryform.config.models import HouseholdConfig
    from pantryform.infrastructure.workbook import ResponseSheet

logger = logging.getLogger(__name__)
log = structlog.get_logger(__name__)

PDF_ID_COLUMN = "Generated PDF ID"
PDF_URL_COLUMN = "Generated PDF URL"
GENERATED_AT_COLUMN = "Generated At"
REGEN_ID_COLUMN = "Regenerated PDF ID"
REGEN_URL_COLUMN = "Regenerated PDF URL"
REGEN_AT_COLUMN = "Last Regenerated At"

COUNT_COLUMNS: tuple[str, ...] = (
    "CountAdultDogs",
    "CountPuppies",
    "CountAdultCats",
    "CountKittens",
)

# Errors a single row can hit that must not escape the service boundary.
_ROW_ERRORS = (OSError, LookupError, TemplateNotFound, SQLAlchemyError)


class IntakeService(BaseService):
    """Generates order forms for response rows."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def on_submit(self, sheet_name: str, row_index: int) -> ServiceResult:
        """Trigger entry point for a newly submitted response row.

        Events for other sheets and for the header row are ignored.
        """
        expected = self._workspace.settings.sheets.response_sheet_name
        if sheet_name != expected:
            return ServiceResult(
                ok=True,
                op="on_submit",
                data={"row": row_index, "skipped": True, "reason": "other_sheet"},
            )
        if row_index <= HEADER_ROW:
            return ServiceResult(
                ok=True,
                op="on_submit",
                data={"row": row_index, "skipped": True, "reason": "header_row"},
            )
        return self.generate(row_index)

    def generate(self, row_index: int, *, force: bool = False) -> ServiceResult:
        """Generate (or with *force*, regenerate) the form for *row_index*.

        A row that already has a PDF ID and URL is skipped unless forced.
        Forced regeneration records the new file in the "Regenerated"
        columns and leaves the original references untouched.
        """
        op = "generate"
        warnings: list[str] = []
        try:
            sheet = self._workspace.open_responses()
        except _ROW_ERRORS as exc:
            return ServiceResult.failure(op, "RESPONSES_UNAVAILABLE", str(exc))

        try:
            with row_context(row_index):
                return self._generate(sheet, row_index, force=force, warnings=warnings)
        except _ROW_ERRORS as exc:
            logger.warning("generate failed for row %d: %s", row_index, exc)
            return ServiceResult.failure(
                op, "GENERATE_FAILED", str(exc), warnings=warnings, row=row_index
            )
        finally:
            sheet.close()

    def preview(self, row_index: int) -> ServiceResult:
        """Compute counts and placeholders for a row without writing anything."""
        op = "preview"
        warnings: list[str] = []
        try:
            sheet = self._workspace.open_responses()
        except _ROW_ERRORS as exc:
            return ServiceResult.failure(op, "RESPONSES_UNAVAILABLE", str(exc))

        try:
            if not HEADER_ROW < row_index <= sheet.last_row:
                return self._out_of_range(op, row_index, sheet)
            submission = self._read_submission(sheet, row_index)
        finally:
            sheet.close()

        counts = summarize(submission.slots, self._household, warnings=warnings)
        recommended = self._recommend(submission, counts, warnings)
        now = now_in(self._workspace.settings.output.timezone)
        placeholders = build_placeholder_map(submission, counts, recommended, today=now.date())
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "row": row_index,
                "form_id": submission.form_id,
                "requested": parse_requested(submission.resources_requested),
                "counts": _counts_payload(counts),
                "recommended": recommended,
                "placeholders": placeholders,
            },
            warnings=warnings,
        )

    def sweep(self, *, force: bool = False) -> ServiceResult:
        """Run :meth:`generate` over every non-blank response row.

        Per-row failures are reported as warnings; the sweep itself only
        fails when the response sheet cannot be opened.
        """
        op = "sweep"
        try:
            sheet = self._workspace.open_responses()
        except _ROW_ERRORS as exc:
            return ServiceResult.failure(op, "RESPONSES_UNAVAILABLE", str(exc))
        try:
            rows = [
                i
                for i in range(HEADER_ROW + 1, sheet.last_row + 1)
                if any(v not in (None, "") for v in sheet.read_row(i).values())
            ]
        finally:
            sheet.close()

        generated: list[dict[str, Any]] = []
        skipped: list[int] = []
        failed: list[int] = []
        warnings: list[str] = []
        for row_index in rows:
            result = self.generate(row_index, force=force)
            warnings.extend(f"Row {row_index}: {w}" for w in result.warnings)
            if not result.ok:
                failed.append(row_index)
                message = result.error.message if result.error else "unknown error"
                warnings.append(f"Row {row_index}: {message}")
            elif result.data.get("skipped"):
                skipped.append(row_index)
            else:
                generated.append(result.data)

        log.info(
            "sweep.complete",
            generated=len(generated),
            skipped=len(skipped),
            failed=len(failed),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "count": len(rows),
                "generated": generated,
                "skipped": skipped,
                "failed": failed,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    @property
    def _household(self) -> HouseholdConfig:
        return self._workspace.settings.household

    def _generate(
        self,
        sheet: ResponseSheet,
        row_index: int,
        *,
        force: bool,
        warnings: list[str],
    ) -> ServiceResult:
        op = "generate"
        settings = self._workspace.settings
        if not HEADER_ROW < row_index <= sheet.last_row:
            return self._out_of_range(op, row_index, sheet)

        # --- CHECK ---
        pdf_id = sheet.read_cell(row_index, PDF_ID_COLUMN)
        pdf_url = sheet.read_cell(row_index, PDF_URL_COLUMN)
        has_pdf = bool(pdf_id and pdf_url)
        if has_pdf and not force:
            logger.info("Skipped row %d: already has a generated PDF", row_index)
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "row": row_index,
                    "skipped": True,
                    "url": str(pdf_url),
                },
            )

        submission = self._read_submission(sheet, row_index)

        # --- ASSIGN ID ---
        if not submission.form_id:
            column = settings.form_id.column
            if sheet.column(column) is None:
                return ServiceResult.failure(
                    op,
                    "FORM_ID_COLUMN_MISSING",
                    f"{column} column missing",
                    warnings=warnings,
                    row=row_index,
                )
            new_id = self._workspace.sequence.next_id()
            sheet.write(row_index, {column: new_id})
            sheet.save()
            submission = submission.model_copy(update={"form_id": new_id})
            log.info("form_id.assigned", row=row_index, form_id=new_id)
        elif not validate_form_id(submission.form_id, settings.form_id.width):
            warnings.append(f"Existing form ID {submission.form_id!r} is not a generated ID")

        # --- SUMMARIZE ---
        counts = summarize(submission.slots, self._household, warnings=warnings)
        self._write_counts(sheet, row_index, counts, warnings)

        # --- RECOMMEND + MERGE ---
        recommended = self._recommend(submission, counts, warnings)
        now = now_in(settings.output.timezone)
        placeholders = build_placeholder_map(submission, counts, recommended, today=now.date())

        # --- RENDER ---
        name = output_name(
            settings.output.name_prefix, submission.first_name, submission.last_name, now
        )
        stored = self._workspace.renderer.render(placeholders, name, warnings=warnings)

        # --- WRITE BACK ---
        if has_pdf:
            columns = (REGEN_ID_COLUMN, REGEN_URL_COLUMN, REGEN_AT_COLUMN)
        else:
            columns = (PDF_ID_COLUMN, PDF_URL_COLUMN, GENERATED_AT_COLUMN)
        sheet.write(row_index, dict(zip(columns, (stored.id, stored.url, now), strict=True)))
        sheet.save()

        log.info(
            "form.regenerated" if has_pdf else "form.generated",
            row=row_index,
            form_id=submission.form_id,
            url=stored.url,
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "row": row_index,
                "form_id": submission.form_id,
                "file_id": stored.id,
                "url": stored.url,
                "path": str(stored.path),
                "regenerated": has_pdf,
                "counts": _counts_payload(counts),
                "recommended_count": len(recommended),
            },
            warnings=warnings,
        )

    def _read_submission(self, sheet: ResponseSheet, row_index: int) -> Submission:
        settings = self._workspace.settings
        return Submission.from_row(
            sheet.read_row(row_index),
            pet_slots=settings.household.pet_slots,
            form_id_column=settings.form_id.column,
        )

    def _write_counts(
        self,
        sheet: ResponseSheet,
        row_index: int,
        counts: HouseholdCounts,
        warnings: list[str],
    ) -> None:
        """Write the four counters back, only when every column exists."""
        if any(sheet.column(c) is None for c in COUNT_COLUMNS):
            return
        values = (counts.adult_dogs, counts.puppies, counts.adult_cats, counts.kittens)
        sheet.write(row_index, dict(zip(COUNT_COLUMNS, values, strict=True)))
        try:
            sheet.save()
        except OSError as exc:
            logger.warning("summary write failed for row %d: %s", row_index, exc)
            warnings.append(f"Summary write failed: {exc}")

    def _recommend(
        self,
        submission: Submission,
        counts: HouseholdCounts,
        warnings: list[str],
    ) -> dict[str, str]:
        """Resolve recommended items; any guideline problem degrades to ``{}``."""
        try:
            table = self._load_guidelines(warnings)
        except (ConfigError, OSError) as exc:
            logger.warning("recommended items skipped: %s", exc)
            warnings.append(f"Recommended items skipped: {exc}")
            return {}
        requested = parse_requested(submission.resources_requested)
        recommended = resolve(requested, counts, table, self._household)
        logger.debug("Built item placeholder map with %d entries", len(recommended))
        return recommended

    @staticmethod
    def _out_of_range(op: str, row_index: int, sheet: ResponseSheet) -> ServiceResult:
        return ServiceResult.failure(
            op,
            "ROW_OUT_OF_RANGE",
            f"Row {row_index} is not a response row (2..{sheet.last_row})",
            row=row_index,
        )


def _counts_payload(counts: HouseholdCounts) -> dict[str, Any]:
    return {
        "adult_dogs": counts.adult_dogs,
        "puppies": counts.puppies,
        "adult_cats": counts.adult_cats,
        "kittens": counts.kittens,
        "dog_sizes": counts.dog_sizes_text,
        "other_species": counts.other_species,
    }
