"""Document rendering — placeholder merge, barcode insertion, PDF export.

The template is plain text. Form feeds (``\\f``) separate pages; each
line is laid out as a full-width text box. A line holding the barcode
placeholder becomes a taller box and receives the barcode image, centered.

Pipeline: MERGE → BARCODE → CLEAR → EXPORT → STORE

Unmatched ``{{tokens}}`` left after the merge are blanked with spaces of
equal length so fixed-width columns stay aligned.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from io import BytesIO
from typing import TYPE_CHECKING, Any

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from pantryform.infrastructure.barcode import BarcodeError

if TYPE_CHECKING:
    from pantryform.config.models import BarcodeConfig
    from pantryform.infrastructure.barcode import BarcodeFetcher
    from pantryform.infrastructure.storage import OutputFolder, StoredFile

logger = logging.getLogger(__name__)

PLACEHOLDER_RE = re.compile(r"\{\{[^}]+\}\}")
FORM_ID_KEYS = ("{{FormID}}", "{{formId}}")

PAGE_WIDTH, PAGE_HEIGHT = letter
MARGIN = 0.75 * inch
FONT = "Courier"
FONT_SIZE = 10
LEADING = 14


@dataclass
class MergeDocument:
    """In-memory working copy of a template: pages of text lines."""

    pages: list[list[str]]
    barcode_slots: set[tuple[int, int]] = field(default_factory=set)

    @classmethod
    def from_text(cls, source: str) -> MergeDocument:
        return cls(pages=[page.split("\n") for page in source.split("\f")])

    @property
    def text(self) -> str:
        return "\f".join("\n".join(lines) for lines in self.pages)

    def replace_all(self, token: str, value: str) -> int:
        """Replace every occurrence of *token*; returns the count replaced."""
        count = 0
        for lines in self.pages:
            for i, line in enumerate(lines):
                if token in line:
                    count += line.count(token)
                    lines[i] = line.replace(token, value)
        return count

    def take_slots(self, token: str) -> int:
        """Turn every line holding *token* into a barcode slot.

        The token is removed from the line text. Returns the slot count.
        """
        for p, lines in enumerate(self.pages):
            for i, line in enumerate(lines):
                if token in line:
                    lines[i] = line.replace(token, "")
                    self.barcode_slots.add((p, i))
        return len(self.barcode_slots)

    def clear_placeholders(self) -> None:
        """Blank unreplaced ``{{tokens}}`` with equal-length spaces."""
        for lines in self.pages:
            for i, line in enumerate(lines):
                if "{{" in line:
                    lines[i] = PLACEHOLDER_RE.sub(lambda m: " " * len(m.group(0)), line)


@dataclass(frozen=True)
class Box:
    left: float
    top: float
    width: float
    height: float


def fit_image(box: Box, *, ratio: float, target_height: float) -> Box:
    """Scale an image of aspect *ratio* into *box*, centered.

    Height starts at ``min(target_height, box.height)``; if the resulting
    width overflows the box, the image is shrunk to the box width.
    """
    h = min(target_height, box.height)
    w = h * ratio
    if w > box.width:
        w = box.width
        h = w / ratio
    return Box(
        left=box.left + (box.width - w) / 2,
        top=box.top + (box.height - h) / 2,
        width=w,
        height=h,
    )


def export_pdf(
    doc: MergeDocument,
    *,
    barcode: ImageReader | None = None,
    barcode_ratio: float = 1.0,
    barcode_height: float = LEADING,
) -> bytes:
    """Lay out *doc* and return PDF bytes.

    Top-based box coordinates are converted to reportlab's bottom-left
    origin at draw time. Lines that overflow a page continue on a new one.
    """
    buf = BytesIO()
    pdf = canvas.Canvas(buf, pagesize=letter)
    content_width = PAGE_WIDTH - 2 * MARGIN

    for p, lines in enumerate(doc.pages):
        if p:
            pdf.showPage()
        pdf.setFont(FONT, FONT_SIZE)
        top = MARGIN
        for i, line in enumerate(lines):
            is_slot = (p, i) in doc.barcode_slots
            height = barcode_height if is_slot else LEADING
            if top + height > PAGE_HEIGHT - MARGIN and top > MARGIN:
                pdf.showPage()
                pdf.setFont(FONT, FONT_SIZE)
                top = MARGIN
            box = Box(left=MARGIN, top=top, width=content_width, height=height)
            if line.strip():
                pdf.drawString(box.left, PAGE_HEIGHT - box.top - FONT_SIZE, line)
            if is_slot and barcode is not None:
                img = fit_image(box, ratio=barcode_ratio, target_height=barcode_height)
                pdf.drawImage(
                    barcode, img.left, PAGE_HEIGHT - img.top - img.height, img.width, img.height
                )
            top += height

    pdf.save()
    return buf.getvalue()


class DocumentRenderer:
    """Merge placeholders into the template and store the PDF."""

    def __init__(
        self,
        template: str,
        folder: OutputFolder,
        config: BarcodeConfig,
        *,
        barcode: BarcodeFetcher | None = None,
    ) -> None:
        self._template = template
        self._folder = folder
        self._config = config
        self._barcode = barcode

    def merge(
        self,
        placeholders: Mapping[str, Any],
        *,
        warnings: list[str] | None = None,
    ) -> tuple[MergeDocument, ImageReader | None]:
        """Apply placeholders and the barcode to a fresh working copy."""
        doc = MergeDocument.from_text(self._template)
        for token, value in placeholders.items():
            doc.replace_all(token, "" if value is None else str(value))

        image: ImageReader | None = None
        form_id = next((str(placeholders[k]) for k in FORM_ID_KEYS if placeholders.get(k)), "")
        if form_id and self._barcode is not None and self._config.enabled:
            try:
                image = ImageReader(BytesIO(self._barcode.fetch(form_id)))
            except (BarcodeError, OSError) as exc:
                logger.warning("Barcode skipped for %s: %s", form_id, exc)
                if warnings is not None:
                    warnings.append(f"Barcode skipped: {exc}")
            else:
                doc.take_slots(self._config.placeholder)

        doc.clear_placeholders()
        return doc, image

    def render(
        self,
        placeholders: Mapping[str, Any],
        output_name: str,
        *,
        warnings: list[str] | None = None,
    ) -> StoredFile:
        """Merge, export, and store; returns the stored PDF."""
        doc, image = self.merge(placeholders, warnings=warnings)
        data = export_pdf(
            doc,
            barcode=image,
            barcode_ratio=self._config.width_px / self._config.height_px,
            barcode_height=self._config.target_height_in * inch,
        )
        stored = self._folder.store(output_name, data)
        logger.debug("Stored %s (%d bytes)", stored.path, len(data))
        return stored
