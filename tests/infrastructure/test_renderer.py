"""Tests for placeholder merge, barcode insertion, and PDF export."""

from pathlib import Path

import pytest
from reportlab.lib.units import inch

from pantryform.config.models import BarcodeConfig
from pantryform.infrastructure.renderer import (
    Box,
    DocumentRenderer,
    MergeDocument,
    export_pdf,
    fit_image,
)
from pantryform.infrastructure.storage import OutputFolder
from tests.conftest import FailingBarcode, StubBarcode

TEMPLATE = "ID {{FormID}}\n{{barcode}}\nName {{fullName}} {{unknown}}\fPage two {{toys}}"


class TestMergeDocument:
    def test_pages_split_on_form_feed(self) -> None:
        doc = MergeDocument.from_text(TEMPLATE)
        assert len(doc.pages) == 2
        assert doc.text == TEMPLATE

    def test_replace_all_counts(self) -> None:
        doc = MergeDocument.from_text("{{a}} {{a}}\n{{a}}")
        assert doc.replace_all("{{a}}", "x") == 3
        assert doc.text == "x x\nx"

    def test_clear_keeps_width(self) -> None:
        doc = MergeDocument.from_text("A {{missing}} B")
        doc.clear_placeholders()
        assert doc.text == "A " + " " * len("{{missing}}") + " B"

    def test_take_slots(self) -> None:
        doc = MergeDocument.from_text("top\n  {{barcode}}  \nbottom")
        assert doc.take_slots("{{barcode}}") == 1
        assert doc.barcode_slots == {(0, 1)}
        assert doc.pages[0][1] == "    "


class TestFitImage:
    def test_shrinks_to_box_height(self) -> None:
        img = fit_image(Box(0, 0, 500, 50), ratio=2.0, target_height=180)
        assert img.height == 50
        assert img.width == 100
        assert img.left == pytest.approx(200)
        assert img.top == 0

    def test_shrinks_to_box_width(self) -> None:
        img = fit_image(Box(10, 20, 100, 50), ratio=2.2, target_height=180)
        assert img.width == 100
        assert img.height == pytest.approx(100 / 2.2)
        assert img.left == 10
        assert img.top == pytest.approx(20 + (50 - 100 / 2.2) / 2)

    def test_keeps_target_height(self) -> None:
        img = fit_image(Box(0, 0, 500, 200), ratio=2.2, target_height=100)
        assert img.height == 100
        assert img.width == pytest.approx(220)


class TestExportPdf:
    def test_produces_pdf(self) -> None:
        data = export_pdf(MergeDocument.from_text(TEMPLATE))
        assert data.startswith(b"%PDF")

    def test_long_document_overflows(self) -> None:
        text = "\n".join(f"line {i}" for i in range(200))
        data = export_pdf(MergeDocument.from_text(text))
        # 48 lines fit between the margins of a letter page
        assert b"/Count 5" in data


class TestDocumentRenderer:
    PLACEHOLDERS = {
        "{{FormID}}": "100000000543",
        "{{fullName}}": "Ana Diaz",
        "{{toys}}": "2 toys",
    }

    def _renderer(self, tmp_path: Path, barcode: object, **config: object) -> DocumentRenderer:
        return DocumentRenderer(
            TEMPLATE,
            OutputFolder(tmp_path / "forms"),
            BarcodeConfig(**config),
            barcode=barcode,  # type: ignore[arg-type]
        )

    def test_merge_with_barcode(self, tmp_path: Path) -> None:
        stub = StubBarcode()
        doc, image = self._renderer(tmp_path, stub).merge(self.PLACEHOLDERS)
        assert stub.requests == ["100000000543"]
        assert image is not None
        assert doc.barcode_slots == {(0, 1)}
        assert doc.pages[0][0] == "ID 100000000543"
        assert doc.pages[0][2] == "Name Ana Diaz " + " " * len("{{unknown}}")
        assert doc.pages[1] == ["Page two 2 toys"]

    def test_template_untouched_between_merges(self, tmp_path: Path) -> None:
        renderer = self._renderer(tmp_path, StubBarcode())
        renderer.merge(self.PLACEHOLDERS)
        doc, _ = renderer.merge({"{{FormID}}": "100000000544"})
        assert doc.pages[0][0] == "ID 100000000544"

    def test_barcode_failure_is_warning(self, tmp_path: Path) -> None:
        warnings: list[str] = []
        doc, image = self._renderer(tmp_path, FailingBarcode()).merge(
            self.PLACEHOLDERS, warnings=warnings
        )
        assert image is None
        assert doc.barcode_slots == set()
        assert doc.pages[0][1] == " " * len("{{barcode}}")
        assert len(warnings) == 1
        assert "Barcode skipped" in warnings[0]

    def test_invalid_image_is_warning(self, tmp_path: Path) -> None:
        class Garbage:
            def fetch(self, text: str) -> bytes:
                return b"not an image"

        warnings: list[str] = []
        _, image = self._renderer(tmp_path, Garbage()).merge(self.PLACEHOLDERS, warnings=warnings)
        assert image is None
        assert warnings

    def test_barcode_disabled(self, tmp_path: Path) -> None:
        stub = StubBarcode()
        _, image = self._renderer(tmp_path, stub, enabled=False).merge(self.PLACEHOLDERS)
        assert image is None
        assert stub.requests == []

    def test_no_form_id_no_barcode(self, tmp_path: Path) -> None:
        stub = StubBarcode()
        _, image = self._renderer(tmp_path, stub).merge({"{{FormID}}": ""})
        assert image is None
        assert stub.requests == []

    def test_render_stores_pdf(self, tmp_path: Path) -> None:
        stored = self._renderer(tmp_path, StubBarcode()).render(
            self.PLACEHOLDERS, "PetPantryForm_Ana_Diaz_20250307_0905"
        )
        assert stored.path == tmp_path / "forms" / "PetPantryForm_Ana_Diaz_20250307_0905.pdf"
        assert stored.path.read_bytes().startswith(b"%PDF")

    def test_barcode_height_default(self) -> None:
        assert BarcodeConfig().target_height_in * inch == 180
