"""Shared pytest fixtures and test helpers for pantryform tests."""

from __future__ import annotations

import logging
from collections.abc import Generator, Sequence
from io import BytesIO
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner
from openpyxl import Workbook, load_workbook
from PIL import Image

from pantryform.config.settings import PantrySettings
from pantryform.infrastructure.barcode import BarcodeError
from pantryform.infrastructure.sequence import InMemorySequence
from pantryform.infrastructure.workspace import Workspace

RESPONSE_SHEET = "Form Responses 1"

PET_FIELDS = ("Name", "Species", "Breed", "Color", "Age", "Units", "Weight", "Sex", "Spay/Neuter")

RESPONSE_HEADERS: list[str] = [
    "Timestamp",
    "First Name",
    "Last Name",
    "Phone Number",
    "Email Address",
    "Preferred Contact Method",
    "Address Line 1",
    "Address Line 2",
    "Town/City",
    "State",
    "Zip Code",
    "Returning Client",
    "Additional Services",
    "Pick-up Window",
    "Resources Requested",
    *[f"Pet {i} {field}" for i in range(1, 7) for field in PET_FIELDS],
    "FormID",
    "Generated PDF ID",
    "Generated PDF URL",
    "Generated At",
    "Regenerated PDF ID",
    "Regenerated PDF URL",
    "Last Regenerated At",
    "CountAdultDogs",
    "CountPuppies",
    "CountAdultCats",
    "CountKittens",
]

GUIDELINE_HEADERS: list[str] = [
    "Item",
    "Placeholders",
    "Per Pet",
    "Household Max",
    "Notes",
    "AmountGiven",
    "Amount Placeholder",
]

GUIDELINE_ROWS: list[list[Any]] = [
    ["Dog Food", "{{dryDogFood}}", 10, 30, "lbs of food", "1 bag", "{{dryDogFoodAmt}}"],
    ["Cat Food", "{{dryCatFood}}", 5, 15, "lbs of food", "", ""],
    ["Dry Puppy Food", "{{dryPuppyFood}}", 4, None, "lbs puppy food", "", ""],
    ["Wet Puppy Food", "{{wetPuppyFood}}", 2, 6, "cans", "", ""],
    ["Dry Kitten Food", "{{dryKittenFood}}", 3, None, "lbs kitten food", "", ""],
    ["Wet Kitten Food", "{{wetKittenFood}}", 4, 8, "cans", "", ""],
    ["Cat Litter", "{{catLitter}}", None, 1, "box", "", ""],
    ["Toys", "{{toys}}", None, 2, "toys", "", ""],
]


def pet(
    i: int,
    species: str,
    *,
    name: str = "",
    age: str = "",
    units: str = "",
    weight: str = "",
) -> dict[str, Any]:
    """Response cells for pet slot *i*."""
    return {
        f"Pet {i} Name": name or f"Pet{i}",
        f"Pet {i} Species": species,
        f"Pet {i} Age": age,
        f"Pet {i} Units": units,
        f"Pet {i} Weight": weight,
    }


# Row 2: one adult dog (45 lbs), one puppy, one adult cat, one rabbit.
ANA_DIAZ: dict[str, Any] = {
    "First Name": "Ana",
    "Last Name": "Diaz",
    "Phone Number": 5551234567,
    "Email Address": "ana@example.org",
    "Preferred Contact Method": "Text - mobile, Email - home",
    "Address Line 1": "12 Elm St",
    "Town/City": "Springfield",
    "State": "IL",
    "Zip Code": 62704,
    "Returning Client": "Yes",
    "Pick-up Window": "Saturday morning",
    "Resources Requested": "Dog Food, Cat Litter, Toys",
    **pet(1, "Dog", name="Rex", age="3", units="Years", weight="45 lbs"),
    **pet(2, "dog", name="Bit", age="4", units="Months", weight="8"),
    **pet(3, "Cat", name="Tom", age="2", units="Years"),
    **pet(4, "rabbit", name="Hop"),
}

# Row 3: no first name, one kitten and one adult cat.
NO_FIRST_NAME: dict[str, Any] = {
    "Last Name": "Okafor",
    "Pick-up Window": "Tuesday evening",
    "Resources Requested": "Cat Food",
    **pet(1, "Cat", age="3", units="months"),
    **pet(2, "Cat", age="5", units="years"),
}

# Row 4: already has a generated PDF.
ALREADY_DONE: dict[str, Any] = {
    "First Name": "Lee",
    "Last Name": "Park",
    "Resources Requested": "Toys",
    "FormID": "100000000001",
    "Generated PDF ID": "abc123",
    "Generated PDF URL": "file:///forms/old.pdf",
}


def write_workbook(
    path: Path,
    headers: Sequence[str],
    rows: Sequence[dict[str, Any] | Sequence[Any]],
    *,
    sheet_name: str = "Sheet1",
) -> Path:
    """Write a single-sheet workbook; dict rows are keyed by header."""
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name
    ws.append(list(headers))
    for row in rows:
        if isinstance(row, dict):
            ws.append([row.get(h) for h in headers])
        else:
            ws.append(list(row))
    wb.save(path)
    wb.close()
    return path


def read_back(path: Path, row_index: int, *, sheet_name: str = RESPONSE_SHEET) -> dict[str, Any]:
    """Read one saved row as ``{header: value}``."""
    wb = load_workbook(path)
    try:
        ws = wb[sheet_name]
        headers = [c.value for c in ws[1]]
        values = [c.value for c in ws[row_index]]
        return dict(zip(headers, values, strict=False))
    finally:
        wb.close()


def png_bytes(width: int = 110, height: int = 50) -> bytes:
    buf = BytesIO()
    Image.new("RGB", (width, height), "white").save(buf, format="PNG")
    return buf.getvalue()


class StubBarcode:
    """Barcode fetcher that records requests and returns a blank PNG."""

    def __init__(self) -> None:
        self.requests: list[str] = []

    def fetch(self, text: str) -> bytes:
        self.requests.append(text)
        return png_bytes()


class FailingBarcode:
    def fetch(self, text: str) -> bytes:
        msg = "Barcode request failed: 503 Service Unavailable"
        raise BarcodeError(msg)


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler changes made by configure_logging() in CLI tests."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    pkg = logging.getLogger("pantryform")
    pkg_level = pkg.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    pkg.setLevel(pkg_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Temporary workspace with a response workbook and a guideline workbook.

    This is the single source of truth for the workspace layout. Rows 2-4
    hold ANA_DIAZ, NO_FIRST_NAME, and ALREADY_DONE.
    """
    write_workbook(
        tmp_path / "responses.xlsx",
        RESPONSE_HEADERS,
        [ANA_DIAZ, NO_FIRST_NAME, ALREADY_DONE],
        sheet_name=RESPONSE_SHEET,
    )
    write_workbook(tmp_path / "guidelines.xlsx", GUIDELINE_HEADERS, GUIDELINE_ROWS)
    return tmp_path


@pytest.fixture
def settings(workspace_root: Path) -> PantrySettings:
    return PantrySettings.from_cli(root=workspace_root)


@pytest.fixture
def barcode() -> StubBarcode:
    return StubBarcode()


@pytest.fixture
def workspace(settings: PantrySettings, barcode: StubBarcode) -> Generator[Workspace]:
    """Workspace with an in-memory form ID sequence and a stub barcode."""
    ws = Workspace(settings, sequence=InMemorySequence(settings.form_id.start), barcode=barcode)
    try:
        yield ws
    finally:
        ws.close()


@pytest.fixture
def _isolated_workspace(workspace_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp workspace with the barcode service disabled.

    Use via ``@pytest.mark.usefixtures("_isolated_workspace")`` on command
    test classes.
    """
    (workspace_root / "pantryform.toml").write_text("[barcode]\nenabled = false\n")
    monkeypatch.delenv("PANTRYFORM_CONFIG", raising=False)
    monkeypatch.chdir(workspace_root)
