"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, pantryform.toml only contains
overrides. A fresh workspace needs no config file at all when the
workbooks use the default names.
"""

from __future__ import annotations

from pydantic import BaseModel

from pantryform.domain.household import HouseholdRules

# --- pantryform.toml sections ---


class SheetsConfig(BaseModel):
    """[sheets] section. Relative paths resolve against the workspace root."""

    model_config = {"frozen": True}

    responses_path: str = "responses.xlsx"
    response_sheet_name: str = "Form Responses 1"
    guidelines_path: str = "guidelines.xlsx"


class HouseholdConfig(HouseholdRules):
    """[household] section."""


class FormIdConfig(BaseModel):
    """[form_id] section.

    ``start`` is the last ID considered issued; the first generated ID is
    ``start + 1``.
    """

    model_config = {"frozen": True}

    start: int = 100000000542
    width: int = 12
    column: str = "FormID"


class BarcodeConfig(BaseModel):
    """[barcode] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    placeholder: str = "{{barcode}}"
    type: str = "code128"
    width_px: int = 1100
    height_px: int = 500
    target_height_in: float = 2.5
    service_url: str = "https://quickchart.io/barcode"
    timeout_s: float = 10.0


class OutputConfig(BaseModel):
    """[output] section."""

    model_config = {"frozen": True}

    folder: str = "forms"
    template: str = "order_form.txt"
    name_prefix: str = "PetPantryForm"
    timezone: str = "UTC"

