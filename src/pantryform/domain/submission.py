"""Submission — typed record built once from a header-indexed sheet row.

The response sheet is keyed by the form's question text. Everything
downstream works on :class:`Submission` so a renamed column only needs
fixing here.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Self

from pydantic import BaseModel, Field

from pantryform.domain.household import IndividualSlot

# field name -> candidate headers, first non-empty wins
SUBMISSION_COLUMNS: dict[str, tuple[str, ...]] = {
    "first_name": ("First Name",),
    "last_name": ("Last Name",),
    "phone": ("Phone Number",),
    "email": ("Email Address",),
    "contact_method": ("Preferred Contact Method", "Contact Method"),
    "address_line1": ("Address Line 1",),
    "address_line2": ("Address Line 2",),
    "city": ("Town/City",),
    "state": ("State",),
    "zip_code": ("Zip Code",),
    "returning_client": ("Returning Client",),
    "additional_services": ("Additional Services",),
    "pickup_window": ("Pick-up Window",),
    "resources_requested": ("Resources Requested", "Requested Resources"),
}

# slot field -> header suffix after "Pet {i} "
SLOT_COLUMNS: dict[str, str] = {
    "name": "Name",
    "species": "Species",
    "breed": "Breed",
    "color": "Color",
    "age": "Age",
    "units": "Units",
    "weight": "Weight",
    "sex": "Sex",
    "spay_neuter": "Spay/Neuter",
}


def cell_text(value: Any) -> str:
    """Render a sheet cell as text; blanks become ``""``.

    Whole-number floats drop the ``.0`` (zip codes and phone numbers often
    arrive as numeric cells). List values keep their first element.
    """
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).upper()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def _first(row: Mapping[str, Any], headers: tuple[str, ...]) -> str:
    for header in headers:
        text = cell_text(row.get(header))
        if text:
            return text
    return ""


class Submission(BaseModel):
    """One intake form response."""

    model_config = {"frozen": True}

    form_id: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    contact_method: str = ""
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    returning_client: str = ""
    additional_services: str = ""
    pickup_window: str = ""
    resources_requested: str = ""
    slots: list[IndividualSlot] = Field(default_factory=list)

    @classmethod
    def from_row(
        cls,
        row: Mapping[str, Any],
        *,
        pet_slots: int = 6,
        form_id_column: str = "FormID",
    ) -> Self:
        """Build a submission from a ``{header: value}`` row mapping."""
        fields = {name: _first(row, headers) for name, headers in SUBMISSION_COLUMNS.items()}
        fields["form_id"] = cell_text(row.get(form_id_column))
        slots = [
            IndividualSlot(
                index=i,
                **{
                    name: cell_text(row.get(f"Pet {i} {suffix}"))
                    for name, suffix in SLOT_COLUMNS.items()
                },
            )
            for i in range(1, pet_slots + 1)
        ]
        return cls(**fields, slots=slots)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
