"""Placeholder map assembly for the order-form template.

Placeholders are opaque ``{{token}}`` strings. Fixed fields come from the
submission and the household summary; recommended-item placeholders are
merged last. Values are always strings, never None.
"""

from __future__ import annotations

import re
from datetime import date

from pantryform.domain.household import HouseholdCounts
from pantryform.domain.submission import Submission

FORM_ID_PLACEHOLDER = "{{FormID}}"

_CONTACT_RE = re.compile(r"\b(Text|Email|Phone)\b(?=\s*[–—-])", re.IGNORECASE)
_WEEKEND_RE = re.compile(r"sat|sun|weekend", re.IGNORECASE)


def format_form_date(day: date) -> str:
    """``M/D/YYYY`` without zero padding (``3/7/2025``)."""
    return f"{day.month}/{day.day}/{day.year}"


def contact_methods(raw: str) -> str:
    """Extract the contact methods a respondent ticked.

    Form options read like ``"Text - mobile only"``; only a method word
    directly followed by a dash counts.

    Examples:
        >>> contact_methods("TEXT – mobile, email - work, Text - again")
        'Text, Email'
        >>> contact_methods("no preference")
        ''
    """
    seen: list[str] = []
    for match in _CONTACT_RE.finditer(raw or ""):
        word = match.group(1).capitalize()
        if word not in seen:
            seen.append(word)
    return ", ".join(seen)


def pickup_window_label(raw: str) -> str:
    """``"Saturday"`` for weekend windows, ``"Weekday"`` otherwise."""
    return "Saturday" if _WEEKEND_RE.search(raw or "") else "Weekday"


def build_placeholder_map(
    submission: Submission,
    counts: HouseholdCounts,
    recommended: dict[str, str],
    *,
    today: date,
) -> dict[str, str]:
    """Assemble the full placeholder -> value mapping for one submission."""
    stamp = format_form_date(today)
    merge: dict[str, str] = {
        "{{formDate}}": stamp,
        FORM_ID_PLACEHOLDER: submission.form_id,
        "{{fullName}}": submission.full_name,
        "{{phone}}": submission.phone,
        "{{email}}": submission.email,
        "{{Contact}}": contact_methods(submission.contact_method),
        "{{addressLine1}}": submission.address_line1,
        "{{addressLine2}}": submission.address_line2,
        "{{city}}": submission.city,
        "{{state}}": submission.state,
        "{{zip}}": submission.zip_code,
        "{{newClient}}": submission.returning_client,
        "{{services}}": submission.additional_services,
        "{{pickupWindow}}": pickup_window_label(submission.pickup_window),
        "{{todaysDate}}": stamp,
        "{{lastName}}": submission.last_name,
    }

    for slot in submission.slots:
        i = slot.index
        merge[f"{{{{{i}Name}}}}"] = slot.name
        merge[f"{{{{{i}Species}}}}"] = slot.species
        merge[f"{{{{{i}Breed}}}}"] = slot.breed
        merge[f"{{{{{i}Color}}}}"] = slot.color
        merge[f"{{{{{i}Age}}}}"] = slot.age
        merge[f"{{{{{i}Units}}}}"] = slot.units
        merge[f"{{{{{i}Weight}}}}"] = slot.weight
        merge[f"{{{{{i}Sex}}}}"] = slot.sex
        merge[f"{{{{{i}SPN}}}}"] = slot.spay_neuter

    merge["{{adultDogCount}}"] = str(counts.adult_dogs)
    merge["{{puppyCount}}"] = str(counts.puppies)
    merge["{{adultCatCount}}"] = str(counts.adult_cats)
    merge["{{kittenCount}}"] = str(counts.kittens)
    merge["{{dogSizes}}"] = counts.dog_sizes_text
    merge["{{otherSpecies}}"] = counts.other_species_text

    merge.update(recommended)
    return merge
