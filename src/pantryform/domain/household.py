"""Household composition — per-pet slots, species classification, dog sizes.

A submission carries a fixed number of pet slots. Each used slot is
classified as a dog, a cat, or "other". Dogs and cats whose age is given
in months are juveniles (puppies / kittens). Adult dogs are bucketed by
weight into five size classes.

INVARIANT: adult counts are derived as ``total - juvenile`` and are never
negative, because juveniles are only counted among their own species.
"""

from __future__ import annotations

import logging
import re
from enum import StrEnum

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"(\d+(\.\d+)?)")


class DogSize(StrEnum):
    """Weight classes for adult dogs, smallest first."""

    MINIATURE = "Miniature"
    SMALL = "Small"
    MEDIUM = "Medium"
    LARGE = "Large"
    GIANT = "Giant"


class HouseholdRules(BaseModel):
    """Tunable classification rules for household summaries.

    Size thresholds are exclusive upper bounds in pounds: a dog weighing
    exactly ``miniature_below`` is Small, not Miniature.
    """

    model_config = {"frozen": True}

    pet_slots: int = 6
    dog_keyword: str = "dog"
    cat_keyword: str = "cat"
    juvenile_unit_prefix: str = "month"
    miniature_below: float = 12
    small_below: float = 25
    medium_below: float = 50
    large_below: float = 100


DEFAULT_RULES = HouseholdRules()


class IndividualSlot(BaseModel):
    """One pet block on a submission. Empty ``species`` means unused."""

    model_config = {"frozen": True}

    index: int
    name: str = ""
    species: str = ""
    breed: str = ""
    color: str = ""
    age: str = ""
    units: str = ""
    weight: str = ""
    sex: str = ""
    spay_neuter: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.species.strip()


class HouseholdCounts(BaseModel):
    """Derived counts for one household."""

    model_config = {"frozen": True}

    adult_dogs: int = 0
    puppies: int = 0
    adult_cats: int = 0
    kittens: int = 0
    dog_sizes: dict[DogSize, int] = Field(default_factory=lambda: {s: 0 for s in DogSize})
    other_species: list[str] = Field(default_factory=list)

    @property
    def dog_sizes_text(self) -> str:
        """Non-zero size buckets as ``"2 Small, 1 Large"`` in size order."""
        return ", ".join(
            f"{self.dog_sizes[size]} {size}" for size in DogSize if self.dog_sizes.get(size, 0) > 0
        )

    @property
    def other_species_text(self) -> str:
        return ", ".join(self.other_species)


def parse_weight_lbs(raw: object) -> float | None:
    """Return the first numeric token in *raw* as pounds, or None.

    Examples:
        >>> parse_weight_lbs("about 45 lbs")
        45.0
        >>> parse_weight_lbs("12.5")
        12.5
        >>> parse_weight_lbs("unknown") is None
        True
    """
    if raw is None:
        return None
    match = _NUMBER_RE.search(str(raw))
    return float(match.group(1)) if match else None


def dog_size_from_weight(lbs: float, rules: HouseholdRules = DEFAULT_RULES) -> DogSize:
    """Bucket a weight into a :class:`DogSize` (left-closed, right-open)."""
    if lbs < rules.miniature_below:
        return DogSize.MINIATURE
    if lbs < rules.small_below:
        return DogSize.SMALL
    if lbs < rules.medium_below:
        return DogSize.MEDIUM
    if lbs < rules.large_below:
        return DogSize.LARGE
    return DogSize.GIANT


def capitalize_first(text: str) -> str:
    """Upper-case the first character of the trimmed *text*."""
    stripped = text.strip()
    return stripped[:1].upper() + stripped[1:] if stripped else ""


def summarize(
    slots: list[IndividualSlot],
    rules: HouseholdRules = DEFAULT_RULES,
    *,
    warnings: list[str] | None = None,
) -> HouseholdCounts:
    """Classify every used slot and return the household counts.

    Unparseable adult-dog weights contribute no size bucket; a note is
    appended to *warnings* (when given) and processing continues.
    """
    dogs = cats = puppies = kittens = 0
    sizes: dict[DogSize, int] = {s: 0 for s in DogSize}
    others: list[str] = []

    for slot in slots[: rules.pet_slots]:
        species = slot.species.strip().lower()
        if not species:
            continue
        juvenile = slot.units.strip().lower().startswith(rules.juvenile_unit_prefix)

        if species == rules.dog_keyword:
            dogs += 1
            if juvenile:
                puppies += 1
                continue
            weight = parse_weight_lbs(slot.weight)
            if weight:
                sizes[dog_size_from_weight(weight, rules)] += 1
            elif weight is None and slot.weight.strip():
                msg = f"Pet {slot.index} weight {slot.weight!r} has no numeric value"
                logger.debug(msg)
                if warnings is not None:
                    warnings.append(msg)
        elif species == rules.cat_keyword:
            cats += 1
            if juvenile:
                kittens += 1
        else:
            pretty = capitalize_first(species)
            if pretty and pretty not in others:
                others.append(pretty)

    return HouseholdCounts(
        adult_dogs=dogs - puppies,
        puppies=puppies,
        adult_cats=cats - kittens,
        kittens=kittens,
        dog_sizes=sizes,
        other_species=others,
    )
