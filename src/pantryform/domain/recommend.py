"""Recommended items — resolve requested categories into line-item text.

Given the household counts and the caller's requested categories, each
matching guideline rule yields a quantity:

- per-pet amount absent: the household max (a flat household allotment);
- otherwise: ``eligible_count * per_pet``, capped by the household max.

The eligible count comes from the request token itself: tokens mentioning
dogs use the adult-dog count, tokens mentioning cats the adult-cat count,
anything else 0. Requests for adult dog/cat food additionally pull in the
puppy/kitten food rules when the household has juveniles.

INVARIANT: ``resolve`` is pure. Unknown categories and zero quantities
produce no output and never raise.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from pydantic import BaseModel

from pantryform.domain.guidelines import GuidelineRule, GuidelineTable
from pantryform.domain.household import DEFAULT_RULES, HouseholdCounts, HouseholdRules

PUPPY_FOODS: tuple[str, ...] = ("Dry Puppy Food", "Wet Puppy Food")
KITTEN_FOODS: tuple[str, ...] = ("Dry Kitten Food", "Wet Kitten Food")


class ResolvedLineItem(BaseModel):
    """A recommended quantity with its display text. Quantity is always > 0."""

    model_config = {"frozen": True}

    quantity: float
    text: str


@dataclass(frozen=True)
class _JuvenileExpansion:
    trigger: str
    count: int
    items: tuple[str, ...]


def parse_requested(csv: object) -> list[str]:
    """Split a comma-separated request string into lowercase tokens.

    Examples:
        >>> parse_requested("Dog Food,  Cat Litter, ,")
        ['dog food', 'cat litter']
        >>> parse_requested(None)
        []
    """
    if not csv:
        return []
    return [part.strip().lower() for part in str(csv).split(",") if part.strip()]


def infer_species(token: str, rules: HouseholdRules = DEFAULT_RULES) -> str | None:
    """Return the species keyword named in *token*, dogs checked first."""
    text = token.lower()
    if rules.dog_keyword in text:
        return rules.dog_keyword
    if rules.cat_keyword in text:
        return rules.cat_keyword
    return None


def eligible_count(
    token: str,
    counts: HouseholdCounts,
    rules: HouseholdRules = DEFAULT_RULES,
) -> int:
    """Adult count of the species named in *token*; 0 for household items."""
    species = infer_species(token, rules)
    if species == rules.dog_keyword:
        return counts.adult_dogs
    if species == rules.cat_keyword:
        return counts.adult_cats
    return 0


def _cap(value: float | None) -> float | None:
    if value is None or math.isnan(value) or value == 0:
        return None
    return value


def compute_quantity(rule: GuidelineRule, count: int) -> float:
    """Quantity for *rule* given *count* eligible pets.

    A zero or missing household max means "no cap" for per-pet rules and
    "nothing" for household-only rules.
    """
    cap = _cap(rule.household_max)
    if rule.per_pet is None or math.isnan(rule.per_pet):
        return cap if cap is not None else 0.0
    raw = count * rule.per_pet
    return min(raw, cap) if cap is not None else raw


def format_quantity(quantity: float) -> str:
    """Render a quantity without a trailing ``.0`` for whole numbers.

    Examples:
        >>> format_quantity(30.0)
        '30'
        >>> format_quantity(2.5)
        '2.5'
    """
    if float(quantity).is_integer():
        return str(int(quantity))
    return repr(float(quantity))


def resolve_line(rule: GuidelineRule, count: int) -> ResolvedLineItem | None:
    """Resolve one rule, or None when the quantity is not positive."""
    quantity = compute_quantity(rule, count)
    if math.isnan(quantity) or quantity <= 0:
        return None
    text = f"{format_quantity(quantity)} {rule.notes}".strip()
    return ResolvedLineItem(quantity=quantity, text=text)


def resolve(
    requested: list[str],
    counts: HouseholdCounts,
    table: GuidelineTable,
    rules: HouseholdRules = DEFAULT_RULES,
) -> dict[str, str]:
    """Resolve requested categories into a placeholder -> text mapping.

    Line-item placeholders are collected first and amount placeholders are
    merged over them, so an amount placeholder wins on a key collision.
    """
    lines: dict[str, str] = {}
    amounts: dict[str, str] = {}

    def apply(rule: GuidelineRule, count: int) -> None:
        line = resolve_line(rule, count)
        if line is None:
            return
        lines[rule.placeholder] = line.text
        if rule.amount_placeholder:
            amounts[rule.amount_placeholder] = rule.amount_given or ""

    for token in requested:
        rule = table.get(token)
        if rule is None:
            continue
        apply(rule, eligible_count(token, counts, rules))

    expansions = (
        _JuvenileExpansion(f"{rules.dog_keyword} food", counts.puppies, PUPPY_FOODS),
        _JuvenileExpansion(f"{rules.cat_keyword} food", counts.kittens, KITTEN_FOODS),
    )
    for expansion in expansions:
        if expansion.count <= 0:
            continue
        if not any(expansion.trigger in token for token in requested):
            continue
        for item in expansion.items:
            rule = table.get(item.lower())
            if rule is not None:
                apply(rule, expansion.count)

    return {**lines, **amounts}
