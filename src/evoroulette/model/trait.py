"""Trait dataclass and the closed set of trait categories."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class TraitCategory(StrEnum):
    """Biological system a trait belongs to."""

    PHYSICAL = "Physical"
    PHYSIOLOGICAL = "Physiological"
    BEHAVIORAL = "Behavioral"
    FEEDING = "Feeding"
    REPRODUCTIVE = "Reproductive"

    @classmethod
    def _missing_(cls, value: object) -> TraitCategory | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


ALL_CATEGORIES = "All"

# Options offered by the category filter, in display order
CATEGORY_FILTERS: tuple[str, ...] = (ALL_CATEGORIES, *(c.value for c in TraitCategory))


@dataclass(frozen=True)
class Trait:
    """A selectable adaptation.

    Catalog traits have ids 1..N. Player-authored traits are flagged with
    ``custom`` and get ids from a separate, higher range.
    """

    id: int
    name: str
    description: str
    category: TraitCategory
    icon: str = "fa-dna"
    custom: bool = False
