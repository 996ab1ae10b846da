"""Habitat and trait selection for one game session."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from evoroulette.model.catalog import TRAITS, traits_in_category
from evoroulette.model.environment import Environment
from evoroulette.model.trait import ALL_CATEGORIES, CATEGORY_FILTERS, Trait, TraitCategory

logger = logging.getLogger(__name__)

CUSTOM_TRAIT_DESCRIPTION = "User-defined adaptation."
CUSTOM_TRAIT_ICON = "fa-flask"


@dataclass
class SelectionState:
    """The player's habitat, chosen traits and active category filter.

    ``traits`` keeps insertion order and never holds two traits with the same id.
    """

    environment: Environment | None = None
    traits: list[Trait] = field(default_factory=list)
    category: str = ALL_CATEGORIES

    @property
    def trait_ids(self) -> list[int]:
        return [trait.id for trait in self.traits]

    def clear(self) -> None:
        self.environment = None
        self.traits = []
        self.category = ALL_CATEGORIES


class CustomTraitIds:
    """Strictly increasing millisecond timestamps, always above ``floor``."""

    def __init__(self, floor: int, clock: Callable[[], float] = time.time) -> None:
        self._last = floor
        self._clock = clock

    def __call__(self) -> int:
        candidate = int(self._clock() * 1000)
        self._last = max(candidate, self._last + 1)
        return self._last


class SelectionTracker:
    """Applies player selection actions to a SelectionState.

    The five-trait minimum is enforced by the controller, not here.
    """

    def __init__(
        self,
        catalog: Sequence[Trait] = TRAITS,
        state: SelectionState | None = None,
        id_source: Callable[[], int] | None = None,
    ) -> None:
        self._catalog = tuple(catalog)
        self.state = state or SelectionState()
        max_catalog_id = max((trait.id for trait in self._catalog), default=0)
        self._next_id = id_source or CustomTraitIds(floor=max_catalog_id)

    @property
    def catalog(self) -> tuple[Trait, ...]:
        return self._catalog

    @property
    def count(self) -> int:
        return len(self.state.traits)

    def is_selected(self, trait_id: int) -> bool:
        return any(trait.id == trait_id for trait in self.state.traits)

    def toggle_trait(self, trait: Trait) -> bool:
        """Add the trait if its id is absent, remove it otherwise.

        Returns:
            True if the trait is selected after the call.
        """
        if self.is_selected(trait.id):
            self.state.traits = [t for t in self.state.traits if t.id != trait.id]
            logger.debug("Deselected trait %d (%s)", trait.id, trait.name)
            return False

        self.state.traits = [*self.state.traits, trait]
        logger.debug("Selected trait %d (%s)", trait.id, trait.name)
        return True

    def set_category_filter(self, category: str) -> str:
        """Set the active category filter.

        Accepts "All" or any TraitCategory value, case-insensitively.

        Raises:
            ValueError: If the category is not one of the filter options.
        """
        for option in CATEGORY_FILTERS:
            if option.lower() == category.strip().lower():
                self.state.category = option
                return option
        raise ValueError(
            f"Unknown category: {category}. Valid categories: {', '.join(CATEGORY_FILTERS)}"
        )

    def add_custom_trait(
        self,
        name: str,
        description: str | None = None,
        category: TraitCategory | str | None = None,
    ) -> Trait | None:
        """Create a player-authored trait and select it.

        Returns:
            The new trait, or None if ``name`` is blank.

        Raises:
            ValueError: If ``category`` is given but is not a TraitCategory.
        """
        if not name or not name.strip():
            return None

        trait = Trait(
            id=self._next_id(),
            name=name.strip(),
            description=(description or "").strip() or CUSTOM_TRAIT_DESCRIPTION,
            category=TraitCategory(category) if category else TraitCategory.PHYSIOLOGICAL,
            icon=CUSTOM_TRAIT_ICON,
            custom=True,
        )
        self.state.traits = [*self.state.traits, trait]
        logger.info("Added custom trait %d (%s)", trait.id, trait.name)
        return trait

    def filtered_traits(self) -> list[Trait]:
        """Catalog traits matching the active category filter."""
        return traits_in_category(self.state.category, self._catalog)
