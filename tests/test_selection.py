"""Tests for habitat and trait selection."""

import pytest

from evoroulette.game.selection import (
    CUSTOM_TRAIT_DESCRIPTION,
    CUSTOM_TRAIT_ICON,
    CustomTraitIds,
    SelectionState,
    SelectionTracker,
)
from evoroulette.model.catalog import ENVIRONMENTS, TRAITS
from evoroulette.model.trait import ALL_CATEGORIES, TraitCategory


class TestToggleTrait:
    """Tests for SelectionTracker.toggle_trait()."""

    def test_toggle_adds_then_removes(self) -> None:
        """Toggling twice restores the original selection."""
        tracker = SelectionTracker()
        tracker.toggle_trait(TRAITS[0])
        before = list(tracker.state.traits)

        assert tracker.toggle_trait(TRAITS[3]) is True
        assert tracker.toggle_trait(TRAITS[3]) is False
        assert tracker.state.traits == before

    def test_preserves_selection_order(self) -> None:
        """Traits are kept in the order they were selected."""
        tracker = SelectionTracker()
        for trait in (TRAITS[9], TRAITS[2], TRAITS[30]):
            tracker.toggle_trait(trait)

        assert tracker.state.trait_ids == [TRAITS[9].id, TRAITS[2].id, TRAITS[30].id]

    def test_no_duplicate_ids(self) -> None:
        """A trait id never appears twice."""
        tracker = SelectionTracker()
        for _ in range(3):
            tracker.toggle_trait(TRAITS[1])

        assert tracker.state.trait_ids == [TRAITS[1].id]
        assert tracker.count == 1

    def test_no_upper_limit(self) -> None:
        """Every catalog trait can be selected at once."""
        tracker = SelectionTracker()
        for trait in TRAITS:
            tracker.toggle_trait(trait)

        assert tracker.count == len(TRAITS)


class TestCategoryFilter:
    """Tests for the category filter."""

    def test_default_is_all(self) -> None:
        """A new selection shows every trait."""
        tracker = SelectionTracker()

        assert tracker.state.category == ALL_CATEGORIES
        assert tracker.filtered_traits() == list(TRAITS)

    def test_filter_by_category(self) -> None:
        """Only traits of the chosen category are listed."""
        tracker = SelectionTracker()
        tracker.set_category_filter("Feeding")

        filtered = tracker.filtered_traits()
        assert filtered
        assert all(trait.category == TraitCategory.FEEDING for trait in filtered)

    def test_case_insensitive(self) -> None:
        """Category names are matched case-insensitively."""
        tracker = SelectionTracker()

        assert tracker.set_category_filter(" behavioral ") == "Behavioral"
        assert tracker.state.category == "Behavioral"

    def test_unknown_category_rejected(self) -> None:
        """Unknown categories raise and leave the filter unchanged."""
        tracker = SelectionTracker()

        with pytest.raises(ValueError, match="Unknown category"):
            tracker.set_category_filter("Cognitive")
        assert tracker.state.category == ALL_CATEGORIES

    def test_filter_does_not_touch_selection(self) -> None:
        """Selected traits outside the filter stay selected."""
        tracker = SelectionTracker()
        tracker.toggle_trait(TRAITS[0])
        tracker.set_category_filter("Reproductive")

        assert tracker.state.trait_ids == [TRAITS[0].id]


class TestCustomTraits:
    """Tests for player-authored traits."""

    def test_added_and_selected(self) -> None:
        """A custom trait is created with defaults and selected straight away."""
        tracker = SelectionTracker()

        trait = tracker.add_custom_trait("  Bioluminescent lure ")

        assert trait is not None
        assert trait.name == "Bioluminescent lure"
        assert trait.description == CUSTOM_TRAIT_DESCRIPTION
        assert trait.category == TraitCategory.PHYSIOLOGICAL
        assert trait.icon == CUSTOM_TRAIT_ICON
        assert trait.custom is True
        assert tracker.state.traits == [trait]

    def test_explicit_description_and_category(self) -> None:
        """Description and category can be supplied."""
        tracker = SelectionTracker()

        trait = tracker.add_custom_trait("Egg caching", "Buries eggs in sand.", "reproductive")

        assert trait is not None
        assert trait.description == "Buries eggs in sand."
        assert trait.category == TraitCategory.REPRODUCTIVE

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_is_noop(self, name: str) -> None:
        """Blank names add nothing."""
        tracker = SelectionTracker()

        assert tracker.add_custom_trait(name) is None
        assert tracker.count == 0

    def test_ids_unique_and_above_catalog(self) -> None:
        """Custom ids never collide with each other or with catalog ids."""
        tracker = SelectionTracker(id_source=CustomTraitIds(floor=50, clock=lambda: 0.0))

        ids = [tracker.add_custom_trait(f"Trait {n}").id for n in range(5)]

        assert ids == sorted(set(ids))
        assert min(ids) > max(trait.id for trait in TRAITS)

    def test_custom_trait_can_be_deselected(self) -> None:
        """Toggling a custom trait removes it."""
        tracker = SelectionTracker()
        trait = tracker.add_custom_trait("Silk glands")

        assert tracker.toggle_trait(trait) is False
        assert tracker.count == 0


class TestCustomTraitIds:
    """Tests for the custom id source."""

    def test_uses_clock_milliseconds(self) -> None:
        """Ids are millisecond timestamps when the clock is ahead of the floor."""
        ids = CustomTraitIds(floor=50, clock=lambda: 1_700_000_000.5)

        assert ids() == 1_700_000_000_500

    def test_strictly_increasing_with_frozen_clock(self) -> None:
        """Two ids in the same millisecond still differ."""
        ids = CustomTraitIds(floor=50, clock=lambda: 1_700_000_000.0)

        first, second = ids(), ids()

        assert second == first + 1


class TestSelectionState:
    """Tests for SelectionState."""

    def test_clear(self) -> None:
        """clear() resets habitat, traits and filter."""
        state = SelectionState(
            environment=ENVIRONMENTS[0], traits=[TRAITS[0]], category="Physical"
        )

        state.clear()

        assert state.environment is None
        assert state.traits == []
        assert state.category == ALL_CATEGORIES
