"""Domain model: Environment, Trait and the static catalogs."""

from evoroulette.model.catalog import (
    ENVIRONMENTS,
    TRAITS,
    get_environment,
    get_trait,
    traits_in_category,
)
from evoroulette.model.environment import Environment
from evoroulette.model.trait import ALL_CATEGORIES, CATEGORY_FILTERS, Trait, TraitCategory

__all__ = [
    "ALL_CATEGORIES",
    "CATEGORY_FILTERS",
    "ENVIRONMENTS",
    "TRAITS",
    "Environment",
    "Trait",
    "TraitCategory",
    "get_environment",
    "get_trait",
    "traits_in_category",
]
