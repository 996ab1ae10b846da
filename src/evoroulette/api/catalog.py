"""API endpoints for the static habitat and trait catalogs."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from evoroulette.model.catalog import ENVIRONMENTS, TRAITS, traits_in_category
from evoroulette.model.environment import Environment
from evoroulette.model.trait import ALL_CATEGORIES, CATEGORY_FILTERS, Trait

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


class EnvironmentResponse(BaseModel):
    """A habitat on the wheel."""

    id: str = Field(description="Habitat identifier")
    name: str = Field(description="Display name")
    climate: str = Field(description="Climate descriptor")
    temperature: str = Field(description="Temperature range")
    resources: str = Field(description="Available resources")
    challenges: str = Field(description="Selective pressures")
    accent: str = Field(description="Accent color for the front end")
    bg_gradient: str = Field(description="Background gradient key for the front end")

    @classmethod
    def from_environment(cls, environment: Environment) -> EnvironmentResponse:
        return cls(
            id=environment.id,
            name=environment.name,
            climate=environment.climate,
            temperature=environment.temperature,
            resources=environment.resources,
            challenges=environment.challenges,
            accent=environment.accent,
            bg_gradient=environment.bg_gradient,
        )


class TraitResponse(BaseModel):
    """A catalog or custom trait."""

    id: int = Field(description="Trait identifier")
    name: str = Field(description="Display name")
    description: str = Field(description="What the adaptation does")
    category: str = Field(description="Biological system")
    icon: str = Field(description="Icon key for the front end")
    custom: bool = Field(default=False, description="Player-authored trait")

    @classmethod
    def from_trait(cls, trait: Trait) -> TraitResponse:
        return cls(
            id=trait.id,
            name=trait.name,
            description=trait.description,
            category=str(trait.category),
            icon=trait.icon,
            custom=trait.custom,
        )


@router.get("/environments", response_model=list[EnvironmentResponse])
async def list_environments() -> list[EnvironmentResponse]:
    """List habitats in wheel order."""
    return [EnvironmentResponse.from_environment(env) for env in ENVIRONMENTS]


@router.get("/categories", response_model=list[str])
async def list_categories() -> list[str]:
    """List category filter options, "All" first."""
    return list(CATEGORY_FILTERS)


@router.get("/traits", response_model=list[TraitResponse])
async def list_traits(category: str = ALL_CATEGORIES) -> list[TraitResponse]:
    """List catalog traits, optionally filtered by category."""
    match = next((c for c in CATEGORY_FILTERS if c.lower() == category.lower()), None)
    if match is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown category: {category}",
        )
    return [TraitResponse.from_trait(trait) for trait in traits_in_category(match, TRAITS)]
