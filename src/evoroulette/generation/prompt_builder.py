"""Prompt builder for species generation requests.

Turns a habitat and a trait list into the three requests the game sends to
its provider: a field-guide profile, an illustration brief, and a viability
analysis constrained to a JSON schema.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, Field

from evoroulette.generation.client import GenerationRequest
from evoroulette.model.environment import Environment
from evoroulette.model.trait import Trait


class SpeciesContext(BaseModel):
    """Habitat and trait data a prompt is built from.

    Attributes:
        environment_name: Display name of the habitat.
        climate: Climate descriptor.
        temperature: Temperature range descriptor.
        resources: Available resources.
        challenges: Selective pressures of the habitat.
        trait_names: Names of the chosen traits, in selection order.
    """

    environment_name: str = Field(description="Habitat display name")
    climate: str = Field(default="", description="Climate descriptor")
    temperature: str = Field(default="", description="Temperature range")
    resources: str = Field(default="", description="Available resources")
    challenges: str = Field(default="", description="Selective pressures")
    trait_names: list[str] = Field(default_factory=list, description="Chosen trait names")

    @classmethod
    def from_selection(cls, environment: Environment, traits: Sequence[Trait]) -> SpeciesContext:
        return cls(
            environment_name=environment.name,
            climate=environment.climate,
            temperature=environment.temperature,
            resources=environment.resources,
            challenges=environment.challenges,
            trait_names=[trait.name for trait in traits],
        )

    @property
    def joined_traits(self) -> str:
        return ", ".join(self.trait_names)


class PromptBuilder:
    """Builds provider requests from a habitat and trait selection.

    Example:
        >>> builder = PromptBuilder()
        >>> request = builder.build_text_request(ENVIRONMENTS[2], traits)
        >>> "Desert" in request.prompt
        True
    """

    BIOLOGIST_SYSTEM_MESSAGE = (
        "You are an evolutionary biologist writing field reports about newly "
        "described species. Stay scientifically plausible: no magic, no monsters, "
        "no fantasy anatomy."
    )

    ANALYST_SYSTEM_MESSAGE = (
        "You are an evolutionary viability analysis engine. You answer only with "
        "a JSON object that matches the requested schema."
    )

    def build_text_request(
        self, environment: Environment, traits: Sequence[Trait]
    ) -> GenerationRequest:
        """Build the request for the species field report."""
        ctx = SpeciesContext.from_selection(environment, traits)
        prompt = "\n\n".join(
            [
                f'Environment: "{ctx.environment_name}"',
                f"Environmental challenges: {ctx.challenges}",
                f"Selected evolutionary traits: [{ctx.joined_traits}]",
                "Describe a fictional but biologically plausible species that evolved "
                "in this environment using these traits. Explain how the traits support "
                "each other under this climate, use academic terminology, ground the "
                "survival strategy in natural selection, and give the species a "
                "Latin-style scientific name.",
            ]
        )
        return GenerationRequest(
            prompt=prompt,
            system_message=self.BIOLOGIST_SYSTEM_MESSAGE,
            context=ctx.model_dump(),
        )

    def build_image_request(
        self, environment: Environment, traits: Sequence[Trait]
    ) -> GenerationRequest:
        """Build the illustration brief."""
        ctx = SpeciesContext.from_selection(environment, traits)
        prompt = (
            f"A biology textbook illustration of a newly discovered species from the "
            f"{ctx.environment_name}. Anatomy: the specimen exhibits {ctx.joined_traits}. "
            f"Shown in its natural habitat ({ctx.climate}). Carbon dust scientific "
            f"illustration style, realistic ecosystem background, biologically plausible, "
            f"no fantasy elements, no glowing effects."
        )
        return GenerationRequest(prompt=prompt, context=ctx.model_dump())

    def build_viability_request(
        self, environment: Environment, traits: Sequence[Trait]
    ) -> GenerationRequest:
        """Build the structured viability analysis request."""
        ctx = SpeciesContext.from_selection(environment, traits)
        prompt = "\n".join(
            [
                f"Analyze the survival of a species in the {ctx.environment_name} "
                f"({ctx.challenges}) with traits: [{ctx.joined_traits}].",
                "1. Quantify survival as a number of generations.",
                "2. Map traits to beneficial and detrimental impacts.",
                "3. Identify one major trade-off.",
                "4. Use academic, objective language.",
                "",
                "Respond with JSON containing: generations (integer), classification "
                "(string), strengths (list of strings), limitations (list of strings), "
                "evolutionaryOutlook (string).",
            ]
        )
        return GenerationRequest(
            prompt=prompt,
            system_message=self.ANALYST_SYSTEM_MESSAGE,
            context=ctx.model_dump(),
        )
