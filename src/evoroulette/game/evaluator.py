"""Survival viability evaluation.

One structured request per evaluation, validated as a whole: the evaluator
returns a complete ViabilityReport or nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from evoroulette.generation.client import GenerativeClient, GenerativeClientError, classify_error
from evoroulette.generation.prompt_builder import PromptBuilder
from evoroulette.generation.response_parser import ResponseParser, ResponseParserError
from evoroulette.model.environment import Environment
from evoroulette.model.trait import Trait

logger = logging.getLogger(__name__)


class ViabilityReport(BaseModel):
    """Structured verdict of the survival simulation.

    Attributes:
        generations: Number of generations the species survives.
        classification: Short label for the outcome.
        strengths: Traits or synergies that help survival.
        limitations: Traits or trade-offs that hurt survival.
        outlook: Narrative of the species' evolutionary outlook.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    generations: int = Field(ge=0, description="Generations survived")
    classification: str = Field(description="Outcome label")
    strengths: list[str] = Field(description="Survival strengths")
    limitations: list[str] = Field(description="Survival limitations")
    outlook: str = Field(alias="evolutionaryOutlook", description="Evolutionary outlook")


# Sent to providers that support schema-constrained output
VIABILITY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "generations": {"type": "integer"},
        "classification": {"type": "string"},
        "strengths": {"type": "array", "items": {"type": "string"}},
        "limitations": {"type": "array", "items": {"type": "string"}},
        "evolutionaryOutlook": {"type": "string"},
    },
    "required": [
        "generations",
        "classification",
        "strengths",
        "limitations",
        "evolutionaryOutlook",
    ],
    "additionalProperties": False,
}


class ViabilityEvaluator:
    """Asks the provider for a viability report and validates it.

    No retries are attempted; the caller decides whether to ask again.
    """

    def __init__(
        self,
        client: GenerativeClient,
        prompt_builder: PromptBuilder | None = None,
        parser: ResponseParser | None = None,
    ) -> None:
        self._client = client
        self._prompt_builder = prompt_builder or PromptBuilder()
        self._parser = parser or ResponseParser()

    async def evaluate(
        self, environment: Environment, traits: Sequence[Trait]
    ) -> ViabilityReport | None:
        """Evaluate survival of the species.

        Returns:
            A fully populated report, or None if the provider failed or
            returned anything that does not match the schema.
        """
        request = self._prompt_builder.build_viability_request(environment, traits)
        logger.info("Evaluating viability in %s with %d traits", environment.name, len(traits))

        try:
            raw = await self._client.generate_structured(request, VIABILITY_SCHEMA)
        except GenerativeClientError as e:
            logger.error("Viability request failed (%s): %s", classify_error(e), e)
            return None
        except Exception as e:
            logger.exception("Unexpected error during viability request (%s)", classify_error(e))
            return None

        try:
            report = self._parser.parse(raw, ViabilityReport)
        except ResponseParserError as e:
            logger.error("Viability response rejected: %s", e)
            return None

        logger.info(
            "Viability report: %s, %d generations",
            report.classification,
            report.generations,
        )
        return report
