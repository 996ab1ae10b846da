"""Response parser for extracting structured data from model output.

Providers without native structured output (and some with it) wrap JSON in
markdown fences or surround it with prose. ``ResponseParser`` digs the JSON
object out and validates it against a Pydantic model.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class ResponseParserError(Exception):
    """Exception raised when response parsing fails."""

    pass


class ResponseParser:
    """Parser for structured model responses.

    Handles:
    - Raw JSON
    - JSON wrapped in markdown code blocks (```json ... ```)
    - JSON with surrounding text

    Example:
        >>> parser = ResponseParser()
        >>> parser.extract_json('Sure! ```json {"generations": 12} ```')
        {'generations': 12}
    """

    def extract_json(self, text: str) -> dict[str, Any]:
        """Extract a JSON object from raw model text.

        Args:
            text: Raw text response.

        Returns:
            The decoded JSON object.

        Raises:
            ResponseParserError: If no JSON object can be decoded.
        """
        if not text or not text.strip():
            raise ResponseParserError("Empty response")

        json_text = self._locate_json(text)
        try:
            data = json.loads(json_text)
        except json.JSONDecodeError as e:
            logger.warning("Response is not valid JSON: %s", text[:200])
            raise ResponseParserError(f"Invalid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ResponseParserError(f"Expected JSON object, got {type(data).__name__}")
        return data

    def parse(self, text: str, model: type[ModelT]) -> ModelT:
        """Extract JSON from ``text`` and validate it as ``model``.

        Raises:
            ResponseParserError: If extraction or validation fails.
        """
        data = self.extract_json(text)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.warning(
                "Response failed %s validation with %d error(s)",
                model.__name__,
                e.error_count(),
            )
            raise ResponseParserError(f"Validation error: {e}") from e

    def _locate_json(self, text: str) -> str:
        if "```json" in text:
            match = re.search(r"```json\s*(.*?)\s*```", text, re.DOTALL)
            if match:
                return match.group(1).strip()

        if "```" in text:
            match = re.search(r"```\s*(.*?)\s*```", text, re.DOTALL)
            if match:
                extracted = match.group(1).strip()
                if extracted.startswith("{"):
                    return extracted

        balanced = self._find_balanced_object(text)
        if balanced:
            return balanced

        return text.strip()

    def _find_balanced_object(self, text: str) -> str | None:
        """Return the first balanced ``{...}`` span, ignoring braces inside strings."""
        start = text.find("{")
        if start == -1:
            return None

        depth = 0
        in_string = False
        escape = False

        for i, char in enumerate(text[start:], start):
            if escape:
                escape = False
                continue
            if char == "\\":
                escape = True
                continue
            if char == '"':
                in_string = not in_string
                continue
            if in_string:
                continue
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]

        return None
