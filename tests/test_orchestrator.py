"""Tests for concurrent species generation."""

import asyncio

import pytest

from conftest import IMAGE_URL, PROFILE_TEXT, FakeClient
from evoroulette.game.errors import KeyRequiredError
from evoroulette.game.orchestrator import GenerationOrchestrator, GenerationResult
from evoroulette.generation.client import (
    CredentialTierError,
    ErrorReason,
    GenerativeClientError,
)
from evoroulette.generation.credential_gate import SessionKeySelector
from evoroulette.model.catalog import ENVIRONMENTS, TRAITS

DESERT = ENVIRONMENTS[2]
SELECTED = list(TRAITS[:5])


def _generate(client: FakeClient, gate: SessionKeySelector | None = None) -> GenerationResult:
    orchestrator = GenerationOrchestrator(client, credential_gate=gate)
    return asyncio.run(orchestrator.generate(DESERT, SELECTED))


class TestGenerationSuccess:
    """Tests for the happy path."""

    def test_combines_both_branches(self, client: FakeClient) -> None:
        """Profile text and illustration land in one result."""
        result = _generate(client)

        assert result.description == PROFILE_TEXT
        assert result.image_url == IMAGE_URL
        assert result.degraded is False
        assert set(result.model_dump()) == {"description", "image_url", "text_error", "image_error"}

    def test_branches_run_concurrently(self, client: FakeClient) -> None:
        """Both requests start before either finishes."""
        _generate(client)

        assert client.events[:2] == ["start:text", "start:image"]
        assert set(client.events[2:]) == {"end:text", "end:image"}

    def test_prompts_carry_selection(self, client: FakeClient) -> None:
        """Both prompts name the habitat and every selected trait."""
        _generate(client)

        assert sorted(client.kinds()) == ["image", "text"]
        for _, request in client.calls:
            assert DESERT.name in request.prompt
            for trait in SELECTED:
                assert trait.name in request.prompt

    def test_no_caching(self, client: FakeClient) -> None:
        """Identical inputs produce a fresh round trip every time."""
        orchestrator = GenerationOrchestrator(client)

        async def twice() -> None:
            await orchestrator.generate(DESERT, SELECTED)
            await orchestrator.generate(DESERT, SELECTED)

        asyncio.run(twice())

        assert len(client.calls) == 4


class TestGenerationDegradation:
    """Tests for per-branch failure handling."""

    def test_text_failure_keeps_image(self) -> None:
        """A failed profile leaves the description empty."""
        client = FakeClient(text=GenerativeClientError("Connection refused"))

        result = _generate(client)

        assert result.description == ""
        assert result.image_url == IMAGE_URL
        assert result.text_error == ErrorReason.NETWORK_ERROR
        assert result.image_error is None
        assert result.degraded is True

    def test_image_failure_keeps_text(self) -> None:
        """A failed illustration leaves image_url unset."""
        client = FakeClient(image=GenerativeClientError("API error: bad request"))

        result = _generate(client)

        assert result.description == PROFILE_TEXT
        assert result.image_url is None
        assert result.image_error == ErrorReason.API_ERROR

    def test_image_without_data(self) -> None:
        """A provider returning no image is not an error."""
        result = _generate(FakeClient(image=None))

        assert result.image_url is None
        assert result.image_error is None

    def test_both_fail(self) -> None:
        """With both branches down the result is empty but still returned."""
        client = FakeClient(
            text=GenerativeClientError("Request timed out"),
            image=RuntimeError("boom"),
        )

        result = _generate(client)

        assert result.description == ""
        assert result.image_url is None
        assert result.text_error == ErrorReason.TIMEOUT
        assert result.image_error == ErrorReason.UNKNOWN


class TestKeyGating:
    """Tests for paid-tier key gating."""

    def test_gate_without_key_blocks_before_any_call(self, client: FakeClient) -> None:
        """No remote call is made when no key is selected."""
        gate = SessionKeySelector(client)

        with pytest.raises(KeyRequiredError) as exc_info:
            _generate(client, gate)

        assert exc_info.value.source == "gate"
        assert client.calls == []

    def test_gate_with_key_proceeds(self, client: FakeClient) -> None:
        """A selected key lets generation run."""
        gate = SessionKeySelector(client)
        gate.submit_key("sk-paid")

        result = _generate(client, gate)

        assert result.description == PROFILE_TEXT

    @pytest.mark.parametrize("branch", ["text", "image"])
    def test_credential_tier_error_in_either_branch(self, branch: str) -> None:
        """A credential-tier failure in one branch gates the whole cycle."""
        client = FakeClient(**{branch: CredentialTierError("model not available")})

        with pytest.raises(KeyRequiredError) as exc_info:
            _generate(client)

        assert exc_info.value.source == branch

    def test_gating_waits_for_both_branches(self) -> None:
        """The other branch is allowed to settle before gating is raised."""
        client = FakeClient(image=CredentialTierError("model not available"))

        with pytest.raises(KeyRequiredError):
            _generate(client)

        assert "end:text" in client.events
        assert "end:image" in client.events
