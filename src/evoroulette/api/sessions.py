"""API endpoints for playing a game session.

Every mutating endpoint returns the full session snapshot. Transitions whose
preconditions are not met return 409 with the reason; key gating is part of
the normal flow and shows up as ``key_prompt: true`` in a 200 response.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status
from pydantic import BaseModel, Field, field_validator

from evoroulette.api.catalog import EnvironmentResponse, TraitResponse
from evoroulette.game.controller import MIN_TRAITS, GameController, GameStep
from evoroulette.game.evaluator import ViabilityReport
from evoroulette.game.orchestrator import GenerationResult
from evoroulette.model.trait import TraitCategory
from evoroulette.server.sessions import StoredSession, get_session_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


class SessionResponse(BaseModel):
    """Snapshot of a game session."""

    session_id: str = Field(description="Session identifier")
    step: GameStep = Field(description="Current game step")
    spinning: bool = Field(description="Whether the wheel is spinning")
    rotation: float = Field(description="Cumulative wheel rotation in degrees")
    environment: EnvironmentResponse | None = Field(description="Selected habitat")
    traits: list[TraitResponse] = Field(description="Selected traits in selection order")
    category: str = Field(description="Active category filter")
    generation: GenerationResult | None = Field(description="Latest generation result")
    report: ViabilityReport | None = Field(description="Viability report")
    key_prompt: bool = Field(description="Whether a paid-tier key must be selected")
    evaluation_failed: bool = Field(description="Whether the last evaluation failed")
    pending: str | None = Field(description="Remote operation in flight")
    can_confirm_environment: bool = Field(description="Environment step can advance")
    can_generate: bool = Field(description="Traits step can advance")
    can_evaluate: bool = Field(description="Evaluation can be requested")

    @classmethod
    def from_controller(cls, controller: GameController) -> SessionResponse:
        snapshot = controller.snapshot()
        environment = snapshot.pop("environment")
        traits = snapshot.pop("traits")
        return cls(
            environment=EnvironmentResponse.from_environment(environment) if environment else None,
            traits=[TraitResponse.from_trait(trait) for trait in traits],
            **snapshot,
        )


class ToggleTraitRequest(BaseModel):
    """Request body for toggling a trait."""

    trait_id: int = Field(description="Catalog or custom trait id")


class CustomTraitRequest(BaseModel):
    """Request body for adding a player-authored trait."""

    name: str = Field(description="Trait name", max_length=80)
    description: str | None = Field(default=None, description="Optional description")
    category: TraitCategory | None = Field(default=None, description="Defaults to Physiological")

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        """Validate name is not just whitespace."""
        if not v or not v.strip():
            raise ValueError("name cannot be empty or whitespace only")
        return v.strip()


class CategoryRequest(BaseModel):
    """Request body for changing the category filter."""

    category: str = Field(description='"All" or a trait category')


class KeySelectionRequest(BaseModel):
    """Request body for selecting a paid-tier API key."""

    api_key: str = Field(description="API key to use for this session", min_length=1)

    @field_validator("api_key")
    @classmethod
    def api_key_not_empty(cls, v: str) -> str:
        """Validate api_key is not just whitespace."""
        if not v.strip():
            raise ValueError("api_key cannot be empty or whitespace only")
        return v.strip()


def _get_session(session_id: str) -> StoredSession:
    session = get_session_store().get(session_id)
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return session


def _conflict(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


def _snapshot(controller: GameController) -> SessionResponse:
    return SessionResponse.from_controller(controller)


@router.post("", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session() -> SessionResponse:
    """Start a new game session."""
    session = get_session_store().create()
    return _snapshot(session.controller)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(session_id: str) -> SessionResponse:
    """Get the current session snapshot."""
    return _snapshot(_get_session(session_id).controller)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str) -> Response:
    """Discard a session."""
    if not get_session_store().delete(session_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Session not found: {session_id}",
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{session_id}/begin", response_model=SessionResponse)
async def begin(session_id: str) -> SessionResponse:
    """Leave the title step."""
    controller = _get_session(session_id).controller
    if not controller.begin():
        raise _conflict("Session is not on the title step")
    return _snapshot(controller)


@router.post("/{session_id}/spin", response_model=SessionResponse)
async def spin(session_id: str) -> SessionResponse:
    """Spin the habitat wheel and wait for it to settle."""
    controller = _get_session(session_id).controller
    if controller.step != GameStep.ENVIRONMENT:
        raise _conflict(f"Cannot spin during the {controller.step} step")
    if controller.spinning:
        raise _conflict("Wheel is already spinning")
    if controller.selection.environment is not None:
        raise _conflict("Habitat already selected")
    await controller.spin()
    return _snapshot(controller)


@router.post("/{session_id}/environment/confirm", response_model=SessionResponse)
async def confirm_environment(session_id: str) -> SessionResponse:
    """Advance from the wheel to trait selection."""
    controller = _get_session(session_id).controller
    if not controller.confirm_environment():
        raise _conflict("Spin the wheel and wait for it to settle first")
    return _snapshot(controller)


@router.get("/{session_id}/traits", response_model=list[TraitResponse])
async def list_session_traits(session_id: str) -> list[TraitResponse]:
    """Catalog traits matching the session's category filter."""
    controller = _get_session(session_id).controller
    if controller.step != GameStep.TRAITS:
        raise _conflict(f"Cannot list traits during the {controller.step} step")
    return [TraitResponse.from_trait(trait) for trait in controller.filtered_traits()]


@router.post("/{session_id}/traits/toggle", response_model=SessionResponse)
async def toggle_trait(session_id: str, request: ToggleTraitRequest) -> SessionResponse:
    """Select or deselect a trait."""
    controller = _get_session(session_id).controller
    if controller.step != GameStep.TRAITS:
        raise _conflict(f"Cannot change traits during the {controller.step} step")
    try:
        controller.toggle_trait_id(request.trait_id)
    except KeyError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Trait not found: {request.trait_id}",
        ) from e
    return _snapshot(controller)


@router.post("/{session_id}/traits/custom", response_model=SessionResponse)
async def add_custom_trait(session_id: str, request: CustomTraitRequest) -> SessionResponse:
    """Add a player-authored trait; it is selected straight away."""
    controller = _get_session(session_id).controller
    if controller.step != GameStep.TRAITS:
        raise _conflict(f"Cannot change traits during the {controller.step} step")
    controller.add_custom_trait(request.name, request.description, request.category)
    return _snapshot(controller)


@router.post("/{session_id}/traits/category", response_model=SessionResponse)
async def set_category(session_id: str, request: CategoryRequest) -> SessionResponse:
    """Change the category filter."""
    controller = _get_session(session_id).controller
    if controller.step != GameStep.TRAITS:
        raise _conflict(f"Cannot change the category filter during the {controller.step} step")
    try:
        controller.set_category_filter(request.category)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e
    return _snapshot(controller)


@router.post("/{session_id}/generate", response_model=SessionResponse)
async def generate(session_id: str) -> SessionResponse:
    """Generate the species profile and illustration.

    Returns once both have settled. If a paid-tier key is needed the session
    stays on the traits step with ``key_prompt`` set.
    """
    controller = _get_session(session_id).controller
    if not controller.can_generate:
        raise _conflict(
            f"Select a habitat and at least {MIN_TRAITS} traits "
            f"({len(controller.selection.traits)} selected)"
        )
    await controller.generate()
    return _snapshot(controller)


@router.post("/{session_id}/key", response_model=SessionResponse)
async def select_key(session_id: str, request: KeySelectionRequest) -> SessionResponse:
    """Select a paid-tier key for the session and retry generation."""
    session = _get_session(session_id)
    if not session.controller.state.key_prompt:
        raise _conflict("No key prompt is open")
    session.key_selector.submit_key(request.api_key)
    await session.controller.select_key()
    return _snapshot(session.controller)


@router.post("/{session_id}/key/dismiss", response_model=SessionResponse)
async def dismiss_key_prompt(session_id: str) -> SessionResponse:
    """Close the key prompt without selecting a key."""
    session = _get_session(session_id)
    session.key_selector.cancel()
    session.controller.dismiss_key_prompt()
    return _snapshot(session.controller)


@router.post("/{session_id}/evaluate", response_model=SessionResponse)
async def evaluate(session_id: str) -> SessionResponse:
    """Request the viability report.

    A failed evaluation leaves the session on the evaluation step with
    ``evaluation_failed`` set; calling again retries.
    """
    controller = _get_session(session_id).controller
    if not controller.can_evaluate:
        raise _conflict(f"Cannot evaluate during the {controller.step} step")
    await controller.evaluate()
    return _snapshot(controller)


@router.post("/{session_id}/traits/modify", response_model=SessionResponse)
async def modify_traits(session_id: str) -> SessionResponse:
    """Go back to trait selection from the result or evaluation step."""
    controller = _get_session(session_id).controller
    if not controller.modify_traits():
        raise _conflict(f"Cannot modify traits during the {controller.step} step")
    return _snapshot(controller)


@router.post("/{session_id}/restart", response_model=SessionResponse)
async def restart(session_id: str) -> SessionResponse:
    """Reset the session to its entry step."""
    controller = _get_session(session_id).controller
    controller.restart()
    return _snapshot(controller)
