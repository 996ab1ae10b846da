"""Game engine: wheel, selection, generation, evaluation and the step controller."""

from evoroulette.game.config import GameConfig, get_game_config
from evoroulette.game.controller import MIN_TRAITS, GameController, GameStep, SessionState
from evoroulette.game.errors import GameError, KeyRequiredError
from evoroulette.game.evaluator import VIABILITY_SCHEMA, ViabilityEvaluator, ViabilityReport
from evoroulette.game.orchestrator import GenerationOrchestrator, GenerationResult
from evoroulette.game.selection import SelectionState, SelectionTracker
from evoroulette.game.wheel import WheelSelector, resolve_index

__all__ = [
    "MIN_TRAITS",
    "VIABILITY_SCHEMA",
    "GameConfig",
    "GameController",
    "GameError",
    "GameStep",
    "GenerationOrchestrator",
    "GenerationResult",
    "KeyRequiredError",
    "SelectionState",
    "SelectionTracker",
    "SessionState",
    "ViabilityEvaluator",
    "ViabilityReport",
    "WheelSelector",
    "get_game_config",
    "resolve_index",
]
