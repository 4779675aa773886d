"""Deterministic, headless rules engine for Piste.

IMPORTANT: This package must never import pygame.
"""

from .actions import (
    ActionOption,
    AdvanceAction,
    AttackAction,
    CancelAction,
    FinishAttackAction,
    MoveAction,
    PassAction,
    PlayCardAction,
    RetreatChoiceAction,
)
from .match import acting_player, legal_actions, new_match, next_round, prompt_for, replay, select_mode, step
from .state import MatchConfig, MatchState, StepResult
from .types import Mode, Severity

__all__ = [
    "ActionOption",
    "AdvanceAction",
    "AttackAction",
    "CancelAction",
    "FinishAttackAction",
    "MatchConfig",
    "MatchState",
    "Mode",
    "MoveAction",
    "PassAction",
    "PlayCardAction",
    "RetreatChoiceAction",
    "Severity",
    "StepResult",
    "acting_player",
    "legal_actions",
    "new_match",
    "next_round",
    "prompt_for",
    "replay",
    "select_mode",
    "step",
]
