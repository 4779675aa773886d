from __future__ import annotations

from dataclasses import dataclass

from .types import Direction


@dataclass(frozen=True)
class PlayCardAction:
    """A player picks a card from their hand.

    How the card is used depends on the phase: in a turn it only lists the
    card's options, otherwise it strengthens, parries, retreats, completes an
    advance or makes the final attack.
    """

    player: int
    hand_index: int


@dataclass(frozen=True)
class MoveAction:
    player: int
    hand_index: int
    direction: Direction


@dataclass(frozen=True)
class AttackAction:
    player: int
    hand_index: int


@dataclass(frozen=True)
class AdvanceAction:
    player: int
    hand_index: int


@dataclass(frozen=True)
class FinishAttackAction:
    player: int


@dataclass(frozen=True)
class RetreatChoiceAction:
    player: int


@dataclass(frozen=True)
class CancelAction:
    player: int


@dataclass(frozen=True)
class PassAction:
    player: int


Action = (
    PlayCardAction
    | MoveAction
    | AttackAction
    | AdvanceAction
    | FinishAttackAction
    | RetreatChoiceAction
    | CancelAction
    | PassAction
)


@dataclass(frozen=True)
class ActionOption:
    label: str
    action: Action
