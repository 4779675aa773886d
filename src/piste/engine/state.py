from __future__ import annotations

import random
from dataclasses import dataclass, field

from .actions import Action, ActionOption
from .deck import Deck
from .types import AttackContext, Card, Mode, Phase, Severity, TurnPhase

Event = dict[str, object]


@dataclass(frozen=True)
class MatchConfig:
    board_length: int = 23
    hand_size: int = 5
    rounds_to_win: int = 5
    card_values: tuple[Card, ...] = (1, 2, 3, 4, 5)
    copies_per_value: int = 5

    @property
    def deck_size(self) -> int:
        return len(self.card_values) * self.copies_per_value


@dataclass
class PlayerState:
    id: int
    position: int
    hand: list[Card] = field(default_factory=list)
    score: int = 0
    must_skip_draw: bool = False  # set by a successful parry, consumed by one draw

    @property
    def name(self) -> str:
        return f"Player {self.id + 1}"


@dataclass
class StepResult:
    ok: bool
    events: list[Event]
    error: str | None = None
    phase: str = ""
    prompt: str = ""
    options: list[ActionOption] | None = None


@dataclass
class MatchState:
    config: MatchConfig
    seed: int
    rng: random.Random
    players: list[PlayerState]
    mode: Mode = "basic"
    pending_mode: Mode = "basic"
    round: int = 1
    starting_player: int = 0
    deck: Deck = field(default_factory=Deck)
    discard: list[Card] = field(default_factory=list)
    phase: Phase = field(default_factory=lambda: TurnPhase(player=0))
    final_attack_offered: bool = False
    match_winner: int | None = None
    action_log: list[Action] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def opponent(self, player: int) -> int:
        return 1 - player

    def distance(self) -> int:
        return abs(self.players[0].position - self.players[1].position)

    def attack(self) -> AttackContext | None:
        return getattr(self.phase, "attack", None)


def accepted(options: list[ActionOption] | None = None, prompt: str = "") -> StepResult:
    return StepResult(ok=True, events=[], prompt=prompt, options=options)


def rejected(error: str) -> StepResult:
    return StepResult(ok=False, events=[], error=error)


def log_event(state: MatchState, event_type: str, severity: Severity, message: str, **data: object) -> None:
    event: Event = {"type": event_type, "round": state.round, "severity": severity, "message": message}
    event.update(data)
    state.event_log.append(event)


def check_invariants(state: MatchState) -> None:
    attack = state.attack()
    in_play = (
        len(state.deck)
        + len(state.discard)
        + len(state.players[0].hand)
        + len(state.players[1].hand)
        + (len(attack.cards) if attack is not None else 0)
    )
    assert in_play == state.config.deck_size, f"card count {in_play} != {state.config.deck_size}"
    p0 = state.players[0].position
    p1 = state.players[1].position
    assert 0 <= p0 < p1 <= state.config.board_length - 1, f"positions out of order: {p0}, {p1}"
    if attack is not None:
        assert all(c == attack.base_card for c in attack.cards), "mixed attack cards"
