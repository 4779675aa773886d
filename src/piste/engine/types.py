from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

Card = int
Mode = Literal["basic", "advanced"]
AttackKind = Literal["standard", "advanced"]
Severity = Literal["info", "success", "warning", "danger"]
Direction = Literal[1, -1]

MODES: tuple[Mode, ...] = ("basic", "advanced")


@dataclass(frozen=True)
class ParryPick:
    hand_index: int
    value: Card


@dataclass
class AttackContext:
    """An attack in progress, from declaration until it resolves."""

    kind: AttackKind
    attacker: int
    defender: int
    cards: list[Card]
    total: int
    parry: list[ParryPick] = field(default_factory=list)
    final: bool = False  # declared in the final-attack window

    @property
    def base_card(self) -> Card:
        return self.cards[0]

    @property
    def required(self) -> int:
        return len(self.cards)

    def parry_total(self) -> int:
        return sum(p.value for p in self.parry)

    def picked(self, hand_index: int) -> bool:
        return any(p.hand_index == hand_index for p in self.parry)


@dataclass(frozen=True)
class PendingAdvance:
    player: int
    distance: int
    hand_index: int
    resume: Literal["turn", "defender_turn"] = "turn"


@dataclass(frozen=True)
class TurnPhase:
    player: int
    name: Literal["turn"] = "turn"


@dataclass(frozen=True)
class DefenderTurnPhase:
    player: int
    name: Literal["defender_turn"] = "defender_turn"


@dataclass(frozen=True)
class AttackStrengthenPhase:
    attack: AttackContext
    name: Literal["attack_strengthen"] = "attack_strengthen"


@dataclass(frozen=True)
class AwaitParryPhase:
    attack: AttackContext
    name: Literal["await_parry"] = "await_parry"


@dataclass(frozen=True)
class AwaitRetreatCardPhase:
    attack: AttackContext
    name: Literal["await_retreat_card"] = "await_retreat_card"


@dataclass(frozen=True)
class AdvanceAttackPhase:
    advance: PendingAdvance
    name: Literal["advance_attack"] = "advance_attack"


@dataclass(frozen=True)
class FinalAttackPhase:
    player: int
    name: Literal["final_attack"] = "final_attack"


@dataclass(frozen=True)
class RoundEndPhase:
    winner: int | None
    name: Literal["round_end"] = "round_end"


Phase = (
    TurnPhase
    | DefenderTurnPhase
    | AttackStrengthenPhase
    | AwaitParryPhase
    | AwaitRetreatCardPhase
    | AdvanceAttackPhase
    | FinalAttackPhase
    | RoundEndPhase
)

AttackPhase = AttackStrengthenPhase | AwaitParryPhase | AwaitRetreatCardPhase
