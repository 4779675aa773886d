"""Advance & attack: a forward move immediately followed by an attack."""

from __future__ import annotations

from .attack import declare_attack
from .board import forward_direction
from .rounds import can_move
from .state import MatchState, StepResult, accepted, log_event, rejected
from .types import AdvanceAttackPhase, DefenderTurnPhase, PendingAdvance, TurnPhase


def can_advance(state: MatchState, player: int, hand_index: int) -> bool:
    if state.mode != "advanced" or state.deck.exhausted:
        return False
    ps = state.players[player]
    card = ps.hand[hand_index]
    if not can_move(state, player, card, True):
        return False
    target = ps.position + card * forward_direction(player)
    gap = abs(target - state.players[state.opponent(player)].position)
    return any(value == gap for i, value in enumerate(ps.hand) if i != hand_index)


def begin_advance(state: MatchState, player: int, hand_index: int) -> StepResult:
    if state.mode != "advanced":
        return rejected("Advance & attack is only available in advanced mode.")
    if not can_advance(state, player, hand_index):
        return rejected("No card would match the distance after that advance.")
    ps = state.players[player]
    resume = "defender_turn" if isinstance(state.phase, DefenderTurnPhase) else "turn"
    card = ps.hand.pop(hand_index)
    state.discard.append(card)
    ps.position += card * forward_direction(player)
    state.phase = AdvanceAttackPhase(
        advance=PendingAdvance(player=player, distance=card, hand_index=hand_index, resume=resume)
    )
    log_event(state, "ADVANCED", "info", f"{ps.name} advances {card} spaces.",
              player=player, card=card, position=ps.position)
    return accepted()


def complete_advance(state: MatchState, pending: PendingAdvance, hand_index: int) -> StepResult:
    player = pending.player
    if state.players[player].hand[hand_index] != state.distance():
        return rejected("Advance attack requires the second card to match the distance.")
    return declare_attack(state, player, hand_index, "advanced")


def cancel_advance(state: MatchState, pending: PendingAdvance) -> StepResult:
    ps = state.players[pending.player]
    ps.position -= pending.distance * forward_direction(pending.player)
    returned = state.discard.pop()
    assert returned == pending.distance, "discard top is not the advance card"
    ps.hand.insert(pending.hand_index, returned)
    if pending.resume == "defender_turn":
        state.phase = DefenderTurnPhase(player=pending.player)
    else:
        state.phase = TurnPhase(player=pending.player)
    log_event(state, "ADVANCE_CANCELLED", "warning", f"{ps.name} cancels the advance.", player=pending.player)
    return accepted()
