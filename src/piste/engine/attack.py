"""Attack protocol: declare, strengthen, then parry or retreat."""

from __future__ import annotations

from .board import backward_direction
from .rounds import (
    begin_turn,
    can_move,
    conclude_round,
    discard_attack,
    discard_parry,
    draw_up,
    resolve_deck_exhaustion,
)
from .state import MatchState, StepResult, accepted, log_event, rejected
from .types import (
    AttackContext,
    AttackKind,
    AttackStrengthenPhase,
    AwaitParryPhase,
    AwaitRetreatCardPhase,
    ParryPick,
)


def retreat_offered(state: MatchState, attack: AttackContext) -> bool:
    return state.mode == "advanced" and attack.kind == "advanced"


def can_retreat(state: MatchState, attack: AttackContext) -> bool:
    hand = state.players[attack.defender].hand
    return retreat_offered(state, attack) and any(can_move(state, attack.defender, c, False) for c in hand)


def declare_attack(
    state: MatchState, player: int, hand_index: int, kind: AttackKind, final: bool = False
) -> StepResult:
    ps = state.players[player]
    card = ps.hand[hand_index]
    if card != state.distance():
        return rejected(f"An attack needs a card equal to the distance ({state.distance()}).")

    ps.hand.pop(hand_index)
    attack = AttackContext(
        kind=kind,
        attacker=player,
        defender=state.opponent(player),
        cards=[card],
        total=card,
        final=final,
    )
    if kind == "advanced":
        log_event(state, "ATTACK_DECLARED", "info", f"{ps.name} attempts an advance & attack with a {card}.",
                  player=player, card=card, kind=kind)
    else:
        log_event(state, "ATTACK_DECLARED", "info", f"{ps.name} launches an attack with a {card}.",
                  player=player, card=card, kind=kind)

    state.phase = AttackStrengthenPhase(attack=attack)
    if state.mode == "basic":
        # No strengthening in basic mode: the attack resolves at once.
        return finish_attack(state, attack)
    return accepted()


def strengthen(state: MatchState, attack: AttackContext, hand_index: int) -> StepResult:
    ps = state.players[attack.attacker]
    card = ps.hand[hand_index]
    if card != attack.base_card:
        return rejected("Only identical cards can strengthen the attack.")
    ps.hand.pop(hand_index)
    attack.cards.append(card)
    attack.total += card
    log_event(state, "ATTACK_STRENGTHENED", "info", f"{ps.name} strengthens the attack with another {card}.",
              player=attack.attacker, total=attack.total, count=len(attack.cards))
    return accepted()


def finish_attack(state: MatchState, attack: AttackContext) -> StepResult:
    attacker = state.players[attack.attacker]
    defender = state.players[attack.defender]
    # Always draws; a pending riposte skip only covers the end-of-turn draw.
    attacker.must_skip_draw = False
    draw_up(state, attack.attacker)

    if state.mode == "basic" and attack.kind == "standard":
        log_event(state, "ATTACK_HIT", "success", f"{attacker.name}'s attack lands a hit!", player=attack.attacker)
        conclude_round(state, attack.attacker)
        return accepted()

    if len(defender.hand) < attack.required and not can_retreat(state, attack):
        log_event(state, "ATTACK_HIT", "danger",
                  f"{defender.name} cannot muster {attack.required} card(s) to parry. The attack lands!",
                  player=attack.attacker)
        conclude_round(state, attack.attacker)
        return accepted()

    state.phase = AwaitParryPhase(attack=attack)
    return accepted()


def select_parry(state: MatchState, attack: AttackContext, hand_index: int) -> StepResult:
    defender = state.players[attack.defender]
    if attack.picked(hand_index):
        return rejected("That card is already part of the parry. Choose another.")

    attack.parry.append(ParryPick(hand_index=hand_index, value=defender.hand[hand_index]))
    count = len(attack.parry)
    total = attack.parry_total()
    if count < attack.required:
        return accepted(
            prompt=f"{defender.name}, select {attack.required - count} more card(s) "
            f"totaling {attack.total - total}."
        )

    if total == attack.total:
        log_event(state, "PARRY_SUCCEEDED", "success", f"{defender.name} parries successfully.",
                  player=attack.defender)
        _resolve_parry(state, attack)
    else:
        log_event(state, "PARRY_FAILED", "danger", f"{defender.name} fails to meet the attack value.",
                  player=attack.defender, total=total, needed=attack.total)
        discard_parry(state, attack)
        conclude_round(state, attack.attacker)
    return accepted()


def _resolve_parry(state: MatchState, attack: AttackContext) -> None:
    discard_parry(state, attack)
    discard_attack(state, attack)
    defender = state.players[attack.defender]
    defender.must_skip_draw = True
    if attack.final:
        resolve_deck_exhaustion(state)
        return
    begin_turn(state, attack.defender, riposte=True)


def choose_retreat(state: MatchState, attack: AttackContext) -> StepResult:
    if not retreat_offered(state, attack):
        return rejected("Retreat is only possible against an advance & attack.")
    if not can_retreat(state, attack):
        return rejected("No card allows a legal retreat. Parry the attack.")
    state.phase = AwaitRetreatCardPhase(attack=attack)
    return accepted()


def cancel_retreat(state: MatchState, attack: AttackContext) -> StepResult:
    state.phase = AwaitParryPhase(attack=attack)
    return accepted()


def perform_retreat(state: MatchState, attack: AttackContext, hand_index: int) -> StepResult:
    defender = state.players[attack.defender]
    card = defender.hand[hand_index]
    if not can_move(state, attack.defender, card, False):
        return rejected("Retreat not possible with that card. Choose another.")

    defender.hand.pop(hand_index)
    defender.position += card * backward_direction(attack.defender)
    state.discard.append(card)
    attack.parry.clear()
    discard_attack(state, attack)
    log_event(state, "RETREATED", "warning", f"{defender.name} retreats {card} space(s) to avoid the attack.",
              player=attack.defender, card=card, position=defender.position)
    draw_up(state, attack.defender)
    begin_turn(state, attack.attacker)
    return accepted()
