"""Round bookkeeping shared by the turn, attack and advance handlers.

Everything here mutates the MatchState handed in; callers are responsible for
validating the triggering action first.
"""

from __future__ import annotations

from .board import backward_direction, displacement, forward_direction, is_move_legal
from .deck import build_deck, draw, draw_to_hand
from .state import MatchState, log_event
from .types import (
    AttackContext,
    Card,
    DefenderTurnPhase,
    FinalAttackPhase,
    RoundEndPhase,
    TurnPhase,
)


def can_move(state: MatchState, player: int, card: Card, forward: bool) -> bool:
    ps = state.players[player]
    other = state.players[state.opponent(player)]
    direction = forward_direction(player) if forward else backward_direction(player)
    return is_move_legal(ps.position, other.position, card, direction, state.config.board_length)


def has_legal_action(state: MatchState, player: int) -> bool:
    """True if any card in hand moves, retreats or attacks at exact distance."""
    gap = state.distance()
    for card in state.players[player].hand:
        if can_move(state, player, card, True) or can_move(state, player, card, False) or card == gap:
            return True
    return False


def draw_up(state: MatchState, player: int) -> None:
    ps = state.players[player]
    was_exhausted = state.deck.exhausted
    drawn = draw_to_hand(state.deck, ps.hand, state.config.hand_size)
    if drawn:
        log_event(
            state,
            "CARDS_DRAWN",
            "info",
            f"{ps.name} draws {len(drawn)} card(s).",
            player=player,
            cards=list(drawn),
        )
    if state.deck.exhausted and not was_exhausted:
        log_event(state, "DECK_EXHAUSTED", "warning", "The deck is exhausted.")


def draw_if_allowed(state: MatchState, player: int) -> None:
    ps = state.players[player]
    if ps.must_skip_draw:
        ps.must_skip_draw = False
        log_event(state, "DRAW_SKIPPED", "info", f"{ps.name} skips drawing after the riposte.", player=player)
        return
    draw_up(state, player)


def start_round(state: MatchState) -> None:
    cfg = state.config
    state.mode = state.pending_mode
    state.deck = build_deck(state.rng, cfg.card_values, cfg.copies_per_value)
    state.discard = []
    state.final_attack_offered = False
    for ps in state.players:
        ps.position = 0 if ps.id == 0 else cfg.board_length - 1
        ps.hand = []
        ps.must_skip_draw = False
    for _ in range(cfg.hand_size):
        for ps in state.players:
            draw(state.deck, ps.hand)
    state.phase = TurnPhase(player=state.starting_player)
    log_event(
        state,
        "ROUND_STARTED",
        "info",
        f"Round {state.round} begins ({state.mode} mode). "
        f"{state.players[state.starting_player].name} leads.",
        starting_player=state.starting_player,
        mode=state.mode,
    )


def discard_attack(state: MatchState, attack: AttackContext) -> None:
    state.discard.extend(attack.cards)
    attack.cards.clear()


def discard_parry(state: MatchState, attack: AttackContext) -> None:
    hand = state.players[attack.defender].hand
    # Highest index first so earlier indices stay valid.
    for pick in sorted(attack.parry, key=lambda p: p.hand_index, reverse=True):
        hand.pop(pick.hand_index)
        state.discard.append(pick.value)
    attack.parry.clear()


def conclude_round(state: MatchState, winner: int | None) -> None:
    attack = state.attack()
    if attack is not None:
        discard_attack(state, attack)
    state.phase = RoundEndPhase(winner=winner)
    if winner is None:
        log_event(state, "ROUND_DRAWN", "warning", "Round drawn.")
        return
    ps = state.players[winner]
    ps.score += 1
    log_event(state, "ROUND_WON", "success", f"{ps.name} wins the round!", winner=winner, score=ps.score)
    if ps.score >= state.config.rounds_to_win:
        state.match_winner = winner
        log_event(state, "MATCH_WON", "success", f"{ps.name} wins the match!", winner=winner)


def begin_turn(state: MatchState, player: int, riposte: bool = False) -> None:
    """Hand the initiative to `player` outside the normal end-of-turn pass."""
    if not state.deck.exhausted and not has_legal_action(state, player):
        winner = state.opponent(player)
        log_event(
            state,
            "STALEMATE",
            "danger",
            f"{state.players[player].name} has no legal action. "
            f"{state.players[winner].name} wins the round.",
            player=player,
        )
        conclude_round(state, winner)
        return
    state.phase = DefenderTurnPhase(player=player) if riposte else TurnPhase(player=player)


def end_player_turn(state: MatchState, mover: int) -> None:
    opponent = state.opponent(mover)
    if not state.deck.exhausted and not has_legal_action(state, opponent):
        log_event(
            state,
            "STALEMATE",
            "success",
            f"{state.players[opponent].name} cannot move. {state.players[mover].name} wins the round.",
            player=opponent,
        )
        conclude_round(state, mover)
        return

    draw_if_allowed(state, mover)

    if state.deck.exhausted:
        if not state.final_attack_offered:
            offer_final_attack(state, opponent)
        else:
            resolve_deck_exhaustion(state)
        return

    state.phase = TurnPhase(player=opponent)


def offer_final_attack(state: MatchState, player: int) -> None:
    state.final_attack_offered = True
    state.phase = FinalAttackPhase(player=player)
    log_event(
        state,
        "FINAL_ATTACK",
        "warning",
        f"{state.players[player].name}, last chance to attack! Play a matching card or pass.",
        player=player,
    )


def resolve_deck_exhaustion(state: MatchState) -> None:
    if state.mode != "basic":
        gap = state.distance()
        counts = [ps.hand.count(gap) for ps in state.players]
        if counts[0] != counts[1]:
            winner = 0 if counts[0] > counts[1] else 1
            log_event(
                state,
                "ENDGAME_ATTACKS",
                "success",
                f"{state.players[winner].name} wins by having more potential attacks after deck exhaustion.",
                counts=counts,
            )
            conclude_round(state, winner)
            return

    length = state.config.board_length
    advanced = [displacement(ps.id, ps.position, length) for ps in state.players]
    if advanced[0] == advanced[1]:
        log_event(state, "ENDGAME_DISTANCE", "warning", "Both players advanced equally.", displacement=advanced)
        conclude_round(state, None)
        return
    winner = 0 if advanced[0] > advanced[1] else 1
    log_event(
        state,
        "ENDGAME_DISTANCE",
        "success",
        f"{state.players[winner].name} wins the round by advancing further.",
        displacement=advanced,
    )
    conclude_round(state, winner)
