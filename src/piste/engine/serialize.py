from __future__ import annotations

from .actions import (
    Action,
    AdvanceAction,
    AttackAction,
    CancelAction,
    FinishAttackAction,
    MoveAction,
    PassAction,
    PlayCardAction,
    RetreatChoiceAction,
)
from .state import MatchState, PlayerState
from .types import AdvanceAttackPhase, AttackContext, PendingAdvance, RoundEndPhase


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, PlayCardAction):
        return {"type": "play", "player": a.player, "hand_index": a.hand_index}
    if isinstance(a, MoveAction):
        return {"type": "move", "player": a.player, "hand_index": a.hand_index, "direction": a.direction}
    if isinstance(a, AttackAction):
        return {"type": "attack", "player": a.player, "hand_index": a.hand_index}
    if isinstance(a, AdvanceAction):
        return {"type": "advance", "player": a.player, "hand_index": a.hand_index}
    if isinstance(a, FinishAttackAction):
        return {"type": "finish_attack", "player": a.player}
    if isinstance(a, RetreatChoiceAction):
        return {"type": "retreat", "player": a.player}
    if isinstance(a, CancelAction):
        return {"type": "cancel", "player": a.player}
    if isinstance(a, PassAction):
        return {"type": "pass", "player": a.player}
    # should be unreachable
    return {"type": "unknown"}


def _attack_to_dict(attack: AttackContext | None) -> dict[str, object] | None:
    if attack is None:
        return None
    return {
        "kind": attack.kind,
        "attacker": attack.attacker,
        "defender": attack.defender,
        "cards": list(attack.cards),
        "total": attack.total,
        "parry": [{"hand_index": p.hand_index, "value": p.value} for p in attack.parry],
        "final": attack.final,
    }


def _advance_to_dict(advance: PendingAdvance | None) -> dict[str, object] | None:
    if advance is None:
        return None
    return {"player": advance.player, "distance": advance.distance, "hand_index": advance.hand_index}


def _player_to_dict(p: PlayerState) -> dict[str, object]:
    return {
        "id": p.id,
        "name": p.name,
        "position": p.position,
        "hand": list(p.hand),
        "score": p.score,
        "must_skip_draw": p.must_skip_draw,
    }


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable view of everything a display needs."""
    phase = state.phase
    advance = phase.advance if isinstance(phase, AdvanceAttackPhase) else None
    round_winner = phase.winner if isinstance(phase, RoundEndPhase) else None
    return {
        "seed": state.seed,
        "round": state.round,
        "mode": state.mode,
        "pending_mode": state.pending_mode,
        "phase": phase.name,
        "starting_player": state.starting_player,
        "board_length": state.config.board_length,
        "distance": state.distance(),
        "deck_count": len(state.deck),
        "deck_exhausted": state.deck.exhausted,
        "discard_count": len(state.discard),
        "players": [_player_to_dict(p) for p in state.players],
        "attack": _attack_to_dict(state.attack()),
        "advance": _advance_to_dict(advance),
        "final_attack_offered": state.final_attack_offered,
        "round_winner": round_winner,
        "match_winner": state.match_winner,
        "action_log": [action_to_dict(a) for a in state.action_log],
    }
