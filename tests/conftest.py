from __future__ import annotations

from collections import Counter
from typing import Callable, Sequence

import pytest

from piste.engine.deck import Deck
from piste.engine.state import MatchState, check_invariants
from piste.engine.types import Mode, TurnPhase


def rig_round(
    state: MatchState,
    *,
    positions: tuple[int, int],
    hands: tuple[Sequence[int], Sequence[int]],
    deck: Sequence[int] | None = None,
    turn: int = 0,
    mode: Mode | None = None,
) -> MatchState:
    """Set up a specific position without breaking card conservation.

    Cards not in either hand go to the deck (sorted, so the last one is drawn
    first) unless `deck` is given, in which case the rest lands in the discard.
    """
    cfg = state.config
    pool = Counter({v: cfg.copies_per_value for v in cfg.card_values})
    for hand in hands:
        pool.subtract(hand)
    assert all(n >= 0 for n in pool.values()), "more copies than the deck holds"

    if deck is None:
        deck_cards = sorted(pool.elements())
        discard: list[int] = []
    else:
        rest = pool.copy()
        rest.subtract(deck)
        assert all(n >= 0 for n in rest.values()), "deck uses cards already in hand"
        deck_cards = list(deck)
        discard = sorted(rest.elements())

    state.deck = Deck(cards=deck_cards, exhausted=not deck_cards)
    state.discard = discard
    for ps, pos, hand in zip(state.players, positions, hands):
        ps.position = pos
        ps.hand = list(hand)
        ps.must_skip_draw = False
    state.phase = TurnPhase(player=turn)
    state.final_attack_offered = False
    if mode is not None:
        state.mode = mode
        state.pending_mode = mode
    check_invariants(state)
    return state


@pytest.fixture
def rig() -> Callable[..., MatchState]:
    return rig_round
