from __future__ import annotations

import random
from collections import Counter

from piste.engine.deck import Deck, build_deck, draw, draw_to_hand

VALUES = (1, 2, 3, 4, 5)


def test_build_deck_composition() -> None:
    deck = build_deck(random.Random(7), VALUES, 5)
    assert len(deck) == 25
    assert Counter(deck.cards) == {v: 5 for v in VALUES}
    assert not deck.exhausted


def test_same_seed_same_order() -> None:
    a = build_deck(random.Random(99), VALUES, 5)
    b = build_deck(random.Random(99), VALUES, 5)
    assert a.cards == b.cards


def test_draw_pops_last_card_and_latches_exhaustion() -> None:
    deck = Deck(cards=[4, 2])
    hand: list[int] = []
    assert draw(deck, hand) == 2
    assert hand == [2]
    assert not deck.exhausted
    assert draw(deck, hand) == 4
    assert deck.exhausted

    # empty deck: no-op, never an error
    assert draw(deck, hand) is None
    assert hand == [2, 4]
    assert deck.exhausted


def test_draw_to_hand_stops_at_size_or_empty_deck() -> None:
    deck = Deck(cards=[1, 2, 3, 4, 5])
    hand = [5, 5, 5]
    assert draw_to_hand(deck, hand, 5) == [5, 4]
    assert hand == [5, 5, 5, 5, 4]
    assert len(deck) == 3

    hand = []
    assert draw_to_hand(deck, hand, 5) == [3, 2, 1]
    assert deck.exhausted


def test_shuffle_marginals_are_uniform() -> None:
    rng = random.Random(2024)
    trials = 5000
    slots = (0, 12, 24)
    counts = {slot: Counter() for slot in slots}
    for _ in range(trials):
        deck = build_deck(rng, VALUES, 5)
        for slot in slots:
            counts[slot][deck.cards[slot]] += 1

    expected = trials / len(VALUES)
    for slot in slots:
        for value in VALUES:
            # ~5 standard deviations
            assert abs(counts[slot][value] - expected) < 150, (slot, value, counts[slot][value])
