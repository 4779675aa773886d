from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

from .types import Card


@dataclass
class Deck:
    cards: list[Card] = field(default_factory=list)
    exhausted: bool = False  # latched for the rest of the round

    def __len__(self) -> int:
        return len(self.cards)


def _shuffle(rng: random.Random, items: list[Card]) -> None:
    # Fisher-Yates, drawing from the match rng so rounds replay from a seed.
    for i in range(len(items) - 1, 0, -1):
        j = rng.randint(0, i)
        items[i], items[j] = items[j], items[i]


def build_deck(rng: random.Random, values: Sequence[Card], copies: int) -> Deck:
    cards = [value for value in values for _ in range(copies)]
    _shuffle(rng, cards)
    return Deck(cards=cards)


def draw(deck: Deck, hand: list[Card]) -> Card | None:
    if not deck.cards:
        return None
    card = deck.cards.pop()
    hand.append(card)
    if not deck.cards:
        deck.exhausted = True
    return card


def draw_to_hand(deck: Deck, hand: list[Card], size: int) -> list[Card]:
    drawn: list[Card] = []
    while len(hand) < size:
        card = draw(deck, hand)
        if card is None:
            break
        drawn.append(card)
    return drawn
