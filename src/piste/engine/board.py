from __future__ import annotations

from .types import Card, Direction


def forward_direction(player: int) -> Direction:
    return 1 if player == 0 else -1


def backward_direction(player: int) -> Direction:
    return -1 if player == 0 else 1


def home_position(player: int, board_length: int) -> int:
    return 0 if player == 0 else board_length - 1


def distance_between(a: int, b: int) -> int:
    return abs(a - b)


def displacement(player: int, position: int, board_length: int) -> int:
    """How far a player has advanced from home toward the opponent."""
    return distance_between(position, home_position(player, board_length))


def is_move_legal(
    position: int,
    opponent_position: int,
    card: Card,
    direction: Direction,
    board_length: int,
) -> bool:
    """A move must stay on the board and never land on or cross the opponent.

    The same rule applies whichever side the mover is on: the target has to
    remain strictly on the mover's side of the opponent.
    """
    target = position + card * direction
    if target < 0 or target >= board_length:
        return False
    if position < opponent_position:
        return target < opponent_position
    return target > opponent_position
