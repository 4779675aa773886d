from __future__ import annotations

from piste.engine.board import (
    backward_direction,
    displacement,
    distance_between,
    forward_direction,
    home_position,
    is_move_legal,
)

N = 23


def test_directions_and_homes() -> None:
    assert forward_direction(0) == 1
    assert forward_direction(1) == -1
    assert backward_direction(0) == -1
    assert backward_direction(1) == 1
    assert home_position(0, N) == 0
    assert home_position(1, N) == N - 1


def test_forward_move_stops_short_of_opponent() -> None:
    assert is_move_legal(5, 8, 2, 1, N)
    assert not is_move_legal(5, 8, 3, 1, N)  # lands on opponent
    assert not is_move_legal(5, 8, 4, 1, N)  # passes opponent


def test_backward_move_stays_on_board() -> None:
    assert is_move_legal(3, 10, 3, -1, N)
    assert not is_move_legal(2, 10, 3, -1, N)


def test_player_one_moves_mirror_player_zero() -> None:
    # Player 1 sits above the opponent: forward is -1, retreat is +1.
    assert is_move_legal(10, 5, 4, -1, N)
    assert not is_move_legal(10, 5, 5, -1, N)
    assert not is_move_legal(10, 5, 6, -1, N)
    assert is_move_legal(20, 5, 2, 1, N)
    assert not is_move_legal(20, 5, 3, 1, N)


def test_distance_and_displacement() -> None:
    assert distance_between(4, 9) == 5
    assert distance_between(9, 4) == 5
    assert displacement(0, 4, N) == 4
    assert displacement(1, 20, N) == 2
    assert displacement(1, N - 1, N) == 0
