from __future__ import annotations

from piste.engine.actions import (
    AdvanceAction,
    CancelAction,
    FinishAttackAction,
    PlayCardAction,
    RetreatChoiceAction,
)
from piste.engine.advance import can_advance
from piste.engine.match import acting_player, legal_actions, new_match, step
from piste.engine.serialize import snapshot
from piste.engine.types import DefenderTurnPhase, TurnPhase


def _labels(options) -> list[str]:
    return [o.label for o in options]


def _opening(rig):
    return rig(
        new_match(seed=21),
        positions=(0, 8),
        hands=([3, 5, 1, 1, 2], [2, 4, 4, 1, 1]),
        mode="advanced",
    )


def test_advance_offered_only_when_a_second_card_fits(rig) -> None:
    state = _opening(rig)
    res = step(state, PlayCardAction(player=0, hand_index=0))
    assert _labels(res.options) == ["Move 3 forward", "Advance & attack (use 3)"]

    assert can_advance(state, 0, 0)
    assert not can_advance(state, 0, 2)  # a 1 would leave a gap of 7


def test_advance_moves_and_waits_for_second_card(rig) -> None:
    state = _opening(rig)
    res = step(state, AdvanceAction(player=0, hand_index=0))
    assert res.ok
    assert res.phase == "advance_attack"
    assert state.players[0].position == 3
    assert state.players[0].hand == [5, 1, 1, 2]
    assert state.discard[-1] == 3
    assert _labels(res.options) == ["Attack with 5", "Cancel advance"]

    before = snapshot(state)
    res = step(state, PlayCardAction(player=0, hand_index=1))
    assert not res.ok
    assert res.error == "Advance attack requires the second card to match the distance."
    assert snapshot(state) == before


def test_cancel_advance_restores_everything(rig) -> None:
    state = _opening(rig)
    hand = list(state.players[0].hand)
    discard = list(state.discard)

    step(state, AdvanceAction(player=0, hand_index=0))
    res = step(state, CancelAction(player=0))
    assert res.ok
    assert state.players[0].position == 0
    assert state.players[0].hand == hand
    assert state.discard == discard
    assert state.phase == TurnPhase(player=0)


def test_cancel_advance_resumes_riposte_turn(rig) -> None:
    state = _opening(rig)
    state.phase = DefenderTurnPhase(player=0)
    step(state, AdvanceAction(player=0, hand_index=0))
    step(state, CancelAction(player=0))
    assert state.phase == DefenderTurnPhase(player=0)


def _advanced_attack_pending(state):
    step(state, AdvanceAction(player=0, hand_index=0))
    step(state, PlayCardAction(player=0, hand_index=0))
    return step(state, FinishAttackAction(player=0))


def test_completed_advance_allows_retreat(rig) -> None:
    state = _opening(rig)
    step(state, AdvanceAction(player=0, hand_index=0))
    res = step(state, PlayCardAction(player=0, hand_index=0))
    assert res.phase == "attack_strengthen"
    attack = state.attack()
    assert attack is not None
    assert attack.kind == "advanced"
    assert attack.cards == [5]

    res = step(state, FinishAttackAction(player=0))
    assert res.phase == "await_parry"
    assert res.prompt.endswith("or retreat.")
    assert "Retreat" in _labels(res.options)


def test_retreat_choice_can_be_cancelled_and_performed(rig) -> None:
    state = _opening(rig)
    _advanced_attack_pending(state)

    res = step(state, RetreatChoiceAction(player=1))
    assert res.phase == "await_retreat_card"
    assert _labels(res.options) == ["Retreat 2", "Retreat 4", "Retreat 1", "Cancel retreat"]

    res = step(state, CancelAction(player=1))
    assert res.phase == "await_parry"

    step(state, RetreatChoiceAction(player=1))
    res = step(state, PlayCardAction(player=1, hand_index=0))  # retreat 2
    assert res.ok
    assert state.players[1].position == 10
    assert len(state.players[1].hand) == 5
    assert state.attack() is None
    # the attacker keeps the initiative
    assert state.phase == TurnPhase(player=0)
    assert acting_player(state) == 0
    assert any(e["type"] == "RETREATED" for e in res.events)


def test_retreat_card_must_stay_on_board(rig) -> None:
    state = rig(
        new_match(seed=22),
        positions=(12, 20),
        hands=([3, 5, 1, 2, 2], [3, 4, 1, 4, 5]),
        mode="advanced",
    )
    _advanced_attack_pending(state)
    res = step(state, RetreatChoiceAction(player=1))
    assert _labels(res.options) == ["Retreat 1", "Cancel retreat"]

    res = step(state, PlayCardAction(player=1, hand_index=0))
    assert not res.ok
    assert res.error == "Retreat not possible with that card. Choose another."
    assert state.players[1].position == 20


def test_retreat_rejected_without_a_legal_card(rig) -> None:
    state = rig(
        new_match(seed=23),
        positions=(14, 22),
        hands=([3, 5, 1, 2, 2], [1, 2, 3, 4, 4]),
        mode="advanced",
    )
    res = _advanced_attack_pending(state)
    assert res.phase == "await_parry"
    assert "Retreat" not in _labels(res.options)

    res = step(state, RetreatChoiceAction(player=1))
    assert not res.ok
    assert res.error == "No card allows a legal retreat. Parry the attack."


def test_no_advance_once_deck_is_exhausted(rig) -> None:
    state = rig(
        new_match(seed=24),
        positions=(0, 8),
        hands=([3, 5, 1, 1, 2], [2, 4, 4, 1, 1]),
        deck=[],
        mode="advanced",
    )
    assert not can_advance(state, 0, 0)
    assert not any(o.label.startswith("Advance") for o in legal_actions(state))
