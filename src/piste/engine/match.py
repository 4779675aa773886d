from __future__ import annotations

import random
from typing import Iterable

from .actions import (
    Action,
    ActionOption,
    AdvanceAction,
    AttackAction,
    CancelAction,
    FinishAttackAction,
    MoveAction,
    PassAction,
    PlayCardAction,
    RetreatChoiceAction,
)
from .advance import begin_advance, can_advance, cancel_advance, complete_advance
from .attack import (
    can_retreat,
    cancel_retreat,
    choose_retreat,
    declare_attack,
    finish_attack,
    perform_retreat,
    retreat_offered,
    select_parry,
    strengthen,
)
from .board import backward_direction, forward_direction
from .rounds import can_move, end_player_turn, resolve_deck_exhaustion, start_round
from .state import (
    MatchConfig,
    MatchState,
    PlayerState,
    StepResult,
    accepted,
    check_invariants,
    log_event,
    rejected,
)
from .types import (
    MODES,
    AdvanceAttackPhase,
    AttackStrengthenPhase,
    AwaitParryPhase,
    AwaitRetreatCardPhase,
    DefenderTurnPhase,
    FinalAttackPhase,
    Mode,
    RoundEndPhase,
    TurnPhase,
)


def acting_player(state: MatchState) -> int | None:
    """The only player whose input the current phase accepts."""
    phase = state.phase
    if isinstance(phase, (TurnPhase, DefenderTurnPhase, FinalAttackPhase)):
        return phase.player
    if isinstance(phase, AttackStrengthenPhase):
        return phase.attack.attacker
    if isinstance(phase, (AwaitParryPhase, AwaitRetreatCardPhase)):
        return phase.attack.defender
    if isinstance(phase, AdvanceAttackPhase):
        return phase.advance.player
    return None


def _unique(options: list[ActionOption]) -> list[ActionOption]:
    # Cards of equal value are interchangeable; list each choice once.
    seen: set[str] = set()
    out: list[ActionOption] = []
    for opt in options:
        if opt.label in seen:
            continue
        seen.add(opt.label)
        out.append(opt)
    return out


def card_options(state: MatchState, player: int, hand_index: int) -> list[ActionOption]:
    """Everything a player may do with one card on their turn."""
    card = state.players[player].hand[hand_index]
    options: list[ActionOption] = []
    if not state.deck.exhausted:
        if can_move(state, player, card, True):
            options.append(
                ActionOption(f"Move {card} forward", MoveAction(player, hand_index, forward_direction(player)))
            )
        if can_move(state, player, card, False):
            options.append(
                ActionOption(f"Retreat {card}", MoveAction(player, hand_index, backward_direction(player)))
            )
    if card == state.distance():
        options.append(ActionOption(f"Attack with {card}", AttackAction(player, hand_index)))
    if can_advance(state, player, hand_index):
        options.append(ActionOption(f"Advance & attack (use {card})", AdvanceAction(player, hand_index)))
    return options


def legal_actions(state: MatchState) -> list[ActionOption]:
    phase = state.phase
    options: list[ActionOption] = []

    if isinstance(phase, (TurnPhase, DefenderTurnPhase)):
        player = phase.player
        for i in range(len(state.players[player].hand)):
            options.extend(card_options(state, player, i))
        if state.deck.exhausted:
            options.append(ActionOption("Pass", PassAction(player)))

    elif isinstance(phase, AttackStrengthenPhase):
        attack = phase.attack
        for i, card in enumerate(state.players[attack.attacker].hand):
            if card == attack.base_card:
                options.append(ActionOption(f"Strengthen with {card}", PlayCardAction(attack.attacker, i)))
        options.append(ActionOption("Finish attack", FinishAttackAction(attack.attacker)))

    elif isinstance(phase, AwaitParryPhase):
        attack = phase.attack
        for i, card in enumerate(state.players[attack.defender].hand):
            if not attack.picked(i):
                options.append(ActionOption(f"Parry with {card}", PlayCardAction(attack.defender, i)))
        if can_retreat(state, attack):
            options.append(ActionOption("Retreat", RetreatChoiceAction(attack.defender)))

    elif isinstance(phase, AwaitRetreatCardPhase):
        attack = phase.attack
        for i, card in enumerate(state.players[attack.defender].hand):
            if can_move(state, attack.defender, card, False):
                options.append(ActionOption(f"Retreat {card}", PlayCardAction(attack.defender, i)))
        options.append(ActionOption("Cancel retreat", CancelAction(attack.defender)))

    elif isinstance(phase, AdvanceAttackPhase):
        player = phase.advance.player
        for i, card in enumerate(state.players[player].hand):
            if card == state.distance():
                options.append(ActionOption(f"Attack with {card}", PlayCardAction(player, i)))
        options.append(ActionOption("Cancel advance", CancelAction(player)))

    elif isinstance(phase, FinalAttackPhase):
        player = phase.player
        for i, card in enumerate(state.players[player].hand):
            if card == state.distance():
                options.append(ActionOption(f"Attack with {card}", PlayCardAction(player, i)))
        options.append(ActionOption("Pass", PassAction(player)))

    return _unique(options)


def prompt_for(state: MatchState) -> str:
    phase = state.phase
    if isinstance(phase, RoundEndPhase):
        if phase.winner is None:
            return "Round drawn. Start the next round when ready."
        name = state.players[phase.winner].name
        if state.match_winner is not None:
            return f"{name} wins the match! Start a new match to play again."
        return f"{name} wins the round!"

    player = acting_player(state)
    assert player is not None
    name = state.players[player].name
    if isinstance(phase, TurnPhase):
        if state.deck.exhausted:
            return f"{name}, the deck is exhausted. Attack or pass."
        return f"{name}, it's your turn."
    if isinstance(phase, DefenderTurnPhase):
        return f"{name}, take your turn before drawing new cards."
    if isinstance(phase, AttackStrengthenPhase):
        return f"{name}, add identical cards to strengthen or finish attack."
    if isinstance(phase, AwaitParryPhase):
        attack = phase.attack
        if attack.parry:
            remaining = attack.required - len(attack.parry)
            return f"{name}, select {remaining} more card(s) totaling {attack.total - attack.parry_total()}."
        text = f"{name}, parry the attack by selecting {attack.required} card(s) totaling {attack.total}"
        if retreat_offered(state, attack):
            return text + " or retreat."
        return text + "."
    if isinstance(phase, AwaitRetreatCardPhase):
        return f"{name}, choose a card to retreat backward."
    if isinstance(phase, AdvanceAttackPhase):
        return f"{name}, choose a card to complete the attack."
    return f"{name}, last chance to attack! Play a matching card or pass."


def _valid_index(state: MatchState, player: int, hand_index: int) -> bool:
    return 0 <= hand_index < len(state.players[player].hand)


def _select_card(state: MatchState, action: PlayCardAction) -> StepResult:
    options = card_options(state, action.player, action.hand_index)
    if not options:
        return rejected("No legal moves with that card. Choose another card.")
    card = state.players[action.player].hand[action.hand_index]
    return accepted(options=options, prompt=f"{state.players[action.player].name}, choose an action for card {card}.")


def _move(state: MatchState, action: MoveAction) -> StepResult:
    if state.deck.exhausted:
        return rejected("The deck is exhausted: only attacks are possible.")
    if action.direction not in (1, -1):
        return rejected("Invalid direction.")
    ps = state.players[action.player]
    card = ps.hand[action.hand_index]
    forward = action.direction == forward_direction(action.player)
    if not can_move(state, action.player, card, forward):
        return rejected("That move is not legal.")

    ps.hand.pop(action.hand_index)
    ps.position += card * action.direction
    state.discard.append(card)
    log_event(
        state,
        "MOVED",
        "info",
        f"{ps.name} moves {'forward' if forward else 'backward'} {card} spaces.",
        player=action.player,
        card=card,
        position=ps.position,
    )
    end_player_turn(state, action.player)
    return accepted()


def _pass(state: MatchState, action: PassAction) -> StepResult:
    ps = state.players[action.player]
    if isinstance(state.phase, FinalAttackPhase):
        log_event(state, "PASSED", "info", f"{ps.name} passes the final attack.", player=action.player)
        resolve_deck_exhaustion(state)
        return accepted()
    if not state.deck.exhausted:
        return rejected("You can only pass once the deck is exhausted.")
    log_event(state, "PASSED", "info", f"{ps.name} passes.", player=action.player)
    end_player_turn(state, action.player)
    return accepted()


def _final_attack(state: MatchState, action: PlayCardAction) -> StepResult:
    if state.players[action.player].hand[action.hand_index] != state.distance():
        return rejected("Final attack must match the distance exactly. Choose another card or pass.")
    return declare_attack(state, action.player, action.hand_index, "standard", final=True)


def _dispatch(state: MatchState, action: Action) -> StepResult:
    phase = state.phase

    if isinstance(phase, (TurnPhase, DefenderTurnPhase)):
        if isinstance(action, PlayCardAction):
            return _select_card(state, action)
        if isinstance(action, MoveAction):
            return _move(state, action)
        if isinstance(action, AttackAction):
            return declare_attack(state, action.player, action.hand_index, "standard")
        if isinstance(action, AdvanceAction):
            return begin_advance(state, action.player, action.hand_index)
        if isinstance(action, PassAction):
            return _pass(state, action)

    elif isinstance(phase, AttackStrengthenPhase):
        if isinstance(action, PlayCardAction):
            return strengthen(state, phase.attack, action.hand_index)
        if isinstance(action, FinishAttackAction):
            return finish_attack(state, phase.attack)

    elif isinstance(phase, AwaitParryPhase):
        if isinstance(action, PlayCardAction):
            return select_parry(state, phase.attack, action.hand_index)
        if isinstance(action, RetreatChoiceAction):
            return choose_retreat(state, phase.attack)

    elif isinstance(phase, AwaitRetreatCardPhase):
        if isinstance(action, PlayCardAction):
            return perform_retreat(state, phase.attack, action.hand_index)
        if isinstance(action, CancelAction):
            return cancel_retreat(state, phase.attack)

    elif isinstance(phase, AdvanceAttackPhase):
        if isinstance(action, PlayCardAction):
            return complete_advance(state, phase.advance, action.hand_index)
        if isinstance(action, CancelAction):
            return cancel_advance(state, phase.advance)

    elif isinstance(phase, FinalAttackPhase):
        if isinstance(action, PlayCardAction):
            return _final_attack(state, action)
        if isinstance(action, PassAction):
            return _pass(state, action)

    return rejected("That action is not available now.")


def _finish(state: MatchState, result: StepResult, events_before: int) -> StepResult:
    result.events = state.event_log[events_before:]
    result.phase = state.phase.name
    if not result.ok:
        result.prompt = result.error or prompt_for(state)
    elif not result.prompt:
        result.prompt = prompt_for(state)
    if result.options is None:
        result.options = legal_actions(state)
    return result


def step(state: MatchState, action: Action) -> StepResult:
    """Apply a single player action to the match state.

    Mutates `state` in place. A rejected action leaves it untouched and is not
    recorded, so replaying `state.action_log` from the seed reproduces the
    match exactly.
    """
    before = len(state.event_log)
    if isinstance(state.phase, RoundEndPhase):
        return _finish(state, rejected("The round is over."), before)
    if action.player != acting_player(state):
        return _finish(state, rejected("Not your turn."), before)
    hand_index = getattr(action, "hand_index", None)
    if hand_index is not None and not _valid_index(state, action.player, hand_index):
        return _finish(state, rejected("Invalid hand index."), before)

    result = _dispatch(state, action)
    if result.ok:
        state.action_log.append(action)
        check_invariants(state)
    return _finish(state, result, before)


def new_match(
    seed: int | None = None,
    mode: Mode = "basic",
    config: MatchConfig | None = None,
) -> MatchState:
    cfg = config or MatchConfig()
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")
    if seed is None:
        seed = random.randrange(1, 2**31 - 1)

    players = [
        PlayerState(id=0, position=0),
        PlayerState(id=1, position=cfg.board_length - 1),
    ]
    state = MatchState(
        config=cfg,
        seed=seed,
        rng=random.Random(seed),
        players=players,
        mode=mode,
        pending_mode=mode,
    )
    log_event(state, "MATCH_STARTED", "success", "New match started. Good luck!", seed=seed, mode=mode)
    start_round(state)
    return state


def next_round(state: MatchState) -> StepResult:
    before = len(state.event_log)
    if not isinstance(state.phase, RoundEndPhase):
        return _finish(state, rejected("The round is still in progress."), before)
    if state.match_winner is not None:
        return _finish(state, rejected("Match already finished. Start a new match to continue."), before)
    state.round += 1
    state.starting_player = state.opponent(state.starting_player)
    start_round(state)
    check_invariants(state)
    return _finish(state, accepted(), before)


def select_mode(state: MatchState, mode: str) -> StepResult:
    """Choose the rules for the next round; the current round is unaffected."""
    before = len(state.event_log)
    if mode not in MODES:
        return _finish(state, rejected(f"Unknown mode: {mode}"), before)
    state.pending_mode = mode  # type: ignore[assignment]
    log_event(state, "MODE_SELECTED", "info", f"Mode set to {mode.capitalize()}. It applies from the next round.",
              mode=mode)
    return _finish(state, accepted(), before)


def replay(
    seed: int,
    actions: Iterable[Action],
    mode: Mode = "basic",
    config: MatchConfig | None = None,
) -> MatchState:
    state = new_match(seed=seed, mode=mode, config=config)
    for a in actions:
        if isinstance(state.phase, RoundEndPhase):
            if state.match_winner is not None:
                break
            next_round(state)
        step(state, a)
    return state
