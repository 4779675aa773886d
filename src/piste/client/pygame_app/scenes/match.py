from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from piste.engine.actions import Action, ActionOption, PlayCardAction
from piste.engine.match import acting_player, legal_actions, new_match, next_round, prompt_for, select_mode, step
from piste.engine.state import MatchState, StepResult
from piste.engine.types import MODES, AwaitParryPhase, RoundEndPhase

from ..app import GameContext, Scene, SceneTransition
from ..ui import SEVERITY_COLORS, Button, draw_text

PLAYER_COLORS = ((90, 150, 240), (230, 90, 90))
CARD_W, CARD_H = 56, 76


class MatchScene:
    """Hot-seat view: both hands are shown, only the acting player's is clickable."""

    def __init__(self, ctx: GameContext, state: MatchState) -> None:
        self.ctx = ctx
        self.state = state
        self._next: SceneTransition | None = None
        self._prompt = prompt_for(state)
        self._options: list[ActionOption] = legal_actions(state)
        self._option_buttons: list[Button] = []

        self.btn_menu = Button(rect=pygame.Rect(864, 16, 140, 40), text="Menu", on_click=self._on_menu)
        self.btn_next = Button(rect=pygame.Rect(704, 700, 150, 48), text="Next round", on_click=self._on_next_round)
        self.btn_new = Button(rect=pygame.Rect(864, 700, 140, 48), text="New match", on_click=self._on_new_match)
        self._mode_buttons = [
            Button(
                rect=pygame.Rect(704 + i * 155, 64, 145, 32),
                text=mode.capitalize(),
                on_click=lambda m=mode: self._apply(select_mode(self.state, m)),
                secondary=True,
            )
            for i, mode in enumerate(MODES)
        ]
        self._rebuild_options()

    # -------- Engine plumbing --------
    def _apply(self, result: StepResult) -> None:
        self.ctx.history.record(result.events)
        self._prompt = result.prompt
        self._options = result.options if result.options is not None else legal_actions(self.state)
        self._rebuild_options()

    def _dispatch(self, action: Action) -> None:
        self._apply(step(self.state, action))

    def _rebuild_options(self) -> None:
        x0, y0 = 40, 440
        w, h, gap = 190, 40, 10
        per_row = 4
        self._option_buttons = []
        for i, opt in enumerate(self._options):
            rect = pygame.Rect(x0 + (i % per_row) * (w + gap), y0 + (i // per_row) * (h + gap), w, h)
            self._option_buttons.append(
                Button(rect=rect, text=opt.label, on_click=lambda a=opt.action: self._dispatch(a))
            )

    # -------- Buttons --------
    def _go(self, scene: Scene) -> None:
        self._next = SceneTransition(scene)

    def _on_menu(self) -> None:
        from .main_menu import MainMenuScene

        self._go(MainMenuScene(self.ctx))

    def _on_next_round(self) -> None:
        self._apply(next_round(self.state))

    def _on_new_match(self) -> None:
        state = new_match(mode=self.state.pending_mode, config=self.state.config)
        self.ctx.history.record(state.event_log)
        self._go(MatchScene(self.ctx, state))

    # -------- Layout --------
    def _space_rect(self, index: int) -> pygame.Rect:
        length = self.state.config.board_length
        w = min(40, (944 - (length - 1) * 2) // length)
        return pygame.Rect(40 + index * (w + 2), 130, w, 56)

    def _card_rect(self, player: int, index: int) -> pygame.Rect:
        y = 230 if player == 0 else 330
        return pygame.Rect(160 + index * (CARD_W + 8), y, CARD_W, CARD_H)

    def _hit_test_hand(self, pos: tuple[int, int]) -> tuple[int, int] | None:
        for player in (0, 1):
            for i in range(len(self.state.players[player].hand)):
                if self._card_rect(player, i).collidepoint(pos):
                    return player, i
        return None

    # -------- Scene protocol --------
    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_menu.handle_event(event):
            return
        if isinstance(self.state.phase, RoundEndPhase):
            self.btn_next.enabled = self.state.match_winner is None
            if self.btn_next.handle_event(event) or self.btn_new.handle_event(event):
                return
        for b in self._mode_buttons:
            if b.handle_event(event):
                return
        for b in list(self._option_buttons):
            if b.handle_event(event):
                return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            hit = self._hit_test_hand(event.pos)
            if hit is not None and hit[0] == acting_player(self.state):
                self._dispatch(PlayCardAction(player=hit[0], hand_index=hit[1]))

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((8, 10, 14))
        fonts = self.ctx.fonts
        state = self.state

        draw_text(screen, fonts.big, f"Round {state.round}", (40, 20))
        draw_text(
            screen,
            fonts.ui,
            f"Mode: {state.mode.capitalize()} (next round: {state.pending_mode.capitalize()})   "
            f"Deck: {len(state.deck)}   Discard: {len(state.discard)}   Distance: {state.distance()}",
            (40, 64),
        )
        self.btn_menu.draw(screen, fonts.ui)
        for b in self._mode_buttons:
            b.draw(screen, fonts.small)

        self._draw_scores(screen)
        self._draw_board(screen)
        self._draw_hands(screen)

        draw_text(screen, fonts.ui, self._prompt, (40, 410), color=(240, 220, 150))
        for b in self._option_buttons:
            b.draw(screen, fonts.small)

        self._draw_log(screen)

        if isinstance(state.phase, RoundEndPhase):
            self.btn_next.enabled = state.match_winner is None
            self.btn_next.draw(screen, fonts.ui)
            self.btn_new.draw(screen, fonts.ui)

    def _draw_scores(self, screen: pygame.Surface) -> None:
        target = self.state.config.rounds_to_win
        for player, ps in enumerate(self.state.players):
            x = 300 + player * 200
            draw_text(screen, self.ctx.fonts.small, ps.name, (x, 24), color=PLAYER_COLORS[player])
            for i in range(target):
                center = (x + 8 + i * 20, 46)
                if i < ps.score:
                    pygame.draw.circle(screen, PLAYER_COLORS[player], center, 7)
                else:
                    pygame.draw.circle(screen, (90, 90, 100), center, 7, width=2)

    def _draw_board(self, screen: pygame.Surface) -> None:
        occupants = {ps.position: ps.id for ps in self.state.players}
        for i in range(self.state.config.board_length):
            rect = self._space_rect(i)
            pygame.draw.rect(screen, (24, 24, 32), rect, border_radius=4)
            pygame.draw.rect(screen, (0, 0, 0), rect, width=1, border_radius=4)
            draw_text(screen, self.ctx.fonts.small, str(i + 1), (rect.x + 4, rect.y + 4), color=(120, 120, 140))
            if i in occupants:
                player = occupants[i]
                pygame.draw.circle(screen, PLAYER_COLORS[player], (rect.centerx, rect.centery + 8), 12)
                label = self.ctx.fonts.small.render(f"P{player + 1}", True, (10, 10, 10))
                screen.blit(label, label.get_rect(center=(rect.centerx, rect.centery + 8)))

    def _draw_hands(self, screen: pygame.Surface) -> None:
        active = acting_player(self.state)
        picked: set[int] = set()
        phase = self.state.phase
        if isinstance(phase, AwaitParryPhase):
            picked = {p.hand_index for p in phase.attack.parry}
        for player, ps in enumerate(self.state.players):
            y = self._card_rect(player, 0).y
            draw_text(screen, self.ctx.fonts.ui, ps.name, (40, y + 26), color=PLAYER_COLORS[player])
            for i, card in enumerate(ps.hand):
                rect = self._card_rect(player, i)
                enabled = player == active
                bg = (235, 235, 225) if enabled else (110, 110, 110)
                pygame.draw.rect(screen, bg, rect, border_radius=6)
                border = (240, 200, 60) if enabled and i in picked else (0, 0, 0)
                pygame.draw.rect(screen, border, rect, width=3, border_radius=6)
                img = self.ctx.fonts.big.render(str(card), True, (20, 20, 20))
                screen.blit(img, img.get_rect(center=rect.center))

    def _draw_log(self, screen: pygame.Surface) -> None:
        draw_text(screen, self.ctx.fonts.ui, "Log", (40, 560))
        y = 586
        for ev in reversed(self.state.event_log[-8:]):
            color = SEVERITY_COLORS.get(str(ev.get("severity", "info")), SEVERITY_COLORS["info"])
            text = f"[Round {ev.get('round', '?')}] {ev.get('message', ev.get('type', ''))}"
            draw_text(screen, self.ctx.fonts.small, text[:110], (40, y), color=color)
            y += 20
