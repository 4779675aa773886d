from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from piste.engine.match import new_match
from piste.engine.state import MatchConfig
from piste.engine.types import MODES

from ..app import GameContext, SceneTransition
from ..ui import Button, RadioGroup, draw_text
from .match import MatchScene


class MainMenuScene:
    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None
        settings = self.ctx.settings
        current = settings.settings.mode if settings is not None else "basic"

        self.mode_picker = RadioGroup(origin=(60, 180), choices=MODES, value=current, on_change=self._on_mode)
        self._buttons = [
            Button(rect=pygame.Rect(60, 260, 320, 56), text="New match", on_click=self._on_new_match),
            Button(
                rect=pygame.Rect(60, 330, 320, 56),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            ),
        ]

    def _on_mode(self, mode: str) -> None:
        if self.ctx.settings is not None:
            self.ctx.settings.set_mode(mode)  # type: ignore[arg-type]

    def _on_new_match(self) -> None:
        state = new_match(seed=self.ctx.seed, mode=self.mode_picker.value, config=self.ctx.config)  # type: ignore[arg-type]
        # A fixed seed only applies to the first match of the session.
        self.ctx.seed = None
        self.ctx.history.record(state.event_log)
        self._next = SceneTransition(MatchScene(self.ctx, state))

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.mode_picker.handle_event(event):
            return
        for b in self._buttons:
            if b.handle_event(event):
                return

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.fonts
        draw_text(screen, fonts.big, "Piste", (60, 40))
        cfg = self.ctx.config or MatchConfig()
        draw_text(
            screen,
            fonts.ui,
            f"A two-player duel on a {cfg.board_length}-space strip. First to {cfg.rounds_to_win} touches.",
            (60, 90),
        )
        draw_text(screen, fonts.ui, "Mode", (60, 150))
        self.mode_picker.draw(screen, fonts.ui)
        for b in self._buttons:
            b.draw(screen, fonts.ui)
        draw_text(
            screen,
            fonts.small,
            "Basic: attacks always hit.  Advanced: strengthen, parry, retreat and advance & attack.",
            (60, 720),
        )
