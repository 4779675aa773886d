from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

import pygame  # type: ignore[import-not-found]


Color = tuple[int, int, int]

SEVERITY_COLORS: dict[str, Color] = {
    "info": (200, 200, 210),
    "success": (120, 220, 140),
    "warning": (240, 200, 120),
    "danger": (240, 110, 110),
}


def draw_text(
    screen: pygame.Surface,
    font: pygame.font.Font,
    text: str,
    pos: tuple[int, int],
    color: Color = (240, 240, 240),
) -> None:
    img = font.render(text, True, color)
    screen.blit(img, pos)


@dataclass
class Button:
    rect: pygame.Rect
    text: str
    on_click: Callable[[], None]
    enabled: bool = True
    secondary: bool = False

    def handle_event(self, event: pygame.event.Event) -> bool:
        if not self.enabled:
            return False
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if self.rect.collidepoint(event.pos):
                self.on_click()
                return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        if not self.enabled:
            bg: Color = (30, 30, 30)
        elif self.secondary:
            bg = (40, 44, 60)
        else:
            bg = (60, 60, 60)
        pygame.draw.rect(screen, bg, self.rect, border_radius=8)
        pygame.draw.rect(screen, (0, 0, 0), self.rect, width=2, border_radius=8)
        img = font.render(self.text, True, (240, 240, 240))
        r = img.get_rect(center=self.rect.center)
        screen.blit(img, r.topleft)


@dataclass
class RadioGroup:
    """A row of mutually exclusive choices, e.g. the match mode."""

    origin: tuple[int, int]
    choices: Sequence[str]
    value: str
    on_change: Callable[[str], None]
    width: int = 160
    height: int = 40

    def _rect(self, i: int) -> pygame.Rect:
        x, y = self.origin
        return pygame.Rect(x + i * (self.width + 10), y, self.width, self.height)

    def handle_event(self, event: pygame.event.Event) -> bool:
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            for i, choice in enumerate(self.choices):
                if self._rect(i).collidepoint(event.pos) and choice != self.value:
                    self.value = choice
                    self.on_change(choice)
                    return True
        return False

    def draw(self, screen: pygame.Surface, font: pygame.font.Font) -> None:
        for i, choice in enumerate(self.choices):
            rect = self._rect(i)
            pygame.draw.rect(screen, (40, 40, 40), rect, border_radius=8)
            pygame.draw.rect(screen, (0, 0, 0), rect, width=2, border_radius=8)
            dot = (rect.x + 20, rect.centery)
            pygame.draw.circle(screen, (220, 220, 220), dot, 8, width=2)
            if choice == self.value:
                pygame.draw.circle(screen, (220, 220, 220), dot, 4)
            draw_text(screen, font, choice.capitalize(), (rect.x + 36, rect.y + 11))
