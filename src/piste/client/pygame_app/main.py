from __future__ import annotations

import argparse

import pygame  # type: ignore[import-not-found]

from piste.paths import get_paths
from piste.services.content import ContentService
from piste.services.history import HistoryService

from .app import App, Fonts, GameContext
from .scenes.boot import BootScene


def main() -> int:
    parser = argparse.ArgumentParser(prog="piste")
    parser.add_argument("--width", type=int, default=1024)
    parser.add_argument("--height", type=int, default=768)
    parser.add_argument("--seed", type=int, default=None, help="fixed seed for the first match")
    args = parser.parse_args()

    pygame.init()
    screen = pygame.display.set_mode((args.width, args.height))
    pygame.display.set_caption("Piste")

    clock = pygame.time.Clock()
    paths = get_paths()

    ctx = GameContext(
        screen=screen,
        clock=clock,
        paths=paths,
        fonts=Fonts.load(),
        content=ContentService(data_dir=paths.data_dir, schema_dir=paths.schema_dir),
        history=HistoryService(paths.userdata_dir / "history.jsonl"),
        seed=args.seed,
    )

    app = App(ctx, BootScene(ctx))
    return app.run()


if __name__ == "__main__":
    raise SystemExit(main())
