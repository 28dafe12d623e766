#!/usr/bin/env python3
"""SpiralChain - Standalone entry point.

Match three colors to clear a chain of balls before it rolls into the
launcher at the center of the screen.

Usage:
    python -m games.SpiralChain.main
    python -m games.SpiralChain.main --level cardioid --color-count 4
    python -m games.SpiralChain.main --level-group campaign
    python -m games.SpiralChain.main --formula-x "200*cos(t)*(1-t/14)" --formula-y "200*sin(t)*(1-t/14)"

Keys: SPACE swaps, R restarts the level, ESC quits.
"""
import argparse
import os
import sys
from typing import List, Optional

import pygame

# Add project root to path
_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
if _root not in sys.path:
    sys.path.insert(0, _root)

from coil.games.input import InputManager
from coil.games.input.sources import MouseInputSource
from coil.logging import close_all_sinks, create_sink_for_environment, get_logger, register_sink
from games.SpiralChain import config
from games.SpiralChain.game_mode import SpiralChainMode

log = get_logger('spiral_chain')


def build_parser() -> argparse.ArgumentParser:
    """Parser for SpiralChainMode.get_arguments()."""
    parser = argparse.ArgumentParser(prog='spiral-chain', description=SpiralChainMode.DESCRIPTION)
    for arg_def in SpiralChainMode.get_arguments():
        options = {key: value for key, value in arg_def.items() if key != 'name'}
        if 'action' in options:
            # store_true and friends reject type=
            options.pop('type', None)
        parser.add_argument(arg_def['name'], **options)
    return parser


def _on_key(game: SpiralChainMode, key: int) -> bool:
    """Apply a keyboard shortcut. Returns False when the player quits."""
    if key == pygame.K_ESCAPE:
        return False
    if key == pygame.K_r:
        game.reset()
    elif key == pygame.K_SPACE:
        game.request_swap()
    return True


def run(game: SpiralChainMode) -> None:
    """Window loop: input, update, render at config.FPS until closed."""
    pygame.init()
    flags = pygame.RESIZABLE if config.RESIZABLE else 0
    screen = pygame.display.set_mode((config.SCREEN_WIDTH, config.SCREEN_HEIGHT), flags)
    pygame.display.set_caption(SpiralChainMode.NAME)

    inputs = InputManager(MouseInputSource())
    clock = pygame.time.Clock()
    playing = True
    try:
        while playing:
            dt = clock.tick(config.FPS) / 1000.0
            inputs.update(dt)

            # Only non-mouse events are left on the queue
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    playing = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode(event.size, flags)
                elif event.type == pygame.KEYDOWN:
                    playing = _on_key(game, event.key) and playing

            game.handle_input(inputs.get_events())
            game.update(dt)
            game.render(screen)
            pygame.display.flip()
    finally:
        pygame.quit()


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    game_kwargs = {name: value for name, value in vars(args).items() if value is not None}

    try:
        game = SpiralChainMode(width=config.SCREEN_WIDTH, height=config.SCREEN_HEIGHT, **game_kwargs)
    except ValueError as e:
        # FormulaError and PathError are ValueErrors too
        print(f"ERROR: Failed to start {SpiralChainMode.NAME}: {e}")
        return 1

    register_sink('chain', create_sink_for_environment('chain'))
    try:
        run(game)
    finally:
        close_all_sinks()
    log.info("Exited after %d run(s)", game.runs)
    return 0


if __name__ == "__main__":
    sys.exit(main())
