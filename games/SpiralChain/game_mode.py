"""
SpiralChain Game Mode

Colored balls roll along a curve toward the launcher in the middle of the
screen. Fire balls into the chain; three or more touching balls of one
color vanish. Clear the whole chain before it reaches the center.

Controls:
    Left click      fire toward the pointer
    Right click     swap current and on-deck ball (SPACE in main.py)
    Click after the run ends: next campaign level, or restart
"""
import dataclasses
import random
from pathlib import Path
from typing import Any, Dict, List, Optional

import pygame

from models import ChainSnapshot, RGB
from coil.games.base_game import BaseGame
from coil.games.game_state import GameState
from coil.games.input import EventType, InputEvent
from coil.logging import get_logger
from games.SpiralChain import config
from games.SpiralChain.chain import ChainEngine, format_time
from games.SpiralChain.levels import ChainLevelData, ChainLevelLoader

log = get_logger('spiral_chain')

DEFAULT_LEVEL = 'spiral'
ON_DECK_SCALE = 0.6


class SpiralChainMode(BaseGame):
    """SpiralChain game mode - keep the chain away from the center."""

    NAME = "SpiralChain"
    DESCRIPTION = "Match three colors to clear a chain rolling toward the center."
    VERSION = "1.0.0"
    AUTHOR = "Coil Team"

    ARGUMENTS = [
        {
            'name': '--formula-x',
            'type': str,
            'default': None,
            'help': 'Custom path x(t) offset from screen center (use with --formula-y)'
        },
        {
            'name': '--formula-y',
            'type': str,
            'default': None,
            'help': 'Custom path y(t) offset from screen center (use with --formula-x)'
        },
        {
            'name': '--travel-time',
            'type': float,
            'default': None,
            'help': 'Seconds for the head ball to cover the whole path'
        },
        {
            'name': '--ball-count',
            'type': int,
            'default': None,
            'help': 'Number of balls in the chain'
        },
        {
            'name': '--color-count',
            'type': int,
            'default': None,
            'help': 'Number of colors in play (2-6)'
        },
        {
            'name': '--seed',
            'type': int,
            'default': None,
            'help': 'Random seed for ball colors'
        },
    ]

    LEVELS_DIR = Path(__file__).parent / 'levels'

    def __init__(
        self,
        formula_x: Optional[str] = None,
        formula_y: Optional[str] = None,
        travel_time: Optional[float] = None,
        ball_count: Optional[int] = None,
        color_count: Optional[int] = None,
        seed: Optional[int] = None,
        width: int = config.SCREEN_WIDTH,
        height: int = config.SCREEN_HEIGHT,
        **kwargs,
    ):
        """Initialize the game.

        Args:
            formula_x: Custom level x(t), offset from the screen center
            formula_y: Custom level y(t), offset from the screen center
            travel_time: Override travel time in seconds
            ball_count: Override number of balls
            color_count: Override number of colors
            seed: Seed for the color generator
            width: Initial viewport width
            height: Initial viewport height

        Raises:
            ValueError: Only one of formula_x/formula_y given
            FormulaError: A custom formula is rejected
            PathError: The level path has no usable points
        """
        if (formula_x is None) != (formula_y is None):
            raise ValueError("--formula-x and --formula-y must be given together")

        self._overrides: Dict[str, Any] = {
            'travel_time_s': travel_time,
            'ball_count': ball_count,
            'color_count': color_count,
        }
        self._rng = random.Random(seed)
        self._screen_width = width
        self._screen_height = height
        self._level_data: Optional[ChainLevelData] = None
        self._engine: Optional[ChainEngine] = None
        self._runs = 0

        # Loads --level / --level-group through _apply_level_config()
        super().__init__(**kwargs)

        # An explicit --palette replaces the level's colors
        self._palette_override: Optional[List[RGB]] = None
        if kwargs.get('palette') or kwargs.get('color_palette'):
            self._palette_override = list(self._palette.colors)

        if formula_x is not None:
            self._level_data = ChainLevelData.custom(formula_x, formula_y)
        elif self._level_data is None:
            if not (self.has_levels and self._load_level(DEFAULT_LEVEL)):
                self._level_data = ChainLevelData(name="Classic Spiral", generator=DEFAULT_LEVEL)

        self._start_level()

    # =========================================================================
    # Level lifecycle
    # =========================================================================

    def _create_level_loader(self) -> ChainLevelLoader:
        return ChainLevelLoader(self.LEVELS_DIR)

    def _apply_level_config(self, level_data: ChainLevelData) -> None:
        self._level_data = level_data

    def _on_level_transition(self) -> None:
        self._restart()

    def _start_level(self) -> None:
        """Build a fresh engine for the current level."""
        level_data = self._level_data
        if self._palette_override:
            level_data = dataclasses.replace(level_data, palette=self._palette_override)

        level = level_data.to_config(**self._overrides)
        self._engine = ChainEngine(level, self._screen_width, self._screen_height, rng=self._rng)
        self._runs += 1
        log.info("Run %d: %s", self._runs, level.name)

    def _restart(self) -> bool:
        """Start the current level again, keeping the old engine if that fails."""
        try:
            self._start_level()
        except ValueError as e:
            # PathError and FormulaError at the current viewport size
            log.error("Could not start '%s': %s", self._level_data.name, e)
            return False
        return True

    def reset(self) -> None:
        """Restart the current level."""
        self._restart()

    @property
    def engine(self) -> ChainEngine:
        return self._engine

    @property
    def runs(self) -> int:
        """Engines started so far, restarts and campaign levels included."""
        return self._runs

    @property
    def level_name(self) -> str:
        return self._engine.level.name

    # =========================================================================
    # BaseGame interface
    # =========================================================================

    def _get_internal_state(self) -> GameState:
        if self._engine.lost:
            return GameState.GAME_OVER
        if self._engine.won:
            return GameState.WON
        return GameState.PLAYING

    def get_score(self) -> int:
        """Balls cleared this run."""
        return self._engine.stats.balls_cleared

    def handle_input(self, events: List[InputEvent]) -> None:
        """Process input events."""
        for event in events:
            if event.event_type == EventType.AIM:
                self._engine.aim(event.position)
            elif event.event_type == EventType.FIRE:
                if self._engine.running:
                    self._engine.aim(event.position)
                    self._engine.fire()
                else:
                    self._continue()
            elif event.event_type == EventType.SWAP:
                self.request_swap()

    def request_swap(self) -> bool:
        return self._engine.request_swap()

    def _continue(self) -> None:
        """After a run ends: next campaign level on a win, otherwise replay."""
        if self._engine.won and self._level_complete():
            return
        self.reset()

    def update(self, dt: float) -> None:
        """Update game logic."""
        self._engine.update(dt)

    def resize(self, width: int, height: int) -> bool:
        """Follow a window resize.

        A size the level path cannot be drawn at is ignored; the game keeps
        playing at the last usable size.
        """
        if (width, height) == (self._screen_width, self._screen_height):
            return True
        if not self._engine.resize(width, height):
            return False
        self._screen_width, self._screen_height = width, height
        return True

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, screen: pygame.Surface) -> None:
        """Render the game."""
        self.resize(*screen.get_size())
        snapshot = self._engine.snapshot()

        screen.fill(config.BACKGROUND_COLOR)
        self._render_path(screen, snapshot)
        self._render_chain(screen, snapshot)
        self._render_projectiles(screen, snapshot)
        self._render_launcher(screen, snapshot)
        self._render_hud(screen, snapshot)

        if not snapshot.running:
            self._render_game_over(screen, snapshot)

    def _render_path(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        points = [(p.x, p.y) for p in snapshot.path_points]
        if len(points) >= 2:
            pygame.draw.lines(screen, config.PATH_COLOR, False, points, 2)
        if points:
            end = (int(points[-1][0]), int(points[-1][1]))
            pygame.draw.circle(screen, config.ENDPOINT_COLOR, end, 10, 3)

    def _render_chain(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        for ball in snapshot.balls:
            center = (int(ball.position.x), int(ball.position.y))
            if ball.vanishing:
                # Shrink and fade into the background
                t = ball.vanish_progress
                radius = max(1, int(ball.radius * t))
                color = _blend(config.BACKGROUND_COLOR, ball.color, t)
            else:
                radius = int(ball.radius)
                color = ball.color
            pygame.draw.circle(screen, color, center, radius)

    def _render_projectiles(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        for projectile in snapshot.projectiles:
            center = (int(projectile.position.x), int(projectile.position.y))
            pygame.draw.circle(screen, projectile.color, center, int(projectile.radius))

    def _render_launcher(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        launcher = snapshot.launcher
        cx, cy = launcher.position.x, launcher.position.y
        center = (int(cx), int(cy))
        radius = int(launcher.radius)

        pygame.draw.circle(screen, config.LAUNCHER_BODY_COLOR, center, radius)
        pygame.draw.circle(screen, config.LAUNCHER_RIM_COLOR, center, radius, 2)

        tip = (int(launcher.barrel_tip.x), int(launcher.barrel_tip.y))
        pygame.draw.line(screen, config.BARREL_COLOR, center, tip, 4)

        ball_radius = self._engine.ball_radius
        deck = (cx + launcher.radius * 0.8, cy + launcher.radius * 0.8)
        deck_radius = ball_radius * ON_DECK_SCALE

        # 0 when idle, runs 0 -> 1 while swapping
        t = 0.0
        if launcher.swap_progress > 0 and launcher.swap_duration > 0:
            t = 1 - max(0.0, min(1.0, launcher.swap_progress / launcher.swap_duration))

        if launcher.current_color is not None:
            pos = _lerp((cx, cy), deck, t)
            r = ball_radius + (deck_radius - ball_radius) * t
            pygame.draw.circle(screen, launcher.current_color, _int_point(pos), max(1, int(r)))
        if launcher.on_deck_color is not None:
            pos = _lerp(deck, (cx, cy), t)
            r = deck_radius + (ball_radius - deck_radius) * t
            pygame.draw.circle(screen, launcher.on_deck_color, _int_point(pos), max(1, int(r)))

    def _render_hud(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        font_medium = pygame.font.Font(None, 36)
        font_small = pygame.font.Font(None, 24)

        text = font_medium.render(format_time(snapshot.elapsed_time), True, config.HUD_COLOR)
        screen.blit(text, (self._screen_width - text.get_width() - 20, 20))

        text = font_medium.render(self.level_name, True, config.HUD_COLOR)
        screen.blit(text, (20, 20))

        stats = self._engine.stats
        status = (f"Chain {len(snapshot.balls)}  Queue {self._engine.spawner.pending}  "
                  f"Cleared {stats.balls_cleared}")
        text = font_small.render(status, True, (180, 180, 180))
        screen.blit(text, (20, 60))

        if self._current_group:
            group = self._current_group
            progress = f"{group.name} {group.current_index + 1}/{len(group.levels)}"
            text = font_small.render(progress, True, (100, 200, 255))
            screen.blit(text, (20, 85))
            # Levels already cleared in this campaign
            bar = pygame.Rect(30 + text.get_width(), 90, 120, 10)
            pygame.draw.rect(screen, (60, 60, 60), bar, 1)
            filled = int(bar.width * group.progress)
            if filled > 0:
                pygame.draw.rect(screen, (100, 200, 255), (bar.x, bar.y, filled, bar.height))

        hint = "Click to fire, right click or SPACE to swap, R to restart"
        text = font_small.render(hint, True, (100, 100, 100))
        screen.blit(text, (self._screen_width // 2 - text.get_width() // 2, self._screen_height - 30))

    def _render_game_over(self, screen: pygame.Surface, snapshot: ChainSnapshot) -> None:
        overlay = pygame.Surface((self._screen_width, self._screen_height), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 160))
        screen.blit(overlay, (0, 0))

        font_large = pygame.font.Font(None, 96)
        font_small = pygame.font.Font(None, 32)
        center_x = self._screen_width // 2
        center_y = self._screen_height // 2

        if snapshot.won:
            title, color = "YOU WIN!", config.WIN_COLOR
        else:
            title, color = "GAME OVER", config.LOSE_COLOR

        text = font_large.render(title, True, color)
        screen.blit(text, text.get_rect(center=(center_x, center_y - 30)))

        line = f"Time {format_time(snapshot.elapsed_time)}  Cleared {self._engine.stats.balls_cleared}"
        text = font_small.render(line, True, config.HUD_COLOR)
        screen.blit(text, text.get_rect(center=(center_x, center_y + 30)))

        text = font_small.render("Click to continue", True, (150, 150, 150))
        screen.blit(text, text.get_rect(center=(center_x, center_y + 65)))


def _blend(a: RGB, b: RGB, t: float) -> RGB:
    """Mix color a toward b (t=0 -> a, t=1 -> b)."""
    return tuple(int(x + (y - x) * t) for x, y in zip(a, b))


def _lerp(a, b, t: float):
    return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)


def _int_point(p):
    return (int(p[0]), int(p[1]))
