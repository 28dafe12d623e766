"""
Launcher - the shooter at the center of the screen.

Holds the ball about to be fired (current) and a preview ball (on deck).
Firing promotes the on-deck ball and draws a fresh random one. Swapping
exchanges the two after a short animation.
"""
import math
import random
from enum import Enum
from typing import Optional, Sequence

from models import LauncherSnapshot, Point2D, RGB
from games.SpiralChain import config
from games.SpiralChain.projectile import Projectile


class SwapState(Enum):
    """Swap animation state."""
    IDLE = "idle"
    SWAPPING = "swapping"


class Launcher:
    """Aims, fires and swaps.

    Args:
        position: Launcher center
        colors: Palette to draw new balls from
        rng: Random source for new ball colors
        radius: Launcher body radius; projectiles spawn on its rim
        ball_radius: Radius given to fired projectiles
        projectile_speed: Projectile speed in pixels per second
        swap_duration: Seconds the swap animation takes
    """

    def __init__(
        self,
        position: Point2D,
        colors: Sequence[RGB],
        rng: Optional[random.Random] = None,
        radius: float = config.LAUNCHER_RADIUS,
        ball_radius: float = config.BALL_RADIUS,
        projectile_speed: float = config.PROJECTILE_SPEED,
        swap_duration: float = config.SWAP_DURATION,
    ):
        self.position = position
        self.radius = radius
        self.ball_radius = ball_radius
        self.projectile_speed = projectile_speed
        self.swap_duration = swap_duration
        self.angle = 0.0

        self._colors = list(colors)
        self._rng = rng or random.Random()
        self._swap_state = SwapState.IDLE
        self._swap_timer = 0.0

        self.current_color: Optional[RGB] = None
        self.on_deck_color: Optional[RGB] = None

    def load(self) -> None:
        """Seed both the current and the on-deck ball with random colors."""
        self.current_color = self._random_color()
        self.on_deck_color = self._random_color()

    def _random_color(self) -> RGB:
        return self._rng.choice(self._colors)

    # =========================================================================
    # Actions
    # =========================================================================

    def aim(self, target: Point2D) -> float:
        """Point the barrel at target. Returns the new angle in radians."""
        self.angle = math.atan2(target.y - self.position.y, target.x - self.position.x)
        return self.angle

    def fire(self) -> Optional[Projectile]:
        """Fire the current ball along the aim angle.

        Returns:
            The new projectile, or None when nothing is loaded
        """
        if self.current_color is None:
            return None

        projectile = Projectile.launched(
            color=self.current_color,
            origin=self.position,
            angle=self.angle,
            offset=self.radius,
            speed=self.projectile_speed,
            radius=self.ball_radius,
        )
        self.current_color = self.on_deck_color
        self.on_deck_color = self._random_color()
        if self.current_color is None:
            self.current_color = self._random_color()
        return projectile

    def request_swap(self) -> bool:
        """Start a swap animation.

        Ignored (returns False) while a swap is running or a ball is missing.
        """
        if self._swap_state is SwapState.SWAPPING:
            return False
        if self.current_color is None or self.on_deck_color is None:
            return False
        self._swap_state = SwapState.SWAPPING
        self._swap_timer = self.swap_duration
        return True

    def update(self, dt: float) -> None:
        """Advance the swap animation; exchange the balls when it ends."""
        if self._swap_state is not SwapState.SWAPPING:
            return
        self._swap_timer -= dt
        if self._swap_timer <= 0:
            self.current_color, self.on_deck_color = self.on_deck_color, self.current_color
            self._swap_state = SwapState.IDLE
            self._swap_timer = 0.0

    def move_to(self, position: Point2D) -> None:
        """Recenter after a viewport resize."""
        self.position = position

    # =========================================================================
    # State
    # =========================================================================

    @property
    def swap_state(self) -> SwapState:
        return self._swap_state

    @property
    def is_swapping(self) -> bool:
        return self._swap_state is SwapState.SWAPPING

    @property
    def swap_progress(self) -> float:
        """Seconds left in the swap animation (0 when idle)."""
        return self._swap_timer

    @property
    def barrel_tip(self) -> Point2D:
        length = self.radius + config.BARREL_EXTRA
        return Point2D(
            x=self.position.x + math.cos(self.angle) * length,
            y=self.position.y + math.sin(self.angle) * length,
        )

    def snapshot(self) -> LauncherSnapshot:
        return LauncherSnapshot(
            position=self.position,
            angle=self.angle,
            radius=self.radius,
            current_color=self.current_color,
            on_deck_color=self.on_deck_color,
            swap_progress=self._swap_timer,
            swap_duration=self.swap_duration,
            barrel_tip=self.barrel_tip,
        )
