"""
ChainBall - one colored ball riding the path.

A ball is either traveling (a normal chain member) or vanishing (part of a
matched run, fading out while still holding its slot). Once its vanish
progress runs out the engine splices it out and it is never reused.
"""
import itertools
import math
from dataclasses import dataclass, field
from enum import Enum

from models import BallSnapshot, Point2D, RGB
from games.SpiralChain.path import ChainPath

_ids = itertools.count(1)


class BallPhase(Enum):
    """Lifecycle of a chain ball."""
    TRAVELING = "traveling"
    VANISHING = "vanishing"


@dataclass
class ChainBall:
    """A ball in the chain.

    Attributes:
        color: Ball color
        path_index: Fractional index along the path
        radius: Ball radius in pixels
        x, y: Screen position derived from path_index
        phase: TRAVELING or VANISHING
        vanish_progress: 1 when vanishing starts, removed at 0
        id: Stable identifier, unique per process
    """
    color: RGB
    path_index: float = 0.0
    radius: float = 12.0
    x: float = 0.0
    y: float = 0.0
    phase: BallPhase = BallPhase.TRAVELING
    vanish_progress: float = 1.0
    id: int = field(default_factory=lambda: next(_ids))

    @property
    def is_vanishing(self) -> bool:
        return self.phase is BallPhase.VANISHING

    @property
    def position(self) -> Point2D:
        return Point2D(x=self.x, y=self.y)

    def update_position(self, path: ChainPath) -> None:
        """Recompute screen position from path_index."""
        self.x, self.y = path.xy_at(self.path_index)

    def start_vanishing(self) -> None:
        """Enter the vanishing phase with a full timer."""
        self.phase = BallPhase.VANISHING
        self.vanish_progress = 1.0

    def tick_vanish(self, dt: float, rate: float) -> bool:
        """Advance the fade. Returns True once the ball should be removed."""
        if not self.is_vanishing:
            return False
        self.vanish_progress -= dt * rate
        return self.vanish_progress <= 0

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.x - x, self.y - y)

    def snapshot(self) -> BallSnapshot:
        return BallSnapshot(
            id=self.id,
            color=self.color,
            path_index=self.path_index,
            position=self.position,
            vanishing=self.is_vanishing,
            vanish_progress=max(0.0, min(1.0, self.vanish_progress)),
            radius=self.radius,
        )
