"""
Projectile - a ball fired from the launcher.

Flies in a straight line until it hits a chain ball (and becomes part of
the chain) or leaves the play area.
"""
import math
from dataclasses import dataclass

from models import Point2D, ProjectileSnapshot, Rectangle, RGB


@dataclass
class Projectile:
    """A free-flying ball.

    Attributes:
        color: Color of the ball it becomes on impact
        x, y: Current position
        vx, vy: Velocity in pixels per second
        radius: Collision radius
    """
    color: RGB
    x: float
    y: float
    vx: float
    vy: float
    radius: float = 12.0

    @classmethod
    def launched(cls, color: RGB, origin: Point2D, angle: float,
                 offset: float, speed: float, radius: float) -> 'Projectile':
        """Create a projectile `offset` pixels from origin heading along angle."""
        dx, dy = math.cos(angle), math.sin(angle)
        return cls(
            color=color,
            x=origin.x + dx * offset,
            y=origin.y + dy * offset,
            vx=dx * speed,
            vy=dy * speed,
            radius=radius,
        )

    def update(self, dt: float) -> None:
        self.x += self.vx * dt
        self.y += self.vy * dt

    def is_out_of_bounds(self, bounds: Rectangle) -> bool:
        """True once the center leaves bounds."""
        return not (bounds.left <= self.x <= bounds.right and
                    bounds.top <= self.y <= bounds.bottom)

    def distance_to(self, x: float, y: float) -> float:
        return math.hypot(self.x - x, self.y - y)

    @property
    def position(self) -> Point2D:
        return Point2D(x=self.x, y=self.y)

    def snapshot(self) -> ProjectileSnapshot:
        return ProjectileSnapshot(
            color=self.color,
            position=self.position,
            velocity=Point2D(x=self.vx, y=self.vy),
            radius=self.radius,
        )
