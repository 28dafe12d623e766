"""
Geometry and color primitives shared by the chain game.

Every screen coordinate (path samples, ball centers, projectile velocities,
the aim target) is a Point2D. Resolution describes the viewport and
Rectangle the play area projectiles are culled against.
"""

import math
from typing import Tuple

from pydantic import BaseModel, Field, computed_field, ConfigDict


# pygame-style color, each channel 0-255
RGB = Tuple[int, int, int]


class Point2D(BaseModel):
    """Frozen (x, y) pair in screen pixels, y growing downward.

    Examples:
        >>> Point2D(x=0.0, y=0.0).distance_to(Point2D(x=3.0, y=4.0))
        5.0
    """
    x: float
    y: float

    model_config = ConfigDict(frozen=True)

    def distance_to(self, other: 'Point2D') -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def lerp(self, other: 'Point2D', t: float) -> 'Point2D':
        """Point a fraction t of the way to other."""
        return Point2D(x=self.x + (other.x - self.x) * t, y=self.y + (other.y - self.y) * t)

    def __str__(self) -> str:
        return f"Point2D(x={self.x:.2f}, y={self.y:.2f})"


# Same type, used where the pair is a velocity or direction
Vector2D = Point2D


class Resolution(BaseModel):
    """Viewport size in whole pixels; both sides positive."""
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    @property
    def center(self) -> Point2D:
        """The launcher's position."""
        return Point2D(x=self.width / 2, y=self.height / 2)

    def __str__(self) -> str:
        return f"Resolution({self.width}x{self.height})"


class Rectangle(BaseModel):
    """Axis-aligned box anchored at its top-left corner.

    Examples:
        >>> play_area = Rectangle.from_resolution(Resolution(width=800, height=600))
        >>> play_area.expanded(10).left
        -10.0
    """
    x: float
    y: float
    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def from_resolution(cls, resolution: Resolution) -> 'Rectangle':
        return cls(x=0.0, y=0.0, width=resolution.width, height=resolution.height)

    @property
    def left(self) -> float:
        return self.x

    @property
    def top(self) -> float:
        return self.y

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains_point(self, point: Point2D) -> bool:
        """Inclusive of the edges."""
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def expanded(self, margin: float) -> 'Rectangle':
        """The same box pushed out by margin on all four sides."""
        return Rectangle(x=self.x - margin, y=self.y - margin,
                         width=self.width + 2 * margin, height=self.height + 2 * margin)

    def __str__(self) -> str:
        return f"Rectangle(x={self.x:.2f}, y={self.y:.2f}, w={self.width:.2f}, h={self.height:.2f})"
