"""
Pydantic models for the chain game.

- primitives: Point2D/Vector2D, Resolution, Rectangle and the RGB alias
- chain: level configuration and the per-frame snapshots the renderer reads

    >>> from models import LevelConfig, Point2D
"""

from .primitives import (
    RGB,
    Point2D,
    Vector2D,
    Resolution,
    Rectangle,
)

from .chain import (
    PathGenerator,
    LevelConfig,
    BallSnapshot,
    LauncherSnapshot,
    ProjectileSnapshot,
    ChainSnapshot,
    parse_color,
)

__all__ = [
    "RGB",
    "Point2D",
    "Vector2D",
    "Resolution",
    "Rectangle",
    "PathGenerator",
    "LevelConfig",
    "BallSnapshot",
    "LauncherSnapshot",
    "ProjectileSnapshot",
    "ChainSnapshot",
    "parse_color",
]
