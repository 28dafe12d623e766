"""
Pydantic models for the chain game.

- LevelConfig: validated, immutable level parameters handed to the engine
- *Snapshot: read-only per-frame views of engine state for renderers
"""

from typing import Any, Callable, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .primitives import Point2D, RGB


# (width, height) -> ordered path points, first = path start, last = center
PathGenerator = Callable[[int, int], Sequence[Any]]


def parse_color(value: Any) -> RGB:
    """Normalize a color given as '#rrggbb' or an [r, g, b] sequence.

    Raises:
        ValueError: If the value is not a valid color
    """
    if isinstance(value, str):
        text = value.strip().lstrip('#')
        if len(text) != 6:
            raise ValueError(f"Expected '#rrggbb' color, got {value!r}")
        try:
            return (int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16))
        except ValueError as e:
            raise ValueError(f"Invalid hex color {value!r}") from e

    if isinstance(value, (list, tuple)) and len(value) == 3:
        rgb = tuple(int(c) for c in value)
        if not all(0 <= c <= 255 for c in rgb):
            raise ValueError(f"Color components must be in range [0, 255], got {value!r}")
        return rgb  # type: ignore[return-value]

    raise ValueError(f"Unsupported color value: {value!r}")


class LevelConfig(BaseModel):
    """Validated level configuration.

    Immutable once a run starts. Validation happens at construction so an
    invalid level is rejected before any engine exists.

    Attributes:
        name: Display name
        path_generator: Callable producing the path points for a viewport
        travel_time_ms: Milliseconds for the head ball to cover the whole path
        target_ball_count: Number of balls fed into the chain
        palette: At least two distinct RGB colors
        ball_radius: Radius shared by chain balls and projectiles
    """
    name: str = "Untitled"
    path_generator: PathGenerator
    travel_time_ms: int = Field(..., gt=0)
    target_ball_count: int = Field(..., gt=0)
    palette: List[RGB] = Field(..., min_length=2)
    ball_radius: float = Field(default=12.0, gt=0)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    @field_validator('palette', mode='before')
    @classmethod
    def validate_palette(cls, v: Any) -> List[RGB]:
        """Normalize colors and require them to be distinct."""
        if not isinstance(v, (list, tuple)):
            raise ValueError("Palette must be a list of colors")
        colors = [parse_color(c) for c in v]
        if len(set(colors)) != len(colors):
            raise ValueError(f"Palette colors must be distinct, got {colors}")
        return colors

    @field_validator('path_generator')
    @classmethod
    def validate_generator(cls, v: Any) -> PathGenerator:
        if not callable(v):
            raise ValueError("path_generator must be callable")
        return v


class BallSnapshot(BaseModel):
    """One chain ball as seen by a renderer."""
    id: int
    color: RGB
    path_index: float
    position: Point2D
    vanishing: bool
    vanish_progress: float = Field(..., ge=0, le=1)
    radius: float

    model_config = ConfigDict(frozen=True)


class LauncherSnapshot(BaseModel):
    """Launcher state for drawing."""
    position: Point2D
    angle: float
    radius: float
    current_color: Optional[RGB]
    on_deck_color: Optional[RGB]
    swap_progress: float  # 0 = idle, counts down from swap_duration
    swap_duration: float
    barrel_tip: Point2D

    model_config = ConfigDict(frozen=True)


class ProjectileSnapshot(BaseModel):
    """A projectile in flight."""
    color: RGB
    position: Point2D
    velocity: Point2D
    radius: float

    model_config = ConfigDict(frozen=True)


class ChainSnapshot(BaseModel):
    """Read-only view of one simulated frame.

    Everything a renderer needs: the path polyline, the ordered chain, the
    launcher, projectiles in flight, elapsed time and terminal flags.
    """
    path_points: Tuple[Point2D, ...]
    balls: Tuple[BallSnapshot, ...]
    launcher: LauncherSnapshot
    projectiles: Tuple[ProjectileSnapshot, ...]
    elapsed_time: float
    running: bool
    won: bool
    lost: bool

    model_config = ConfigDict(frozen=True)
