"""
ChainPath - the curve the chain travels along.

A path is an ordered list of points. Balls address it with a fractional
index in [0, max_index]: index 0 is the outer start, max_index is the
center end where the chain is lost. A fractional index maps to a point by
linear interpolation between its neighbouring samples.
"""
import math
from typing import Iterable, List, Tuple, Union

from models import Point2D, PathGenerator

PointLike = Union[Point2D, Tuple[float, float], dict]


class PathError(ValueError):
    """Raised when a path generator produces no usable points."""
    pass


def _to_point(value: PointLike) -> Point2D:
    if isinstance(value, Point2D):
        return value
    if isinstance(value, dict):
        return Point2D(x=float(value['x']), y=float(value['y']))
    x, y = value
    return Point2D(x=float(x), y=float(y))


class ChainPath:
    """Immutable polyline with fractional indexing.

    Args:
        points: Ordered samples, first = path start, last = center.
            Accepts Point2D, (x, y) pairs or {'x': .., 'y': ..} dicts.

    Raises:
        PathError: If points is empty or contains a non-finite coordinate
    """

    def __init__(self, points: Iterable[PointLike]):
        try:
            converted = [_to_point(p) for p in points]
        except (TypeError, ValueError, KeyError) as e:
            raise PathError(f"Malformed path point: {e}") from e

        if not converted:
            raise PathError("Path generator produced no points")
        for i, p in enumerate(converted):
            if not (math.isfinite(p.x) and math.isfinite(p.y)):
                raise PathError(f"Path point {i} is not finite: {p}")

        self._points: Tuple[Point2D, ...] = tuple(converted)
        self._xs: List[float] = [p.x for p in converted]
        self._ys: List[float] = [p.y for p in converted]

    @classmethod
    def from_generator(cls, generator: PathGenerator, width: int, height: int) -> 'ChainPath':
        """Build a path by calling a generator for a viewport size."""
        try:
            points = generator(width, height)
        except PathError:
            raise
        except (ArithmeticError, LookupError, ValueError, TypeError) as e:
            raise PathError(f"Path generator failed: {e}") from e
        if points is None:
            raise PathError("Path generator returned nothing")
        return cls(points)

    @property
    def points(self) -> Tuple[Point2D, ...]:
        return self._points

    @property
    def max_index(self) -> int:
        """Largest valid index (the loss boundary)."""
        return len(self._points) - 1

    @property
    def end(self) -> Point2D:
        return self._points[-1]

    def __len__(self) -> int:
        return len(self._points)

    def length(self) -> float:
        """Total arc length in pixels."""
        xs, ys = self._xs, self._ys
        return sum(math.hypot(xs[i + 1] - xs[i], ys[i + 1] - ys[i])
                   for i in range(len(xs) - 1))

    def clamp(self, index: float) -> float:
        """Clamp an index into [0, max_index]."""
        return max(0.0, min(index, float(self.max_index)))

    def xy_at(self, index: float) -> Tuple[float, float]:
        """Interpolated (x, y) at a fractional index. Never fails."""
        clamped = self.clamp(index) if not math.isnan(index) else 0.0
        i0 = int(math.floor(clamped))
        i1 = min(i0 + 1, self.max_index)
        t = clamped - i0
        x0, y0 = self._xs[i0], self._ys[i0]
        return (x0 + (self._xs[i1] - x0) * t,
                y0 + (self._ys[i1] - y0) * t)

    def point_at(self, index: float) -> Point2D:
        """Interpolated point at a fractional index. Never fails."""
        x, y = self.xy_at(index)
        return Point2D(x=x, y=y)

    def advance(self, from_index: float, distance: float) -> float:
        """Index reached by walking `distance` pixels forward from `from_index`.

        Walks segment by segment from the starting position. Stops at
        max_index when the path runs out. A non-positive distance returns
        from_index unchanged, as does a path with fewer than two points.
        """
        if distance <= 0 or len(self._points) < 2:
            return from_index

        xs, ys = self._xs, self._ys
        max_index = self.max_index
        start = self.clamp(from_index)
        i = int(math.floor(start))
        t = start - i
        if i >= max_index:
            return float(max_index)

        cur_x = xs[i] + (xs[i + 1] - xs[i]) * t
        cur_y = ys[i] + (ys[i + 1] - ys[i]) * t
        remaining = distance

        while remaining > 0 and i < max_index:
            seg_len = math.hypot(xs[i + 1] - xs[i], ys[i + 1] - ys[i])
            walked = math.hypot(cur_x - xs[i], cur_y - ys[i])
            seg_remaining = max(0.0, seg_len - walked)
            if remaining <= seg_remaining:
                fraction = (walked + remaining) / seg_len
                return i + max(0.0, min(fraction, 1.0))
            remaining -= seg_remaining
            i += 1
            cur_x, cur_y = xs[i], ys[i]

        return float(min(i, max_index))

    def __repr__(self) -> str:
        return f"ChainPath(points={len(self._points)}, length={self.length():.1f})"

