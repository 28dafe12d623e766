"""
Registry of path generators.

A path generator is any callable (width, height) -> ordered points, first
point = path start, last point = the center end. Built-in curves register
themselves here at import time; level files refer to them by name.

Examples:
    >>> from games.SpiralChain.generators import PathGeneratorRegistry
    >>> PathGeneratorRegistry.list_generators()
    ['cardioid', 'infinity', 'serpent', 'spiral']
    >>> points = PathGeneratorRegistry.get('spiral')(800, 600)
"""
import math
from typing import Dict, List, Optional, Tuple

from models import PathGenerator
from coil.logging import get_logger
from coil.lua import FormulaSandbox
from coil.lua.formula import frange
from games.SpiralChain import config

log = get_logger('generators')

Points = List[Tuple[float, float]]


class PathGeneratorRegistry:
    """Central registry of named path generators.

    Class Attributes:
        _generators: Dictionary mapping generator names to callables
    """

    _generators: Dict[str, PathGenerator] = {}

    @classmethod
    def register(cls, name: str, generator: PathGenerator) -> None:
        """Register a generator under a name.

        An existing generator with the same name is replaced.
        """
        cls._generators[name] = generator

    @classmethod
    def get(cls, name: str) -> PathGenerator:
        """Retrieve a generator by name.

        Raises:
            ValueError: If no generator with the given name is registered
        """
        if name not in cls._generators:
            available = ", ".join(cls.list_generators())
            raise ValueError(
                f"Unknown path generator: '{name}'. "
                f"Available generators: {available if available else 'none'}"
            )
        return cls._generators[name]

    @classmethod
    def list_generators(cls) -> List[str]:
        """Sorted list of registered generator names."""
        return sorted(cls._generators.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._generators

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove a generator (no-op if absent)."""
        cls._generators.pop(name, None)


# =============================================================================
# Built-in curves
# =============================================================================

def spiral_path(width: int, height: int) -> Points:
    """Archimedean spiral r = a * theta, outermost point first."""
    cx, cy = width / 2, height / 2
    start_theta = math.pi * 2.5
    end_theta = math.pi * 16
    margin = 40
    a = max(1.0, (min(width, height) / 2 - margin) / end_theta)

    points = [(cx + a * theta * math.cos(theta), cy + a * theta * math.sin(theta))
              for theta in frange(start_theta, end_theta, 0.02)]
    points.reverse()
    return points


def cardioid_path(width: int, height: int) -> Points:
    """Heart-shaped cardioid r = s * (1 - sin(theta))."""
    scale = min(width, height) * 0.3
    cx = width / 2
    cy = height / 2 - scale * 0.8

    points = []
    for theta in frange(0.0, math.pi * 2, 0.01):
        r = scale * (1 - math.sin(theta))
        points.append((cx + r * math.cos(theta), cy - r * math.sin(theta)))
    return points


def infinity_path(width: int, height: int) -> Points:
    """Figure-eight lying on its side, shifted slightly down."""
    scale_x = width * 0.4
    scale_y = height * 0.3
    cx, cy = width / 2, height / 2

    return [(cx + scale_x * math.sin(t), cy + scale_y * math.sin(2 * t) + height * 0.1)
            for t in frange(0.0, math.pi * 2, 0.01)]


def serpent_path(width: int, height: int) -> Points:
    """Left-to-right wave whose amplitude is modulated by a slower cosine."""
    margin = 50
    span = width - margin * 2
    if span <= 0:
        return []
    amplitude = height * 0.35

    points = []
    for x in range(margin, width - margin + 1, 2):
        nx = (x - margin) / span
        y = height * 0.3 + amplitude * math.sin(nx * math.pi * 4) * math.cos(nx * math.pi * 3)
        points.append((float(x), y))
    return points


PathGeneratorRegistry.register('spiral', spiral_path)
PathGeneratorRegistry.register('cardioid', cardioid_path)
PathGeneratorRegistry.register('infinity', infinity_path)
PathGeneratorRegistry.register('serpent', serpent_path)


# =============================================================================
# User formulas
# =============================================================================

def formula_generator(
    formula_x: str,
    formula_y: str,
    sandbox: Optional[FormulaSandbox] = None,
    t_start: float = config.FORMULA_T_START,
    t_end: float = config.FORMULA_T_END,
    t_step: float = config.FORMULA_T_STEP,
) -> PathGenerator:
    """Build a generator from two formulas x(t), y(t).

    Both formulas are compiled immediately, so a bad formula is reported
    before any level starts. Results are offsets from the screen center.
    Samples where either formula is not finite are skipped.

    Raises:
        FormulaError: If either formula is rejected
    """
    sandbox = sandbox or FormulaSandbox()
    fx = sandbox.compile(formula_x, name='x')
    fy = sandbox.compile(formula_y, name='y')
    samples = frange(t_start, t_end, t_step)

    def generate(width: int, height: int) -> Points:
        cx, cy = width / 2, height / 2
        points = []
        for t in samples:
            x = fx(t, width, height)
            y = fy(t, width, height)
            if math.isfinite(x) and math.isfinite(y):
                points.append((cx + x, cy + y))
        if len(points) < len(samples):
            log.debug("Formula path dropped %d non-finite samples", len(samples) - len(points))
        return points

    return generate
