"""Tests for the path generator registry and formula paths."""
import math

import pytest

from coil.lua import FormulaError
from games.SpiralChain.generators import (
    PathGeneratorRegistry,
    formula_generator,
    serpent_path,
    spiral_path,
)
from games.SpiralChain.path import ChainPath, PathError

BUILTINS = ['cardioid', 'infinity', 'serpent', 'spiral']


class TestRegistry:
    """Test generator lookup."""

    def test_builtins_registered(self):
        for name in BUILTINS:
            assert PathGeneratorRegistry.is_registered(name)
        assert set(BUILTINS) <= set(PathGeneratorRegistry.list_generators())

    def test_unknown_lists_available(self):
        with pytest.raises(ValueError, match="Available generators"):
            PathGeneratorRegistry.get('zigzag')

    def test_register_and_unregister(self):
        def tiny(width, height):
            return [(0.0, 0.0), (1.0, 1.0)]

        PathGeneratorRegistry.register('tiny', tiny)
        try:
            assert PathGeneratorRegistry.get('tiny') is tiny
        finally:
            PathGeneratorRegistry.unregister('tiny')
        assert not PathGeneratorRegistry.is_registered('tiny')


class TestBuiltinCurves:
    """Test the built-in curves produce usable paths."""

    @pytest.mark.parametrize("name", BUILTINS)
    def test_curve_builds_a_path(self, name):
        path = ChainPath.from_generator(PathGeneratorRegistry.get(name), 800, 600)
        assert len(path) > 100
        assert path.length() > 0

    def test_spiral_ends_at_center(self):
        points = spiral_path(800, 600)
        start, end = points[0], points[-1]
        assert math.hypot(start[0] - 400, start[1] - 300) > math.hypot(end[0] - 400, end[1] - 300)

    def test_spiral_fits_viewport(self):
        for x, y in spiral_path(800, 600):
            assert 0 <= x <= 800
            assert 0 <= y <= 600

    def test_serpent_too_narrow(self):
        assert serpent_path(80, 600) == []
        with pytest.raises(PathError):
            ChainPath.from_generator(serpent_path, 80, 600)


class TestFormulaGenerator:
    """Test paths built from user formulas."""

    def test_offsets_from_center(self):
        generate = formula_generator("t", "0")
        points = generate(800, 600)
        assert len(points) == 1251
        assert points[0] == pytest.approx((400.0, 300.0))
        assert points[-1] == pytest.approx((412.5, 300.0))

    def test_uses_viewport_size(self):
        generate = formula_generator("width / 4", "-height / 4")
        assert generate(800, 600)[0] == pytest.approx((600.0, 150.0))

    def test_non_finite_samples_skipped(self):
        generate = formula_generator("1 / (t - 1)", "0")
        assert len(generate(800, 600)) == 1250

    def test_all_non_finite_is_path_error(self):
        generate = formula_generator("t / 0", "0")
        with pytest.raises(PathError):
            ChainPath.from_generator(generate, 800, 600)

    def test_rejected_formula_fails_immediately(self):
        with pytest.raises(FormulaError):
            formula_generator("t", "__import__('os')")
