"""Shared fixtures for SpiralChain tests."""
import os

# Headless pygame for rendering tests
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')

import random

import pytest

from models import LevelConfig

RED = (255, 0, 0)
BLUE = (0, 0, 255)
GREEN = (0, 255, 0)


def line_path(width, height):
    """Horizontal line, one point per pixel: index == distance from start."""
    return [(float(x), 0.0) for x in range(0, 1001)]


@pytest.fixture
def make_level():
    """Factory for LevelConfig with test-friendly defaults.

    A travel time of 1001000 ms on the 1001-point line moves the head one
    index per second.
    """
    def _make(path_generator=line_path, travel_time_ms=1001000, ball_count=5,
              palette=(RED, BLUE, GREEN), **kwargs):
        return LevelConfig(
            name=kwargs.pop('name', 'Test Line'),
            path_generator=path_generator,
            travel_time_ms=travel_time_ms,
            target_ball_count=ball_count,
            palette=list(palette),
            **kwargs,
        )
    return _make


@pytest.fixture
def make_engine(make_level):
    """Factory for a ChainEngine whose chain is given head to tail.

    The spawner prepends each color at the head, so the spawn order is the
    reverse of the requested chain.
    """
    from games.SpiralChain.chain import ChainEngine

    def _make(chain=(), width=1000, height=600, level=None, **kwargs):
        level = level or make_level()
        return ChainEngine(
            level, width, height,
            rng=random.Random(42),
            spawn_colors=list(reversed(chain)),
            spawn_interval=kwargs.pop('spawn_interval', 0.1),
            **kwargs,
        )
    return _make


@pytest.fixture
def spawn_all():
    """Run the engine until the spawn queue is empty."""
    def _spawn(engine, dt=0.1, max_ticks=500):
        for _ in range(max_ticks):
            if engine.spawner.is_complete:
                return engine
            engine.update(dt)
        raise AssertionError("spawner never finished")
    return _spawn
