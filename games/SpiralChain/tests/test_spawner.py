"""Tests for ChainSpawner."""
import random

from games.SpiralChain.spawner import ChainSpawner

R = (255, 0, 0)
B = (0, 0, 255)
G = (0, 255, 0)


class TestRelease:
    """Test timed release of colors."""

    def test_releases_in_order(self):
        spawner = ChainSpawner([R, B, G], interval=0.1)
        released = [spawner.update(0.1) for _ in range(3)]
        assert released == [R, B, G]
        assert spawner.is_complete
        assert spawner.spawned == 3

    def test_waits_for_interval(self):
        spawner = ChainSpawner([R, B], interval=0.5)
        assert spawner.update(0.2) is None
        assert spawner.update(0.2) is None
        assert spawner.update(0.2) == R
        assert spawner.pending == 1

    def test_one_release_per_update(self):
        spawner = ChainSpawner([R, B, G], interval=0.1)
        assert spawner.update(1.0) == R
        assert spawner.pending == 2

    def test_timer_resets_after_release(self):
        spawner = ChainSpawner([R, B], interval=0.5)
        assert spawner.update(0.9) == R
        assert spawner.update(0.1) is None

    def test_empty_queue(self):
        spawner = ChainSpawner([], interval=0.1)
        assert spawner.is_complete
        assert spawner.update(1.0) is None
        assert spawner.spawned == 0


class TestRandom:
    """Test random color sequences."""

    def test_count_and_palette(self):
        spawner = ChainSpawner.random(40, [R, B], random.Random(1))
        assert spawner.pending == 40
        colors = [spawner.update(spawner.interval) for _ in range(40)]
        assert set(colors) <= {R, B}

    def test_seeded_sequences_repeat(self):
        first = ChainSpawner.random(20, [R, B, G], random.Random(9), interval=1.0)
        second = ChainSpawner.random(20, [R, B, G], random.Random(9), interval=1.0)
        assert [first.update(1.0) for _ in range(20)] == [second.update(1.0) for _ in range(20)]
