"""
ChainSpawner - feeds new balls into the head of the chain.

The whole color sequence is drawn from the palette when the level starts.
One color is released per spawn interval until the queue runs dry.
"""
import random
from collections import deque
from typing import Iterable, Optional, Sequence

from models import RGB
from games.SpiralChain import config


class ChainSpawner:
    """Timed queue of pending ball colors."""

    def __init__(
        self,
        colors: Iterable[RGB],
        interval: float = config.SPAWN_INTERVAL,
    ):
        """Initialize the spawner.

        Args:
            colors: Colors to release, in order
            interval: Seconds between releases
        """
        self._queue = deque(colors)
        self.interval = interval
        self._timer = 0.0
        self.spawned = 0

    @classmethod
    def random(
        cls,
        count: int,
        palette: Sequence[RGB],
        rng: Optional[random.Random] = None,
        interval: float = config.SPAWN_INTERVAL,
    ) -> 'ChainSpawner':
        """Spawner with `count` colors drawn uniformly from palette."""
        rng = rng or random.Random()
        return cls([rng.choice(palette) for _ in range(count)], interval=interval)

    @property
    def pending(self) -> int:
        """Colors still waiting to be spawned."""
        return len(self._queue)

    @property
    def is_complete(self) -> bool:
        return not self._queue

    def update(self, dt: float) -> Optional[RGB]:
        """Accumulate time and release at most one color.

        Returns:
            The color to prepend to the chain, or None
        """
        if not self._queue:
            return None
        self._timer += dt
        if self._timer < self.interval:
            return None
        self._timer = 0.0
        self.spawned += 1
        return self._queue.popleft()
