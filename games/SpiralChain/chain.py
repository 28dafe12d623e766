"""
ChainEngine - the chain simulation.

Owns the ordered chain of balls and advances it one frame at a time:

    spawn -> head advance -> follower resolution -> positions/vanish
          -> projectiles -> loss check -> win check

Ordering of `balls` is physical ordering along the path: balls[0] is the
head, nearest the path start, and balls[-1] is the tail, nearest the
center. The head is pushed along the path at a constant rate; every other
ball keeps one diameter of arc length behind the ball ahead of it in the
list. A ball that is further along than that spacing allows (a gap left by
removed balls) is pulled back at a bounded rate, and if it closes onto a
ball of its own color the pair is checked for a match.
"""
import math
import random
from dataclasses import asdict, dataclass
from enum import Enum
from typing import List, Optional, Sequence

from models import ChainSnapshot, LevelConfig, Point2D, Rectangle, Resolution, RGB
from coil.logging import emit_record, get_logger
from games.SpiralChain import config
from games.SpiralChain.ball import ChainBall
from games.SpiralChain.launcher import Launcher
from games.SpiralChain.path import ChainPath, PathError
from games.SpiralChain.projectile import Projectile
from games.SpiralChain.spawner import ChainSpawner

log = get_logger('chain')

MIN_MATCH = 3


class RunState(Enum):
    """Outcome of a run."""
    RUNNING = "running"
    WON = "won"
    LOST = "lost"


@dataclass
class ChainStats:
    """Counters for the current run."""
    shots_fired: int = 0
    insertions: int = 0
    matches: int = 0
    balls_cleared: int = 0


def format_time(total_seconds: float) -> str:
    """Format seconds as MM:SS.mmm."""
    total_seconds = max(0.0, total_seconds)
    minutes = int(total_seconds // 60)
    seconds = int(total_seconds % 60)
    millis = int((total_seconds - math.floor(total_seconds)) * 1000)
    return f"{minutes:02d}:{seconds:02d}.{millis:03d}"


class ChainEngine:
    """Simulates one run of a level.

    Args:
        level: Validated level configuration
        width: Viewport width in pixels
        height: Viewport height in pixels
        rng: Random source for spawn and launcher colors
        spawn_colors: Explicit spawn order (overrides random spawning)
        attraction_speed: Gap closing rate in path indices per second
        spawn_interval: Seconds between spawned balls
        vanish_rate: Vanish progress lost per second
        bounds_margin: Pixels outside the viewport before a projectile is dropped

    Raises:
        PathError: If the level's path generator yields no usable points
    """

    def __init__(
        self,
        level: LevelConfig,
        width: int,
        height: int,
        rng: Optional[random.Random] = None,
        spawn_colors: Optional[Sequence[RGB]] = None,
        attraction_speed: float = config.ATTRACTION_SPEED,
        spawn_interval: float = config.SPAWN_INTERVAL,
        vanish_rate: float = config.VANISH_RATE,
        bounds_margin: float = config.OUT_OF_BOUNDS_MARGIN,
    ):
        self.level = level
        self.attraction_speed = attraction_speed
        self.vanish_rate = vanish_rate
        self.bounds_margin = bounds_margin
        self._rng = rng or random.Random()

        self.width = width
        self.height = height
        self.path = ChainPath.from_generator(level.path_generator, width, height)
        self._bounds = self._compute_bounds()
        self._rejected_size: Optional[tuple] = None

        self.balls: List[ChainBall] = []
        self.projectiles: List[Projectile] = []

        if spawn_colors is not None:
            self.spawner = ChainSpawner(spawn_colors, interval=spawn_interval)
        else:
            self.spawner = ChainSpawner.random(
                level.target_ball_count, level.palette, self._rng, interval=spawn_interval,
            )

        self.launcher = Launcher(
            position=self._center(),
            colors=level.palette,
            rng=self._rng,
            ball_radius=level.ball_radius,
        )
        self.launcher.load()

        self.elapsed_time = 0.0
        self.stats = ChainStats()
        self._state = RunState.RUNNING

        log.info("Level '%s' started: %d points, %d balls, %d colors",
                 level.name, len(self.path), self.spawner.pending, len(level.palette))

    def _center(self) -> Point2D:
        return Resolution(width=self.width, height=self.height).center

    def _compute_bounds(self) -> Rectangle:
        viewport = Resolution(width=self.width, height=self.height)
        return Rectangle.from_resolution(viewport).expanded(self.bounds_margin)

    # =========================================================================
    # State
    # =========================================================================

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is RunState.RUNNING

    @property
    def won(self) -> bool:
        return self._state is RunState.WON

    @property
    def lost(self) -> bool:
        return self._state is RunState.LOST

    @property
    def spawning_complete(self) -> bool:
        return self.spawner.is_complete

    @property
    def head_speed(self) -> float:
        """Head speed in path indices per second."""
        return len(self.path) / (self.level.travel_time_ms / 1000)

    @property
    def ball_radius(self) -> float:
        return self.level.ball_radius

    # =========================================================================
    # Player intents
    # =========================================================================

    def aim(self, target: Point2D) -> float:
        return self.launcher.aim(target)

    def fire(self) -> Optional[Projectile]:
        """Fire the launcher's current ball. No-op once the run is over."""
        if not self.running:
            return None
        projectile = self.launcher.fire()
        if projectile is not None:
            self.projectiles.append(projectile)
            self.stats.shots_fired += 1
        return projectile

    def request_swap(self) -> bool:
        if not self.running:
            return False
        return self.launcher.request_swap()

    # =========================================================================
    # Frame update
    # =========================================================================

    def update(self, dt: float) -> None:
        """Advance the simulation by dt seconds. No-op once the run is over."""
        if not self.running:
            return
        dt = max(0.0, dt)

        self.elapsed_time += dt
        self.launcher.update(dt)

        self._spawn(dt)
        if self.balls:
            self._advance_head(dt)
            self._resolve_followers(dt)
            self._update_balls(dt)
        self._update_projectiles(dt)

        tail = self.balls[-1] if self.balls else None
        if tail is not None and tail.path_index >= self.path.max_index:
            self._finish(RunState.LOST)
        elif self.spawner.is_complete and not self.balls:
            self._finish(RunState.WON)

    def _spawn(self, dt: float) -> None:
        color = self.spawner.update(dt)
        if color is None:
            return

        ball = ChainBall(color=color, path_index=0.0, radius=self.level.ball_radius)
        ball.update_position(self.path)
        self.balls.insert(0, ball)

        # Push everything behind the new head out to one diameter apart
        for i in range(1, len(self.balls)):
            leader, follower = self.balls[i - 1], self.balls[i]
            follower.path_index = self.path.advance(leader.path_index, follower.radius * 2)

        if self.spawner.is_complete:
            log.debug("Spawning complete after %d balls", self.spawner.spawned)

    def _advance_head(self, dt: float) -> None:
        head = self.balls[0]
        head.path_index = min(head.path_index + self.head_speed * dt, float(self.path.max_index))

    def _resolve_followers(self, dt: float) -> None:
        for i in range(1, len(self.balls)):
            leader, follower = self.balls[i - 1], self.balls[i]
            target = self.path.advance(leader.path_index, follower.radius * 2)
            current = follower.path_index

            if current > target:
                new_index = max(target, current - self.attraction_speed * dt)
                closed = new_index == target
                follower.path_index = leader.path_index if math.isnan(new_index) else new_index
                if closed and leader.color == follower.color and not follower.is_vanishing:
                    self.check_matches(i - 1)
            else:
                follower.path_index = leader.path_index if math.isnan(target) else target

    def _update_balls(self, dt: float) -> None:
        # Tail to head so removals do not shift unvisited indices
        for i in range(len(self.balls) - 1, -1, -1):
            ball = self.balls[i]
            ball.update_position(self.path)
            if ball.tick_vanish(dt, self.vanish_rate):
                del self.balls[i]
                self.stats.balls_cleared += 1

    def _update_projectiles(self, dt: float) -> None:
        for i in range(len(self.projectiles) - 1, -1, -1):
            projectile = self.projectiles[i]
            projectile.update(dt)

            if projectile.is_out_of_bounds(self._bounds):
                log.trace("Projectile left the play area at (%.0f, %.0f)", projectile.x, projectile.y)
                del self.projectiles[i]
                continue

            hit = self.find_collision(projectile)
            if hit is None:
                continue

            del self.projectiles[i]
            self.insert_ball(projectile.color, self.insertion_index(projectile, hit))

    def _finish(self, state: RunState) -> None:
        self._state = state
        log.info("Level '%s' %s after %s", self.level.name, state.value,
                 format_time(self.elapsed_time))
        emit_record('chain', {
            'event': state.value,
            'level': self.level.name,
            'elapsed': round(self.elapsed_time, 3),
            'remaining': len(self.balls),
            'stats': asdict(self.stats),
        })

    # =========================================================================
    # Collision and insertion
    # =========================================================================

    def find_collision(self, projectile: Projectile) -> Optional[int]:
        """Index of the nearest non-vanishing ball the projectile overlaps."""
        best: Optional[int] = None
        best_dist = math.inf
        for j, ball in enumerate(self.balls):
            if ball.is_vanishing:
                continue
            dist = projectile.distance_to(ball.x, ball.y)
            if dist <= projectile.radius + ball.radius and dist < best_dist:
                best, best_dist = j, dist
        return best

    def insertion_index(self, projectile: Projectile, hit: int) -> int:
        """Chain slot a projectile that struck balls[hit] goes into.

        Behind the head, the projectile goes in front of the struck ball when
        the ball ahead of it is strictly closer, otherwise after it. At the
        head it goes in front only when it lies beyond the head, further from
        the second ball than the head is. A single ball is always followed.
        """
        struck = self.balls[hit]
        if len(self.balls) == 1:
            return hit + 1

        if hit > 0:
            prev = self.balls[hit - 1]
            d_struck = projectile.distance_to(struck.x, struck.y)
            d_prev = projectile.distance_to(prev.x, prev.y)
            return hit if d_prev < d_struck else hit + 1

        nxt = self.balls[1]
        if projectile.distance_to(nxt.x, nxt.y) > struck.distance_to(nxt.x, nxt.y):
            return 0
        return 1

    def insert_ball(self, color: RGB, index: int) -> ChainBall:
        """Insert a new ball at a chain slot and check for a match around it.

        The ball is placed just past the ball ahead of it (or on the head
        when inserted at 0); the next follower resolution settles it.
        """
        index = max(0, min(index, len(self.balls)))
        ball = ChainBall(color=color, radius=self.level.ball_radius)
        if index > 0:
            ball.path_index = self.path.clamp(self.balls[index - 1].path_index + config.INSERT_EPSILON)
        elif self.balls:
            ball.path_index = self.balls[0].path_index
        ball.update_position(self.path)

        self.balls.insert(index, ball)
        self.stats.insertions += 1
        emit_record('chain', {
            'event': 'insert',
            'index': index,
            'color': list(color),
            'path_index': round(ball.path_index, 3),
            'length': len(self.balls),
        })

        self.check_matches(min(index, len(self.balls) - 1))
        return ball

    def check_matches(self, index: int) -> int:
        """Mark the same-color run through balls[index] as vanishing.

        Returns:
            Size of the run marked (0 if shorter than three)
        """
        if not 0 <= index < len(self.balls):
            return 0

        color = self.balls[index].color
        lo = index
        while lo > 0 and self.balls[lo - 1].color == color:
            lo -= 1
        hi = index
        while hi < len(self.balls) - 1 and self.balls[hi + 1].color == color:
            hi += 1

        run = self.balls[lo:hi + 1]
        if len(run) < MIN_MATCH:
            return 0

        for ball in run:
            ball.start_vanishing()
        self.stats.matches += 1

        log.debug("Match of %d at slots %d-%d", len(run), lo, hi)
        emit_record('chain', {
            'event': 'match',
            'size': len(run),
            'start': lo,
            'color': list(color),
            'elapsed': round(self.elapsed_time, 3),
        })
        return len(run)

    # =========================================================================
    # Viewport
    # =========================================================================

    def resize(self, width: int, height: int) -> bool:
        """Regenerate the path for a new viewport.

        Ball indices are kept and clamped into the new path, so chain order
        never changes. When the generator yields no usable points for the new
        size the previous path and viewport stay in place.

        Returns:
            True if the new size was applied
        """
        if (width, height) == self._rejected_size:
            return False
        try:
            path = ChainPath.from_generator(self.level.path_generator, width, height)
        except PathError as e:
            self._rejected_size = (width, height)
            log.warning("Keeping %dx%d path, %dx%d unusable: %s",
                        self.width, self.height, width, height, e)
            return False

        self._rejected_size = None

        self.width, self.height = width, height
        self.path = path
        self._bounds = self._compute_bounds()
        self.launcher.move_to(self._center())

        for ball in self.balls:
            ball.path_index = self.path.clamp(ball.path_index)
            ball.update_position(self.path)

        log.debug("Resized to %dx%d, path now %d points", width, height, len(path))
        return True

    # =========================================================================
    # Snapshot
    # =========================================================================

    def snapshot(self) -> ChainSnapshot:
        """Read-only view of the current frame."""
        return ChainSnapshot(
            path_points=self.path.points,
            balls=tuple(ball.snapshot() for ball in self.balls),
            launcher=self.launcher.snapshot(),
            projectiles=tuple(p.snapshot() for p in self.projectiles),
            elapsed_time=self.elapsed_time,
            running=self.running,
            won=self.won,
            lost=self.lost,
        )
