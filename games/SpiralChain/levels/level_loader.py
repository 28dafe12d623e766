"""
Level loader for SpiralChain.

Level files name a path (a registered generator or a pair of formulas) and
the chain parameters. Values a file leaves out fall back to the game
config. Player overrides (travel time, ball count, color count) are applied
when the level is turned into a LevelConfig.

Example level file:
    name: "Classic Spiral"
    difficulty: 2
    path:
      generator: spiral
    travel_time_ms: 120000
    ball_count: 50
    color_count: 3
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from models import LevelConfig, RGB, parse_color
from coil.games.levels import LevelLoader
from coil.games.palette import GamePalette, clamp_color_count
from games.SpiralChain import config
from games.SpiralChain.generators import PathGeneratorRegistry, formula_generator

LEVELS_DIR = Path(__file__).parent


@dataclass
class ChainLevelData:
    """A level as read from disk, before overrides.

    Exactly one of `generator` and `formula` is set.
    """
    name: str = "Untitled"
    description: str = ""
    difficulty: int = 1
    author: str = "unknown"

    generator: Optional[str] = None
    formula: Optional[Tuple[str, str]] = None

    travel_time_ms: int = config.DEFAULT_TRAVEL_TIME_MS
    ball_count: int = config.DEFAULT_BALL_COUNT
    color_count: Optional[int] = None
    palette: List[RGB] = field(default_factory=lambda: list(config.DEFAULT_PALETTE))
    ball_radius: float = config.BALL_RADIUS

    @classmethod
    def custom(cls, formula_x: str, formula_y: str, name: str = "Custom") -> 'ChainLevelData':
        """Ad-hoc level following two user formulas."""
        return cls(name=name, formula=(formula_x, formula_y),
                   color_count=config.DEFAULT_COLOR_COUNT)

    def to_config(
        self,
        travel_time_s: Optional[float] = None,
        ball_count: Optional[int] = None,
        color_count: Optional[int] = None,
    ) -> LevelConfig:
        """Build the engine configuration, applying any player overrides.

        Args:
            travel_time_s: Seconds for the head to cover the path
            ball_count: Number of balls to spawn
            color_count: Number of palette colors in play (clamped to [2, 6])

        Raises:
            ValueError: Unknown generator name
            FormulaError: A formula is rejected
            pydantic.ValidationError: Resulting configuration is invalid
        """
        if self.formula is not None:
            path_generator = formula_generator(*self.formula)
        else:
            path_generator = PathGeneratorRegistry.get(self.generator or '')

        travel_time_ms = self.travel_time_ms
        if travel_time_s is not None:
            travel_time_ms = int(round(travel_time_s * 1000))

        count = color_count if color_count is not None else self.color_count
        if count is None:
            colors = list(self.palette)
        else:
            colors = GamePalette(colors=self.palette).ball_colors(clamp_color_count(count))

        return LevelConfig(
            name=self.name,
            path_generator=path_generator,
            travel_time_ms=travel_time_ms,
            target_ball_count=ball_count if ball_count is not None else self.ball_count,
            palette=colors,
            ball_radius=self.ball_radius,
        )


class ChainLevelLoader(LevelLoader[ChainLevelData]):
    """Loads SpiralChain levels from YAML."""

    def _parse_level_data(self, data: Dict[str, Any], file_path: Path) -> ChainLevelData:
        path_data = data.get('path') or {}
        generator = path_data.get('generator')
        formula_data = path_data.get('formula')

        if (generator is None) == (formula_data is None):
            raise ValueError(f"{file_path}: path needs exactly one of 'generator' or 'formula'")

        formula = None
        if formula_data is not None:
            formula = (str(formula_data['x']), str(formula_data['y']))

        palette = [parse_color(c) for c in data.get('palette', config.DEFAULT_PALETTE)]

        return ChainLevelData(
            name=data.get('name', file_path.stem),
            description=data.get('description', ''),
            difficulty=data.get('difficulty', 1),
            author=data.get('author', 'unknown'),
            generator=generator,
            formula=formula,
            travel_time_ms=int(data.get('travel_time_ms', config.DEFAULT_TRAVEL_TIME_MS)),
            ball_count=int(data.get('ball_count', config.DEFAULT_BALL_COUNT)),
            color_count=data.get('color_count'),
            palette=palette,
            ball_radius=float(data.get('ball_radius', config.BALL_RADIUS)),
        )


def create_loader(levels_dir: Path = LEVELS_DIR) -> ChainLevelLoader:
    return ChainLevelLoader(levels_dir)
