"""
Coil game framework: the BaseGame contract, run states, ball palettes,
level files and input.
"""

from coil.games.game_state import GameState
from coil.games.base_game import BaseGame
from coil.games.palette import (
    GamePalette,
    MASTER_PALETTE,
    TEST_PALETTES,
    clamp_color_count,
    get_palette_names,
)
from coil.games.levels import (
    LevelInfo,
    LevelGroup,
    LevelLoader,
    SchemaValidationError,
)

__all__ = [
    'GameState',
    'BaseGame',
    'GamePalette',
    'MASTER_PALETTE',
    'TEST_PALETTES',
    'clamp_color_count',
    'get_palette_names',
    'LevelInfo',
    'LevelGroup',
    'LevelLoader',
    'SchemaValidationError',
]
