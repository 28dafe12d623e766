"""Configuration for SpiralChain game."""
import os
from pathlib import Path

from dotenv import load_dotenv

from coil.games.palette import MASTER_PALETTE

# Load .env from game directory
_env_path = Path(__file__).parent / '.env'
load_dotenv(_env_path)


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment."""
    val = os.getenv(key, str(default)).lower()
    return val in ('true', '1', 'yes')


def _get_int(key: str, default: int) -> int:
    """Get integer from environment."""
    return int(os.getenv(key, str(default)))


def _get_float(key: str, default: float) -> float:
    """Get float from environment."""
    return float(os.getenv(key, str(default)))


# Display settings
SCREEN_WIDTH = _get_int('SCREEN_WIDTH', 1280)
SCREEN_HEIGHT = _get_int('SCREEN_HEIGHT', 720)
FPS = _get_int('FPS', 60)
RESIZABLE = _get_bool('RESIZABLE', True)

# Colors
BACKGROUND_COLOR = (17, 17, 17)
PATH_COLOR = (85, 85, 85)
ENDPOINT_COLOR = (255, 213, 79)
LAUNCHER_BODY_COLOR = (34, 34, 34)
LAUNCHER_RIM_COLOR = (170, 170, 170)
BARREL_COLOR = (221, 221, 221)
HUD_COLOR = (230, 230, 230)
WIN_COLOR = (144, 238, 144)
LOSE_COLOR = (255, 99, 71)

# Chain
BALL_RADIUS = _get_float('BALL_RADIUS', 12.0)
ATTRACTION_SPEED = _get_float('ATTRACTION_SPEED', 600.0)  # path indices per second
SPAWN_INTERVAL = _get_float('SPAWN_INTERVAL', 0.15)       # seconds between spawned balls
VANISH_RATE = _get_float('VANISH_RATE', 3.0)              # vanish progress lost per second
INSERT_EPSILON = 0.01                                      # index offset for an inserted ball

# Launcher and projectiles
LAUNCHER_RADIUS = _get_float('LAUNCHER_RADIUS', 25.0)
BARREL_EXTRA = 18.0                                        # barrel drawn past the rim
PROJECTILE_SPEED = _get_float('PROJECTILE_SPEED', 800.0)  # pixels per second
OUT_OF_BOUNDS_MARGIN = _get_float('OUT_OF_BOUNDS_MARGIN', 100.0)
SWAP_DURATION = _get_float('SWAP_DURATION', 0.15)         # seconds

# Level defaults (used when a level omits a value)
DEFAULT_TRAVEL_TIME_MS = _get_int('DEFAULT_TRAVEL_TIME_MS', 120000)
DEFAULT_BALL_COUNT = _get_int('DEFAULT_BALL_COUNT', 50)
DEFAULT_COLOR_COUNT = _get_int('DEFAULT_COLOR_COUNT', 3)
DEFAULT_PALETTE = list(MASTER_PALETTE)

# Custom formula sampling range for t
FORMULA_T_START = 0.0
FORMULA_T_END = 12.5
FORMULA_T_STEP = 0.01
