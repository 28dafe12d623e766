"""Run state every Coil game reports through BaseGame.state."""
from enum import Enum


class GameState(Enum):
    """PLAYING until the run ends; then GAME_OVER for a loss or WON.

    A game maps its engine's own bookkeeping onto these in
    _get_internal_state(); the runner only looks at this value.
    """
    PLAYING = "playing"
    GAME_OVER = "game_over"
    WON = "won"
