"""SpiralChain levels: bundled YAML files and their loader."""
from games.SpiralChain.levels.level_loader import (
    LEVELS_DIR,
    ChainLevelData,
    ChainLevelLoader,
    create_loader,
)

__all__ = ['LEVELS_DIR', 'ChainLevelData', 'ChainLevelLoader', 'create_loader']
