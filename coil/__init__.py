"""
Coil - shared platform layer for the chain game.

Logging, standard game states, palettes, YAML level loading, sandboxed
path formulas and input events live here; the game itself lives under
games/SpiralChain.
"""

__version__ = "1.0.0"

__all__ = ['__version__']
