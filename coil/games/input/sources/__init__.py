"""
Input source implementations.
"""

from coil.games.input.sources.base import InputSource
from coil.games.input.sources.mouse import MouseInputSource

__all__ = ['InputSource', 'MouseInputSource']
