"""
Input for Coil games: sources turn device activity into InputEvents and the
InputManager hands them to the game once per frame.
"""

from coil.games.input.input_event import EventType, InputEvent
from coil.games.input.input_manager import InputManager

__all__ = ['EventType', 'InputEvent', 'InputManager']
