"""
InputSource interface.
"""
from abc import ABC, abstractmethod
from typing import List

from coil.games.input.input_event import InputEvent


class InputSource(ABC):
    """A device (or a script) that produces InputEvents.

    update() gathers whatever happened since the previous frame;
    poll_events() drains what was gathered.
    """

    @abstractmethod
    def update(self, dt: float) -> None:
        """Gather device activity for the frame that just ran for dt seconds."""

    @abstractmethod
    def poll_events(self) -> List[InputEvent]:
        """Hand over and forget the gathered events, oldest first."""
