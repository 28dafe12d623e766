"""
Per-frame input collection.
"""
from typing import List, Optional

from coil.games.input.input_event import InputEvent
from coil.games.input.sources.base import InputSource


class InputManager:
    """Front for whichever InputSource is plugged in.

    The main loop calls update() once per frame, then hands get_events()
    to the game. With no source plugged in every frame is empty.
    """

    def __init__(self, source: Optional[InputSource] = None):
        self._source = source

    @property
    def source(self) -> Optional[InputSource]:
        return self._source

    def set_source(self, source: InputSource) -> None:
        self._source = source

    def has_source(self) -> bool:
        return self._source is not None

    def update(self, dt: float) -> None:
        if self.has_source():
            self._source.update(dt)

    def get_events(self) -> List[InputEvent]:
        """Events gathered by the last update(); each is returned once."""
        return self._source.poll_events() if self.has_source() else []
