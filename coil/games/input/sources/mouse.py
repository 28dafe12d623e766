"""
Mouse input: the pointer aims, left click fires, right click swaps.
"""
import time
from typing import List, Optional

import pygame

from models import Vector2D
from coil.games.input.input_event import EventType, InputEvent
from coil.games.input.sources.base import InputSource

BUTTON_ACTIONS = {
    1: EventType.FIRE,   # left
    3: EventType.SWAP,   # right
}


class MouseInputSource(InputSource):
    """Reads the pygame queue and keeps only mouse activity.

    All motion within a frame collapses into one AIM event at the last
    pointer position, placed ahead of that frame's clicks. Anything that is
    not a mouse event goes back on the pygame queue for the main loop.
    """

    def __init__(self):
        self._pending: List[InputEvent] = []

    def update(self, dt: float) -> None:
        aim: Optional[InputEvent] = None
        clicks: List[InputEvent] = []
        for event in pygame.event.get():
            if event.type == pygame.MOUSEMOTION:
                aim = _event_at(event.pos, EventType.AIM)
            elif event.type == pygame.MOUSEBUTTONDOWN:
                action = BUTTON_ACTIONS.get(event.button)
                if action is not None:
                    clicks.append(_event_at(event.pos, action))
            elif event.type != pygame.MOUSEBUTTONUP:
                pygame.event.post(event)

        if aim is not None:
            self._pending.append(aim)
        self._pending.extend(clicks)

    def poll_events(self) -> List[InputEvent]:
        events, self._pending = self._pending, []
        return events

    def clear(self) -> None:
        self._pending.clear()


def _event_at(pos, event_type: EventType) -> InputEvent:
    return InputEvent(
        position=Vector2D(x=float(pos[0]), y=float(pos[1])),
        timestamp=time.monotonic(),
        event_type=event_type,
    )
