"""
Player actions as plain values.

Sources translate device activity (pointer motion, button presses) into
InputEvents; games react to these and never read pygame events themselves.
"""
from dataclasses import dataclass
from enum import Enum

from models import Vector2D


class EventType(str, Enum):
    AIM = "aim"      # pointer moved, position is the new target
    FIRE = "fire"    # shoot the loaded ball toward position
    SWAP = "swap"    # exchange loaded and on-deck balls


@dataclass(frozen=True)
class InputEvent:
    """One action at a screen position.

    `timestamp` is seconds on the monotonic clock and may not be negative.
    """
    position: Vector2D
    timestamp: float
    event_type: EventType = EventType.FIRE

    def __post_init__(self):
        if self.timestamp < 0:
            raise ValueError(f'Timestamp must be non-negative, got {self.timestamp}')

    def __str__(self) -> str:
        x, y = self.position.x, self.position.y
        return f"InputEvent(pos=({x:.2f}, {y:.2f}), t={self.timestamp:.3f}, type={self.event_type.value})"
