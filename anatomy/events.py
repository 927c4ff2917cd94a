"""
Events recorded while a body takes damage.

Hosts can read Body.events after the fact or register callbacks to react as
events happen (actor death, cooldown effects and so on).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional


class BodyEventType(Enum):
    """Types of events a body can emit."""
    DAMAGE_TAKEN = auto()
    PART_DESTROYED = auto()
    LIMB_DESTROYED = auto()
    BODY_EMPTIED = auto()


@dataclass
class BodyEvent:
    """
    An event that occurred on a body.

    Attributes:
        event_type: The type of event.
        sequence: Running count of damage events the body had taken when
            this event fired.
        limb_name: Limb involved (if applicable).
        part_name: Part involved (if applicable).
        data: Additional event-specific data.
    """
    event_type: BodyEventType
    sequence: int
    limb_name: Optional[str] = None
    part_name: Optional[str] = None
    data: dict = field(default_factory=dict)

    def __str__(self) -> str:
        where = self.limb_name or ""
        if self.part_name:
            where = f"{where}/{self.part_name}"
        where_str = f" [{where}]" if where else ""
        return f"#{self.sequence} {self.event_type.name}{where_str}"
