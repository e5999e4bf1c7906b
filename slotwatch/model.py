"""
Central data model definitions used across the project.

This module defines the canonical structure of availability data so that:
- the scraping layer, the table interpreter and the checker share one vocabulary
- parsed results are immutable snapshots (frozen dataclasses, tuples)
- a RawRow is the only thing the parser needs from the browser side
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Tuple


class AvailabilityStatus(str, Enum):
    """
    Availability of one time slot. Closed set; unknown glyphs map to UNKNOWN.
    """

    AVAILABLE = "available"
    RESERVED = "reserved"
    OUTSIDE_PERIOD = "outside_period"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TimeSlotStatus:
    """
    Status of one room at one time point, e.g. ("9:30", AVAILABLE).
    """

    time: str
    status: AvailabilityStatus


@dataclass(frozen=True)
class RoomAvailability:
    """
    All time slots of one room row in a single page snapshot.
    """

    room_name: str
    time_slots: Tuple[TimeSlotStatus, ...]


@dataclass(frozen=True)
class RawRow:
    """
    One table row as extracted from the rendered page.

    room_name    - text of the first cell
    cells        - texts of the remaining cells, in column order
    header_hours - hour labels detected in the table header ("9", "10", ...)
    """

    room_name: str
    cells: Tuple[str, ...]
    header_hours: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Target:
    """
    One monitoring target: a room of a facility on a date, at given times.
    """

    facility: str
    room: str
    date: str
    time_slots: Tuple[str, ...]
    target_id: Optional[str] = None


@dataclass
class CheckResult:
    facility: str
    room: str
    date: str
    available_slots: List[str] = field(default_factory=list)
    screenshot_path: Optional[str] = None
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def found(self) -> bool:
        return bool(self.available_slots)


@dataclass
class Config:
    targets: List[Target]
    screenshot_dir: Path
    delay_seconds: float = 1.0
