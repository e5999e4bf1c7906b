"""
Time matching.

Requested times come from user config ("9", "9:00", "13:30") and slot labels
come from the parser ("9:00", "9:30", or a bare "9" for multi-hour cells).
Both sides are normalized before comparing:

    "9"     -> "9"
    "9:00"  -> "9"
    "13:30" -> "13:30"

A bare hour also matches the ":00" form of that hour, never the ":30" one.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from slotwatch.model import AvailabilityStatus, RoomAvailability

logger = logging.getLogger(__name__)

_TIME_RE = re.compile(r"^(\d+):?(\d*)$")


def normalize_time(time: str) -> str:
    """
    Normalize 'H', 'H:MM' to 'H' (full hour) or 'H:MM'.
    Anything else is returned unchanged.
    """
    m = _TIME_RE.match(time)
    if not m:
        return time

    hour = m.group(1)
    minute = m.group(2) or "00"
    if minute == "00":
        return hour
    return f"{hour}:{minute}"


def _clock(normalized: str) -> Optional[Tuple[int, int]]:
    m = _TIME_RE.match(normalized)
    if not m:
        return None
    return int(m.group(1)), int(m.group(2) or 0)


def times_match(a: str, b: str) -> bool:
    n1 = normalize_time(a)
    n2 = normalize_time(b)

    if n1 == n2:
        return True

    # hour prefixes only count as equal when the minutes agree too:
    # "09" == "9", "09:30" == "9:30", but "9" != "9:30"
    c1 = _clock(n1)
    return c1 is not None and c1 == _clock(n2)


def find_available_slots(room: RoomAvailability, requested: Sequence[str]) -> List[str]:
    """
    Return the requested times that have an available slot in this room.

    Requested times without an available slot are simply left out.
    """
    found: List[str] = []
    for wanted in requested:
        for slot in room.time_slots:
            if slot.status is AvailabilityStatus.AVAILABLE and times_match(slot.time, wanted):
                found.append(wanted)
                break
    return found


def rooms_matching(rooms: Iterable[RoomAvailability], room_name: str) -> List[RoomAvailability]:
    """
    Candidate rooms: names that contain the wanted name or are contained in it.
    """
    return [r for r in rooms if room_name in r.room_name or r.room_name in room_name]


def collect_available_slots(
    rooms: Iterable[RoomAvailability],
    room_name: str,
    requested: Sequence[str],
) -> List[str]:
    """
    Union of available requested times over every candidate room.

    The page can list the same room several times (one row per sub-area),
    so all candidates are checked, not just the first.
    """
    candidates = rooms_matching(rooms, room_name)
    if not candidates:
        logger.warning("Room not found: %s", room_name)
        return []

    logger.debug("Matched %d room row(s) for %s", len(candidates), room_name)

    found: List[str] = []
    for room in candidates:
        for time in find_available_slots(room, requested):
            if time not in found:
                found.append(time)
    return found
