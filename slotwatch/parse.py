"""
Parsing (rendered HTML -> structured availability).

- Extracts raw rows (room name + cell texts + header hours) from the page HTML
- Classifies each cell glyph into an AvailabilityStatus
- Infers the time granularity of the table and expands cells into time slots

Important rules (DO NOT CHANGE):
- 1 room row = 1 RoomAvailability, rows with the same name are NOT merged
- cell order = slot order
- never raise on strange input: unknown glyphs -> UNKNOWN, header overrun -> "unknown"
"""

from __future__ import annotations

import math
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from slotwatch.filters import is_room_row
from slotwatch.model import AvailabilityStatus, RawRow, RoomAvailability, TimeSlotStatus


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

# Used when the page header could not be read (site opening hours 9-20)
DEFAULT_HEADER_HOURS: Tuple[str, ...] = tuple(str(h) for h in range(9, 21))

# Cells per header hour; the site rounds these counts loosely
HALF_HOUR_RATIO = 1.5
HOUR_RATIO = 0.8

UNKNOWN_TIME = "unknown"

_STATUS_BY_TEXT = {
    "●": AvailabilityStatus.AVAILABLE,
    "〇": AvailabilityStatus.AVAILABLE,
    "○": AvailabilityStatus.AVAILABLE,
    "×": AvailabilityStatus.RESERVED,
    "-": AvailabilityStatus.OUTSIDE_PERIOD,
    "不可": AvailabilityStatus.UNAVAILABLE,
    "休館・保守": AvailabilityStatus.UNAVAILABLE,
}

# "9", "9時", "9:00", "09:00"
_HOUR_LABEL_RE = re.compile(r"^(\d{1,2})(?:時|:00)?$")
_LEADING_DIGITS_RE = re.compile(r"^\s*(\d+)")


# ---------------------------------------------------------------------------
# Cell classification
# ---------------------------------------------------------------------------


def classify_cell(cell_text: Optional[str]) -> AvailabilityStatus:
    """
    Map the text of one table cell to an availability status.
    """
    text = "" if cell_text is None else str(cell_text).strip()
    return _STATUS_BY_TEXT.get(text, AvailabilityStatus.UNKNOWN)


# ---------------------------------------------------------------------------
# Time mapping
# ---------------------------------------------------------------------------


def _hour_of(label: str) -> str:
    # "09時" -> "9"; labels without digits are kept as they are
    m = _LEADING_DIGITS_RE.match(label)
    if not m:
        return label.strip()
    return str(int(m.group(1)))


def _header_at(header: Sequence[str], index: int) -> Optional[str]:
    if 0 <= index < len(header):
        return _hour_of(header[index])
    return None


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _half_hour_times(header: Sequence[str], cell_index: int) -> List[str]:
    hour = _header_at(header, cell_index // 2)
    if hour is None:
        return [UNKNOWN_TIME]
    minute = "00" if cell_index % 2 == 0 else "30"
    return [f"{hour}:{minute}"]


def _hour_times(header: Sequence[str], cell_index: int) -> List[str]:
    hour = _header_at(header, cell_index)
    if hour is None:
        return [UNKNOWN_TIME]
    return [f"{hour}:00"]


def _span_times(header: Sequence[str], cell_index: int, hours_per_cell: int) -> List[str]:
    times: List[str] = []
    start = cell_index * hours_per_cell
    for offset in range(hours_per_cell):
        hour = _header_at(header, start + offset)
        times.append(UNKNOWN_TIME if hour is None else hour)
    return times


def cell_times(header_hours: Sequence[str], cell_count: int) -> List[List[str]]:
    """
    Return, for every cell index, the time labels that cell covers.

    The granularity is inferred from cells per header hour:
        ratio >= 1.5        -> half-hour cells  ("9:00", "9:30", ...)
        0.8 <= ratio < 1.5  -> one cell per hour ("9:00", "10:00", ...)
        ratio < 0.8         -> one cell spans several hours ("9", "10" for one cell)
    """
    header = list(header_hours) or list(DEFAULT_HEADER_HOURS)
    if cell_count <= 0:
        return []

    ratio = cell_count / len(header)

    if ratio >= HALF_HOUR_RATIO:
        return [_half_hour_times(header, i) for i in range(cell_count)]

    if ratio >= HOUR_RATIO:
        return [_hour_times(header, i) for i in range(cell_count)]

    hours_per_cell = max(1, _round_half_up(len(header) / cell_count))
    return [_span_times(header, i, hours_per_cell) for i in range(cell_count)]


# ---------------------------------------------------------------------------
# Table interpretation (CORE LOGIC)
# ---------------------------------------------------------------------------


def interpret_row(row: RawRow) -> Optional[RoomAvailability]:
    """
    Interpret one raw row. Returns None if the row is not a room row.
    """
    room_name = (row.room_name or "").strip()
    cells = [("" if c is None else str(c)) for c in row.cells]

    if not is_room_row(room_name, cells):
        return None

    slots: List[TimeSlotStatus] = []
    for text, times in zip(cells, cell_times(row.header_hours, len(cells))):
        status = classify_cell(text)
        # multi-hour cells fan the same status out to every hour they cover
        for time in times:
            slots.append(TimeSlotStatus(time=time, status=status))

    return RoomAvailability(room_name=room_name, time_slots=tuple(slots))


def interpret_rows(rows: Iterable[RawRow]) -> List[RoomAvailability]:
    """
    Turn raw table rows into one RoomAvailability per room row, in page order.
    """
    out: List[RoomAvailability] = []
    for row in rows:
        room = interpret_row(row)
        if room is not None:
            out.append(room)
    return out


# ---------------------------------------------------------------------------
# HTML extraction
# ---------------------------------------------------------------------------


def _cell_text(cell) -> str:
    return cell.get_text(" ", strip=True)


def _header_hours_of(table) -> Tuple[str, ...]:
    """
    Find the hour labels of a table: the first row holding at least two
    bare hour tokens. Returns () if there is none.
    """
    for tr in table.find_all("tr"):
        hours: List[str] = []
        for cell in tr.find_all(["th", "td"]):
            m = _HOUR_LABEL_RE.match(_cell_text(cell))
            if m and int(m.group(1)) <= 24:
                hours.append(str(int(m.group(1))))
        if len(hours) >= 2:
            return tuple(hours)
    return ()


def extract_raw_rows(html: str) -> List[RawRow]:
    """
    Extract every data row of every table in the page.

    First <td> -> room name, remaining <td> -> cells. Rows are NOT filtered
    here beyond "has at least one cell"; interpret_rows decides what a room is.
    """
    soup = BeautifulSoup(html, "html.parser")

    rows: List[RawRow] = []
    for table in soup.find_all("table"):
        header_hours = _header_hours_of(table)

        for tr in table.find_all("tr"):
            # nested tables are visited on their own
            if tr.find_parent("table") is not table:
                continue

            tds = tr.find_all("td", recursive=False)
            if len(tds) < 2:
                continue

            rows.append(
                RawRow(
                    room_name=_cell_text(tds[0]),
                    cells=tuple(_cell_text(td) for td in tds[1:]),
                    header_hours=header_hours,
                )
            )

    return rows


def parse_availability_html(html: str) -> List[RoomAvailability]:
    return interpret_rows(extract_raw_rows(html))
