"""
Row filters for the availability table.

The reservation page has no stable row markup: calendar widgets, navigation
bars and region headings are all rendered as <tr>/<td> just like the real
room rows. Everything that decides "is this a room row?" lives here, as
named denylists and small predicates, so it can be tested and extended
without touching the interpreter in parse.py.

A row is kept when:
- its room name is not denied (see is_denied_room_name), and
- at least one of its cells is a status glyph (see has_status_cell)
"""

from __future__ import annotations

import re
from typing import FrozenSet, Iterable, Tuple


# ---------------------------------------------------------------------------
# Denylists
# ---------------------------------------------------------------------------

# Glyphs the site uses in availability cells
STATUS_GLYPHS: FrozenSet[str] = frozenset({"●", "×", "〇", "○", "-"})

# Table headings that look like room names
STRUCTURAL_LABELS: FrozenSet[str] = frozenset({"施設"})

# Calendar / paging controls
NAVIGATION_LABELS: FrozenSet[str] = frozenset({"本日", "前へ", "次へ"})

# Bare tokens coming from the date picker ("4月", "12", ...)
MONTH_TOKEN: re.Pattern[str] = re.compile(r"^\d{1,2}\s*月$")
NUMERIC_TOKEN: re.Pattern[str] = re.compile(r"^\d+$")

# Relative jumps: "1ヶ月後", "3か月前", "1週間", "2週間後", "7日前", "1日後"
RELATIVE_OFFSET_PATTERNS: Tuple[re.Pattern[str], ...] = (
    re.compile(r"\d+\s*[ヶかカケヵ]月\s*[後前]"),
    re.compile(r"\d+\s*週間"),
    re.compile(r"\d+\s*日\s*[前後]"),
)

# Region headings that group facilities ("富山地区", "呉西地域", ...).
# "エリア" is not a region suffix: rooms such as "多目的エリア" end with it
REGION_LABEL_PATTERN: re.Pattern[str] = re.compile(r"^.{1,8}(地区|地域|方面)$")
REGION_LABELS: FrozenSet[str] = frozenset({"全域", "県内全域", "地域を選択"})


# ---------------------------------------------------------------------------
# Predicates
# ---------------------------------------------------------------------------


def is_relative_offset(text: str) -> bool:
    return any(p.search(text) for p in RELATIVE_OFFSET_PATTERNS)


def is_region_label(text: str) -> bool:
    return text in REGION_LABELS or bool(REGION_LABEL_PATTERN.match(text))


def is_denied_room_name(room_name: str) -> bool:
    """
    True if the first-cell text cannot be a room name.
    """
    name = (room_name or "").strip()
    if not name:
        return True

    if name in STRUCTURAL_LABELS or name in STATUS_GLYPHS or name in NAVIGATION_LABELS:
        return True

    if MONTH_TOKEN.match(name) or NUMERIC_TOKEN.match(name):
        return True

    return is_relative_offset(name) or is_region_label(name)


def has_status_cell(cells: Iterable[str]) -> bool:
    """
    True if at least one raw cell text is a status glyph.
    """
    return any((c or "").strip() in STATUS_GLYPHS for c in cells)


def is_room_row(room_name: str, cells: Iterable[str]) -> bool:
    return not is_denied_room_name(room_name) and has_status_cell(cells)
