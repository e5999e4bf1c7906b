"""
Site navigation (Playwright).

Drives the reservation site to the availability table of one facility on one
date and hands the rendered HTML to slotwatch.parse.

Flow on the site:
    top page -> "施設 の空きを見る" -> facility radio -> availability table
    -> "1ヶ月後" / "1ヶ月前" per month -> calendar -> day
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import List, Optional

from playwright.sync_api import Page

from slotwatch.config import DEFAULT_BASE_URL
from slotwatch.model import RawRow
from slotwatch.parse import extract_raw_rows

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Site labels
# ---------------------------------------------------------------------------

FACILITY_LIST_LINK = "text=施設 の空きを見る"
NEXT_MONTH_LINK = "text=1ヶ月後"
PREV_MONTH_LINK = "text=1ヶ月前"
OPEN_CALENDAR_LINK = "text=カレンダーを開く"

# The availability screen shows "<facility> YYYY年M月D日" in an h3
TABLE_TITLE_SELECTOR = 'h3:has-text("年")'


# ---------------------------------------------------------------------------
# Navigation
# ---------------------------------------------------------------------------


def navigate_to_facility(page: Page, facility: str, base_url: str = DEFAULT_BASE_URL) -> None:
    """
    Open the availability table of a facility (shows today's date).
    """
    page.goto(base_url)
    page.wait_for_load_state("networkidle")

    page.click(FACILITY_LIST_LINK)
    page.wait_for_load_state("networkidle")
    page.wait_for_timeout(1000)

    page.get_by_role("radio", name=facility).click()

    page.wait_for_selector(TABLE_TITLE_SELECTOR, timeout=15000)
    page.wait_for_timeout(1000)


def month_steps(target: date, today: date) -> int:
    """
    Number of month pages between today and target (negative = backwards).
    """
    return (target.year - today.year) * 12 + (target.month - today.month)


def navigate_to_date(page: Page, target_date: str, today: Optional[date] = None) -> None:
    """
    Move the availability table to target_date (YYYY-MM-DD).
    """
    target = date.fromisoformat(target_date)
    today = today or date.today()

    if target == today:
        return

    steps = month_steps(target, today)
    link = NEXT_MONTH_LINK if steps > 0 else PREV_MONTH_LINK
    for _ in range(abs(steps)):
        page.click(link)
        page.wait_for_load_state("networkidle")

    calendar_button = page.locator(OPEN_CALENDAR_LINK)
    if calendar_button.is_visible():
        calendar_button.click()
        page.wait_for_timeout(500)

    page.click(f'table >> text="{target.day}"')
    page.wait_for_load_state("networkidle")

    # the table is re-rendered after the date change
    page.wait_for_timeout(2000)


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------


def read_raw_rows(page: Page) -> List[RawRow]:
    """
    Extract raw table rows from the current page state.
    """
    page.wait_for_timeout(1000)
    rows = extract_raw_rows(page.content())
    logger.debug("Extracted %d raw rows", len(rows))
    return rows


def take_screenshot(page: Page, path: str | Path) -> None:
    page.screenshot(path=str(path), full_page=True)
