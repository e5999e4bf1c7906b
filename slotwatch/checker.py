"""
Availability checks for monitoring targets.

For one target:
1. navigate to the facility and date (slotwatch.scrape)
2. interpret the availability table (slotwatch.parse)
3. match requested times against available slots of every candidate room
4. on a hit, optionally store a full-page screenshot

A failing browser step is logged and gives an empty result, so one broken
target does not stop the loop over the others.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import Page

from slotwatch import scrape
from slotwatch.config import DEFAULT_BASE_URL
from slotwatch.match import collect_available_slots
from slotwatch.model import CheckResult, Target
from slotwatch.parse import interpret_rows

logger = logging.getLogger(__name__)

# Characters not allowed in file names on common file systems
_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]')


def screenshot_filename(target: Target, screenshot_dir: str | Path, now: Optional[datetime] = None) -> Path:
    """
    Build '<date>_<facility>_<room>_<timestamp>.png' inside screenshot_dir.
    """
    stamp = (now or datetime.now()).isoformat(timespec="milliseconds")
    stamp = re.sub(r"[:.]", "-", stamp)
    facility = _UNSAFE_FILENAME_CHARS.sub("_", target.facility)[:20]
    room = _UNSAFE_FILENAME_CHARS.sub("_", target.room)[:20]
    return Path(screenshot_dir) / f"{target.date}_{facility}_{room}_{stamp}.png"


def _save_screenshot(page: Page, target: Target, out_dir: Path) -> Optional[str]:
    """
    Store a full-page screenshot. A failure is logged and gives None; the
    slots already found are kept.
    """
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        path = screenshot_filename(target, out_dir)
        scrape.take_screenshot(page, path)
    except (OSError, PlaywrightError) as e:
        logger.error("Screenshot failed for %s / %s / %s: %s", target.facility, target.room, target.date, e)
        return None
    return str(path)


def check_target(
    page: Page,
    target: Target,
    screenshot_dir: str | Path | None = None,
    base_url: str = DEFAULT_BASE_URL,
) -> CheckResult:
    """
    Check one target. Screenshots are only taken when screenshot_dir is set.
    """
    result = CheckResult(facility=target.facility, room=target.room, date=target.date)

    try:
        logger.info("Opening facility: %s", target.facility)
        scrape.navigate_to_facility(page, target.facility, base_url)

        logger.info("Moving to date: %s", target.date)
        scrape.navigate_to_date(page, target.date)

        rooms = interpret_rows(scrape.read_raw_rows(page))
        logger.debug("Rooms on page: %s", [r.room_name for r in rooms])

        result.available_slots = collect_available_slots(rooms, target.room, target.time_slots)
    except PlaywrightError as e:
        logger.error("Check failed for %s / %s / %s: %s", target.facility, target.room, target.date, e)
        return result

    if result.found and screenshot_dir is not None:
        result.screenshot_path = _save_screenshot(page, target, Path(screenshot_dir))

    if result.found:
        logger.info(
            "Availability found: %s / %s / %s -> %s",
            target.facility,
            target.room,
            target.date,
            ", ".join(result.available_slots),
        )
    else:
        logger.info("No availability: %s / %s / %s", target.facility, target.room, target.date)

    return result


def run_targets(
    page: Page,
    targets: Iterable[Target],
    screenshot_dir: str | Path | None = None,
    base_url: str = DEFAULT_BASE_URL,
    delay_seconds: float = 1.0,
    on_result: Optional[Callable[[Target, CheckResult], None]] = None,
) -> List[CheckResult]:
    """
    Check targets one after another with a fixed pause in between.
    """
    todo = list(targets)
    results: List[CheckResult] = []

    for i, target in enumerate(todo):
        logger.info("Checking %d/%d: %s / %s / %s", i + 1, len(todo), target.facility, target.room, target.date)
        result = check_target(page, target, screenshot_dir, base_url)
        results.append(result)

        if on_result is not None:
            on_result(target, result)

        # go easy on the site
        if i < len(todo) - 1 and delay_seconds > 0:
            page.wait_for_timeout(delay_seconds * 1000)

    return results


def format_summary(results: List[CheckResult]) -> str:
    """
    Plain-text summary of a run.
    """
    found = [r for r in results if r.found]

    lines = [
        "=" * 40,
        "Check summary",
        "=" * 40,
        f"Targets checked: {len(results)}",
        f"Availability found: {len(found)}",
    ]

    for r in found:
        lines.append(f"- {r.facility} / {r.room} / {r.date}")
        lines.append(f"  times: {', '.join(r.available_slots)}")
        if r.screenshot_path:
            lines.append(f"  screenshot: {r.screenshot_path}")

    lines.append("=" * 40)
    return "\n".join(lines)
