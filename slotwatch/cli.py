"""
CLI (Command Line Interface).

Commands:

    slotwatch check [-c config.json]
    slotwatch pending [--store targets.json]
    slotwatch parse <page.html> [--room NAME] [--times 9:00 13:00 ...]

Exit codes of "check":
    0  availability found for at least one target
    1  nothing found (or the config could not be loaded)
    2  the browser could not be started

Note:
- progress goes to the log (stderr), results are printed as plain text
- "parse" works on a saved page and needs no browser
"""

from __future__ import annotations

import argparse
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from playwright.sync_api import Error as PlaywrightError

from slotwatch.browser import open_page, select_launcher
from slotwatch.checker import format_summary, run_targets
from slotwatch.config import ConfigError, base_url, default_store_path, load_config, log_level
from slotwatch.match import collect_available_slots
from slotwatch.model import CheckResult, Target
from slotwatch.parse import parse_availability_html
from slotwatch.storage import load_pending_targets, mark_as_found

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=log_level(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _result_to_dict(r: CheckResult) -> dict[str, Any]:
    return {
        "facility": r.facility,
        "room": r.room,
        "date": r.date,
        "available_slots": r.available_slots,
        "checked_at": r.checked_at.isoformat(),
    }


def _cmd_check(args: argparse.Namespace) -> int:
    """
    Check every target of the config file once.
    """
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Failed to load config: {e}")
        return 1

    print(f"Targets: {len(config.targets)}")

    try:
        with open_page(select_launcher()) as page:
            results = run_targets(
                page,
                config.targets,
                screenshot_dir=config.screenshot_dir,
                base_url=base_url(),
                delay_seconds=config.delay_seconds,
            )
    except PlaywrightError as e:
        print(f"Browser error: {e}")
        return 2

    print(format_summary(results))
    return 0 if any(r.found for r in results) else 1


def _cmd_pending(args: argparse.Namespace) -> int:
    """
    Check all unchecked targets of the store and flag the ones with hits.
    """
    store = Path(args.store) if args.store else default_store_path()
    targets = load_pending_targets(store)
    logger.info("Pending targets in %s: %d", store, len(targets))

    results: list[CheckResult] = []

    if targets:

        def flag_found(target: Target, result: CheckResult) -> None:
            if result.found and target.target_id is not None:
                try:
                    mark_as_found(store, target.target_id, result.available_slots)
                except OSError as e:
                    logger.error("Cannot flag target %s in %s: %s", target.target_id, store, e)
                    return
                logger.info("Flagged target %s as found", target.target_id)

        try:
            with open_page(select_launcher()) as page:
                results = run_targets(
                    page,
                    targets,
                    base_url=base_url(),
                    delay_seconds=args.delay,
                    on_result=flag_found,
                )
        except PlaywrightError as e:
            print(f"Browser error: {e}")
            return 2

    payload = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "total_targets": len(targets),
        "found_availability": sum(1 for r in results if r.found),
        "results": [_result_to_dict(r) for r in results],
    }
    print(json.dumps(payload, ensure_ascii=False))
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """
    Interpret a saved availability page and print rooms and slots.
    """
    path = Path(args.html)
    try:
        html = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"Cannot read {path}: {e}")
        return 1

    rooms = parse_availability_html(html)
    if not rooms:
        print("No room rows found.")
        return 0

    for room in rooms:
        print(f"{room.room_name} ({len(room.time_slots)} slots)")
        for slot in room.time_slots:
            print(f"  {slot.time}: {slot.status.value}")

    if args.room:
        found = collect_available_slots(rooms, args.room, args.times or [])
        print(f"Available for {args.room}: {', '.join(found) if found else '-'}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="slotwatch", description="Facility availability monitor")
    sub = parser.add_subparsers(dest="command", required=True)

    p_check = sub.add_parser("check", help="Check all targets of a config file")
    p_check.add_argument("-c", "--config", type=str, default="config.json", help="Config file (default: config.json)")

    p_pending = sub.add_parser("pending", help="Check unchecked targets of the target store")
    p_pending.add_argument("--store", type=str, default=None, help="Target store JSON (default: $SLOTWATCH_STORE or targets.json)")
    p_pending.add_argument("--delay", type=float, default=1.0, help="Seconds to wait between targets")

    p_parse = sub.add_parser("parse", help="Interpret a saved availability page")
    p_parse.add_argument("html", type=str, help="Saved page (.html)")
    p_parse.add_argument("--room", type=str, default=None, help="Room name to match")
    p_parse.add_argument("--times", nargs="*", default=None, help="Requested times (e.g. 9:00 13)")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    _configure_logging()

    if args.command == "check":
        raise SystemExit(_cmd_check(args))
    if args.command == "pending":
        raise SystemExit(_cmd_pending(args))
    if args.command == "parse":
        raise SystemExit(_cmd_parse(args))

    raise SystemExit(2)
