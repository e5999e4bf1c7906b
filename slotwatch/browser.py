"""
Browser launch strategies.

Where the browser comes from depends on where slotwatch runs:
- on a workstation the Chromium bundled with Playwright is used
- in a managed / serverless runtime a separately shipped Chromium binary
  is started with sandbox-less flags
- a browser that is already running can be attached to over CDP

select_launcher() picks one from the environment; the rest of the code only
sees a Page.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Mapping, Optional, Tuple

from playwright.sync_api import Browser, Page, Playwright, sync_playwright

logger = logging.getLogger(__name__)

# Flags needed by Chromium in containers without user namespaces / /dev/shm
SERVERLESS_ARGS: Tuple[str, ...] = (
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--single-process",
    "--no-zygote",
)


class BrowserLauncher:
    """Base class: turn a running Playwright into a Browser."""

    name = "base"

    def launch(self, playwright: Playwright) -> Browser:
        raise NotImplementedError


@dataclass
class LocalLauncher(BrowserLauncher):
    headless: bool = True
    name = "local"

    def launch(self, playwright: Playwright) -> Browser:
        return playwright.chromium.launch(headless=self.headless)


@dataclass
class ExecutableLauncher(BrowserLauncher):
    executable_path: str
    args: Tuple[str, ...] = field(default=SERVERLESS_ARGS)
    name = "executable"

    def launch(self, playwright: Playwright) -> Browser:
        return playwright.chromium.launch(
            executable_path=self.executable_path,
            headless=True,
            args=list(self.args),
        )


@dataclass
class CdpLauncher(BrowserLauncher):
    endpoint_url: str
    name = "cdp"

    def launch(self, playwright: Playwright) -> Browser:
        return playwright.chromium.connect_over_cdp(self.endpoint_url)


def select_launcher(env: Optional[Mapping[str, str]] = None) -> BrowserLauncher:
    """
    Pick a launcher from the environment.

    SLOTWATCH_CDP_URL wins over SLOTWATCH_CHROMIUM_PATH; without either the
    Playwright-bundled Chromium is used.
    """
    env = os.environ if env is None else env

    cdp_url = env.get("SLOTWATCH_CDP_URL", "").strip()
    if cdp_url:
        return CdpLauncher(endpoint_url=cdp_url)

    chromium_path = env.get("SLOTWATCH_CHROMIUM_PATH", "").strip()
    if chromium_path:
        return ExecutableLauncher(executable_path=chromium_path)

    return LocalLauncher()


@contextmanager
def open_page(launcher: BrowserLauncher) -> Iterator[Page]:
    """
    Start Playwright, launch a browser with the given strategy and yield a
    fresh page. The browser is closed on exit.
    """
    logger.info("Starting browser (%s)", launcher.name)
    with sync_playwright() as p:
        browser = launcher.launch(p)
        try:
            context = browser.new_context()
            yield context.new_page()
        finally:
            logger.info("Closing browser")
            browser.close()
