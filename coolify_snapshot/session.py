"""Playwright-backed browsing session shared by every pipeline stage."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from playwright.async_api import Page, async_playwright

from .config import SnapshotConfig
from .errors import SessionError
from .fields import FieldReading
from .utils import epoch_millis

logger = logging.getLogger("coolify_snapshot")

_READ_FIELD_SCRIPT = """
(el) => ({
    tag: el.tagName.toLowerCase(),
    inputType: el.type || null,
    value: 'value' in el ? el.value : null,
    checked: !!el.checked,
    text: el.textContent,
})
"""


class BrowserSession:
    """One authenticated view onto the admin interface.

    Every stage navigates the same page, one step at a time, so nothing in
    the pipeline may drive the session concurrently.
    """

    def __init__(self, page: Page, config: SnapshotConfig) -> None:
        self.page = page
        self.config = config
        self.authenticated = False

    def ensure_authenticated(self) -> None:
        if not self.authenticated:
            raise SessionError("Session is not authenticated")

    def resolve(self, url: str) -> str:
        return urljoin(self.config.base_url + "/", url)

    @property
    def url(self) -> str:
        return self.page.url

    async def title(self) -> str:
        return await self.page.title()

    async def navigate(self, url: str) -> None:
        target = self.resolve(url)
        logger.debug("Loading %s", target)
        await self.page.goto(target, wait_until="networkidle")
        await self.pause(self.config.settle_wait)

    async def wait_for_settled(self) -> None:
        await self.page.wait_for_load_state(
            "networkidle", timeout=self.config.navigation_timeout * 1000
        )
        await self.pause(self.config.settle_wait)

    async def pause(self, seconds: float) -> None:
        if seconds > 0:
            await self.page.wait_for_timeout(int(seconds * 1000))

    async def document(self) -> BeautifulSoup:
        return BeautifulSoup(await self.page.content(), "html.parser")

    async def count(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    async def click(self, selector: str) -> None:
        await self.page.locator(selector).first.click()

    async def fill(self, selector: str, value: str) -> None:
        await self.page.locator(selector).first.fill(value)

    async def press(self, key: str) -> None:
        await self.page.keyboard.press(key)

    async def click_at(self, x: float, y: float) -> None:
        await self.page.mouse.click(x, y)

    async def wait_for_selector(self, selector: str, timeout: float) -> None:
        await self.page.wait_for_selector(selector, timeout=timeout * 1000)

    async def read_field(self, selector: str) -> Optional[FieldReading]:
        locator = self.page.locator(selector)
        if await locator.count() == 0:
            return None
        raw = await locator.first.evaluate(_READ_FIELD_SCRIPT)
        return FieldReading(
            tag=raw["tag"],
            input_type=raw.get("inputType"),
            value=raw.get("value"),
            checked=bool(raw.get("checked")),
            text=raw.get("text"),
        )

    async def capture_image(self, name: str) -> Optional[Path]:
        """Save a full-page screenshot when a screenshot directory is configured."""
        if self.config.screenshot_dir is None:
            return None
        destination = self.config.screenshot_dir / f"{name}-{epoch_millis()}.png"
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            await self.page.screenshot(path=str(destination), full_page=True)
        except Exception as exc:  # noqa: BLE001 - screenshots are best effort
            logger.warning("Screenshot %s failed: %s", destination, exc)
            return None
        logger.debug("Screenshot saved to %s", destination)
        return destination


@asynccontextmanager
async def open_session(config: SnapshotConfig) -> AsyncIterator[BrowserSession]:
    """Launch a browser for the lifetime of one run."""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=config.headless)
        try:
            page = await browser.new_page()
            page.set_default_navigation_timeout(config.navigation_timeout * 1000)
            page.set_default_timeout(config.navigation_timeout * 1000)
            yield BrowserSession(page, config)
        finally:
            await browser.close()
