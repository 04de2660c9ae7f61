"""Playwright-backed browser session."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from config.settings import ScraperConfig
from core.cookies import Cookie
from core.errors import NavigationFailure, NavigationTimeout
from scrapers.base import BrowserSession
from scrapers.document import HtmlDocument

log = logging.getLogger(__name__)

VIEWPORT = {"width": 1200, "height": 900}

LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-accelerated-2d-canvas",
    "--disable-gpu",
    "--window-size=1200,900",
    "--lang=en-US,en",
]

_BODY_TEXT_JS = "() => document.body ? document.body.innerText || '' : ''"
_SCROLL_JS = "(fraction) => window.scrollBy(0, window.innerHeight * fraction)"


class PlaywrightSession(BrowserSession):
    def __init__(
        self,
        playwright: Playwright,
        browser: Browser,
        context: BrowserContext,
        page: Page,
    ) -> None:
        self._playwright = playwright
        self._browser = browser
        self._context = context
        self._page = page

    @classmethod
    async def launch(cls, config: ScraperConfig) -> PlaywrightSession:
        playwright = await async_playwright().start()
        try:
            launch_kwargs: dict = {"headless": config.headless, "args": LAUNCH_ARGS}
            if config.browser_path:
                launch_kwargs["executable_path"] = config.browser_path
                log.info("Using custom Chrome executable: %s", config.browser_path)
            browser = await playwright.chromium.launch(**launch_kwargs)
            context = await browser.new_context(
                viewport=VIEWPORT,
                user_agent=config.user_agent,
                locale="en-US",
                extra_http_headers={"Accept-Language": "en-US,en;q=0.9"},
            )
            page = await context.new_page()
        except BaseException:
            await playwright.stop()
            raise
        return cls(playwright, browser, context, page)

    async def add_cookies(self, cookies: Sequence[Cookie]) -> None:
        await self._context.add_cookies([c.to_browser() for c in cookies])

    async def goto(self, url: str, timeout_ms: int) -> None:
        try:
            await self._page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(f"Timed out loading {url}: {e}", url=url) from e
        except PlaywrightError as e:
            raise NavigationFailure(f"Failed to load {url}: {e}", url=url) from e

    async def wait_for(self, selector: str, timeout_ms: int) -> bool:
        try:
            await self._page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError:
            return False
        return True

    async def pause(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    async def snapshot(self) -> HtmlDocument:
        html = await self._page.content()
        try:
            body_text = await self._page.evaluate(_BODY_TEXT_JS)
        except PlaywrightError as e:
            log.debug("innerText read failed, falling back to markup text: %s", e)
            body_text = None
        return HtmlDocument(html, body_text=body_text)

    async def scroll_height(self) -> int:
        try:
            return int(await self._page.evaluate("document.body.scrollHeight") or 0)
        except PlaywrightError as e:
            log.debug("scrollHeight unavailable: %s", e)
            return 0

    async def scroll_by_viewport(self, fraction: float = 0.9) -> None:
        try:
            await self._page.evaluate(_SCROLL_JS, fraction)
        except PlaywrightError as e:
            log.debug("Scroll failed: %s", e)

    async def screenshot(self, path: Path) -> None:
        await self._page.screenshot(path=str(path), full_page=True)

    async def content(self) -> str:
        return await self._page.content()

    async def close(self) -> None:
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
