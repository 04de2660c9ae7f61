from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Sequence
from urllib.parse import quote

from config.settings import ScraperConfig
from core.cookies import Cookie
from core.errors import LoginRequired, NavigationError
from core.models import Post, RunResult, RunState, SessionState
from scrapers.base import BaseScraper, BrowserSession
from scrapers.browser import PlaywrightSession
from scrapers.collector import collect
from scrapers.diagnostics import save_debug_snapshot
from scrapers.session_validator import classify

log = logging.getLogger(__name__)

HOME_URL = "https://twitter.com/"

SessionFactory = Callable[[ScraperConfig], Awaitable[BrowserSession]]


def build_search_url(query: str) -> str:
    return f"https://twitter.com/search?q={quote(query, safe='')}&f=live"


class TwitterScraper(BaseScraper):
    """Collects search results from the Twitter/X web client with a real browser.

    One run owns one browser session from start to finish:

        INIT -> SESSION_OPEN -> AUTH_CHECKED -> SEARCH_NAVIGATED
             -> BLOCK_CHECKED -> COLLECTING -> DONE

    Any failure moves the run to FAILED. Navigation problems are logged and
    the run carries on; the session checks afterwards decide whether the
    page is usable. The browser is closed on every exit path.
    """

    source_name = "twitter"

    def __init__(
        self, config: ScraperConfig, session_factory: SessionFactory | None = None
    ) -> None:
        self.config = config
        self._open_session = session_factory or PlaywrightSession.launch

    async def scrape(
        self, query: str, max_items: int, cookies: Sequence[Cookie] | None
    ) -> RunResult:
        start = time.monotonic()
        cookie_list = list(cookies or [])
        max_items = max(1, max_items)
        states: list[RunState] = [RunState.INIT]

        def advance(state: RunState) -> None:
            log.debug("Scrape '%s': %s -> %s", query, states[-1].value, state.value)
            states.append(state)

        session = await self._open_session(self.config)
        try:
            advance(RunState.SESSION_OPEN)
            items = await self._run(session, query, max_items, cookie_list, advance)
        except Exception:
            advance(RunState.FAILED)
            raise
        finally:
            await self._close(session)

        advance(RunState.DONE)
        duration = time.monotonic() - start
        log.info(
            "Scraped twitter query '%s': %d tweets in %.1fs", query, len(items), duration
        )
        return RunResult(
            query=query,
            max_items=max_items,
            items=items,
            states=states,
            cookies_used=bool(cookie_list),
            duration_seconds=duration,
        )

    async def _run(
        self,
        session: BrowserSession,
        query: str,
        max_items: int,
        cookies: list[Cookie],
        advance: Callable[[RunState], None],
    ) -> list[Post]:
        cfg = self.config

        if cookies:
            try:
                await session.add_cookies(cookies)
                log.info("Set %d cookies on page.", len(cookies))
            except Exception as e:
                log.warning("Failed to set cookies on page: %s", e)

        await self._navigate(session, HOME_URL, cfg.home_timeout_ms)
        await session.pause(cfg.settle_ms)

        if classify(await session.snapshot(), check="auth") is not SessionState.AUTHENTICATED:
            debug_files = await save_debug_snapshot(session, cfg.debug_dir)
            msg = (
                "Login not detected after applying cookies. Check COOKIE_JSON or "
                "cookie.json; include auth_token and ct0 and ensure domain is .x.com."
            )
            log.warning(msg)
            raise LoginRequired(msg, debug_files=debug_files)
        advance(RunState.AUTH_CHECKED)
        log.info("Logged-in session detected; proceeding to search.")

        url = build_search_url(query)
        log.info("Navigating to twitter search URL: %s", url)
        await self._navigate(session, url, cfg.search_timeout_ms)
        advance(RunState.SEARCH_NAVIGATED)

        if classify(await session.snapshot(), check="block") is SessionState.BLOCKED:
            if not cookies:
                msg = (
                    "Twitter returned a login/blocked page on search. Provide "
                    "COOKIE_JSON or cookie.json (logged-in cookies) to continue."
                )
                log.warning(msg)
                raise LoginRequired(msg)
            log.warning("Search page looks blocked, continuing because cookies are set.")
        advance(RunState.BLOCK_CHECKED)

        if not await session.wait_for("article", cfg.article_timeout_ms):
            log.warning("Timed out waiting for articles; collecting anyway.")

        advance(RunState.COLLECTING)
        return await collect(
            session,
            max_items,
            cookies_present=bool(cookies),
            scroll_attempts=cfg.scroll_attempts,
            scroll_delay_ms=cfg.scroll_delay_ms,
        )

    @staticmethod
    async def _navigate(session: BrowserSession, url: str, timeout_ms: int) -> None:
        try:
            await session.goto(url, timeout_ms)
        except NavigationError as e:
            log.warning("Navigation to %s failed (non-fatal): %s", url, e.message)

    @staticmethod
    async def _close(session: BrowserSession) -> None:
        try:
            await session.close()
        except Exception as e:
            log.warning("Error while closing browser session: %s", e)
