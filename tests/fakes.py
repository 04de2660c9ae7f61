from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from core.cookies import Cookie
from core.errors import NavigationTimeout
from scrapers.base import BrowserSession
from scrapers.document import HtmlDocument

HOME_LOGGED_IN = """
<html><body>
  <nav><a href="/home" aria-label="Home">Home</a></nav>
  <div aria-label="Timeline: Your Home Timeline"></div>
</body></html>
"""

HOME_LOGGED_OUT = """
<html><body>
  <h1>Happening now</h1>
  <p>Join today. Sign up or log in with your password.</p>
</body></html>
"""

SEARCH_EMPTY = "<html><body><main><p>Latest</p></main></body></html>"


def article_html(
    status_id: str,
    text: str,
    *,
    handle: str = "alice",
    name: str = "Alice Example",
    likes: str | None = "12 Likes. Like",
    timestamp: str | None = "2024-05-01T10:00:00.000Z",
    verified: bool = False,
) -> str:
    like = f'<div data-testid="like" aria-label="{likes}"></div>' if likes is not None else ""
    time_el = f'<time datetime="{timestamp}">May 1</time>' if timestamp else ""
    badge = '<svg data-testid="icon-verified"></svg>' if verified else ""
    return f"""
    <article>
      <a href="/{handle}"><div><span>{name}</span></div></a>{badge}
      <a href="/{handle}/status/{status_id}">{time_el}</a>
      <div data-testid="tweetText"><span>{text}</span></div>
      {like}
    </article>
    """


def page_html(*articles: str) -> str:
    return "<html><body><main>" + "".join(articles) + "</main></body></html>"


class FakeSession(BrowserSession):
    """Scripted browser: each URL maps to the HTML it renders.

    ``search_pages`` is consumed one snapshot at a time while collecting; the
    last page repeats once the script runs out. ``heights`` works the same way
    for the scroll height.
    """

    def __init__(
        self,
        pages: dict[str, str] | None = None,
        *,
        search_pages: Sequence[str] = (),
        heights: Sequence[int] = (900,),
        fail_goto: set[str] | None = None,
        article_appears: bool = True,
    ) -> None:
        self.pages = dict(pages or {})
        self.search_pages = list(search_pages)
        self.heights = list(heights)
        self.fail_goto = fail_goto or set()
        self.article_appears = article_appears
        self.url = "about:blank"
        self.visited: list[str] = []
        self.cookies: list[Cookie] = []
        self.scrolls = 0
        self.pauses: list[int] = []
        self.snapshots = 0
        self.screenshots: list[Path] = []
        self.closed = False

    async def add_cookies(self, cookies: Sequence[Cookie]) -> None:
        self.cookies.extend(cookies)

    async def goto(self, url: str, timeout_ms: int) -> None:
        self.visited.append(url)
        self.url = url
        if url in self.fail_goto:
            raise NavigationTimeout(f"Timed out loading {url}", url=url)

    async def wait_for(self, selector: str, timeout_ms: int) -> bool:
        return self.article_appears

    async def pause(self, ms: int) -> None:
        self.pauses.append(ms)

    def _current_html(self) -> str:
        if "/search" in self.url and self.search_pages:
            idx = min(self.snapshots, len(self.search_pages) - 1)
            self.snapshots += 1
            return self.search_pages[idx]
        return self.pages.get(self.url, SEARCH_EMPTY)

    async def snapshot(self) -> HtmlDocument:
        return HtmlDocument(self._current_html())

    async def scroll_height(self) -> int:
        idx = min(self.scrolls, len(self.heights) - 1)
        return self.heights[idx]

    async def scroll_by_viewport(self, fraction: float = 0.9) -> None:
        self.scrolls += 1

    async def screenshot(self, path: Path) -> None:
        self.screenshots.append(path)
        path.write_bytes(b"\x89PNG")

    async def content(self) -> str:
        return self._current_html()

    async def close(self) -> None:
        self.closed = True


