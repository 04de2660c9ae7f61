from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

from core.cookies import Cookie
from core.models import RunResult
from scrapers.document import Document


class BaseScraper(ABC):
    source_name: str

    @abstractmethod
    async def scrape(
        self, query: str, max_items: int, cookies: Sequence[Cookie] | None
    ) -> RunResult:
        """Execute a full scrape for one query."""
        ...


class BrowserSession(ABC):
    """One browser with one page, owned by a single scrape run.

    Every method is a suspension point. Navigation raises
    ``NavigationTimeout`` / ``NavigationFailure``; the other calls report
    problems through their return value.
    """

    @abstractmethod
    async def add_cookies(self, cookies: Sequence[Cookie]) -> None: ...

    @abstractmethod
    async def goto(self, url: str, timeout_ms: int) -> None: ...

    @abstractmethod
    async def wait_for(self, selector: str, timeout_ms: int) -> bool:
        """Wait for ``selector`` to appear. False on timeout."""
        ...

    @abstractmethod
    async def pause(self, ms: int) -> None: ...

    @abstractmethod
    async def snapshot(self) -> Document: ...

    @abstractmethod
    async def scroll_height(self) -> int:
        """Height of the scrollable content, 0 when it cannot be measured."""
        ...

    @abstractmethod
    async def scroll_by_viewport(self, fraction: float = 0.9) -> None: ...

    @abstractmethod
    async def screenshot(self, path: Path) -> None: ...

    @abstractmethod
    async def content(self) -> str: ...

    @abstractmethod
    async def close(self) -> None: ...
