from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from pydantic_settings import BaseSettings

from core.cookies import CookieSource

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/115.0.0.0 Safari/537.36"
)


class Settings(BaseSettings):
    # Server
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # Collection loop
    MAX_ITEMS_DEFAULT: int = 1
    SCROLL_DELAY_MS: int = 1000
    MAX_SCROLL_ATTEMPTS: int = 12

    # Cookies
    COOKIE_JSON: str | None = None
    COOKIE_FILE_PATH: str = "./cookie.json"

    # Browser
    HEADLESS: bool = True
    CHROME_EXECUTABLE_PATH: str | None = None
    USER_AGENT: str = DEFAULT_USER_AGENT

    # Timeouts (milliseconds)
    HOME_NAV_TIMEOUT_MS: int = 30_000
    SEARCH_NAV_TIMEOUT_MS: int = 60_000
    ARTICLE_WAIT_TIMEOUT_MS: int = 15_000
    RENDER_SETTLE_MS: int = 1_500

    # Output
    OUTPUT_PATH: str = "./output.json"
    DEBUG_DIR: str = "."

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


@dataclass(frozen=True)
class ScraperConfig:
    """Everything the scrape orchestrator needs, resolved once at startup."""

    cookie_source: CookieSource | None = None
    max_items_default: int = 1
    scroll_delay_ms: int = 1000
    scroll_attempts: int = 12
    headless: bool = True
    browser_path: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    home_timeout_ms: int = 30_000
    search_timeout_ms: int = 60_000
    article_timeout_ms: int = 15_000
    settle_ms: int = 1_500
    debug_dir: Path = Path(".")

    @classmethod
    def from_settings(cls, s: Settings) -> ScraperConfig:
        return cls(
            cookie_source=CookieSource(s.COOKIE_JSON, s.COOKIE_FILE_PATH),
            max_items_default=max(1, s.MAX_ITEMS_DEFAULT),
            scroll_delay_ms=s.SCROLL_DELAY_MS,
            scroll_attempts=s.MAX_SCROLL_ATTEMPTS,
            headless=s.HEADLESS,
            browser_path=s.CHROME_EXECUTABLE_PATH or None,
            user_agent=s.USER_AGENT or DEFAULT_USER_AGENT,
            home_timeout_ms=s.HOME_NAV_TIMEOUT_MS,
            search_timeout_ms=s.SEARCH_NAV_TIMEOUT_MS,
            article_timeout_ms=s.ARTICLE_WAIT_TIMEOUT_MS,
            settle_ms=s.RENDER_SETTLE_MS,
            debug_dir=Path(s.DEBUG_DIR),
        )
