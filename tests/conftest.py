from __future__ import annotations

from pathlib import Path

import pytest

from config.settings import ScraperConfig
from core.cookies import Cookie


@pytest.fixture
def scraper_config(tmp_path: Path) -> ScraperConfig:
    return ScraperConfig(
        scroll_delay_ms=0,
        scroll_attempts=12,
        settle_ms=0,
        debug_dir=tmp_path / "debug",
    )


@pytest.fixture
def session_cookies() -> list[Cookie]:
    return [
        Cookie(name="auth_token", value="abc", secure=True, http_only=True),
        Cookie(name="ct0", value="def"),
    ]
