"""Twitter search scraper — entry point."""

from __future__ import annotations

import logging

import uvicorn

from api.app import create_app
from api.routers.scrape import set_scraper
from config.settings import ScraperConfig, settings
from scrapers.twitter import TwitterScraper

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
)
log = logging.getLogger(__name__)

app = create_app()


@app.on_event("startup")
async def on_startup() -> None:
    config = ScraperConfig.from_settings(settings)
    set_scraper(TwitterScraper(config))
    log.info(
        "Scraper ready (headless=%s, scroll attempts=%d, scroll delay=%dms)",
        config.headless, config.scroll_attempts, config.scroll_delay_ms,
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.PORT,
        reload=False,
    )
