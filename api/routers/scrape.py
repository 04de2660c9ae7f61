from __future__ import annotations

import asyncio
import logging
import re
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from core.errors import LoginRequired
from data.output import build_payload, write_output

log = logging.getLogger(__name__)

router = APIRouter(tags=["scrape"])

_LEADING_INT_RE = re.compile(r"\s*-?\d+")

LOGIN_HINT = (
    "Provide COOKIE_JSON env var or place cookie.json in project folder with "
    "logged-in Twitter cookies (include auth_token and ct0)."
)

# The scraper reference is injected by main.py at startup
_scraper = None


def set_scraper(scraper) -> None:
    global _scraper
    _scraper = scraper


def _parse_max_items(body: dict[str, Any], default: int) -> int:
    """Read the requested tweet count the way parseInt would: "10 tweets" -> 10."""
    raw = body.get("max_tweets_per_run") or body.get("max_tweets")
    m = _LEADING_INT_RE.match(str(raw)) if raw else None
    value = int(m.group(0)) if m else default
    return max(1, value)


@router.get("/")
async def index():
    return {"ok": True, "message": "Twitter scraper up. POST JSON to /scrape"}


@router.post("/scrape")
async def scrape(request: Request):
    try:
        body = await request.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    query = str(body.get("filter") or body.get("query") or "").strip()
    if not query:
        return JSONResponse({"error": "filter (query) is required in body"}, status_code=400)
    if _scraper is None:
        return JSONResponse({"ok": False, "error": "Scraper not initialized"}, status_code=503)

    max_items = _parse_max_items(body, _scraper.config.max_items_default)
    meta = {"filter": query, "max_tweets": max_items, "id": body.get("id")}
    log.info("Received scrape request: filter=%r max_tweets=%d", query, max_items)

    source = _scraper.config.cookie_source
    cookies = await asyncio.to_thread(source.load) if source is not None else None

    try:
        result = await _scraper.scrape(query, max_items, cookies)
    except LoginRequired as e:
        log.error("Scrape '%s' needs login: %s", query, e.message)
        return JSONResponse(
            {
                "ok": False,
                "error": e.code,
                "message": e.message,
                "hint": LOGIN_HINT,
            },
            status_code=403,
        )
    except Exception as e:
        log.exception("Scrape '%s' failed", query)
        return JSONResponse({"ok": False, "error": str(e) or "scrape_failed"}, status_code=500)

    await asyncio.to_thread(write_output, settings.OUTPUT_PATH, meta, result.items)
    return {"ok": True, **build_payload(meta, result.items)}
