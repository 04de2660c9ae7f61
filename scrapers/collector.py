"""Scroll-and-deduplicate collection loop."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, timezone

from dateutil import parser as date_parser

from core.errors import LoginRequired
from core.models import Post
from scrapers.base import BrowserSession
from scrapers.extractor import extract_posts
from scrapers.session_validator import is_blocked

log = logging.getLogger(__name__)

DEFAULT_SCROLL_ATTEMPTS = 12
DEFAULT_SCROLL_DELAY_MS = 1000
SCROLL_FRACTION = 0.9

# Free-text dates must name a year; "3h" or "45m" stay unparsed
_YEAR_RE = re.compile(r"\b\d{4}\b")


def merge_posts(collected: dict[str, Post], batch: Iterable[Post]) -> int:
    """Add unseen posts to ``collected`` keyed by permalink.

    Earlier occurrences are never replaced. Returns the number added.
    """
    added = 0
    for post in batch:
        if post.link and post.link not in collected:
            collected[post.link] = post
            added += 1
    return added


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse an ISO datetime attribute or the visible text of a time element."""
    if not raw or not raw.strip():
        return None
    raw = raw.strip()
    try:
        dt = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        if not _YEAR_RE.search(raw):
            return None
        try:
            dt = date_parser.parse(raw)
        except (ValueError, OverflowError):
            return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def normalize_timestamp(raw: str | None) -> str | None:
    """``2024-05-01T10:00:00+02:00`` -> ``2024-05-01T08:00:00.000Z``"""
    dt = parse_timestamp(raw)
    if dt is None:
        return None
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _sort_key(post: Post) -> float:
    dt = parse_timestamp(post.timestamp_iso)
    return dt.timestamp() if dt else 0.0


def finalize_posts(posts: Iterable[Post], max_items: int) -> list[Post]:
    """Normalize timestamps, order newest first and truncate."""
    out = list(posts)
    for post in out:
        post.timestamp_iso = normalize_timestamp(post.timestamp)
    # stable sort keeps discovery order between equal timestamps
    out.sort(key=_sort_key, reverse=True)
    return out[:max_items]


async def collect(
    session: BrowserSession,
    max_items: int,
    *,
    cookies_present: bool,
    scroll_attempts: int = DEFAULT_SCROLL_ATTEMPTS,
    scroll_delay_ms: int = DEFAULT_SCROLL_DELAY_MS,
) -> list[Post]:
    """Extract, scroll and repeat until enough posts or the page stops growing.

    Running out of scroll attempts is not an error; whatever was found is
    returned. With nothing found and no cookies, a login/block page raises
    :class:`LoginRequired`.
    """
    collected: dict[str, Post] = {}
    stagnant = 0
    last_height = 0
    passes = 0

    while len(collected) < max_items and stagnant < scroll_attempts:
        passes += 1
        document = await session.snapshot()
        added = merge_posts(collected, extract_posts(document))
        log.debug("Pass %d: %d new, %d total", passes, added, len(collected))

        if len(collected) >= max_items:
            break

        height = await session.scroll_height()
        if height == last_height:
            stagnant += 1
        else:
            stagnant = 0
            last_height = height

        await session.scroll_by_viewport(SCROLL_FRACTION)
        await session.pause(scroll_delay_ms)

    log.info(
        "Collection finished after %d passes: %d posts (stagnant scrolls: %d)",
        passes, len(collected), stagnant,
    )

    if not collected:
        document = await session.snapshot()
        if is_blocked(document) and not cookies_present:
            raise LoginRequired(
                "After navigation, page appears blocked or requires login. "
                "Provide valid cookies."
            )

    return finalize_posts(collected.values(), max_items)
