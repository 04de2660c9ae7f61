from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from urllib.parse import urljoin

from core.errors import ExtractionItemError
from core.models import Post
from scrapers.document import Document, Node

log = logging.getLogger(__name__)

BASE_URL = "https://twitter.com"

ARTICLE_SELECTOR = "article"
TEXT_SELECTOR = '[data-testid="tweetText"]'
PERMALINK_SELECTOR = 'a[href*="/status/"]'
LIKE_SELECTOR = '[data-testid="like"]'
VERIFIED_SELECTOR = '[data-testid="icon-verified"]'
HEADER_NAME_SELECTOR = 'div[dir="auto"] span'

_STATUS_SEGMENT = "/status/"
_ABSOLUTE_PROFILE_RE = re.compile(r"(?:twitter|x)\.com/[^/]+$")
_ORIGIN_RE = re.compile(r"^https?://(?:www\.)?(?:twitter|x)\.com")
_HANDLE_RE = re.compile(r"@([A-Za-z0-9_]{1,15})")
_COUNT_RE = re.compile(r"\d[\d,]*")


def extract_posts(document: Document) -> Iterator[Post]:
    """Yield the posts visible in a page snapshot, once per permalink.

    A candidate that fails to parse is skipped; it never aborts the pass.
    """
    seen: set[str] = set()
    for article in document.select(ARTICLE_SELECTOR):
        try:
            post = _parse_candidate(article)
        except ExtractionItemError as e:
            log.debug("Skipping article: %s", e.message)
            continue
        if post is None or post.link in seen:
            continue
        seen.add(post.link)
        yield post


def _parse_candidate(article: Node) -> Post | None:
    try:
        return _parse_article(article)
    except Exception as e:
        raise ExtractionItemError(f"Malformed article: {e}") from e


def _parse_article(article: Node) -> Post | None:
    text_el = article.select_one(TEXT_SELECTOR)
    text = text_el.text.strip() if text_el else ""

    status_anchor = article.select_one(PERMALINK_SELECTOR)
    href = (status_anchor.attr("href") or "") if status_anchor else ""
    link = urljoin(BASE_URL, href) if href else ""

    if not text or not link:
        return None

    profile = find_profile_anchor(article)
    if profile is not None:
        handle = handle_from_href(profile.attr("href") or "")
        display_name = _display_name_from_anchor(article, profile)
    else:
        display_name = _first_text(article, HEADER_NAME_SELECTOR)
        m = _HANDLE_RE.search(article.text)
        handle = m.group(1) if m else ""

    time_el = article.select_one("time")
    timestamp = None
    if time_el is not None:
        timestamp = time_el.attr("datetime") or time_el.text or None

    return Post(
        link=link,
        text=text,
        display_name=display_name,
        handle=handle,
        likes=_like_count(article),
        verified=article.select_one(VERIFIED_SELECTOR) is not None,
        timestamp=timestamp,
    )


def find_profile_anchor(article: Node) -> Node | None:
    """Pick the link pointing at the author's profile, not the permalink."""
    anchors = article.select("a[href]")
    for a in anchors:
        href = a.attr("href") or ""
        if not href or _STATUS_SEGMENT in href:
            continue
        parts = [p for p in href.split("?")[0].split("/") if p]
        if len(parts) == 1:
            return a

    for a in anchors:
        if _ABSOLUTE_PROFILE_RE.search(a.attr("href") or ""):
            return a
    return None


def handle_from_href(href: str) -> str:
    """``https://twitter.com/@jack?ref=x`` -> ``jack``"""
    path = _ORIGIN_RE.sub("", href)
    path = path.split("?")[0].split("#")[0]
    if path.startswith("/"):
        path = path[1:]
    if not path:
        return ""
    return path.split("/")[0].lstrip("@").strip()


def _display_name_from_anchor(article: Node, anchor: Node) -> str:
    name = _first_text(anchor, "div span") or _first_text(anchor, "span")
    if name:
        return name
    name = _first_text(article, HEADER_NAME_SELECTOR)
    if name:
        return name
    for attr in ("aria-label", "title"):
        value = (anchor.attr(attr) or "").strip()
        if value:
            return value
    return ""


def _first_text(node: Node, css: str) -> str:
    el = node.select_one(css)
    return el.text.strip() if el is not None else ""


def _like_count(article: Node) -> int:
    button = article.select_one(LIKE_SELECTOR)
    if button is None:
        return 0
    label = button.attr("aria-label") or button.text or ""
    m = _COUNT_RE.search(label)
    return int(m.group(0).replace(",", "")) if m else 0
