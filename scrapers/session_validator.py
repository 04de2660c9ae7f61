"""Login/block detection for rendered Twitter pages.

Both checks combine structural selectors with text fallbacks; either kind of
evidence is enough on its own.
"""

from __future__ import annotations

import logging

from core.models import SessionState
from scrapers.document import Document

log = logging.getLogger(__name__)

# Affordances only present for a signed-in viewer
AUTHENTICATED_SELECTORS = (
    'a[href="/home"]',
    'a[aria-label="Profile"]',
    'div[aria-label*="Timeline"]',
)

LOGIN_AFFORDANCE_SELECTOR = (
    'div[role="button"][data-testid*="login"], '
    'a[href*="/login"], '
    'button[data-testid="loginButton"]'
)

_BRAND_MARKERS = ("twitter", "x.com")
_LOGIN_PROMPTS = ("log in", "sign up")
_RATE_LIMIT_PHRASES = ("rate limit", "too many requests")
_RESTRICTED_PHRASES = ("you are only seeing", "to view this page")
_LOGGED_OUT_CUES = ("log in", "sign up", "password")


def is_authenticated(document: Document) -> bool:
    for selector in AUTHENTICATED_SELECTORS:
        if document.select_one(selector) is not None:
            return True

    # Login wording on the page is not evidence either way; the result is
    # already negative once the structural affordances are missing.
    body = document.body_text.lower()
    cues = [cue for cue in _LOGGED_OUT_CUES if cue in body]
    if cues:
        log.debug("Logged-out text cues on landing page: %s", cues)
    return False


def is_blocked(document: Document) -> bool:
    body = document.body_text.lower()

    if any(p in body for p in _LOGIN_PROMPTS) and any(b in body for b in _BRAND_MARKERS):
        return True
    if any(p in body for p in _RATE_LIMIT_PHRASES):
        return True
    if any(p in body for p in _RESTRICTED_PHRASES):
        return True
    return document.select_one(LOGIN_AFFORDANCE_SELECTOR) is not None


def classify(document: Document, *, check: str) -> SessionState:
    """Run one of the two checks and map it onto a :class:`SessionState`.

    ``check`` is ``"auth"`` for the landing page and ``"block"`` for the
    search results page.
    """
    if check == "auth":
        if is_authenticated(document):
            return SessionState.AUTHENTICATED
        return SessionState.INDETERMINATE
    if check == "block":
        if is_blocked(document):
            return SessionState.BLOCKED
        return SessionState.INDETERMINATE
    raise ValueError(f"Unknown session check: {check!r}")
