from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Post:
    """A single post collected from the search timeline."""

    link: str  # permalink, unique within a run
    text: str
    display_name: str = ""
    handle: str = ""  # without the leading "@"
    likes: int = 0
    verified: bool = False
    timestamp: str | None = None  # raw value read from the page
    timestamp_iso: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "display_name": self.display_name,
            "handle": self.handle,
            "text": self.text,
            "link": self.link,
            "likes": self.likes,
            "verified": self.verified,
            "timestamp": self.timestamp,
            "timestamp_iso": self.timestamp_iso,
        }


class SessionState(enum.Enum):
    AUTHENTICATED = "authenticated"
    BLOCKED = "blocked"
    INDETERMINATE = "indeterminate"


class RunState(enum.Enum):
    INIT = "init"
    SESSION_OPEN = "session_open"
    AUTH_CHECKED = "auth_checked"
    SEARCH_NAVIGATED = "search_navigated"
    BLOCK_CHECKED = "block_checked"
    COLLECTING = "collecting"
    DONE = "done"
    FAILED = "failed"


@dataclass
class RunResult:
    """Outcome of a single scrape run."""

    query: str
    max_items: int
    items: list[Post]
    states: list[RunState] = field(default_factory=list)
    cookies_used: bool = False
    duration_seconds: float = 0.0
