"""Session cookies supplied from the environment or a JSON file on disk."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

DEFAULT_COOKIE_DOMAIN = ".x.com"


@dataclass(frozen=True)
class Cookie:
    name: str
    value: str
    domain: str = DEFAULT_COOKIE_DOMAIN
    path: str = "/"
    http_only: bool = False
    secure: bool = False
    expires: float | None = None

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Cookie:
        """Build a cookie from a browser-export style record.

        Accepts both ``expires`` (Puppeteer/Playwright) and ``expirationDate``
        (browser extensions) for the expiry.
        """
        expires = raw.get("expires", raw.get("expirationDate"))
        return cls(
            name=str(raw["name"]),
            value=str(raw["value"]),
            domain=raw.get("domain") or DEFAULT_COOKIE_DOMAIN,
            path=raw.get("path") or "/",
            http_only=bool(raw.get("httpOnly", False)),
            secure=bool(raw.get("secure", False)),
            expires=float(expires) if expires else None,
        )

    def to_browser(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "name": self.name,
            "value": self.value,
            "domain": self.domain,
            "path": self.path,
            "httpOnly": self.http_only,
            "secure": self.secure,
        }
        if self.expires:
            out["expires"] = self.expires
        return out


def parse_cookies(raw: str) -> list[Cookie] | None:
    """Parse a JSON array of cookie records. Returns None when unusable."""
    try:
        parsed = json.loads(raw)
    except ValueError as e:
        log.warning("Cookie JSON could not be parsed: %s", e)
        return None

    if not isinstance(parsed, list) or not parsed:
        log.warning("Cookie JSON parsed but is not an array or is empty.")
        return None

    cookies: list[Cookie] = []
    for entry in parsed:
        if not isinstance(entry, dict) or not entry.get("name") or "value" not in entry:
            log.debug("Skipping malformed cookie entry: %r", entry)
            continue
        try:
            cookies.append(Cookie.from_dict(entry))
        except (TypeError, ValueError) as e:
            log.debug("Skipping cookie %r: %s", entry.get("name"), e)
    return cookies or None


class CookieSource:
    """Loads cookies from ``COOKIE_JSON`` first, then from the cookie file."""

    def __init__(self, env_json: str | None, file_path: Path | str) -> None:
        self._env_json = env_json
        self._file_path = Path(file_path)

    def load(self) -> list[Cookie] | None:
        if self._env_json:
            cookies = parse_cookies(self._env_json)
            if cookies:
                log.info("Using %d cookies from COOKIE_JSON env var.", len(cookies))
                return cookies

        if not self._file_path.exists():
            log.info("No cookie file found at %s", self._file_path)
            return None

        try:
            raw = self._file_path.read_text(encoding="utf-8")
        except OSError as e:
            log.warning("Failed to read cookie file %s: %s", self._file_path, e)
            return None

        cookies = parse_cookies(raw)
        if cookies:
            log.info("Using %d cookies from %s", len(cookies), self._file_path)
        else:
            log.warning("Cookie file %s holds no usable cookies.", self._file_path)
        return cookies
