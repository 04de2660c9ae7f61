from __future__ import annotations

import logging
import time
from pathlib import Path

from core.errors import DiagnosticWriteFailure
from scrapers.base import BrowserSession

log = logging.getLogger(__name__)


async def _write_debug_files(session: BrowserSession, prefix: Path) -> tuple[str, str]:
    png_path = prefix.with_suffix(".png")
    html_path = prefix.with_suffix(".html")
    try:
        prefix.parent.mkdir(parents=True, exist_ok=True)
        await session.screenshot(png_path)
        html_path.write_text(await session.content(), encoding="utf-8")
    except Exception as e:
        raise DiagnosticWriteFailure(f"Failed to save debug files: {e}") from e
    return str(png_path), str(html_path)


async def save_debug_snapshot(session: BrowserSession, debug_dir: Path) -> tuple[str, ...]:
    """Write a full-page screenshot and the page HTML for later inspection.

    Returns the written paths, or an empty tuple when writing failed.
    """
    prefix = debug_dir / f"debug_{int(time.time() * 1000)}"
    try:
        files = await _write_debug_files(session, prefix)
    except DiagnosticWriteFailure as e:
        log.warning("%s", e.message)
        return ()
    log.warning("Saved debug files because login was not detected: %s", list(files))
    return files
