from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from core.models import Post

log = logging.getLogger(__name__)


def build_payload(meta: dict[str, Any], posts: Iterable[Post]) -> dict[str, Any]:
    return {"meta": meta, "tweets": [p.to_dict() for p in posts]}


def write_output(path: Path | str, meta: dict[str, Any], posts: Iterable[Post]) -> bool:
    """Best-effort dump of a run to a JSON file. Never raises."""
    out_path = Path(path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)
        out_path.write_text(
            json.dumps(build_payload(meta, posts), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
    except (OSError, TypeError, ValueError) as e:
        log.warning("Could not write %s: %s", out_path, e)
        return False
    log.info("Saved %s", out_path)
    return True
