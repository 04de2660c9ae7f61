from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from api.app import create_app
from api.routers import scrape as scrape_router
from config.settings import ScraperConfig, settings
from core.cookies import CookieSource
from core.errors import LoginRequired
from core.models import Post, RunResult


class _StubScraper:
    def __init__(self, config: ScraperConfig, outcome=None) -> None:
        self.config = config
        self.outcome = outcome
        self.calls: list[tuple] = []
        self.scrape_thread: int | None = None

    async def scrape(self, query, max_items, cookies):
        self.calls.append((query, max_items, cookies))
        self.scrape_thread = threading.get_ident()
        if isinstance(self.outcome, Exception):
            raise self.outcome
        items = [Post(link="https://twitter.com/a/status/1", text="hello", handle="a")]
        return RunResult(query=query, max_items=max_items, items=items)


@pytest.fixture
def output_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    path = tmp_path / "output.json"
    monkeypatch.setattr(settings, "OUTPUT_PATH", str(path))
    return path


@pytest.fixture
def client():
    yield TestClient(create_app())
    scrape_router.set_scraper(None)


def _install(
    tmp_path: Path,
    outcome=None,
    cookie_json: str | None = None,
    max_items_default: int = 1,
    source: CookieSource | None = None,
) -> _StubScraper:
    source = source or CookieSource(cookie_json, tmp_path / "cookie.json")
    config = ScraperConfig(cookie_source=source, max_items_default=max_items_default)
    stub = _StubScraper(config, outcome)
    scrape_router.set_scraper(stub)
    return stub


def test_index_and_health(client) -> None:
    assert client.get("/").json()["ok"] is True
    assert client.get("/health").json() == {"status": "ok"}


def test_missing_query_is_rejected(client, tmp_path) -> None:
    _install(tmp_path)

    resp = client.post("/scrape", json={"max_tweets": 3})

    assert resp.status_code == 400
    assert "filter" in resp.json()["error"]


def test_successful_scrape_echoes_meta_and_writes_output(client, tmp_path, output_path) -> None:
    stub = _install(tmp_path, cookie_json=json.dumps([{"name": "auth_token", "value": "x"}]))

    resp = client.post("/scrape", json={"filter": "  python ", "max_tweets_per_run": "5", "id": 42})

    assert resp.status_code == 200
    body = resp.json()
    assert body["ok"] is True
    assert body["meta"] == {"filter": "python", "max_tweets": 5, "id": 42}
    assert body["tweets"][0]["text"] == "hello"

    query, max_items, cookies = stub.calls[0]
    assert (query, max_items) == ("python", 5)
    assert [c.name for c in cookies] == ["auth_token"]

    saved = json.loads(output_path.read_text(encoding="utf-8"))
    assert saved["meta"]["filter"] == "python"


@pytest.mark.parametrize(
    "raw, expected",
    [("abc", 1), (-4, 1), (None, 1), (7, 7), ("5.5", 5), ("10 tweets", 10), (" 3", 3)],
)
def test_max_tweets_is_clamped(client, tmp_path, output_path, raw, expected) -> None:
    stub = _install(tmp_path)

    client.post("/scrape", json={"query": "q", "max_tweets": raw})

    assert stub.calls[0][1] == expected


def test_login_required_maps_to_403(client, tmp_path) -> None:
    _install(tmp_path, outcome=LoginRequired("Login not detected"))

    resp = client.post("/scrape", json={"filter": "python"})

    assert resp.status_code == 403
    body = resp.json()
    assert body["error"] == "login_required"
    assert body["message"] == "Login not detected"
    assert "cookie" in body["hint"].lower()


def test_other_failures_map_to_500(client, tmp_path) -> None:
    _install(tmp_path, outcome=RuntimeError("browser crashed"))

    resp = client.post("/scrape", json={"filter": "python"})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "browser crashed"}


def test_scraper_not_initialized(client) -> None:
    scrape_router.set_scraper(None)

    resp = client.post("/scrape", json={"filter": "python"})

    assert resp.status_code == 503


@pytest.mark.parametrize("body", [{"filter": "q"}, {"filter": "q", "max_tweets": "lots"}])
def test_configured_default_applies_when_count_missing_or_unreadable(
    client, tmp_path, output_path, body
) -> None:
    stub = _install(tmp_path, max_items_default=5)

    resp = client.post("/scrape", json=body)

    assert resp.json()["meta"]["max_tweets"] == 5
    assert stub.calls[0][1] == 5


class _ThreadRecordingSource(CookieSource):
    def __init__(self, path: Path) -> None:
        super().__init__(None, path)
        self.load_thread: int | None = None

    def load(self):
        self.load_thread = threading.get_ident()
        return super().load()


def test_cookies_are_loaded_off_the_event_loop(client, tmp_path, output_path) -> None:
    source = _ThreadRecordingSource(tmp_path / "cookie.json")
    stub = _install(tmp_path, source=source)

    resp = client.post("/scrape", json={"filter": "python"})

    assert resp.status_code == 200
    assert source.load_thread is not None
    assert source.load_thread != stub.scrape_thread
