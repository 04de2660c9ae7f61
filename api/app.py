from __future__ import annotations

from fastapi import FastAPI

from api.routers import scrape


def create_app() -> FastAPI:
    app = FastAPI(title="Twitter Search Scraper", version="0.1.0")

    app.include_router(scrape.router)

    # Health check
    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app
