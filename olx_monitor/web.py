from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from olx_monitor.monitor import MonitorService

STATUS_TEXT = "✅ OLX monitor is running"
SCRAPE_ACK_TEXT = "🚀 Manual scrape triggered"


def create_app(service: MonitorService, dry_run: bool = False) -> FastAPI:
    app = FastAPI(title="OLX monitor")

    @app.get("/", response_class=PlainTextResponse)
    def status() -> str:
        return STATUS_TEXT

    @app.get("/scrape", response_class=PlainTextResponse)
    def manual_scrape() -> str:
        service.scrape(dry_run=dry_run)
        return SCRAPE_ACK_TEXT

    return app
