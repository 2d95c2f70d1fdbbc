from __future__ import annotations

import argparse
import logging
import threading

import uvicorn

from olx_monitor.config import load_settings
from olx_monitor.monitor import MonitorService
from olx_monitor.web import create_app


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="OLX listing monitor with Telegram alerts")
    parser.add_argument("--once", action="store_true", help="Run one scrape and exit")
    parser.add_argument(
        "--serve",
        action="store_true",
        help="Serve the manual /scrape trigger and poll in the background",
    )
    parser.add_argument("--dry-run", action="store_true", help="Do not send Telegram messages")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    settings = load_settings()
    log_level = logging.DEBUG if args.debug else getattr(logging, settings.log_level, logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    service = MonitorService(settings)

    if args.once:
        summaries = service.scrape(dry_run=args.dry_run)
        new = sum(summary.notified for summary in summaries)
        logging.getLogger(__name__).info("One-shot done: channels=%s new=%s", len(summaries), new)
        return

    if args.serve:
        poller = threading.Thread(
            target=service.run_forever,
            kwargs={"dry_run": args.dry_run},
            name="poller",
            daemon=True,
        )
        poller.start()
        app = create_app(service, dry_run=args.dry_run)
        uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=logging.getLevelName(log_level).lower())
        return

    service.run_forever(dry_run=args.dry_run)


if __name__ == "__main__":
    main()
