"""Entry point for the cron-triggered installation sync.

Usage:
  python -m jdc_portal.scheduled

The hosting platform calls `handler(event, context)` with no payload; the
return value is the HTTP-style response it expects.
"""
import json
import logging

from dotenv import load_dotenv

load_dotenv()

from firebase_admin import firestore

from jdc_portal.config.settings import Settings
from jdc_portal.firebase_utils import init_firebase_app
from jdc_portal.services.sync_service import run_installation_sync

logger = logging.getLogger(__name__)


def _response(status_code: int, payload: dict) -> dict:
    return {
        "statusCode": status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload, ensure_ascii=False),
    }


def handler(event=None, context=None) -> dict:
    logger.info("[sync-installations] Scheduled sync started")
    try:
        init_firebase_app()
        report = run_installation_sync(firestore.client(), Settings)
    except Exception as e:
        logger.error(f"[sync-installations] Sync failed: {e}")
        return _response(500, {"message": "Installation sync failed", "error": str(e)})

    payload = {"message": "Installation sync completed", "results": report.to_dict()}
    if not report.ok:
        payload["error"] = f"Errors in sectors: {', '.join(report.failed_sectors)}"
    logger.info("[sync-installations] Scheduled sync finished")
    return _response(200, payload)


def main() -> int:
    """Run the sync once from a shell and print the response body."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    result = handler()
    print(result["body"])
    return 0 if result["statusCode"] == 200 else 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
