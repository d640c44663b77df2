"""
Sync endpoint called by the scheduler (or the admin sync panel) to pull the
sector spreadsheets into Firestore.
"""
import logging
from flask import jsonify
from firebase_admin import firestore

from . import sync_bp
from jdc_portal.config.settings import Settings
from jdc_portal.middleware.auth_middleware import ApiKeyMiddleware
from jdc_portal.services.sync_service import run_installation_sync

logger = logging.getLogger(__name__)


@sync_bp.post("/sync-installations")
@ApiKeyMiddleware.require_api_key
def sync_installations():
    """Run one installation sync cycle over every sector."""
    logger.info("Installation sync requested")
    try:
        db = firestore.client()
        report = run_installation_sync(db, Settings)
    except Exception as e:
        logger.error(f"Installation sync failed: {e}")
        return jsonify({
            "success": False,
            "message": "Installation sync failed",
            "error": str(e)
        }), 500

    message = "Installation sync completed"
    if not report.ok:
        message += f" with errors in: {', '.join(report.failed_sectors)}"

    return jsonify({
        "success": True,
        "message": message,
        "results": report.to_dict()
    }), 200
