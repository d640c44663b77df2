from flask import request, jsonify
from firebase_admin import firestore

from . import installations_bp
from jdc_portal.middleware.error_middleware import ErrorHandler
from jdc_portal.models.installation_model import InstallationModel
from jdc_portal.models.sectors import get_sector
from jdc_portal.utils.validators import Validators, Helpers


@installations_bp.get("/snapshot")
def get_installations_snapshot():
    """
    Installation counts by status, overall and per sector.

    Query params:
    - sectors: comma separated sectors to include (default: all)
    """
    sectors = Helpers.parse_sector_list(request.args.get("sectors"))
    for sector in sectors:
        if not Validators.validate_sector(sector):
            return ErrorHandler.handle_not_found_error(f"Sector '{sector}'")

    model = InstallationModel(firestore.client())
    return jsonify(model.snapshot(sectors or None)), 200


@installations_bp.get("/<sector>")
def get_sector_installations(sector):
    """
    List the installations of a sector.

    Query params:
    - status: only return installations with this status
    """
    schema = get_sector(sector)
    status = request.args.get("status")
    if status and not Validators.validate_status(status):
        return ErrorHandler.handle_validation_error(f"Invalid status: {status}")

    model = InstallationModel(firestore.client())
    installations = model.list_by_sector(schema.secteur, status=status)
    return jsonify({
        "secteur": schema.secteur,
        "count": len(installations),
        "installations": installations
    }), 200
