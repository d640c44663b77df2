"""
Error Handling Middleware
Centralized error handling and logging
"""
import logging
import traceback
from flask import jsonify
from werkzeug.exceptions import HTTPException

from jdc_portal.errors import SyncError, UnknownSectorError
from jdc_portal.utils.validators import Helpers

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class ErrorHandler:
    """Centralized error handling service"""

    @staticmethod
    def handle_validation_error(error_message: str = "Validation failed") -> tuple:
        """Handle validation errors"""
        logger.warning(f"Validation error: {error_message}")

        return jsonify(Helpers.build_error_response(
            message=error_message,
            code="VALIDATION_ERROR"
        )), 400

    @staticmethod
    def handle_authentication_error(error_message: str = "Unauthorized") -> tuple:
        """Handle authentication errors"""
        logger.warning(f"Authentication error: {error_message}")

        return jsonify(Helpers.build_error_response(
            message=error_message,
            code="AUTHENTICATION_ERROR"
        )), 401

    @staticmethod
    def handle_not_found_error(resource: str = "Resource") -> tuple:
        """Handle not found errors"""
        logger.info(f"Not found error: {resource}")

        return jsonify(Helpers.build_error_response(
            message=f"{resource} not found",
            code="NOT_FOUND"
        )), 404

    @staticmethod
    def handle_sync_error(error: Exception) -> tuple:
        """Handle installation sync errors"""
        logger.error(f"Sync error: {str(error)}")

        return jsonify(Helpers.build_error_response(
            message=str(error),
            code="SYNC_ERROR"
        )), 500

    @staticmethod
    def handle_generic_error(error: Exception) -> tuple:
        """Handle generic errors"""
        logger.error(f"Unexpected error: {str(error)}")
        logger.error(f"Traceback: {traceback.format_exc()}")

        return jsonify(Helpers.build_error_response(
            message="An unexpected error occurred",
            code="INTERNAL_ERROR"
        )), 500


def register_error_handlers(app):
    """Register error handlers with Flask app"""

    @app.errorhandler(UnknownSectorError)
    def handle_unknown_sector(error):
        return ErrorHandler.handle_not_found_error(f"Sector '{error.sector}'")

    @app.errorhandler(SyncError)
    def handle_sync_error(error):
        return ErrorHandler.handle_sync_error(error)

    @app.errorhandler(404)
    def handle_not_found(error):
        return ErrorHandler.handle_not_found_error("Endpoint")

    @app.errorhandler(405)
    def handle_method_not_allowed(error):
        return jsonify(Helpers.build_error_response(
            message="Method not allowed",
            code="METHOD_NOT_ALLOWED"
        )), 405

    @app.errorhandler(Exception)
    def handle_unhandled_exception(error):
        if isinstance(error, HTTPException):
            return jsonify(Helpers.build_error_response(
                message=error.description,
                code=error.name.upper().replace(" ", "_")
            )), error.code
        return ErrorHandler.handle_generic_error(error)
