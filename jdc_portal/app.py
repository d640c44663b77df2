import logging
from flask import Flask, jsonify
from flask_cors import CORS
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from jdc_portal.api import sync_bp, installations_bp
from jdc_portal.config.settings import Settings
from jdc_portal.firebase_utils import init_firebase_app
from jdc_portal.middleware.error_middleware import register_error_handlers

logger = logging.getLogger(__name__)


def init_firebase():
    """Initialize Firebase, but allow app to run without it in dev mode."""
    if Settings.DEV_MODE:
        logger.info("🔧 Running in DEV_MODE - Firebase disabled")
        return False

    try:
        return init_firebase_app()
    except ValueError as e:
        logger.warning(f"⚠️  {e}")
        logger.warning("   To use the emulator instead, set FIRESTORE_EMULATOR_HOST=localhost:8080")
        return False
    except Exception as e:
        logger.error(f"❌ Firebase initialization failed: {e}")
        return False


def create_app():
    """Create and configure the Flask application."""
    app = Flask(__name__)

    CORS(app,
         resources={r"/*": {"origins": Settings.CORS_ORIGINS}},
         allow_headers=["Content-Type", "X-API-Key", "Authorization"],
         methods=["GET", "POST", "OPTIONS"])

    # Allow app to start even if Firebase fails
    firebase_initialized = init_firebase()

    @app.get("/")
    def health():
        return jsonify({
            "status": "ok",
            "service": "installations-sync",
            "firebase": "connected" if firebase_initialized else "not configured"
        }), 200

    register_error_handlers(app)

    app.register_blueprint(sync_bp)
    app.register_blueprint(installations_bp)

    return app


def main():
    """Main entry point for running the application."""
    app = create_app()
    app.run(host="0.0.0.0", port=Settings.PORT, debug=Settings.DEBUG)


if __name__ == "__main__":  # pragma: no cover
    main()
