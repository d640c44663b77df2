import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


class Settings:
    # Flask settings
    FLASK_ENV = os.getenv('FLASK_ENV', 'development')
    DEBUG = FLASK_ENV == 'development'
    DEV_MODE = os.getenv('DEV_MODE', 'false').lower() == 'true'
    PORT = _int_env('PORT', 5000)

    # CORS settings
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*').split(',')

    # Firebase settings
    FIREBASE_PROJECT_ID = os.getenv('FIREBASE_PROJECT_ID')
    FIRESTORE_EMULATOR_HOST = os.getenv('FIRESTORE_EMULATOR_HOST')

    # Google OAuth client used with the stored refresh token
    GOOGLE_CLIENT_ID = os.getenv('GOOGLE_CLIENT_ID')
    GOOGLE_CLIENT_SECRET = os.getenv('GOOGLE_CLIENT_SECRET')
    GOOGLE_TOKEN_URI = os.getenv('GOOGLE_TOKEN_URI', 'https://oauth2.googleapis.com/token')

    # Sync settings
    SCHEDULED_TASKS_API_KEY = os.getenv('SCHEDULED_TASKS_API_KEY')
    SYNC_MAX_BATCH_OPERATIONS = min(_int_env('SYNC_MAX_BATCH_OPERATIONS', 490), 500)
    # Read cells through grid data (formattedValue) rather than the values API
    SHEETS_USE_GRID_DATA = os.getenv('SHEETS_USE_GRID_DATA', 'true').lower() == 'true'

    @classmethod
    def validate(cls):
        """Validate settings required by the installation sync"""
        required_vars = [
            'GOOGLE_CLIENT_ID',
            'GOOGLE_CLIENT_SECRET',
        ]

        missing_vars = []
        for var in required_vars:
            if not getattr(cls, var):
                missing_vars.append(var)

        if missing_vars:
            raise ValueError(f"Missing required environment variables: {', '.join(missing_vars)}")

        if cls.SYNC_MAX_BATCH_OPERATIONS <= 0:
            raise ValueError("SYNC_MAX_BATCH_OPERATIONS must be greater than 0")

        return True
