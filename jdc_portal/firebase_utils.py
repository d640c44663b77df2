"""Firebase initialisation for the web app and the scheduled sync."""
import os
import json
import logging
from typing import Dict, Any

import firebase_admin
from firebase_admin import credentials

logger = logging.getLogger(__name__)


def get_firebase_credentials() -> Dict[str, Any]:
    """
    Load Firebase credentials from environment variables or file.

    Supports:
    1. FIREBASE_CREDENTIALS_JSON - JSON string or path to JSON file
    2. FIREBASE_CREDENTIALS_PATH - path to service account JSON file
    3. GOOGLE_APPLICATION_CREDENTIALS - path to service account JSON file
    4. Individual environment variables (FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL,
       FIREBASE_PRIVATE_KEY)

    Returns:
        Dict containing Firebase service account credentials

    Raises:
        ValueError: If no valid credentials are found
    """
    creds_json = os.getenv('FIREBASE_CREDENTIALS_JSON')
    if creds_json:
        try:
            return json.loads(creds_json)
        except json.JSONDecodeError:
            if os.path.exists(creds_json):
                with open(creds_json, 'r') as f:
                    return json.load(f)

    for env_name in ('FIREBASE_CREDENTIALS_PATH', 'GOOGLE_APPLICATION_CREDENTIALS'):
        creds_path = os.getenv(env_name)
        if creds_path and os.path.exists(creds_path):
            with open(creds_path, 'r') as f:
                return json.load(f)

    # Deployments only carry the three service-account variables
    if os.getenv('FIREBASE_PROJECT_ID') and os.getenv('FIREBASE_PRIVATE_KEY'):
        return {
            "type": "service_account",
            "project_id": os.getenv('FIREBASE_PROJECT_ID'),
            "private_key": os.getenv('FIREBASE_PRIVATE_KEY', '').replace('\\n', '\n'),
            "client_email": os.getenv('FIREBASE_CLIENT_EMAIL'),
            "token_uri": "https://oauth2.googleapis.com/token",
        }

    raise ValueError(
        "Firebase credentials not found. Please set one of:\n"
        "1. FIREBASE_CREDENTIALS_JSON (JSON string or path to JSON file)\n"
        "2. FIREBASE_CREDENTIALS_PATH (path to service account JSON file)\n"
        "3. GOOGLE_APPLICATION_CREDENTIALS (path to service account JSON file)\n"
        "4. FIREBASE_PROJECT_ID, FIREBASE_CLIENT_EMAIL and FIREBASE_PRIVATE_KEY"
    )


def init_firebase_app() -> bool:
    """
    Initialize the default Firebase app once.

    Uses the Firestore emulator when FIRESTORE_EMULATOR_HOST is set, the
    service account credentials otherwise. Returns True when an app is ready.
    """
    if firebase_admin._apps:
        return True

    firestore_emulator = os.getenv("FIRESTORE_EMULATOR_HOST")
    if firestore_emulator:
        project_id = os.getenv("GCLOUD_PROJECT") or "demo-no-project"
        os.environ.setdefault("GCLOUD_PROJECT", project_id)
        logger.info(f"🔥 Firestore emulator mode: {firestore_emulator}")
        firebase_admin.initialize_app(options={'projectId': project_id})
        return True

    cred = credentials.Certificate(get_firebase_credentials())
    firebase_admin.initialize_app(cred)
    logger.info("✓ Firebase initialized successfully (CLOUD MODE)")
    return True
