"""Locate the stored Google refresh token used by the scheduled sync."""
import logging

from google.oauth2.credentials import Credentials
from google.cloud.firestore_v1.base_query import FieldFilter

from jdc_portal.config.settings import Settings
from jdc_portal.errors import CredentialNotFoundError
from jdc_portal.services.sheets_service import SHEETS_SCOPES

logger = logging.getLogger(__name__)

ADMIN_ROLE = "Admin"


def _first_token(docs):
    for doc in docs:
        token = (doc.to_dict() or {}).get("googleRefreshToken")
        if token is not None:
            return token
    return None


def get_google_refresh_token(db) -> str:
    """
    Return a Google refresh token stored on a user document.

    Admin users are tried first, then every user.

    Raises:
        CredentialNotFoundError: if no user carries a token
    """
    users = db.collection("users")

    token = _first_token(users.where(filter=FieldFilter("role", "==", ADMIN_ROLE)).stream())
    if token is not None:
        logger.info("Admin user with a Google refresh token found")
        return token

    token = _first_token(users.stream())
    if token is not None:
        logger.info("Non-admin user with a Google refresh token found")
        return token

    logger.error("No user with a Google refresh token found in Firestore")
    raise CredentialNotFoundError("No user with a Google refresh token found in Firestore")


def build_google_credentials(refresh_token: str, settings=Settings) -> Credentials:
    """OAuth2 credentials that refresh themselves from `refresh_token`"""
    return Credentials(
        token=None,
        refresh_token=refresh_token,
        token_uri=settings.GOOGLE_TOKEN_URI,
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        scopes=SHEETS_SCOPES,
    )
