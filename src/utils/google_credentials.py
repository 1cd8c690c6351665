# pyright: reportMissingTypeStubs=false
"""
Google OAuth2 credentials shared by the Sheets, Drive and Calendar adapters.
"""

import json
import logging

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from core.config import AppConfig
from core.constants import GOOGLE_API_SCOPES
from core.exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


def load_credentials(config: AppConfig) -> Credentials:
    """
    Build authorized-user credentials from the configured JSON string.

    Args:
        config: Application configuration carrying the credentials JSON and
            OAuth2 client id/secret

    Returns:
        Credentials, refreshed if they were expired

    Raises:
        ExternalServiceError: If the JSON is invalid or the refresh fails
    """
    try:
        creds_data = json.loads(config.google_credentials_json)
    except json.JSONDecodeError as e:
        raise ExternalServiceError(f"Invalid credentials JSON: {e}")

    if config.google_client_id:
        creds_data["client_id"] = config.google_client_id
    if config.google_client_secret:
        creds_data["client_secret"] = config.google_client_secret

    try:
        credentials = Credentials.from_authorized_user_info(creds_data, scopes=GOOGLE_API_SCOPES)
        if credentials.expired and credentials.refresh_token:
            credentials.refresh(Request())
            logger.info("Refreshed expired Google credentials")
    except Exception as e:
        raise ExternalServiceError(f"Failed to load Google credentials: {e}")

    return credentials
