"""
Identity dependencies for FastAPI.

Authentication happens in front of the app (e.g. an identity-aware proxy);
the caller's address arrives in a request header.
"""

import logging

from fastapi import HTTPException, Request

from core.config import AppConfig
from core.constants import HTTP_CODE_FORBIDDEN

logger = logging.getLogger(__name__)

IDENTITY_PREFIX = "accounts.google.com:"


def parse_identity_header(value: str) -> str:
    """Strip the proxy's account prefix from an identity header value."""
    value = (value or "").strip()
    if value.startswith(IDENTITY_PREFIX):
        value = value[len(IDENTITY_PREFIX):]
    return value.strip()


def get_app_config(request: Request) -> AppConfig:
    return request.app.state.dispatcher.workspace.config


def get_current_user_email(request: Request) -> str:
    """
    The caller's email address.

    Raises:
        HTTPException: 403 when an allow-list is configured and the caller
            is not on it
    """
    config = get_app_config(request)
    email = parse_identity_header(request.headers.get(config.identity_header, ""))

    if config.allowed_user_emails and email.lower() not in config.allowed_user_emails:
        logger.warning(f"Rejected request from {email or 'anonymous'}")
        raise HTTPException(status_code=HTTP_CODE_FORBIDDEN, detail="Forbidden")

    return email
