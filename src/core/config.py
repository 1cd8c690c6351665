"""
Application configuration using python-dotenv.

This module loads environment variables from a .env file into os.environ and
collects them into an immutable AppConfig, built once per process start.
"""

import os
import pathlib
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from dotenv import load_dotenv


# Don't load .env file during testing to ensure predictable test behavior
is_testing = os.getenv("PYTEST_VERSION") is not None

if not is_testing:
    # Try multiple possible locations for .env file
    possible_paths = [
        pathlib.Path(__file__).parent.parent.parent / ".env",  # project root (src layout)
        pathlib.Path.cwd() / ".env",  # .env in current directory
    ]

    for env_path in possible_paths:
        if env_path.exists():
            load_dotenv(env_path)
            break


DEFAULT_TEMPLATE_DIR = pathlib.Path(__file__).parent.parent.parent / "templates"


@dataclass(frozen=True)
class AppConfig:
    """
    Process-wide configuration.

    Attributes:
        master_sheet_id: Spreadsheet holding the Master Index
        calendar_id: Google Calendar the visits are booked on
        root_folder_name: Drive folder every patient folder lives under
        visit_default_price: Price proposed for a new visit
        time_zone: IANA time zone used for visit dates and "today"
        visit_duration_minutes: Length of a booked calendar event
        base_url: Public URL of the app, used to build redirect links
        google_credentials_json: Authorized-user credentials JSON string
        google_client_id: OAuth2 client id merged into the credentials
        google_client_secret: OAuth2 client secret merged into the credentials
        identity_header: Request header carrying the caller's address
        allowed_user_emails: Addresses allowed to use the app (empty = anyone)
        template_dir: Directory holding the view templates
    """
    master_sheet_id: str = ""
    calendar_id: str = "primary"
    root_folder_name: str = "MD-SOLO-PRACTICE"
    visit_default_price: Decimal = Decimal("30000.00")
    time_zone: str = "UTC"
    visit_duration_minutes: int = 60
    base_url: str = "http://localhost:8000/"
    google_credentials_json: str = ""
    google_client_id: str = ""
    google_client_secret: str = ""
    identity_header: str = "X-Goog-Authenticated-User-Email"
    allowed_user_emails: Tuple[str, ...] = field(default_factory=tuple)
    template_dir: str = str(DEFAULT_TEMPLATE_DIR)


def _parse_price(raw: Optional[str]) -> Decimal:
    if not raw:
        return AppConfig.visit_default_price
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"VISIT_DEFAULT_PRICE is not a number: {raw!r}")


def load_config() -> AppConfig:
    """Read the configuration from the environment."""
    return AppConfig(
        master_sheet_id=os.getenv("MASTER_SHEET_ID", ""),
        calendar_id=os.getenv("MD_CALENDAR_ID", "primary"),
        root_folder_name=os.getenv("ROOT_FOLDER_NAME", "MD-SOLO-PRACTICE"),
        visit_default_price=_parse_price(os.getenv("VISIT_DEFAULT_PRICE")),
        time_zone=os.getenv("APP_TIME_ZONE", "UTC"),
        visit_duration_minutes=int(os.getenv("VISIT_DURATION_MINUTES", "60")),
        base_url=os.getenv("BASE_URL", "http://localhost:8000/"),
        google_credentials_json=os.getenv("GOOGLE_CREDENTIALS_JSON", ""),
        google_client_id=os.getenv("GOOGLE_CLIENT_ID", ""),
        google_client_secret=os.getenv("GOOGLE_CLIENT_SECRET", ""),
        identity_header=os.getenv("IDENTITY_HEADER", "X-Goog-Authenticated-User-Email"),
        allowed_user_emails=tuple(
            email.strip().lower()
            for email in os.getenv("ALLOWED_USER_EMAILS", "").split(",")
            if email.strip()
        ),
        template_dir=os.getenv("TEMPLATE_DIR", str(DEFAULT_TEMPLATE_DIR)),
    )
