"""
The bundle of external collaborators every controller works against.
"""

import logging
from dataclasses import dataclass

from core.config import AppConfig
from services.google_calendar_service import GoogleCalendarService
from services.google_drive_service import GoogleDriveService
from services.google_sheets_service import GoogleSheetsService
from utils.google_credentials import load_credentials

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    """
    Configuration plus the Sheets, Drive and Calendar adapters.

    Built once at start-up and shared by all requests.
    """
    config: AppConfig
    sheets: GoogleSheetsService
    drive: GoogleDriveService
    calendar: GoogleCalendarService


def build_workspace(config: AppConfig) -> Workspace:
    """Authenticate against Google and build the three API adapters."""
    credentials = load_credentials(config)
    workspace = Workspace(
        config=config,
        sheets=GoogleSheetsService(credentials),
        drive=GoogleDriveService(credentials),
        calendar=GoogleCalendarService(credentials, calendar_id=config.calendar_id),
    )
    logger.info(f"Google workspace ready (calendar={config.calendar_id})")
    return workspace
