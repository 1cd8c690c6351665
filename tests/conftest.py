"""
Shared fixtures for the MD Solo test suite.

Controllers and models run against in-memory fakes of the Google
adapters (see tests/fakes.py); no network access is needed.
"""

import pytest
from decimal import Decimal

from api.controllers import build_registry
from api.dispatcher import Dispatcher
from core.config import DEFAULT_TEMPLATE_DIR, AppConfig
from services.workspace import Workspace
from tests.fakes import FakeCalendarService, FakeDriveService, FakeSheetsService

MASTER_SHEET_ID = "master-sheet"
BASE_URL = "https://x/"


@pytest.fixture
def app_config():
    """Configuration pointing at the fake master sheet and the bundled templates."""
    return AppConfig(
        master_sheet_id=MASTER_SHEET_ID,
        calendar_id="md@example.com",
        root_folder_name="MD-SOLO-PRACTICE",
        visit_default_price=Decimal("30000.00"),
        time_zone="UTC",
        visit_duration_minutes=60,
        base_url=BASE_URL,
        template_dir=str(DEFAULT_TEMPLATE_DIR),
    )


@pytest.fixture
def sheets():
    fake = FakeSheetsService()
    fake.add_spreadsheet(MASTER_SHEET_ID, {1: ["Name", "Gov Id", "Folder", "Sheet", "Sheet Id", "Date Created"]})
    return fake


@pytest.fixture
def drive():
    return FakeDriveService()


@pytest.fixture
def calendar():
    return FakeCalendarService("md@example.com")


@pytest.fixture
def workspace(app_config, sheets, drive, calendar):
    return Workspace(config=app_config, sheets=sheets, drive=drive, calendar=calendar)


@pytest.fixture
def dispatcher(workspace):
    """Dispatcher with every page registered, rendering the bundled templates."""
    return Dispatcher(build_registry(), workspace)


@pytest.fixture
def intake_fields():
    return {
        "patientName": "Jane Doe",
        "patientGovId": "A123456789",
        "patientPhone": "0912345678",
        "patientEmail": "jane@example.com",
    }
