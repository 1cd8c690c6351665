"""
Patient model backed by a per-patient spreadsheet.

Layout of a patient's spreadsheet:

    A1:B5    header block (labels in A, values in B): name, phone,
             government id, folder link, email
    A10:F10  visit log header
    A11:F..  one row per visit (see models.visit)

A Patient is built either from intake fields (no assets yet) or by
rehydrating an existing spreadsheet. Assets (folder + spreadsheet) are
provisioned exactly once.
"""

import logging
import re
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from core.constants import (
    DATE_TIME_NUMBER_FORMAT,
    PATIENT_EMAIL_ROW,
    PATIENT_FOLDER_LINK_LABEL,
    PATIENT_FOLDER_ROW,
    PATIENT_GOV_ID_ROW,
    PATIENT_HEADER_LABELS,
    PATIENT_HEADER_RANGE,
    PATIENT_NAME_ROW,
    PATIENT_PHONE_ROW,
    VISIT_LOG_FIRST_COLUMN,
    VISIT_LOG_FIRST_ROW,
    VISIT_LOG_HEADER_BACKGROUND,
    VISIT_LOG_HEADER_ROW,
    VISIT_LOG_HEADERS,
    VISIT_LOG_LAST_COLUMN,
    VISIT_LOG_WIDTH,
    VISIT_NOTES_COLUMN_WIDTH,
)
from core.exceptions import AssetAlreadyProvisioned
from models.visit import Visit
from services.google_drive_service import DriveFolder
from utils.sheet_links import cell_a1, hyperlink_formula, pad_row, row_range_a1

if TYPE_CHECKING:
    from services.workspace import Workspace

logger = logging.getLogger(__name__)

# Sheet id of the first tab of a freshly created spreadsheet
FIRST_SHEET_ID = 0


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def safe_folder_name(patient_name: str, timestamp_ms: int) -> str:
    """Folder name: non-alphanumerics replaced by '_', suffixed with a millisecond timestamp."""
    return re.sub(r'[^a-z0-9]', '_', patient_name, flags=re.IGNORECASE) + f"_{timestamp_ms}"


@dataclass
class Patient:
    """
    A registered patient.

    Identity is ``document_id``, the id of the patient's spreadsheet.
    """
    name: str
    gov_id: str
    phone: str
    email: str = ""
    root_folder: Optional[DriveFolder] = None
    folder: Optional[DriveFolder] = None
    document_id: Optional[str] = None
    latest_visit: Optional[Visit] = None

    @classmethod
    def new_intake(cls, fields: Mapping[str, str], root_folder: DriveFolder) -> "Patient":
        """Build a not-yet-provisioned patient from (validated) intake fields."""
        return cls(
            name=fields["patientName"],
            gov_id=fields["patientGovId"],
            phone=fields["patientPhone"],
            email=fields.get("patientEmail") or "",
            root_folder=root_folder,
        )

    @classmethod
    def rehydrate(cls, workspace: "Workspace", document_id: str) -> "Patient":
        """
        Load a provisioned patient from its spreadsheet.

        Reads the header block, the last visit of the log and the containing
        folders. Never writes.
        """
        rows = workspace.sheets.get_values(document_id, PATIENT_HEADER_RANGE)
        rows = rows + [[]] * (PATIENT_EMAIL_ROW - len(rows))
        values = [_cell_text(pad_row(row, 2)[1]) for row in rows]

        folder = workspace.drive.get_parent_folder(document_id)
        root_folder = workspace.drive.get_parent_folder(folder.id) if folder else None

        patient = cls(
            name=values[PATIENT_NAME_ROW - 1],
            phone=values[PATIENT_PHONE_ROW - 1],
            gov_id=values[PATIENT_GOV_ID_ROW - 1],
            email=values[PATIENT_EMAIL_ROW - 1],
            root_folder=root_folder,
            folder=folder,
            document_id=document_id,
        )
        patient.latest_visit = Visit.latest_for(workspace, patient)
        return patient

    def document_url(self, workspace: "Workspace") -> str:
        if not self.document_id:
            return ""
        return workspace.sheets.spreadsheet_url(self.document_id)

    def create_assets(self, workspace: "Workspace") -> None:
        """
        Provision the patient's folder and spreadsheet and write the layout.

        Raises:
            AssetAlreadyProvisioned: If the patient already has a spreadsheet
        """
        if self.document_id:
            raise AssetAlreadyProvisioned("Patient assets already created.")
        if self.root_folder is None:
            raise ValueError("A root folder is required to create patient assets")

        folder_name = safe_folder_name(self.name, int(time.time() * 1000))
        self.folder = workspace.drive.create_folder(folder_name, parent_id=self.root_folder.id)

        document_id = workspace.sheets.create_spreadsheet(f"{self.name} - Visit Log")
        self.document_id = document_id
        workspace.drive.move_file(document_id, self.folder.id)

        self._setup_log_sheet(workspace)
        logger.info(f"Provisioned assets for patient '{self.name}': folder {self.folder.id}, sheet {document_id}")

    def record_visit(self, workspace: "Workspace", visit: Visit) -> int:
        """
        Append a visit to the log. Creating the calendar event is the caller's job.

        Returns:
            Row the visit was written to
        """
        row = visit.append_to(workspace, self)
        self.latest_visit = visit
        return row

    def header_rows(self) -> List[List[str]]:
        """Header block values, with the folder link cell left blank for its formula."""
        values = {
            PATIENT_NAME_ROW: self.name,
            PATIENT_PHONE_ROW: self.phone,
            PATIENT_GOV_ID_ROW: self.gov_id,
            PATIENT_FOLDER_ROW: "",
            PATIENT_EMAIL_ROW: self.email or "",
        }
        return [[label, values[index]] for index, label in enumerate(PATIENT_HEADER_LABELS, start=1)]

    def _setup_log_sheet(self, workspace: "Workspace") -> None:
        sheets = workspace.sheets
        if not self.document_id or self.folder is None:
            raise ValueError(f"Patient '{self.name}' has no folder and spreadsheet to lay out")

        sheets.update_values(self.document_id, PATIENT_HEADER_RANGE, self.header_rows())
        sheets.set_formula(
            self.document_id,
            cell_a1("B", PATIENT_FOLDER_ROW),
            hyperlink_formula(self.folder.url, PATIENT_FOLDER_LINK_LABEL),
        )
        sheets.update_values(
            self.document_id,
            row_range_a1(VISIT_LOG_FIRST_COLUMN, VISIT_LOG_LAST_COLUMN, VISIT_LOG_HEADER_ROW),
            [VISIT_LOG_HEADERS],
        )
        sheets.batch_update(self.document_id, _log_sheet_format_requests())


def _log_sheet_format_requests() -> List[Dict[str, Any]]:
    """Bold grey log header, wide notes column, date-time format for the appointment column."""
    return [
        {
            "repeatCell": {
                "range": {
                    "sheetId": FIRST_SHEET_ID,
                    "startRowIndex": VISIT_LOG_HEADER_ROW - 1,
                    "endRowIndex": VISIT_LOG_HEADER_ROW,
                    "startColumnIndex": 0,
                    "endColumnIndex": VISIT_LOG_WIDTH,
                },
                "cell": {
                    "userEnteredFormat": {
                        "textFormat": {"bold": True},
                        "backgroundColor": VISIT_LOG_HEADER_BACKGROUND,
                    }
                },
                "fields": "userEnteredFormat(textFormat,backgroundColor)",
            }
        },
        {
            "updateDimensionProperties": {
                "range": {
                    "sheetId": FIRST_SHEET_ID,
                    "dimension": "COLUMNS",
                    "startIndex": 1,
                    "endIndex": 2,
                },
                "properties": {"pixelSize": VISIT_NOTES_COLUMN_WIDTH},
                "fields": "pixelSize",
            }
        },
        {
            "repeatCell": {
                "range": {
                    "sheetId": FIRST_SHEET_ID,
                    "startRowIndex": VISIT_LOG_FIRST_ROW - 1,
                    "startColumnIndex": 0,
                    "endColumnIndex": 1,
                },
                "cell": {
                    "userEnteredFormat": {
                        "numberFormat": {"type": "DATE_TIME", "pattern": DATE_TIME_NUMBER_FORMAT}
                    }
                },
                "fields": "userEnteredFormat.numberFormat",
            }
        },
    ]
