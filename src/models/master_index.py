"""
Master Index: one spreadsheet row per patient, used for listing and search.

Columns (data from row 2): name, government id, folder link, document link,
document id, creation date. The document id is the join key; the link
columns are display formulas and are never parsed.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING, Any, List

from core.constants import (
    FOLDER_LINK_LABEL,
    FOLDER_PLACEHOLDER,
    MASTER_INDEX_DOCUMENT_COLUMN,
    MASTER_INDEX_FIRST_ROW,
    MASTER_INDEX_FOLDER_COLUMN,
    SHEET_LINK_LABEL,
    SHEET_PLACEHOLDER,
)
from utils.sheet_links import cell_a1, hyperlink_formula, pad_row

if TYPE_CHECKING:
    from models.patient import Patient
    from services.workspace import Workspace

logger = logging.getLogger(__name__)

MASTER_INDEX_WIDTH = 6


@dataclass
class MasterIndexRow:
    name: Any
    gov_id: Any
    folder_link: Any
    document_link: Any
    document_id: str
    date_created: Any

    @classmethod
    def from_row(cls, values: List[Any]) -> "MasterIndexRow":
        name, gov_id, folder_link, document_link, document_id, date_created = pad_row(values, MASTER_INDEX_WIDTH)[:MASTER_INDEX_WIDTH]
        return cls(
            name=name,
            gov_id=gov_id,
            folder_link=folder_link,
            document_link=document_link,
            document_id=str(document_id).strip(),
            date_created=date_created,
        )


class MasterIndex:
    """Access to the Master Index spreadsheet."""

    def __init__(self, workspace: "Workspace") -> None:
        self.workspace = workspace
        self.spreadsheet_id = workspace.config.master_sheet_id

    def add_patient(self, patient: "Patient", created: date) -> int:
        """
        Append the patient's row, then install the folder and sheet links.

        Returns:
            Row number written
        """
        sheets = self.workspace.sheets
        row = sheets.append_row(
            self.spreadsheet_id,
            [patient.name, patient.gov_id, FOLDER_PLACEHOLDER, SHEET_PLACEHOLDER,
             patient.document_id, created.isoformat()],
            "A",
            "F",
            min_row=MASTER_INDEX_FIRST_ROW,
        )

        folder_url = patient.folder.url if patient.folder else ""
        sheets.set_formula(
            self.spreadsheet_id,
            cell_a1(MASTER_INDEX_FOLDER_COLUMN, row),
            hyperlink_formula(folder_url, FOLDER_LINK_LABEL),
        )
        sheets.set_formula(
            self.spreadsheet_id,
            cell_a1(MASTER_INDEX_DOCUMENT_COLUMN, row),
            hyperlink_formula(patient.document_url(self.workspace), SHEET_LINK_LABEL),
        )
        logger.info(f"Master Index row {row} added for {patient.document_id}")
        return row

    def rows(self) -> List[MasterIndexRow]:
        """All non-blank rows."""
        values = self.workspace.sheets.get_values(self.spreadsheet_id, f"A{MASTER_INDEX_FIRST_ROW}:F")
        return [MasterIndexRow.from_row(row) for row in values if any(cell != "" for cell in row)]
