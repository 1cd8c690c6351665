"""
Visit model: one row of a patient's visit log.

A visit is identified by its patient and its row number in the log. Rows are
append-only: a visit is written once, right after the last used row, and is
never rewritten.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any, List, Optional

from core.constants import (
    EVENT_PLACEHOLDER,
    PENDING_DIAGNOSIS,
    VISIT_EVENT_COLUMN,
    VISIT_LOG_FIRST_COLUMN,
    VISIT_LOG_FIRST_ROW,
    VISIT_LOG_LAST_COLUMN,
    VISIT_LOG_WIDTH,
)
from utils.datetime_utils import parse_sheet_datetime, to_sheets_serial
from utils.sheet_links import cell_a1, pad_row, row_range_a1

if TYPE_CHECKING:
    from models.patient import Patient
    from services.workspace import Workspace

logger = logging.getLogger(__name__)


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        logger.warning(f"Non-numeric amount cell: {value!r}")
        return None


def _to_number(value: Optional[Decimal]) -> Any:
    # The Sheets API takes JSON numbers; blanks stay blank
    if value is None:
        return ""
    return float(value)


@dataclass
class Visit:
    """
    A booked visit.

    Attributes:
        appointment_at: Naive date/time of the appointment in the app time zone
        notes: Free-text notes
        price: Visit amount
        amount_paid: Blank (None) until the visit is reconciled
        event_reference: Display formula linking the calendar event
        diagnosis: Defaults to the pending sentinel
        row: Log row the visit lives in, once persisted
    """
    appointment_at: Optional[datetime]
    notes: str = ""
    price: Optional[Decimal] = None
    amount_paid: Optional[Decimal] = None
    event_reference: str = ""
    diagnosis: str = PENDING_DIAGNOSIS
    row: Optional[int] = None

    def to_row(self) -> List[Any]:
        """Log row in column order, with a placeholder where the event formula goes."""
        return [
            to_sheets_serial(self.appointment_at) if self.appointment_at else "",
            self.notes or "",
            _to_number(self.price),
            _to_number(self.amount_paid),
            EVENT_PLACEHOLDER,
            self.diagnosis or "",
        ]

    @classmethod
    def from_row(cls, values: List[Any], row: int) -> "Visit":
        appointment, notes, price, paid, event_reference, diagnosis = pad_row(values, VISIT_LOG_WIDTH)[:VISIT_LOG_WIDTH]
        return cls(
            appointment_at=parse_sheet_datetime(appointment),
            notes=str(notes),
            price=_to_decimal(price),
            amount_paid=_to_decimal(paid),
            event_reference=str(event_reference),
            diagnosis=str(diagnosis),
            row=row,
        )

    def append_to(self, workspace: "Workspace", patient: "Patient") -> int:
        """
        Persist this visit as the next row of the patient's log.

        The row is written with a placeholder in the event column, then the
        event reference formula is installed in that cell.

        Returns:
            The row number written
        """
        if not patient.document_id:
            raise ValueError(f"Patient '{patient.name}' has no document to log visits in")

        sheets = workspace.sheets
        row = sheets.append_row(
            patient.document_id,
            self.to_row(),
            VISIT_LOG_FIRST_COLUMN,
            VISIT_LOG_LAST_COLUMN,
            min_row=VISIT_LOG_FIRST_ROW,
        )
        sheets.set_formula(patient.document_id, cell_a1(VISIT_EVENT_COLUMN, row), self.event_reference)
        self.row = row
        logger.info(f"Logged visit at row {row} of {patient.document_id}")
        return row

    @classmethod
    def latest_for(cls, workspace: "Workspace", patient: "Patient") -> Optional["Visit"]:
        """Most recently appended visit, or None when the log holds only its header."""
        if not patient.document_id:
            return None

        sheets = workspace.sheets
        last_row = sheets.get_last_row(patient.document_id, VISIT_LOG_FIRST_COLUMN, VISIT_LOG_LAST_COLUMN)
        if last_row < VISIT_LOG_FIRST_ROW:
            return None

        values = sheets.get_values(
            patient.document_id,
            row_range_a1(VISIT_LOG_FIRST_COLUMN, VISIT_LOG_LAST_COLUMN, last_row),
        )
        return cls.from_row(values[0] if values else [], last_row)
