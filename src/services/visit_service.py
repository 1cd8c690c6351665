"""
Visit booking: creates the calendar event and logs the visit.
"""

import logging
from datetime import datetime, timedelta
from decimal import Decimal

from core.constants import EVENT_LINK_LABEL, PENDING_DIAGNOSIS
from core.exceptions import ExternalServiceError
from models.patient import Patient
from models.visit import Visit
from services.patient_service import PatientService
from services.workspace import Workspace
from utils.datetime_utils import localize
from utils.sheet_links import hyperlink_formula

logger = logging.getLogger(__name__)


def build_event_description(notes: str, sheet_url: str, patient_id: str) -> str:
    """
    Event description; the ``patientId: <id>`` line is what today's visit
    listing parses to link an event back to its patient.
    """
    return (
        f"Initial Notes: {notes}\n"
        f"View Patient Details (Click 'More Details' first to activate link): {sheet_url}\n"
        f"patientId: {patient_id}"
    )


class VisitService:

    @staticmethod
    def book_new_visit(
        workspace: Workspace,
        patient: Patient,
        start: datetime,
        price: Decimal,
        notes: str,
    ) -> Visit:
        """
        Book a visit: create the calendar event, then append the visit row.

        Args:
            workspace: External collaborators and configuration
            patient: A provisioned patient
            start: Naive appointment date/time in the app time zone
            price: Visit amount
            notes: Initial notes

        Returns:
            The persisted Visit

        Raises:
            ExternalServiceError: If the calendar or the spreadsheet call fails.
                If the append fails the event is left in the calendar.
        """
        config = workspace.config
        start_at = localize(start, config.time_zone)
        end_at = start_at + timedelta(minutes=config.visit_duration_minutes)

        event = workspace.calendar.create_event(
            summary=patient.name,
            start=start_at,
            end=end_at,
            description=build_event_description(notes, patient.document_url(workspace), patient.document_id or ""),
        )
        event_id = event.get("id", "")
        full_event = workspace.calendar.get_event(event_id)
        event_url = workspace.calendar.event_url(full_event)

        visit = Visit(
            appointment_at=start,
            notes=notes,
            price=price,
            amount_paid=None,
            event_reference=hyperlink_formula(event_url, EVENT_LINK_LABEL),
            diagnosis=PENDING_DIAGNOSIS,
        )
        try:
            PatientService.record_visit(workspace, patient, visit)
        except ExternalServiceError as e:
            logger.error(f"Booking error: visit log append failed after event {event_id} was created, event left orphaned: {e}")
            raise

        logger.info(f"Visit successfully booked for {patient.name} on {start_at.isoformat()}")
        return visit
