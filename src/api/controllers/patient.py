"""
Patient controllers: detail view, intake and visit booking.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

from api.view import RequestContext, ViewDescriptor, merge_template_data, redirect_to_patient_detail
from core.constants import HTTP_CODE_BAD_REQUEST, HTTP_CODE_UNPROCESSABLE_ENTITY
from core.exceptions import ExternalServiceError, ValidationError
from models.patient import Patient
from services.patient_service import PatientService
from services.visit_service import VisitService
from utils.datetime_utils import parse_visit_datetime

logger = logging.getLogger(__name__)


def _patient_view_data(context: RequestContext, patient: Patient) -> Dict[str, Any]:
    return {
        'context': context,
        'patient': patient,
        'document_url': patient.document_url(context.workspace),
        'folder_url': patient.folder.url if patient.folder else '',
    }


def patient_detail_controller(context: RequestContext) -> ViewDescriptor:
    """A patient's header data and latest visit."""
    patient_id = context.query_data.get('patientId')
    if not patient_id:
        return merge_template_data(
            'PatientDetailForm',
            {'context': context, 'patient': None, 'error': 'Error: patientId is required.'},
            status=HTTP_CODE_BAD_REQUEST,
        )

    patient = PatientService.load_by_id(context.workspace, patient_id)
    return merge_template_data('PatientDetailForm', _patient_view_data(context, patient))


def new_visit_controller(context: RequestContext) -> ViewDescriptor:
    """
    Visit booking form.

    The patient is taken from the payload when embedded by the detail view,
    otherwise loaded by ``patientId``.
    """
    patient = context.query_data.get('patient')
    if patient is None and context.query_data.get('patientId'):
        patient = PatientService.load_by_id(context.workspace, context.query_data['patientId'])

    return merge_template_data('NewVisitForm', {
        'context': context,
        'patient': patient,
        'default_price': context.workspace.config.visit_default_price,
    })


def new_patient_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('NewPatientForm', {'context': context, 'details': context.query_data})


def create_new_patient_controller(context: RequestContext) -> ViewDescriptor:
    """
    Register a patient from the intake form.

    Invalid input re-shows the form (422) with the input preserved; success
    redirects to the patient's detail page.
    """
    try:
        patient = PatientService.create_from_intake(context.workspace, context.query_data)
    except ValidationError as e:
        logger.info(f"Rejected patient intake: {e.message}")
        return merge_template_data(
            'NewPatientForm',
            {'context': context, 'error': e.message, 'patient_data': dict(context.query_data)},
            status=HTTP_CODE_UNPROCESSABLE_ENTITY,
        )

    return redirect_to_patient_detail(context.base_url, patient.document_id or '')


def _parse_price(raw: Any, default: Decimal) -> Decimal:
    if raw is None or str(raw).strip() == '':
        return default
    try:
        price = Decimal(str(raw).strip())
    except InvalidOperation:
        raise ValidationError(f"Error: visit price '{raw}' is not a number.", field='visitPrice')
    if not price.is_finite() or price < 0:
        raise ValidationError(f"Error: visit price '{raw}' is not a valid amount.", field='visitPrice')
    return price


def _booking_form(
    context: RequestContext,
    patient: Optional[Patient],
    error: str,
    status: Optional[int] = None,
) -> ViewDescriptor:
    return merge_template_data('NewVisitForm', {
        'context': context,
        'patient': patient,
        'default_price': context.workspace.config.visit_default_price,
        'visit_data': dict(context.query_data),
        'error': error,
    }, status=status)


def book_new_visit_controller(context: RequestContext) -> ViewDescriptor:
    """
    Book a visit for a patient: creates the calendar event and logs the visit.

    Payload: patientId, visitDate (YYYY-MM-DD), visitTime (HH:MM),
    visitPrice (optional, defaults to the configured price), notes.
    Calendar and spreadsheet failures re-show the form with the error.
    """
    query_data = context.query_data
    patient_id = query_data.get('patientId')
    if not patient_id:
        return _booking_form(context, None, 'Error: patientId is required.', HTTP_CODE_BAD_REQUEST)

    try:
        start = parse_visit_datetime(str(query_data.get('visitDate') or ''), str(query_data.get('visitTime') or ''))
    except ValueError:
        return _booking_form(context, None, 'Error: a valid visit date and time are required.', HTTP_CODE_UNPROCESSABLE_ENTITY)

    try:
        price = _parse_price(query_data.get('visitPrice'), context.workspace.config.visit_default_price)
    except ValidationError as e:
        return _booking_form(context, None, e.message, HTTP_CODE_UNPROCESSABLE_ENTITY)

    notes = str(query_data.get('notes') or '').strip()
    patient = None
    try:
        patient = PatientService.load_by_id(context.workspace, patient_id)
        VisitService.book_new_visit(context.workspace, patient, start, price, notes)
    except ExternalServiceError as e:
        logger.error(f"Booking error: {e}")
        return _booking_form(context, patient, f"Error booking visit: {e}")

    return redirect_to_patient_detail(context.base_url, patient_id)
