"""
Layout controllers: page frame, header, menu, home and calendar views.
"""

import logging
import re
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo

from api.view import RequestContext, ViewDescriptor, merge_template_data
from core.constants import PAGE_TITLE, PATIENT_DETAIL_PAGE
from core.exceptions import ExternalServiceError
from services.google_calendar_service import web_safe_calendar_id
from utils.datetime_utils import app_now, day_window, parse_event_start
from utils.url_utils import encode_data

logger = logging.getLogger(__name__)

PATIENT_ID_PATTERN = re.compile(r'^patientId: (.+)$', re.MULTILINE)


def index_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('Index', {'context': context, 'title': PAGE_TITLE})


def header_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('Header', {'context': context})


def menu_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('Menu', {'context': context})


def home_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('Home', {'context': context})


def calendar_controller(context: RequestContext) -> ViewDescriptor:
    """Embedded calendar view of the practice calendar."""
    config = context.workspace.config
    return merge_template_data('CalendarContainer', {
        'context': context,
        'md_calendar_id': web_safe_calendar_id(config.calendar_id),
        'time_zone': config.time_zone,
    })


def extract_patient_id(description: Optional[str]) -> Optional[str]:
    """
    Patient id from an event description's ``patientId: <id>`` line.

    The id line is written last, after the free-text notes, so the last
    matching line wins.
    """
    matches = PATIENT_ID_PATTERN.findall(description or '')
    if not matches:
        return None
    return matches[-1].strip() or None


def booked_patients_for(events: List[Dict[str, Any]], base_url: str, time_zone: str) -> List[Dict[str, str]]:
    """Events carrying a patient id, as rows for the today's visits view."""
    booked_patients = []
    for event in events:
        patient_id = extract_patient_id(event.get('description'))
        if not patient_id:
            continue

        start = parse_event_start(event)
        booked_patients.append({
            'patient_name': event.get('summary', ''),
            'patient_details_link': f"{base_url}?page={PATIENT_DETAIL_PAGE}&data={encode_data({'patientId': patient_id})}",
            'event_start_time': start.astimezone(ZoneInfo(time_zone)).strftime('%H:%M') if start else '',
        })
    return booked_patients


def today_visits_controller(context: RequestContext) -> ViewDescriptor:
    """
    Patients booked today, read from the calendar.

    Only events whose description carries ``patientId: <id>`` are listed.
    A calendar failure is logged and rendered as an empty list with an error.
    """
    config = context.workspace.config
    start_time, end_time = day_window(app_now(config.time_zone).date(), config.time_zone)

    try:
        events = context.workspace.calendar.list_events(start_time, end_time)
    except ExternalServiceError as e:
        logger.error(f"Failed to fetch calendar events: {e}")
        return merge_template_data('TodayVisits', {
            'context': context,
            'booked_patients': [],
            'error': f"Could not load today's visits: {e}",
        })

    booked_patients = booked_patients_for(events, context.base_url, config.time_zone)
    logger.info(f"Found {len(booked_patients)} patients booked for today.")
    return merge_template_data('TodayVisits', {'context': context, 'booked_patients': booked_patients})
