# pyright: reportUnknownMemberType=false, reportUnknownVariableType=false, reportMissingTypeStubs=false
"""
Google Calendar service for visit scheduling.

This module handles all Google Calendar API interactions of the practice:
creating the event that backs a booked visit, fetching an event by id and
listing the events of a time window (e.g. today's visits).
"""

import base64
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from core.exceptions import ExternalServiceError
from utils.google_errors import http_error_message, http_error_status

logger = logging.getLogger(__name__)


class GoogleCalendarError(ExternalServiceError):
    """Custom exception for Google Calendar API errors."""
    pass


def format_utc_datetime(dt: datetime) -> str:
    """Format a datetime as an RFC3339 UTC string with Z suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    iso_str = dt.astimezone(timezone.utc).isoformat()
    if iso_str.endswith('+00:00'):
        return iso_str[:-6] + 'Z'
    return iso_str


class GoogleCalendarService:
    """
    Service for Google Calendar API operations.

    Attributes:
        calendar_id: Google Calendar ID (defaults to primary calendar)
        service: Google Calendar API service client
    """

    DEFAULT_CALENDAR_ID = 'primary'
    EVENT_URL_TEMPLATE = 'https://calendar.google.com/calendar/event?eid={eid}'

    def __init__(self, credentials: Any, calendar_id: str = DEFAULT_CALENDAR_ID) -> None:
        """
        Initialize Google Calendar service.

        Args:
            credentials: Google OAuth2 credentials
            calendar_id: Google Calendar ID to operate on (defaults to primary)

        Raises:
            GoogleCalendarError: If service initialization fails
        """
        try:
            self.service = build('calendar', 'v3', credentials=credentials, cache_discovery=False)
            self.calendar_id = calendar_id
        except Exception as e:
            raise GoogleCalendarError(f"Failed to initialize Google Calendar service: {e}")

    def create_event(
        self,
        summary: str,
        start: datetime,
        end: datetime,
        description: str = "",
    ) -> Dict[str, Any]:
        """
        Create a new Google Calendar event.

        Args:
            summary: Event title (the patient's name)
            start: Event start datetime
            end: Event end datetime
            description: Event description

        Returns:
            Google Calendar event data including event ID and htmlLink

        Raises:
            GoogleCalendarError: If event creation fails
        """
        event_body = {
            'summary': summary or '',
            'description': description or '',
            'start': {
                'dateTime': format_utc_datetime(start),
                'timeZone': 'UTC',
            },
            'end': {
                'dateTime': format_utc_datetime(end),
                'timeZone': 'UTC',
            },
        }
        try:
            logger.debug(f"Creating Google Calendar event with calendar_id={self.calendar_id}, body={json.dumps(event_body, indent=2)}")

            event = self.service.events().insert(
                calendarId=self.calendar_id,
                body=event_body
            ).execute()

            logger.info(f"Google Calendar event created successfully: {event.get('id')}")
            return event

        except HttpError as e:
            error_message = http_error_message(e)
            logger.error(f"Google Calendar API error: {error_message} (status: {http_error_status(e)})")
            raise GoogleCalendarError(f"Failed to create calendar event: {error_message}")
        except Exception as e:
            logger.error(f"Unexpected error creating calendar event: {e}", exc_info=True)
            raise GoogleCalendarError(f"Unexpected error creating calendar event: {e}")

    def get_event(self, event_id: str) -> Dict[str, Any]:
        """
        Get details of a Google Calendar event.

        Raises:
            GoogleCalendarError: If event retrieval fails
        """
        try:
            return self.service.events().get(
                calendarId=self.calendar_id,
                eventId=event_id
            ).execute()

        except HttpError as e:
            if http_error_status(e) == 404:
                raise GoogleCalendarError(f"Event {event_id} not found")
            raise GoogleCalendarError(f"Failed to get calendar event: {http_error_message(e)}")
        except Exception as e:
            raise GoogleCalendarError(f"Unexpected error getting calendar event: {e}")

    def list_events(self, time_min: datetime, time_max: datetime) -> List[Dict[str, Any]]:
        """
        List the (expanded, single) events starting in a time window.

        Args:
            time_min: Window start (inclusive)
            time_max: Window end (exclusive)

        Returns:
            Event resources ordered by start time

        Raises:
            GoogleCalendarError: If the listing fails
        """
        events: List[Dict[str, Any]] = []
        page_token = None
        try:
            while True:
                response = self.service.events().list(
                    calendarId=self.calendar_id,
                    timeMin=format_utc_datetime(time_min),
                    timeMax=format_utc_datetime(time_max),
                    singleEvents=True,
                    orderBy='startTime',
                    pageToken=page_token,
                ).execute()
                events.extend(response.get('items', []))
                page_token = response.get('nextPageToken')
                if not page_token:
                    break
        except HttpError as e:
            raise GoogleCalendarError(f"Failed to list calendar events: {http_error_message(e)}")
        except Exception as e:
            raise GoogleCalendarError(f"Unexpected error listing calendar events: {e}")

        logger.info(f"Found {len(events)} events between {time_min} and {time_max}")
        return events

    def event_url(self, event: Dict[str, Any]) -> str:
        """
        Get a browser URL for an event.

        Uses the event's ``htmlLink`` when present, otherwise builds the public
        ``eid`` link from the event id and calendar id.
        """
        html_link = event.get('htmlLink')
        if html_link:
            return html_link
        logger.warning(f"Event {event.get('id')} has no htmlLink. Falling back to base ID URL.")
        return self.EVENT_URL_TEMPLATE.format(eid=base_event_id(event.get('id', ''), self.calendar_id))


def base_event_id(full_event_id: str, calendar_id: str) -> str:
    """
    Encode ``"<event id> <calendar id>"`` as web-safe base64 without padding.

    Anything from the first ``@`` on is dropped from the event id.
    """
    event_id = full_event_id.split('@', 1)[0]
    encoded = base64.urlsafe_b64encode(f"{event_id} {calendar_id}".encode('utf-8')).decode('ascii')
    return encoded.rstrip('=')


def web_safe_calendar_id(calendar_id: str) -> str:
    """Web-safe base64 of a calendar id with padding stripped, as used by the embed URL."""
    return base64.urlsafe_b64encode(calendar_id.encode('utf-8')).decode('ascii').rstrip('=')
