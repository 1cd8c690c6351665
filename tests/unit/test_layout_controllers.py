"""
Unit tests for layout controllers and full-page rendering of the bundled templates.
"""

import pytest
from datetime import datetime, timedelta, timezone

from api.controllers.layout import (
    booked_patients_for,
    calendar_controller,
    extract_patient_id,
    today_visits_controller,
)
from api.controllers.search import do_patient_search_controller
from services.google_calendar_service import GoogleCalendarError
from services.visit_service import build_event_description
from tests.conftest import MASTER_SHEET_ID


def today_at(hour):
    now = datetime.now(timezone.utc)
    return now.replace(hour=hour, minute=0, second=0, microsecond=0).isoformat()


class TestExtractPatientId:

    def test_found(self):
        assert extract_patient_id("Initial Notes: x\nView: url\npatientId: abc123") == "abc123"

    def test_id_mentioned_in_notes_ignored(self):
        description = build_event_description("follow up, see patientId: other-doc", "https://s", "real-doc")

        assert extract_patient_id(description) == "real-doc"

    def test_id_line_in_notes_ignored(self):
        description = build_event_description("line one\npatientId: other-doc", "https://s", "real-doc")

        assert extract_patient_id(description) == "real-doc"

    @pytest.mark.parametrize("description", [None, "", "no id here", "patientId: "])
    def test_absent(self, description):
        assert extract_patient_id(description) is None


class TestBookedPatients:

    def test_only_events_with_patient_id(self):
        events = [
            {"summary": "Jane Doe", "description": "patientId: abc", "start": {"dateTime": "2025-12-30T06:00:00Z"}},
            {"summary": "Lunch", "description": "", "start": {"dateTime": "2025-12-30T04:00:00Z"}},
        ]

        booked = booked_patients_for(events, "https://x/", "Asia/Taipei")

        assert booked == [{
            "patient_name": "Jane Doe",
            "patient_details_link": "https://x/?page=PatientDetail&data=%7B%22patientId%22%3A%22abc%22%7D",
            "event_start_time": "14:00",
        }]


class TestTodayVisitsController:
    """Test listing today's booked patients."""

    def test_lists_todays_patients(self, dispatcher, calendar):
        calendar.add_event("Jane Doe", today_at(9), "Initial Notes: x\npatientId: abc")
        calendar.add_event("Team meeting", today_at(10), "weekly")
        tomorrow = (datetime.now(timezone.utc) + timedelta(days=1)).replace(hour=12).isoformat()
        calendar.add_event("John Roe", tomorrow, "patientId: def")
        context = dispatcher.build_context("TodayVisits", {}, "")

        descriptor = today_visits_controller(context)

        booked = descriptor.data["booked_patients"]
        assert [b["patient_name"] for b in booked] == ["Jane Doe"]
        assert booked[0]["event_start_time"] == "09:00"

    def test_calendar_failure_renders_empty_list(self, dispatcher, calendar):
        calendar.list_failure = GoogleCalendarError("Failed to list calendar events: forbidden")
        context = dispatcher.build_context("TodayVisits", {}, "")

        descriptor = today_visits_controller(context)

        assert descriptor.data["booked_patients"] == []
        assert "forbidden" in descriptor.data["error"]
        assert descriptor.status == 200


class TestCalendarController:

    def test_web_safe_calendar_id(self, dispatcher):
        context = dispatcher.build_context("Calendar", {}, "")

        descriptor = calendar_controller(context)

        assert descriptor.view_name == "CalendarContainer"
        assert descriptor.data["md_calendar_id"] == "bWRAZXhhbXBsZS5jb20"
        assert descriptor.data["time_zone"] == "UTC"


class TestSearchControllers:

    def test_do_patient_search(self, dispatcher, sheets):
        sheets.add_spreadsheet(MASTER_SHEET_ID, {2: ["Alice Smith", "A111", "", "", "doc-alice", "2025-01-02"]})
        context = dispatcher.build_context("DoPatientSearch", {"searchTerm": "alice"}, "")

        descriptor = do_patient_search_controller(context)

        assert descriptor.view_name == "SearchResults"
        assert [m.patient_id for m in descriptor.data["matches"]] == ["doc-alice"]

    def test_results_render_links(self, dispatcher, sheets):
        sheets.add_spreadsheet(MASTER_SHEET_ID, {2: ["Alice Smith", "A111", "", "", "doc-alice", "2025-01-02"]})
        context = dispatcher.build_context("DoPatientSearch", {"searchTerm": "alice"}, "")

        content = dispatcher.embed_controller("DoPatientSearch", context)

        assert "Alice Smith" in content
        assert "https://x/?page=PatientDetail&amp;data=%7B%22patientId%22%3A%22doc-alice%22%7D" in content
        assert 'value="alice"' in content


class TestRenderDocument:
    """Test full pages rendered through the Index frame."""

    @pytest.mark.parametrize("page", ["Home", "Calendar", "TodayVisits", "NewPatient", "PatientSearch"])
    def test_pages_render(self, dispatcher, page):
        rendered = dispatcher.render_document(page, {}, "doc@example.com")

        assert rendered.status == 200
        assert rendered.content.startswith("<!DOCTYPE html>")
        assert "doc@example.com" in rendered.content
        assert "Today&#39;s Visits" in rendered.content or "Today's Visits" in rendered.content

    def test_default_page_is_home(self, dispatcher):
        rendered = dispatcher.render_document(None, {}, "")

        assert "Welcome" in rendered.content

    def test_patient_detail_without_id(self, dispatcher):
        rendered = dispatcher.render_document("PatientDetail", {}, "")

        # The Index frame carries the frame's own status
        assert rendered.status == 200
        assert "Error: patientId is required." in rendered.content
