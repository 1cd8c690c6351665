"""
Unit tests for patient search over the Master Index.
"""

import pytest

from services.google_sheets_service import GoogleSheetsError
from services.search_service import SearchService
from tests.conftest import MASTER_SHEET_ID


@pytest.fixture
def indexed_patients(sheets):
    """Two indexed patients: Alice (no matching notes) and Bob (diagnosed with asthma)."""
    sheets.add_spreadsheet(MASTER_SHEET_ID, {
        2: ["Alice Smith", "A111", "=HYPERLINK(...)", "=HYPERLINK(...)", "doc-alice", "2025-01-02"],
        3: ["Bob Jones", "B222", "=HYPERLINK(...)", "=HYPERLINK(...)", "doc-bob", ""],
    })
    sheets.add_spreadsheet("doc-alice", {11: [46021.5, "routine checkup", 30000.0, "", "x", "Healthy"]})
    sheets.add_spreadsheet("doc-bob", {11: [46022.5, "wheezing", 30000.0, "", "x", "Asthma"]})
    return sheets


class TestFindPatients:
    """Test matching on term and diagnosis keyword."""

    def test_term_matches_name_case_insensitively(self, workspace, indexed_patients):
        results = SearchService.find_patients(workspace, "alice", None)

        assert [r.patient_id for r in results] == ["doc-alice"]
        assert results[0].date_created == "2025-01-02"
        assert results[0].details_link == "?page=PatientDetail&data=%7B%22patientId%22%3A%22doc-alice%22%7D"

    def test_term_matches_gov_id(self, workspace, indexed_patients):
        results = SearchService.find_patients(workspace, "b222", "")

        assert [r.name for r in results] == ["Bob Jones"]
        assert results[0].date_created == "N/A"

    def test_keyword_matches_log_cells(self, workspace, indexed_patients):
        results = SearchService.find_patients(workspace, None, "ASTHMA")

        assert [r.patient_id for r in results] == ["doc-bob"]

    def test_term_and_keyword_combine_with_or(self, workspace, indexed_patients):
        """Test that one row matching only the term and one matching only the keyword are both returned."""
        results = SearchService.find_patients(workspace, "alice", "asthma")

        assert [r.patient_id for r in results] == ["doc-alice", "doc-bob"]

    def test_numeric_criteria_accepted(self, workspace, indexed_patients):
        """Test that non-string payload values are matched as text."""
        indexed_patients.add_spreadsheet(MASTER_SHEET_ID, {4: ["Carol White", 12345, "", "", "doc-carol", ""]})
        indexed_patients.add_spreadsheet("doc-carol", {11: [46023.5, "code 404", 30000.0, "", "x", "Pending"]})

        assert [r.patient_id for r in SearchService.find_patients(workspace, 12345, None)] == ["doc-carol"]
        assert [r.patient_id for r in SearchService.find_patients(workspace, None, 404)] == ["doc-carol"]

    def test_neither_criterion_returns_nothing(self, workspace, indexed_patients):
        assert SearchService.find_patients(workspace, "  ", None) == []

    def test_no_match(self, workspace, indexed_patients):
        assert SearchService.find_patients(workspace, "carol", "diabetes") == []

    def test_unreadable_candidate_skipped(self, workspace, indexed_patients):
        indexed_patients.read_failures["doc-alice"] = GoogleSheetsError("Spreadsheet doc-alice not found")

        results = SearchService.find_patients(workspace, None, "asthma")

        assert [r.patient_id for r in results] == ["doc-bob"]

    def test_term_match_skips_notes_lookup(self, workspace, indexed_patients):
        indexed_patients.read_failures["doc-alice"] = GoogleSheetsError("unavailable")

        results = SearchService.find_patients(workspace, "alice", "asthma")

        assert [r.patient_id for r in results] == ["doc-alice", "doc-bob"]

    def test_blank_index_rows_ignored(self, workspace, indexed_patients):
        indexed_patients.add_spreadsheet(MASTER_SHEET_ID, {5: ["Carol White", "C333", "", "", "doc-carol", ""]})
        indexed_patients.add_spreadsheet("doc-carol", {})

        results = SearchService.find_patients(workspace, "white", None)

        assert [r.patient_id for r in results] == ["doc-carol"]
