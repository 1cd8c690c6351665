"""
Unit tests for the Patient model and PatientService.
"""

import pytest
from unittest.mock import patch

from core.exceptions import AssetAlreadyProvisioned, ValidationError
from models.master_index import MasterIndex
from models.patient import Patient, safe_folder_name
from services.google_drive_service import GoogleDriveError
from services.patient_service import PatientService
from tests.conftest import MASTER_SHEET_ID


class TestSafeFolderName:

    def test_replaces_non_alphanumerics(self):
        assert safe_folder_name("Jane O'Doe-Smith", 1700000000000) == "Jane_O_Doe_Smith_1700000000000"


class TestRootFolder:
    """Test the root folder lookup."""

    def test_creates_when_absent(self, workspace, drive):
        folder = PatientService.get_or_create_root_folder(workspace, "MD-SOLO-PRACTICE")

        assert folder.name == "MD-SOLO-PRACTICE"
        assert list(drive.folders) == [folder.id]

    def test_first_match_wins(self, workspace, drive):
        first = drive.add_folder("MD-SOLO-PRACTICE")
        drive.add_folder("MD-SOLO-PRACTICE")

        assert PatientService.get_or_create_root_folder(workspace, "MD-SOLO-PRACTICE") == first
        assert len(drive.folders) == 2


class TestCreateFromIntake:
    """Test registering a patient."""

    def test_provisions_folder_sheet_and_index_row(self, workspace, sheets, drive, intake_fields):
        patient = PatientService.create_from_intake(workspace, intake_fields)

        assert patient.document_id in sheets.spreadsheets
        assert sheets.titles[patient.document_id] == "Jane Doe - Visit Log"
        # root folder + patient folder
        assert len(drive.folders) == 2
        assert drive.parents[patient.document_id] == patient.folder.id
        assert drive.parents[patient.folder.id] == patient.root_folder.id
        assert patient.folder.name.startswith("Jane_Doe_")

    def test_sheet_layout(self, workspace, sheets, intake_fields):
        patient = PatientService.create_from_intake(workspace, intake_fields)
        doc = patient.document_id

        assert sheets.get_values(doc, "A1:B5") == [
            ["Patient Name:", "Jane Doe"],
            ["Phone:", "0912345678"],
            ["Gov Id:", "A123456789"],
            ["Patient Folder", f'=HYPERLINK("{patient.folder.url}", "Open Patient Folder")'],
            ["Patient e-Mail:", "jane@example.com"],
        ]
        assert sheets.get_values(doc, "A10:F10")[0][0] == "Date and Time of Appointment"
        assert len(sheets.formatting[doc]) == 3

    def test_master_index_row(self, workspace, sheets, intake_fields):
        patient = PatientService.create_from_intake(workspace, intake_fields)

        rows = MasterIndex(workspace).rows()

        assert len(rows) == 1
        assert rows[0].name == "Jane Doe"
        assert rows[0].gov_id == "A123456789"
        assert rows[0].document_id == patient.document_id
        assert sheets.cell(MASTER_SHEET_ID, "C2") == f'=HYPERLINK("{patient.folder.url}", "View Folder")'
        assert sheets.cell(MASTER_SHEET_ID, "D2") == (
            f'=HYPERLINK("https://docs.google.com/spreadsheets/d/{patient.document_id}/edit", "View Patient Sheet")'
        )

    def test_second_patient_appends_next_row(self, workspace, sheets, intake_fields):
        PatientService.create_from_intake(workspace, intake_fields)
        second = PatientService.create_from_intake(workspace, {**intake_fields, "patientName": "John Roe"})

        assert sheets.cell(MASTER_SHEET_ID, "A3") == "John Roe"
        assert sheets.cell(MASTER_SHEET_ID, "E3") == second.document_id

    def test_root_folder_reused(self, workspace, drive, intake_fields):
        first = PatientService.create_from_intake(workspace, intake_fields)
        second = PatientService.create_from_intake(workspace, intake_fields)

        assert first.root_folder == second.root_folder
        assert len(drive.find_folders_by_name("MD-SOLO-PRACTICE")) == 1

    @pytest.mark.parametrize("missing,message", [
        ("patientName", "Error: Patient name cannot be empty."),
        ("patientGovId", "Error: Patient Gov Id cannot be empty."),
        ("patientPhone", "Error: Patient Phone cannot be empty."),
    ])
    def test_missing_required_field_provisions_nothing(self, workspace, sheets, drive, intake_fields, missing, message):
        """Test that invalid intake touches no asset, not even the root folder."""
        sheet_count = len(sheets.spreadsheets)
        fields = {**intake_fields, missing: "   "}

        with pytest.raises(ValidationError) as exc_info:
            PatientService.create_from_intake(workspace, fields)

        assert exc_info.value.message == message
        assert exc_info.value.field == missing
        assert len(sheets.spreadsheets) == sheet_count
        assert drive.folders == {}
        assert sheets.writes == []

    def test_email_optional(self, workspace, intake_fields):
        del intake_fields["patientEmail"]

        patient = PatientService.create_from_intake(workspace, intake_fields)

        assert patient.email == ""

    def test_drive_failure_propagates(self, workspace, drive, intake_fields):
        with patch.object(drive, "create_folder", side_effect=GoogleDriveError("quota exceeded")):
            with pytest.raises(GoogleDriveError):
                PatientService.create_from_intake(workspace, intake_fields)


class TestRehydrate:
    """Test loading a patient back from its spreadsheet."""

    def test_round_trip(self, workspace, intake_fields):
        created = PatientService.create_from_intake(workspace, intake_fields)

        loaded = PatientService.load_by_id(workspace, created.document_id)

        assert (loaded.name, loaded.phone, loaded.gov_id, loaded.email) == (
            created.name, created.phone, created.gov_id, created.email
        )
        assert loaded.folder == created.folder
        assert loaded.root_folder == created.root_folder
        assert loaded.latest_visit is None

    def test_load_does_not_write(self, workspace, sheets, intake_fields):
        created = PatientService.create_from_intake(workspace, intake_fields)
        writes = list(sheets.writes)

        PatientService.load_by_id(workspace, created.document_id)

        assert sheets.writes == writes

    def test_numeric_cells_read_as_text(self, workspace, sheets):
        sheets.add_spreadsheet("legacy", {1: ["Patient Name:", "Old Patient"], 2: ["Phone:", 912345678.0], 3: ["Gov Id:", 42]})

        patient = Patient.rehydrate(workspace, "legacy")

        assert patient.phone == "912345678"
        assert patient.gov_id == "42"
        assert patient.email == ""
        assert patient.folder is None

    def test_empty_id_rejected(self, workspace):
        with pytest.raises(ValidationError):
            PatientService.load_by_id(workspace, "")


class TestCreateAssets:

    def test_second_call_fails_and_keeps_assets(self, workspace, sheets, drive, intake_fields):
        created = PatientService.create_from_intake(workspace, intake_fields)
        patient = PatientService.load_by_id(workspace, created.document_id)
        folders = dict(drive.folders)
        cells = dict(sheets.spreadsheets[created.document_id])

        with pytest.raises(AssetAlreadyProvisioned, match="Patient assets already created."):
            patient.create_assets(workspace)

        assert drive.folders == folders
        assert sheets.spreadsheets[created.document_id] == cells
        assert len(sheets.spreadsheets) == 2

    def test_log_sheet_layout_requires_assets(self, workspace, sheets):
        patient = Patient(name="Jane", gov_id="1", phone="2")

        with pytest.raises(ValueError, match="has no folder and spreadsheet"):
            patient._setup_log_sheet(workspace)

        assert sheets.writes == []

    def test_requires_root_folder(self, workspace):
        patient = Patient(name="Jane", gov_id="1", phone="2")

        with pytest.raises(ValueError):
            patient.create_assets(workspace)
