"""
Patient service for patient registration and lookup.

This module contains the patient-related business logic used by the
controllers: validating intake, provisioning assets, indexing, and loading
patients back from their spreadsheets.
"""

import logging
from typing import Any, Mapping

from core.exceptions import ValidationError
from models.master_index import MasterIndex
from models.patient import Patient
from models.visit import Visit
from services.google_drive_service import DriveFolder
from services.workspace import Workspace
from utils.datetime_utils import app_now
from utils.patient_validators import validate_intake

logger = logging.getLogger(__name__)


def error_details(e: Exception) -> str:
    """Format an exception's type and message for logging."""
    return f"{type(e).__name__}: {e}"


class PatientService:
    """
    Service class for patient operations.
    """

    @staticmethod
    def get_or_create_root_folder(workspace: Workspace, folder_name: str) -> DriveFolder:
        """
        Find the root folder by exact name, creating it if absent.

        If several folders share the name the first one listed wins.
        """
        folders = workspace.drive.find_folders_by_name(folder_name)
        if folders:
            if len(folders) > 1:
                logger.warning(f"{len(folders)} folders named '{folder_name}' found, using {folders[0].id}")
            return folders[0]

        logger.info(f'Root folder "{folder_name}" not found. Creating a new one.')
        return workspace.drive.create_folder(folder_name)

    @staticmethod
    def create_from_intake(workspace: Workspace, fields: Mapping[str, Any]) -> Patient:
        """
        Register a new patient.

        Creates the patient's folder and spreadsheet under the root folder and
        adds the Master Index row. Steps run in sequence; a failure part-way
        leaves the assets created so far in place.

        Args:
            workspace: External collaborators and configuration
            fields: Intake form fields (patientName, patientGovId,
                patientPhone, patientEmail)

        Returns:
            The provisioned Patient

        Raises:
            ValidationError: If name, government id or phone is empty; no
                asset is touched in that case
            ExternalServiceError: If a Google API call fails
        """
        normalized = validate_intake(fields)

        try:
            root_folder = PatientService.get_or_create_root_folder(workspace, workspace.config.root_folder_name)
            patient = Patient.new_intake(normalized, root_folder)
            patient.create_assets(workspace)
            MasterIndex(workspace).add_patient(patient, app_now(workspace.config.time_zone).date())
        except Exception as e:
            logger.error(f"Error creating patient: {error_details(e)}", exc_info=True)
            raise

        logger.info(f"Created patient {patient.document_id}")
        return patient

    @staticmethod
    def load_by_id(workspace: Workspace, document_id: str) -> Patient:
        """
        Load a patient and its latest visit from the patient's spreadsheet.

        Raises:
            ValidationError: If no document id is given
        """
        if not document_id:
            raise ValidationError("Error: patientId is required.", field="patientId")
        return Patient.rehydrate(workspace, document_id)

    @staticmethod
    def record_visit(workspace: Workspace, patient: Patient, visit: Visit) -> int:
        """Append a visit to the patient's log; the calendar event is created by the caller."""
        return patient.record_visit(workspace, visit)
