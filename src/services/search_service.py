"""
Patient search over the Master Index.

A row matches when the term is found (case-insensitively) in the name or
government id, OR when the diagnosis keyword is found in any cell of the
patient's visit log. Both criteria combine with OR, not AND.
"""

import logging
from dataclasses import dataclass
from typing import Any, List

from core.constants import (
    NOT_AVAILABLE,
    PATIENT_DETAIL_PAGE,
    VISIT_LOG_FIRST_COLUMN,
    VISIT_LOG_FIRST_ROW,
    VISIT_LOG_LAST_COLUMN,
)
from core.exceptions import ExternalServiceError, SearchCandidateError
from models.master_index import MasterIndex, MasterIndexRow
from services.workspace import Workspace
from utils.datetime_utils import format_sheet_date
from utils.url_utils import encode_data

logger = logging.getLogger(__name__)


@dataclass
class PatientMatch:
    name: str
    gov_id: str
    date_created: str
    details_link: str
    patient_id: str


class SearchService:

    @staticmethod
    def search_patient_notes(workspace: Workspace, document_id: str, keyword: str) -> bool:
        """
        Check whether any cell of a patient's visit log contains ``keyword``.

        Raises:
            SearchCandidateError: If the patient's spreadsheet cannot be read
        """
        log_range = f"{VISIT_LOG_FIRST_COLUMN}{VISIT_LOG_FIRST_ROW}:{VISIT_LOG_LAST_COLUMN}"
        try:
            rows = workspace.sheets.get_values(document_id, log_range)
        except ExternalServiceError as e:
            raise SearchCandidateError(document_id, e) from e

        return any(keyword in str(cell).lower() for row in rows for cell in row)

    @staticmethod
    def find_patients(
        workspace: Workspace,
        search_term: Any,
        diagnosis_keyword: Any,
    ) -> List[PatientMatch]:
        """
        Search the Master Index.

        Args:
            workspace: External collaborators and configuration
            search_term: Matched against name and government id
            diagnosis_keyword: Matched against every cell of each patient's log
                (one spreadsheet read per candidate)

        Returns:
            Matching patients; empty when neither criterion is given
        """
        term = _normalize_criterion(search_term)
        keyword = _normalize_criterion(diagnosis_keyword)
        if not term and not keyword:
            return []

        results: List[PatientMatch] = []
        for row in MasterIndex(workspace).rows():
            general_match = bool(term) and (
                term in str(row.name).lower() or term in str(row.gov_id).lower()
            )

            diagnosis_match = False
            if keyword and row.document_id and not general_match:
                try:
                    diagnosis_match = SearchService.search_patient_notes(workspace, row.document_id, keyword)
                except SearchCandidateError as e:
                    logger.warning(f"Skipping patient {row.name} due to error: {e}")

            if general_match or diagnosis_match:
                results.append(_to_match(row))

        logger.info(f"Patient search (term={term!r}, keyword={keyword!r}) found {len(results)} matches")
        return results


def _normalize_criterion(value: Any) -> str:
    # Payload values are arbitrary JSON; a gov id may arrive as a number
    return "" if value is None else str(value).strip().lower()


def _to_match(row: MasterIndexRow) -> PatientMatch:
    return PatientMatch(
        name=str(row.name),
        gov_id=str(row.gov_id),
        date_created=format_sheet_date(row.date_created, NOT_AVAILABLE),
        details_link=f"?page={PATIENT_DETAIL_PAGE}&data={encode_data({'patientId': row.document_id})}",
        patient_id=row.document_id,
    )
