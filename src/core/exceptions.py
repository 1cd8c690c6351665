"""
Error taxonomy shared by the dispatcher, the entity model and the adapters.
"""

from typing import Optional


class ValidationError(Exception):
    """A required intake field is missing or malformed."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


class HandlerNotFound(LookupError):
    """No controller is registered for the requested page."""

    def __init__(self, controller_name: str) -> None:
        super().__init__(f'Controller function "{controller_name}" is not defined or is not callable.')
        self.controller_name = controller_name


class InvalidPayload(ValueError):
    """The ``data`` query parameter is not a URL-encoded JSON object."""
    pass


class AssetAlreadyProvisioned(Exception):
    """Assets were already created for this patient."""
    pass


class ExternalServiceError(Exception):
    """Base error for failures reported by Sheets, Drive or Calendar."""
    pass


class SearchCandidateError(Exception):
    """Looking into one patient's document failed during a keyword search."""

    def __init__(self, document_id: str, cause: Exception) -> None:
        super().__init__(f"Lookup failed for patient document {document_id}: {cause}")
        self.document_id = document_id
        self.cause = cause
