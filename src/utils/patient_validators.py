"""
Patient intake validation.

Provides centralized validation of the intake form fields.
"""

from typing import Any, Dict, Mapping

from core.exceptions import ValidationError

INTAKE_FIELDS = ("patientName", "patientGovId", "patientPhone", "patientEmail")

REQUIRED_INTAKE_FIELDS = (
    ("patientName", "Error: Patient name cannot be empty."),
    ("patientGovId", "Error: Patient Gov Id cannot be empty."),
    ("patientPhone", "Error: Patient Phone cannot be empty."),
)


def normalize_intake(fields: Mapping[str, Any]) -> Dict[str, str]:
    """Pick the intake fields and strip surrounding whitespace (missing -> "")."""
    normalized = {}
    for name in INTAKE_FIELDS:
        value = fields.get(name)
        normalized[name] = "" if value is None else str(value).strip()
    return normalized


def validate_intake(fields: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate the patient intake fields.

    Name, government id and phone are required; email is optional.

    Args:
        fields: Raw form fields

    Returns:
        Normalized fields

    Raises:
        ValidationError: For the first missing required field
    """
    normalized = normalize_intake(fields)
    for name, message in REQUIRED_INTAKE_FIELDS:
        if not normalized[name]:
            raise ValidationError(message, field=name)
    return normalized
