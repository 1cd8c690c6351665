# pyright: reportMissingTypeStubs=false
"""Helpers for reading Google API error payloads."""

import json

from googleapiclient.errors import HttpError


def http_error_message(e: HttpError) -> str:
    """Extract the API's error message from an HttpError, falling back to str(e)."""
    try:
        error_details = json.loads(e.content.decode("utf-8")) if e.content else {}
    except (ValueError, UnicodeDecodeError):
        return str(e)
    if not isinstance(error_details, dict):
        return str(e)
    return error_details.get("error", {}).get("message", str(e))


def http_error_status(e: HttpError) -> int:
    return int(getattr(e.resp, "status", 0) or 0)
