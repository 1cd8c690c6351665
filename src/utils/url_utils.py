"""
Query-string helpers for routing between views.
"""

import json
from typing import Any, Dict
from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


def encode_data(data: Dict[str, Any]) -> str:
    """
    URL-encode a dict as compact JSON, suitable for the ``data`` query parameter.

    Produces the same text as ``encodeURIComponent(JSON.stringify(data))``.
    """
    json_string = json.dumps(data, separators=(",", ":"), ensure_ascii=False)
    return quote(json_string, safe=_URI_COMPONENT_SAFE)


def decode_data(raw: str) -> Any:
    """
    Decode a ``data`` query parameter back into a Python value.

    Raises:
        ValueError: If the text is not JSON
    """
    return json.loads(unquote(raw))


def page_url(base_url: str, page: str, data: Dict[str, Any]) -> str:
    """Build ``<base>?page=<page>&data=<encoded json>``."""
    return f"{base_url}?page={page}&data={encode_data(data)}"
