"""
Response and request models shared by the HTTP endpoints.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class EnvelopeResponse(BaseModel):
    """Uniform envelope for asynchronous calls from an already-loaded page."""
    status: int
    content: str


class AsyncRunRequest(BaseModel):
    """Asynchronous controller call."""
    page: str
    data: Dict[str, Any] = Field(default_factory=dict)
    view: Optional[str] = None  # Overrides the view the controller names


class RenderedPage(BaseModel):
    """Full-document render result."""
    title: str
    content: str
    status: int
