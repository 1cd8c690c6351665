"""
View descriptors and the request context handed to controllers.

Every controller takes a RequestContext and returns a ViewDescriptor naming
the template to render (or carrying literal content, e.g. a redirect URL),
the data bound into the template, and response metadata.
"""

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from core.constants import HTTP_CODE_REDIRECT, HTTP_CODE_SUCCESS, PATIENT_DETAIL_PAGE
from utils.url_utils import page_url

if TYPE_CHECKING:
    from services.workspace import Workspace


@dataclass
class ResponseMetadata:
    """Response metadata; ``status`` None means the default (200)."""
    status: Optional[int] = None


@dataclass
class ViewDescriptor:
    """
    Result of a controller.

    Attributes:
        view_name: Template to render (without extension)
        literal_content: Pre-rendered content returned verbatim, bypassing
            the template engine
        metadata: Response metadata
        data: Values bound into the template scope
    """
    view_name: Optional[str]
    literal_content: Optional[str] = None
    metadata: ResponseMetadata = field(default_factory=ResponseMetadata)
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def status(self) -> int:
        return self.metadata.status or HTTP_CODE_SUCCESS

    @property
    def is_literal(self) -> bool:
        return self.literal_content is not None


Handler = Callable[["RequestContext"], ViewDescriptor]


@dataclass(frozen=True)
class RequestContext:
    """
    What a controller receives.

    Attributes:
        user_name: Caller identity (email address) from the hosting environment
        page_controller: The controller resolved for the requested page
        query_data: Decoded request payload ({} when absent)
        base_url: Public URL of the app, for building links
        workspace: Configuration and external collaborators
    """
    user_name: str
    page_controller: Handler
    query_data: Dict[str, Any]
    base_url: str
    workspace: "Workspace"

    def with_data(self, **data: Any) -> "RequestContext":
        """Copy of this context with extra payload entries, for embedding another controller."""
        return replace(self, query_data={**self.query_data, **data})


def merge_template_data(
    view_name: Optional[str],
    data: Optional[Dict[str, Any]] = None,
    status: Optional[int] = None,
) -> ViewDescriptor:
    """Build a descriptor rendering ``view_name`` with ``data``."""
    return ViewDescriptor(
        view_name=view_name,
        metadata=ResponseMetadata(status),
        data=dict(data or {}),
    )


def literal_render(content: str, status: Optional[int] = None) -> ViewDescriptor:
    """Build a descriptor whose content is returned as-is."""
    return ViewDescriptor(view_name=None, literal_content=content, metadata=ResponseMetadata(status))


def redirect_to_page(base_url: str, page: str, data: Dict[str, Any]) -> ViewDescriptor:
    """
    Redirect instruction: the literal ``<base>?page=<page>&data=<json>`` tagged 302.

    Performing the navigation is up to the caller.
    """
    return literal_render(page_url(base_url, page, data), HTTP_CODE_REDIRECT)


def redirect_to_patient_detail(base_url: str, patient_id: str) -> ViewDescriptor:
    return redirect_to_page(base_url, PATIENT_DETAIL_PAGE, {"patientId": patient_id})
