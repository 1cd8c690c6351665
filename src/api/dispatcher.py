"""
Dispatcher: turns a page request into rendered output.

A request names a page and may carry a URL-encoded JSON payload under
``data``. The dispatcher resolves the page's controller through the
registry, builds the RequestContext, runs the controller and renders the
ViewDescriptor it returns in one of three modes:

- ``render_document``: the full page, the Index frame embedding the page
- ``embed_controller``: the content string only, for nesting views
- ``async_embed_controller``: a ``{status, content}`` envelope

Errors raised by controllers propagate to the caller.
"""

import logging
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from jinja2 import Environment
from markupsafe import Markup

from api.registry import ControllerRegistry
from api.responses import EnvelopeResponse, RenderedPage
from api.templating import create_template_environment, template_file
from api.view import Handler, RequestContext, ResponseMetadata, ViewDescriptor, merge_template_data
from core.constants import DEFAULT_PAGE, HTTP_CODE_SUCCESS, INDEX_PAGE, PAGE_TITLE
from core.exceptions import InvalidPayload
from services.workspace import Workspace
from utils.url_utils import decode_data, encode_data

logger = logging.getLogger(__name__)

ControllerRef = Union[str, Handler]


def parse_query_data(raw: Optional[str]) -> Dict[str, Any]:
    """
    Decode the ``data`` query parameter.

    Returns:
        The decoded object, or {} when the parameter is absent

    Raises:
        InvalidPayload: If it is not a URL-encoded JSON object
    """
    if not raw:
        return {}
    try:
        query_data = decode_data(raw)
    except ValueError as e:
        raise InvalidPayload(f"data parameter is not valid JSON: {e}")
    if not isinstance(query_data, dict):
        raise InvalidPayload("data parameter must encode a JSON object")
    return query_data


def async_render(content: str, response_metadata: ResponseMetadata, status: int = HTTP_CODE_SUCCESS) -> EnvelopeResponse:
    """Envelope for asynchronous calls; the metadata status wins over ``status``."""
    return EnvelopeResponse(status=response_metadata.status or status, content=content)


class Dispatcher:
    """
    Resolves, runs and renders controllers.

    Attributes:
        registry: Page name -> controller mapping
        workspace: Configuration and external collaborators handed to controllers
        env: Jinja2 environment; templates can call ``embed_controller``,
            ``include_static_template`` and ``encode_data``
    """

    def __init__(
        self,
        registry: ControllerRegistry,
        workspace: Workspace,
        template_env: Optional[Environment] = None,
    ) -> None:
        self.registry = registry
        self.workspace = workspace
        self.env = template_env or create_template_environment(workspace.config.template_dir)
        self.env.globals.update(
            embed_controller=self._embed_markup,
            include_static_template=self._include_markup,
            encode_data=encode_data,
        )

    @property
    def base_url(self) -> str:
        return self.workspace.config.base_url

    def build_context(self, requested_page: Optional[str], query_data: Dict[str, Any], user_name: str) -> RequestContext:
        """
        Resolve the page's controller and build the context passed to it.

        Raises:
            HandlerNotFound: If the page has no controller
        """
        controller = self.registry.resolve(requested_page or DEFAULT_PAGE)
        return RequestContext(
            user_name=user_name,
            page_controller=controller,
            query_data=query_data,
            base_url=self.base_url,
            workspace=self.workspace,
        )

    def compute_controller_data(
        self,
        requested_page: Optional[str],
        params: Mapping[str, str],
        user_name: str,
    ) -> RequestContext:
        """
        Context for a page request; ``params`` holds the raw query parameters.

        Raises:
            HandlerNotFound: If the page has no controller
            InvalidPayload: If ``data`` is not a URL-encoded JSON object
        """
        controller_context = self.build_context(requested_page, parse_query_data(params.get("data")), user_name)
        logger.debug(f"Dispatching page '{requested_page or DEFAULT_PAGE}' for {user_name or 'anonymous'}")
        return controller_context

    def do_embed_controller(
        self,
        controller: ControllerRef,
        context: RequestContext,
        view_name: Optional[str] = None,
    ) -> Tuple[str, ViewDescriptor]:
        """
        Run a controller and render its descriptor.

        Args:
            controller: Page name or controller
            context: Request context passed to the controller
            view_name: Renders this view instead of the one the controller names

        Returns:
            Rendered content and the controller's descriptor
        """
        resolved = self.registry.resolve(controller)
        descriptor = resolved(context)
        final_view = view_name or descriptor.view_name
        return self.process_template(final_view, descriptor), descriptor

    def embed_controller(
        self,
        controller: ControllerRef,
        context: RequestContext,
        view_name: Optional[str] = None,
    ) -> str:
        """Run a controller and return only the rendered content."""
        content, _ = self.do_embed_controller(controller, context, view_name)
        return content

    def async_embed_controller(
        self,
        controller: ControllerRef,
        context: RequestContext,
        view_name: Optional[str] = None,
    ) -> EnvelopeResponse:
        """Run a controller and wrap the rendered content in an envelope."""
        content, descriptor = self.do_embed_controller(controller, context, view_name)
        return async_render(content, descriptor.metadata)

    def render_document(
        self,
        requested_page: Optional[str],
        params: Mapping[str, str],
        user_name: str,
    ) -> RenderedPage:
        """
        Full-page render for direct navigation: the Index frame embeds the
        requested page's controller.
        """
        context = self.compute_controller_data(requested_page, params, user_name)
        content, descriptor = self.do_embed_controller(INDEX_PAGE, context)
        return RenderedPage(title=PAGE_TITLE, content=content, status=descriptor.status)

    def include_static_template(self, view_name: str, data: Optional[Dict[str, Any]] = None) -> str:
        """Render a template that has no controller."""
        return self.process_template(view_name, merge_template_data(view_name, data))

    def process_template(self, view_name: Optional[str], descriptor: ViewDescriptor) -> str:
        """
        Render a descriptor.

        Literal content is returned verbatim; otherwise ``view_name`` is
        rendered with the descriptor's data in scope.

        Raises:
            ValueError: If there is neither literal content nor a view name
            jinja2.TemplateNotFound: If the view has no template
        """
        if descriptor.is_literal:
            return descriptor.literal_content or ""

        if not view_name:
            raise ValueError("Controller returned neither a view name nor literal content")

        template = self.env.get_template(template_file(view_name))
        scope = {
            "base_url": self.base_url,
            "view_name": view_name,
            "response_metadata": descriptor.metadata,
        }
        scope.update(descriptor.data)
        return template.render(**scope)

    def _embed_markup(self, controller: ControllerRef, context: RequestContext, view_name: Optional[str] = None) -> Markup:
        # Called from templates; the nested output is already escaped HTML
        return Markup(self.embed_controller(controller, context, view_name))

    def _include_markup(self, view_name: str, data: Optional[Dict[str, Any]] = None) -> Markup:
        return Markup(self.include_static_template(view_name, data))
