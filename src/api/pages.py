"""
HTTP endpoints exposing the dispatcher.

``GET /`` renders a full page for direct navigation; ``POST /run`` runs a
controller for an already-loaded page and answers with an envelope.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from api.dispatcher import Dispatcher
from api.responses import AsyncRunRequest, EnvelopeResponse
from auth.dependencies import get_current_user_email

logger = logging.getLogger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> Dispatcher:
    return request.app.state.dispatcher


@router.get("/", response_class=HTMLResponse, summary="Render a page")
def render_page(
    request: Request,
    page: Optional[str] = None,
    user_email: str = Depends(get_current_user_email),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> HTMLResponse:
    """
    Render ``page`` (default ``home``) inside the page frame.

    ``data`` may carry a URL-encoded JSON object passed to the controller.
    """
    rendered = dispatcher.render_document(page, dict(request.query_params), user_email)
    return HTMLResponse(content=rendered.content, status_code=rendered.status)


@router.post("/run", response_model=EnvelopeResponse, summary="Run a controller asynchronously")
def run_controller(
    run_request: AsyncRunRequest,
    user_email: str = Depends(get_current_user_email),
    dispatcher: Dispatcher = Depends(get_dispatcher),
) -> EnvelopeResponse:
    """
    Run the controller of ``page`` with ``data`` as its payload.

    The HTTP status is always 200; the controller's status travels in the
    envelope (e.g. 302 with the redirect URL as content, 422 with a re-shown
    form).
    """
    context = dispatcher.build_context(run_request.page, run_request.data, user_email)
    return dispatcher.async_embed_controller(context.page_controller, context, run_request.view)
