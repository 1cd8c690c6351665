"""
Controller registry: explicit mapping from page names to controllers.

Page ``X`` is served by the controller registered under
``lowercase-first-letter(X) + "Controller"``, e.g. ``PatientDetail`` ->
``patientDetailController``.
"""

import logging
from typing import Dict, List, Union

from api.view import Handler
from core.constants import CONTROLLER_SUFFIX
from core.exceptions import HandlerNotFound

logger = logging.getLogger(__name__)


def controller_name(page_name: str) -> str:
    """Registry key for a page name."""
    return f"{page_name[:1].lower()}{page_name[1:]}{CONTROLLER_SUFFIX}"


class ControllerRegistry:
    """Built once at start-up; read-only afterwards."""

    def __init__(self) -> None:
        self._controllers: Dict[str, Handler] = {}

    def register(self, page_name: str, controller: Handler) -> Handler:
        """
        Register the controller serving ``page_name``.

        Raises:
            ValueError: If the page already has a controller
        """
        name = controller_name(page_name)
        if name in self._controllers:
            raise ValueError(f"Controller {name} is already registered")
        self._controllers[name] = controller
        return controller

    def resolve(self, controller: Union[str, Handler]) -> Handler:
        """
        Resolve a page name into its controller.

        Callables are returned unchanged so one controller can embed another
        directly.

        Raises:
            HandlerNotFound: If no controller is registered for the page
        """
        if callable(controller):
            return controller

        name = controller_name(controller)
        resolved = self._controllers.get(name)
        if resolved is None:
            logger.warning(f"No controller registered for page '{controller}' ({name})")
            raise HandlerNotFound(name)
        return resolved

    def names(self) -> List[str]:
        return sorted(self._controllers)

    def __contains__(self, page_name: object) -> bool:
        return isinstance(page_name, str) and controller_name(page_name) in self._controllers
