"""
Controllers and the registry that maps page names to them.
"""

from api.registry import ControllerRegistry

from .layout import (
    calendar_controller,
    header_controller,
    home_controller,
    index_controller,
    menu_controller,
    today_visits_controller,
)
from .patient import (
    book_new_visit_controller,
    create_new_patient_controller,
    new_patient_controller,
    new_visit_controller,
    patient_detail_controller,
)
from .search import do_patient_search_controller, patient_search_controller


def build_registry() -> ControllerRegistry:
    """Registry of every page the application serves."""
    registry = ControllerRegistry()
    registry.register("Index", index_controller)
    registry.register("Header", header_controller)
    registry.register("Menu", menu_controller)
    registry.register("Home", home_controller)
    registry.register("Calendar", calendar_controller)
    registry.register("TodayVisits", today_visits_controller)
    registry.register("PatientDetail", patient_detail_controller)
    registry.register("NewVisit", new_visit_controller)
    registry.register("NewPatient", new_patient_controller)
    registry.register("CreateNewPatient", create_new_patient_controller)
    registry.register("BookNewVisit", book_new_visit_controller)
    registry.register("PatientSearch", patient_search_controller)
    registry.register("DoPatientSearch", do_patient_search_controller)
    return registry


__all__ = ["build_registry"]
