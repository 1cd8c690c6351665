"""
Unit tests for the controller registry.
"""

import pytest

from api.controllers import build_registry
from api.registry import ControllerRegistry, controller_name
from api.view import merge_template_data
from core.exceptions import HandlerNotFound


def sample_controller(context):
    return merge_template_data("Sample")


class TestControllerName:

    def test_lowercases_first_letter(self):
        assert controller_name("PatientDetail") == "patientDetailController"
        assert controller_name("home") == "homeController"


class TestControllerRegistry:
    """Test registration and resolution."""

    def test_resolve_registered_page(self):
        registry = ControllerRegistry()
        registry.register("Sample", sample_controller)

        assert registry.resolve("Sample") is sample_controller
        # Only the first letter's case is folded
        assert registry.resolve("sample") is sample_controller
        assert "Sample" in registry

    def test_resolve_callable_passes_through(self):
        registry = ControllerRegistry()

        assert registry.resolve(sample_controller) is sample_controller

    def test_unknown_page_raises_handler_not_found(self):
        registry = ControllerRegistry()

        with pytest.raises(HandlerNotFound) as exc_info:
            registry.resolve("Missing")

        assert exc_info.value.controller_name == "missingController"
        assert 'Controller function "missingController" is not defined or is not callable.' == str(exc_info.value)

    def test_duplicate_registration_rejected(self):
        registry = ControllerRegistry()
        registry.register("Sample", sample_controller)

        with pytest.raises(ValueError):
            registry.register("Sample", sample_controller)


class TestBuildRegistry:

    def test_all_pages_registered(self):
        registry = build_registry()

        for page in ("Index", "Header", "Menu", "Home", "Calendar", "TodayVisits", "PatientDetail",
                     "NewVisit", "NewPatient", "CreateNewPatient", "BookNewVisit", "PatientSearch",
                     "DoPatientSearch"):
            assert page in registry

        assert len(registry.names()) == 13
