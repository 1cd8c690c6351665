"""
Patient search controllers.
"""

from api.view import RequestContext, ViewDescriptor, merge_template_data
from services.search_service import SearchService


def patient_search_controller(context: RequestContext) -> ViewDescriptor:
    return merge_template_data('SearchForm', {'context': context, 'data': context.query_data or {}})


def do_patient_search_controller(context: RequestContext) -> ViewDescriptor:
    """Run the Master Index search for ``searchTerm`` / ``diagnosisKeyword``."""
    data = context.query_data
    matches = SearchService.find_patients(
        context.workspace,
        data.get('searchTerm'),
        data.get('diagnosisKeyword'),
    )
    return merge_template_data('SearchResults', {'context': context, 'data': data, 'matches': matches})
