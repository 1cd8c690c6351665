"""
Jinja2 environment for the view templates.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import BaseLoader, Environment, FileSystemLoader, select_autoescape

from utils.datetime_utils import parse_sheet_datetime

logger = logging.getLogger(__name__)

TEMPLATE_EXTENSION = ".html"


def template_file(view_name: str) -> str:
    return f"{view_name}{TEMPLATE_EXTENSION}"


def format_currency(value: Optional[Union[Decimal, float, int, str]]) -> str:
    """Format an amount with comma separators and two decimals (e.g. 30000 -> '30,000.00')."""
    if value is None or value == "":
        return ""
    try:
        return f"{Decimal(str(value)):,.2f}"
    except ArithmeticError:
        logger.warning(f"Error formatting currency: {value!r}")
        return str(value)


def format_datetime(value: Any) -> str:
    """Format a datetime (or date cell) as YYYY-MM-DD HH:MM."""
    parsed = parse_sheet_datetime(value)
    if parsed is None:
        return ""
    return parsed.strftime('%Y-%m-%d %H:%M')


def create_template_environment(
    template_dir: Union[str, Path, None] = None,
    loader: Optional[BaseLoader] = None,
) -> Environment:
    """
    Environment loading ``<view name>.html`` files.

    Args:
        template_dir: Directory holding the templates
        loader: Loader to use instead of reading ``template_dir``
    """
    if loader is None:
        if template_dir is None:
            raise ValueError("Either template_dir or loader is required")
        loader = FileSystemLoader(str(template_dir))
    env = Environment(
        loader=loader,
        autoescape=select_autoescape(['html', 'xml']),
    )
    env.filters['format_currency'] = format_currency
    env.filters['format_datetime'] = format_datetime
    return env
