"""
Spreadsheet cell helpers: A1 notation and clickable link formulas.
"""


def _formula_string(value: str) -> str:
    # Formula string literals escape a double quote by doubling it
    return value.replace('"', '""')


def hyperlink_formula(url: str, label: str) -> str:
    """Build a HYPERLINK formula rendering ``label`` as a link to ``url``."""
    return f'=HYPERLINK("{_formula_string(url)}", "{_formula_string(label)}")'


def cell_a1(column: str, row: int) -> str:
    return f"{column}{row}"


def row_range_a1(first_column: str, last_column: str, row: int) -> str:
    """A1 range spanning one row, e.g. ``A11:F11``."""
    return f"{first_column}{row}:{last_column}{row}"


def pad_row(values: list, width: int) -> list:
    """Pad a row returned by the Sheets API (trailing blanks are omitted) to ``width`` cells."""
    return list(values) + [""] * (width - len(values))
