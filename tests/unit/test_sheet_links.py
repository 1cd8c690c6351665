"""
Unit tests for spreadsheet cell helpers.
"""

from utils.sheet_links import cell_a1, hyperlink_formula, pad_row, row_range_a1


class TestHyperlinkFormula:

    def test_plain(self):
        assert hyperlink_formula("https://x/y", "View Event") == '=HYPERLINK("https://x/y", "View Event")'

    def test_double_quotes_doubled(self):
        assert hyperlink_formula('https://x/?q="a"', 'Say "hi"') == '=HYPERLINK("https://x/?q=""a""", "Say ""hi""")'


class TestA1Helpers:

    def test_cell_and_row_range(self):
        assert cell_a1("E", 11) == "E11"
        assert row_range_a1("A", "F", 11) == "A11:F11"

    def test_pad_row(self):
        assert pad_row(["a"], 3) == ["a", "", ""]
