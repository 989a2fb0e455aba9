"""Tests for shared utility functions."""

from sms_agent.utils import mask_phone, normalize_phone


class TestNormalizePhone:
    def test_strips_spaces(self):
        assert normalize_phone("415 555 0134") == "4155550134"

    def test_strips_dashes_and_dots(self):
        assert normalize_phone("415-555.0134") == "4155550134"

    def test_strips_parentheses(self):
        assert normalize_phone("(415) 555 0134") == "4155550134"

    def test_preserves_leading_plus(self):
        assert normalize_phone("+1 415 555 0134") == "+14155550134"

    def test_clean_number_unchanged(self):
        assert normalize_phone("+14155550134") == "+14155550134"

    def test_strips_whitespace(self):
        assert normalize_phone("  +14155550134  ") == "+14155550134"


class TestMaskPhone:
    def test_keeps_last_four_digits(self):
        assert mask_phone("+1 (415) 555-0134") == "***0134"

    def test_short_value_fully_masked(self):
        assert mask_phone("123") == "***"
