"""Tests for catalog/common/text_utils.py"""

from catalog.common.text_utils import normalize_whitespace, slugify, strip_punctuation


class TestStripPunctuation:
    def test_removes_symbols(self):
        assert strip_punctuation("Galaxy S24+") == "Galaxy S24"

    def test_empty(self):
        assert strip_punctuation("") == ""


class TestSlugify:
    def test_basic(self):
        assert slugify("iPhone 15 Pro") == "iphone-15-pro"

    def test_collapses_whitespace(self):
        assert slugify("  Space   Black ") == "space-black"

    def test_empty(self):
        assert slugify("") == ""


class TestNormalizeWhitespace:
    def test_collapses(self):
        assert normalize_whitespace(" 6.1\"\n  OLED ") == "6.1\" OLED"
