"""Tests for payload validation and the page-signal input model."""

import logging

import pytest

from src.models.page import HeadingSignal, PageSignals
from src.utils.validators import (
    InvalidInputError,
    ensure_valid_payload,
    validate_content,
    validate_heading,
    validate_page_payload,
    validate_token_list,
)


# ===========================================================================
# 1. Validators
# ===========================================================================
class TestValidators:
    """tuple[bool, str] validators and the raising wrapper."""

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidInputError, ValueError)

    @pytest.mark.parametrize("content,ok", [
        ("text", True),
        ("", True),
        (None, True),
        (42, False),
        (["a"], False),
    ])
    def test_validate_content(self, content, ok):
        valid, msg = validate_content(content)
        assert valid is ok
        assert (msg == "") is ok

    @pytest.mark.parametrize("value,ok", [
        (None, True),
        ([], True),
        (["seo", "tools"], True),
        (("seo",), True),
        ("seo", False),
        ([1, "seo"], False),
        ({"seo": 1}, False),
    ])
    def test_validate_token_list(self, value, ok):
        assert validate_token_list(value, "url_keywords")[0] is ok

    def test_validate_heading(self):
        assert validate_heading({"tag": "h1", "text": "Hi", "keywords": []}) == (True, "")
        assert validate_heading("h1")[0] is False
        assert validate_heading({"tag": 1, "text": "Hi"})[0] is False
        assert validate_heading({"tag": "h2", "text": None})[0] is False

    def test_validate_page_payload(self):
        assert validate_page_payload({"content": "x"}) == (True, "")
        assert validate_page_payload({})[0] is True
        assert validate_page_payload("x")[0] is False
        assert validate_page_payload({"content": "x", "title": 3})[0] is False

    def test_ensure_valid_payload_raises_with_message(self):
        with pytest.raises(InvalidInputError, match="Content must be a string"):
            ensure_valid_payload({"content": 5})


# ===========================================================================
# 2. PageSignals normalisation
# ===========================================================================
class TestPageSignals:
    """Tolerant normalisation of parser payloads."""

    def test_not_a_mapping(self):
        with pytest.raises(InvalidInputError):
            PageSignals.from_dict(["content"])

    def test_defaults(self):
        signals = PageSignals.from_dict({})
        assert signals.content == ""
        assert signals.headings == ()
        assert signals.url_keywords == ()
        assert signals.h1 is None
        assert signals.title_text == ""

    def test_tokens_lowercased_and_deduplicated(self):
        signals = PageSignals.from_dict({"url_keywords": ["SEO", "seo", " Link  Building "]})
        assert signals.url_keywords == ("seo", "link building")

    def test_malformed_lists_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="src.models.page"):
            signals = PageSignals.from_dict({
                "content": "text",
                "url_keywords": "seo",
                "headings": [{"tag": "h1", "text": "Good"}, "bad", {"tag": "h2", "text": 7}],
                "image_alt_texts": ["A photo", 12],
            })
        assert signals.url_keywords == ()
        assert [h.text for h in signals.headings] == ["Good"]
        assert [a.text for a in signals.image_alt_texts] == ["A photo"]
        assert "Skipping heading entry" in caplog.text

    def test_heading_views(self):
        signals = PageSignals.from_dict({
            "headings": [
                {"tag": "h2", "text": "Intro"},
                {"tag": "H1", "text": "Main Title", "keywords": ["Main"]},
                {"tag": "h3", "text": "Details"},
            ],
        })
        assert signals.first_heading.text == "Intro"
        assert signals.h1.text == "Main Title"
        assert signals.h1.keywords == ("main",)
        assert signals.title_text == "Intro"
        assert [h.text for h in signals.subheadings] == ["Intro", "Details"]

    def test_title_preferred(self):
        signals = PageSignals.from_dict({
            "title": "  Page   Title ",
            "headings": [{"tag": "h1", "text": "Heading"}],
        })
        assert signals.title_text == "Page Title"

    @pytest.mark.parametrize("tag,level", [("h1", 1), ("h6", 6), ("p", 0), ("h7", 0)])
    def test_heading_level(self, tag, level):
        assert HeadingSignal(tag=tag, text="x").level == level

    def test_all_keywords_order(self):
        signals = PageSignals.from_dict({
            "url_keywords": ["seo"],
            "meta_keywords": ["tools", "seo"],
            "headings": [{"tag": "h2", "text": "X", "keywords": ["audit"]}],
        })
        assert signals.all_keywords() == ["seo", "tools", "audit"]
