"""Tests for legalcite.clean."""
from __future__ import annotations

from legalcite.clean import clean_text
from legalcite.extract import extract_citations


class TestCleanText:
    def test_plain_text_is_identity(self) -> None:
        result = clean_text("Smith v. Jones, 500 F.2d 123")
        assert result.cleaned == "Smith v. Jones, 500 F.2d 123"
        assert result.position_map.is_identity
        assert not any(result.flags.values())

    def test_empty_input(self) -> None:
        result = clean_text("")
        assert result.cleaned == ""
        assert result.position_map.to_original(0) == 0

    def test_strips_inline_tags(self) -> None:
        raw = "<p>See <i>Roe</i>, 410 U.S. 113</p>"
        result = clean_text(raw)
        assert result.cleaned == "\nSee Roe, 410 U.S. 113\n"
        assert result.flags["html_stripped"]

    def test_tag_stripping_keeps_offsets(self) -> None:
        raw = "<p>See <i>Roe</i>, 410 U.S. 113</p>"
        result = clean_text(raw)
        start = result.cleaned.index("410")
        end = start + len("410 U.S. 113")
        pm = result.position_map
        assert raw[pm.to_original(start) : pm.to_original(end)] == "410 U.S. 113"

    def test_entities_decoded(self) -> None:
        result = clean_text("A&amp;B")
        assert result.cleaned == "A&B"
        assert result.flags["entities_decoded"]
        assert result.position_map.to_original(2) == 6

    def test_section_entity(self) -> None:
        assert clean_text("42 U.S.C. &sect; 1983").cleaned == "42 U.S.C. § 1983"

    def test_crlf(self) -> None:
        result = clean_text("a\r\nb")
        assert result.cleaned == "a\nb"
        assert result.flags["crlf_normalized"]
        assert result.position_map.to_original(1) == 2
        assert result.position_map.to_original(2) == 3

    def test_unicode_normalization(self) -> None:
        result = clean_text("500\u00a0F.2d \u201cquoted\u201d")
        assert result.cleaned == '500 F.2d "quoted"'
        assert result.flags["unicode_normalized"]

    def test_zero_width_removed(self) -> None:
        result = clean_text("Id.\u200b at 5")
        assert result.cleaned == "Id. at 5"
        assert result.flags["zero_width_removed"]

    def test_whitespace_collapse(self) -> None:
        result = clean_text("a   b\n\n\n c")
        assert result.cleaned == "a b\n\nc"
        assert result.flags["whitespace_collapsed"]
        assert result.position_map.to_original(2) == 4
        # Dropped characters map forward to the next clean offset.
        assert result.position_map.to_clean(2) == 2

    def test_end_sentinel(self) -> None:
        raw = "<b>x</b>"
        result = clean_text(raw)
        assert result.cleaned == "x"
        assert result.position_map.to_original(len(result.cleaned)) == len(raw)

    def test_span_end_stops_before_closing_tag(self) -> None:
        raw = "<i>500 F.2d 123</i> (1990)"
        result = clean_text(raw)
        assert result.cleaned == "500 F.2d 123 (1990)"
        end = len("500 F.2d 123")
        pm = result.position_map
        assert pm.to_original(end) == raw.index(" (1990)")
        assert raw[pm.to_original(0) : pm.to_original_end(end)] == "500 F.2d 123"

    def test_span_end_after_entity(self) -> None:
        raw = "A&amp;B"
        pm = clean_text(raw).position_map
        assert pm.to_original_end(2) == raw.index("B")
        assert pm.to_original_end(3) == len(raw)

    def test_idempotent(self) -> None:
        once = clean_text("Smith  v.\r\nJones &amp; Co.,  <b>1 F.3d 2</b>").cleaned
        assert clean_text(once).cleaned == once

    def test_options_disable_transforms(self) -> None:
        result = clean_text("<b>a</b>  b", strip_html=False, collapse_whitespace=False)
        assert result.cleaned == "<b>a</b>  b"


class TestHtmlRoundTrip:
    def test_original_span_covers_citation_in_raw_html(self) -> None:
        raw = "<p>See <em>Smith v. Jones</em>, 500 F.2d 123 (9th Cir. 2020).</p>"
        citations = extract_citations(raw)
        assert len(citations) == 1
        span = citations[0].span
        assert raw[span.original_start : span.original_end] == "500 F.2d 123"
