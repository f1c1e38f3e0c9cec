"""Tests for legalcite.annotate."""
from __future__ import annotations

import pytest

from legalcite.annotate import AnnotationTemplate, annotate, escape_html
from legalcite.citation_types import Citation
from legalcite.extract import extract_citations, extract_document

CITE = AnnotationTemplate("<cite>", "</cite>")


class TestTemplate:
    def test_escapes_region_text(self) -> None:
        text = "See 12 F. App'x 34."
        result = annotate(text, extract_citations(text), template=CITE)
        assert result.text == "See <cite>12 F. App&#39;x 34</cite>."
        assert result.skipped == ()

    def test_no_escape(self) -> None:
        text = "See 12 F. App'x 34."
        result = annotate(text, extract_citations(text), template=CITE, auto_escape=False)
        assert result.text == "See <cite>12 F. App'x 34</cite>."

    def test_multiple_citations_keep_offsets(self) -> None:
        text = "A 1 F.3d 2 and 3 F.3d 4."
        result = annotate(text, extract_citations(text), template=AnnotationTemplate("[", "]"))
        assert result.text == "A [1 F.3d 2] and [3 F.3d 4]."

    def test_citations_unchanged(self) -> None:
        text = "A 1 F.3d 2 and 3 F.3d 4."
        citations = extract_citations(text)
        before = list(citations)
        annotate(text, citations, template=CITE)
        assert citations == before


class TestRegions:
    def test_full_span_overlap_is_skipped(self) -> None:
        text = "Roe v. Wade, 410 U.S. 113, 93 S. Ct. 705 (1973)"
        citations = extract_citations(text)
        result = annotate(text, citations, template=CITE, use_full_span=True)
        assert result.text == "Roe v. Wade, 410 U.S. 113, <cite>93 S. Ct. 705</cite> (1973)"
        assert result.skipped == (citations[0],)

    def test_full_span(self) -> None:
        text = "See Smith v. Jones, 500 F.2d 123 (1990)."
        result = annotate(text, extract_citations(text), template=CITE, use_full_span=True)
        assert result.text == "See <cite>Smith v. Jones, 500 F.2d 123 (1990)</cite>."

    def test_clean_and_original_coordinates(self) -> None:
        raw = "<b>Id.</b>"
        doc = extract_document(raw)
        on_original = annotate(raw, doc.citations, template=CITE, auto_escape=False)
        assert on_original.text == "<b><cite>Id.</cite></b>"
        on_clean = annotate(doc.clean.cleaned, doc.citations, template=CITE, use_clean_text=True)
        assert on_clean.text == "<cite>Id.</cite>"

    def test_citation_inside_inline_tag(self) -> None:
        raw = "<i>500 F.2d 123</i> (1990)"
        doc = extract_document(raw)
        result = annotate(raw, doc.citations, template=CITE, auto_escape=False)
        assert result.text == "<i><cite>500 F.2d 123</cite></i> (1990)"


class TestCallback:
    def test_callback_replaces_region(self) -> None:
        seen: list[str] = []

        def mark(citation: Citation, surrounding: str) -> str:
            seen.append(surrounding)
            return f"[{citation.citation_type}]"

        text = "Id. at 5"
        result = annotate(text, extract_citations(text), callback=mark)
        assert result.text == "[id]"
        assert seen == ["Id. at 5"]

    def test_requires_template_or_callback(self) -> None:
        with pytest.raises(ValueError):
            annotate("Id.", extract_citations("Id."))


def test_escape_html() -> None:
    assert escape_html("a/b <c> & \"d\"") == "a&#x2F;b &lt;c&gt; &amp; &quot;d&quot;"
