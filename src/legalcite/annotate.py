"""Insert markup around citations in a document.

Markup is inserted from the end of the document backwards so earlier
offsets stay valid while the text grows. Citations are never modified.

Example::

    result = annotate(text, citations, template=AnnotationTemplate("<cite>", "</cite>"))
    result.text      # annotated document
    result.skipped   # citations whose region overlapped one already annotated
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from legalcite.citation_types import Citation, FullCaseCitation, Span

SURROUNDING_CONTEXT = 30

_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#39;",
    "/": "&#x2F;",
}
_ESCAPE_RE = re.compile(r"[&<>\"'/]")


@dataclass(frozen=True, slots=True)
class AnnotationTemplate:
    before: str
    after: str


@dataclass(frozen=True, slots=True)
class AnnotationResult:
    text: str
    skipped: tuple[Citation, ...] = ()


def escape_html(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPES[m.group(0)], text)


def _region(citation: Citation, *, use_clean_text: bool, use_full_span: bool) -> tuple[int, int]:
    span: Span = citation.span
    if use_full_span and isinstance(citation, FullCaseCitation) and citation.full_span is not None:
        span = citation.full_span
    if use_clean_text:
        return span.clean_start, span.clean_end
    return span.original_start, span.original_end


def annotate(
    text: str,
    citations: Sequence[Citation],
    *,
    template: AnnotationTemplate | None = None,
    callback: Callable[[Citation, str], str] | None = None,
    use_clean_text: bool = False,
    use_full_span: bool = False,
    auto_escape: bool = True,
) -> AnnotationResult:
    """Wrap each citation's region of *text* in markup.

    With *template* the region text (HTML-escaped when *auto_escape*) is
    wrapped in ``before``/``after``. With *callback* the returned string
    replaces the region verbatim; the callback receives the citation and up
    to 30 characters of context on either side. *use_clean_text* selects
    clean offsets, for annotating the cleaned text instead of the original.
    """
    if template is None and callback is None:
        raise ValueError("annotate needs a template or a callback")

    regions = [
        (citation, *_region(citation, use_clean_text=use_clean_text, use_full_span=use_full_span))
        for citation in citations
    ]
    regions.sort(key=lambda r: (r[1], r[2]), reverse=True)

    result = text
    skipped: list[Citation] = []
    floor = len(text) + 1
    for citation, start, end in regions:
        if end > floor or start < 0 or end > len(text):
            skipped.append(citation)
            continue
        if callback is not None:
            surrounding = text[max(0, start - SURROUNDING_CONTEXT) : end + SURROUNDING_CONTEXT]
            markup = callback(citation, surrounding)
        else:
            assert template is not None
            inner = text[start:end]
            if auto_escape:
                inner = escape_html(inner)
            markup = template.before + inner + template.after
        result = result[:start] + markup + result[end:]
        floor = start

    skipped.reverse()
    return AnnotationResult(text=result, skipped=tuple(skipped))
