"""Short-form resolution: link Id., supra and short-form case citations to
their full antecedents.

Citations are processed strictly in document order. A ``ResolutionContext``
carries the per-document history through every step; nothing is shared
between documents. Failures never raise: an unresolved short form gets a
result with ``resolved_index=None``, a ``failure_reason`` and a matching
warning.

Rules:
- Id./Ibid.: the immediately preceding citation, confidence 1.0.
- supra: exact normalized party-name match (0.9), else fuzzy Levenshtein
  similarity at or above the threshold (confidence = similarity).
- short-form case: nearest earlier full case citation with the same volume
  and reporter (0.7).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

from legalcite.case_names import normalize_party_name, split_parties
from legalcite.citation_types import (
    Citation,
    CitationWarning,
    FullCaseCitation,
    IdCitation,
    ResolutionResult,
    ResolvedCitation,
    ShortFormCaseCitation,
    SupraCitation,
)
from legalcite.config import ResolutionOptions
from legalcite.scope import ParagraphScope

logger = logging.getLogger(__name__)

ID_RESOLUTION_CONFIDENCE = 1.0
SUPRA_EXACT_CONFIDENCE = 0.9
SHORT_FORM_CASE_RESOLUTION_CONFIDENCE = 0.7


def reporter_match_key(reporter: str) -> str:
    """Case-, space- and period-insensitive key (``F. 2d`` == ``f.2d``)."""
    return "".join(reporter.split()).replace(".", "").lower()


@dataclass(slots=True)
class ResolutionContext:
    """Mutable history for one document pass."""

    citations: Sequence[Citation]
    options: ResolutionOptions
    scope: ParagraphScope | None = None
    full_history: list[int] = field(default_factory=list)
    party_index: dict[str, int] = field(default_factory=dict)

    def record_full(self, index: int, citation: Citation) -> None:
        self.full_history.append(index)
        if isinstance(citation, FullCaseCitation):
            for party in (citation.plaintiff_normalized, citation.defendant_normalized):
                if party:
                    self.party_index[party] = index

    def in_scope(self, antecedent: int, current: int) -> bool:
        if self.scope is None:
            return True
        return self.scope.same_paragraph(
            self.citations[antecedent].span.original_start,
            self.citations[current].span.original_start,
        )


def _warning(citation: Citation, message: str) -> CitationWarning:
    return CitationWarning(
        level="warning",
        message=message,
        position=(citation.span.original_start, citation.span.original_end),
    )


def _failure(citation: Citation, reason: str) -> ResolutionResult:
    logger.debug("unresolved %r: %s", citation.text, reason)
    return ResolutionResult(
        resolved_index=None,
        confidence=0.0,
        warnings=(_warning(citation, reason),),
        failure_reason=reason,
    )


def resolve_id(index: int, citation: IdCitation, ctx: ResolutionContext) -> ResolutionResult:
    if index == 0:
        return _failure(citation, "No preceding citation")
    if not ctx.in_scope(index - 1, index):
        return _failure(citation, "Preceding citation outside scope boundary")
    return ResolutionResult(
        resolved_index=index - 1,
        confidence=ID_RESOLUTION_CONFIDENCE,
        pincite=citation.pincite,
    )


def supra_party_key(party_name: str) -> str:
    """Normalized lookup key; ``Smith v. Jones, supra`` matches on Smith."""
    plaintiff, _ = split_parties(party_name)
    return normalize_party_name(plaintiff)


def resolve_supra(index: int, citation: SupraCitation, ctx: ResolutionContext) -> ResolutionResult:
    target = supra_party_key(citation.party_name)
    candidates = {
        party: antecedent
        for party, antecedent in ctx.party_index.items()
        if ctx.in_scope(antecedent, index)
    }
    if not candidates:
        return _failure(citation, "No full citation found in scope")

    if target in candidates:
        return ResolutionResult(
            resolved_index=candidates[target],
            confidence=SUPRA_EXACT_CONFIDENCE,
            pincite=citation.pincite,
        )
    if not ctx.options.fuzzy_party_matching:
        return _failure(citation, f'No full citation found for party "{citation.party_name}"')

    best_score = -1.0
    best: set[int] = set()
    for party, antecedent in candidates.items():
        score = Levenshtein.normalized_similarity(target, party)
        if score > best_score:
            best_score, best = score, {antecedent}
        elif score == best_score:
            best.add(antecedent)

    threshold = ctx.options.party_match_threshold
    if best_score < threshold:
        return _failure(
            citation,
            f"Party name similarity {best_score:.2f} below threshold {threshold}",
        )
    if len(best) > 1:
        return _failure(
            citation,
            f'Ambiguous party name "{citation.party_name}": matches citations '
            + ", ".join(str(i) for i in sorted(best)),
        )
    return ResolutionResult(
        resolved_index=best.pop(),
        confidence=round(best_score, 4),
        warnings=(_warning(citation, f"Fuzzy match: similarity {best_score:.2f}"),),
        pincite=citation.pincite,
    )


def resolve_short_form_case(
    index: int, citation: ShortFormCaseCitation, ctx: ResolutionContext
) -> ResolutionResult:
    key = (str(citation.volume), reporter_match_key(citation.reporter))
    matches: list[int] = []
    for antecedent in reversed(ctx.full_history):
        candidate = ctx.citations[antecedent]
        if not isinstance(candidate, FullCaseCitation):
            continue
        if (str(candidate.volume), reporter_match_key(candidate.reporter)) != key:
            continue
        if not ctx.in_scope(antecedent, index):
            continue
        matches.append(antecedent)
    if not matches:
        return _failure(citation, "No matching full case citation found")

    warnings: tuple[CitationWarning, ...] = ()
    pages = {ctx.citations[m].page for m in matches}  # type: ignore[union-attr]
    if len(pages) > 1:
        warnings = (
            _warning(
                citation,
                f"Multiple antecedents share {citation.volume} {citation.reporter}; "
                "using the nearest",
            ),
        )
    return ResolutionResult(
        resolved_index=matches[0],
        confidence=SHORT_FORM_CASE_RESOLUTION_CONFIDENCE,
        warnings=warnings,
        pincite=citation.pincite,
    )


def resolve_citations(
    citations: Sequence[Citation],
    text: str | None = None,
    options: ResolutionOptions | None = None,
) -> list[ResolvedCitation]:
    """Resolve every short form against the full citations before it.

    *text* is the original document; it is only needed for the
    ``"paragraph"`` scope strategy. Full citations come back with
    ``resolution=None``, as do unresolved short forms when
    ``report_unresolved`` is off.
    """
    options = options or ResolutionOptions()
    scope = None
    if options.scope_strategy == "paragraph":
        if text is None:
            logger.warning("paragraph scope requested without document text; scope disabled")
        else:
            scope = ParagraphScope(text, options.paragraph_pattern)
    ctx = ResolutionContext(citations=citations, options=options, scope=scope)

    out: list[ResolvedCitation] = []
    for index, citation in enumerate(citations):
        resolution: ResolutionResult | None
        match citation:
            case IdCitation():
                resolution = resolve_id(index, citation, ctx)
            case SupraCitation():
                resolution = resolve_supra(index, citation, ctx)
            case ShortFormCaseCitation():
                resolution = resolve_short_form_case(index, citation, ctx)
            case _:
                ctx.record_full(index, citation)
                resolution = None
        if resolution is not None and not resolution.resolved and not options.report_unresolved:
            resolution = None
        out.append(ResolvedCitation(index=index, citation=citation, resolution=resolution))
    return out
