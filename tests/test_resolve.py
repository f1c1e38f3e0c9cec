"""Tests for legalcite.resolve."""
from __future__ import annotations

import pytest

from legalcite.citation_types import ResolvedCitation
from legalcite.config import ResolutionOptions
from legalcite.extract import extract_citations
from legalcite.resolve import reporter_match_key, resolve_citations, supra_party_key


def _resolve(text: str, options: ResolutionOptions | None = None) -> list[ResolvedCitation]:
    return resolve_citations(extract_citations(text), text, options)


class TestId:
    def test_resolves_to_previous(self) -> None:
        results = _resolve("Roe v. Wade, 410 U.S. 113 (1973). Id. at 120.")
        assert results[0].resolution is None
        r = results[1].resolution
        assert r is not None
        assert r.resolved_index == 0
        assert r.confidence == 1.0
        assert r.pincite == 120

    def test_previous_citation_of_any_type(self) -> None:
        results = _resolve("Roe v. Wade, 410 U.S. 113 (1973); 42 U.S.C. § 1983. Id.")
        r = results[2].resolution
        assert r is not None
        assert r.resolved_index == 1

    def test_first_citation(self) -> None:
        (result,) = _resolve("Id. at 5.")
        r = result.resolution
        assert r is not None
        assert not r.resolved
        assert r.failure_reason == "No preceding citation"
        assert r.warnings[0].message == "No preceding citation"
        assert r.confidence == 0.0


class TestSupra:
    _DOC = "Doe v. Roe, 10 Cal. 3d 100, 500 P.2d 200 (1970). Later, see Doe, supra, at 105."

    def test_exact_match(self) -> None:
        results = _resolve(self._DOC)
        r = results[-1].resolution
        assert r is not None
        assert r.resolved_index == 0
        assert r.confidence == pytest.approx(0.9)
        assert r.pincite == 105
        assert r.warnings == ()

    def test_after_capitalized_sentence(self) -> None:
        text = (
            "The rule applies throughout the United States. "
            "Smith v. Jones, 500 F.2d 123 (1990). See Smith, supra, at 125."
        )
        results = _resolve(text)
        assert results[0].citation.plaintiff == "Smith"  # type: ignore[union-attr]
        r = results[1].resolution
        assert r is not None
        assert r.resolved_index == 0
        assert r.confidence == pytest.approx(0.9)

    def test_fuzzy_match(self) -> None:
        results = _resolve("Smith v. Jones, 500 F.2d 123 (1990). See Smyth, supra.")
        r = results[1].resolution
        assert r is not None
        assert r.resolved_index == 0
        assert r.confidence == pytest.approx(0.8)
        assert r.warnings[0].message == "Fuzzy match: similarity 0.80"

    def test_below_threshold(self) -> None:
        results = _resolve("Smith v. Jones, 500 F.2d 123 (1990). See Smythe, supra.")
        r = results[1].resolution
        assert r is not None
        assert not r.resolved
        assert r.failure_reason == "Party name similarity 0.67 below threshold 0.8"

    def test_fuzzy_disabled(self) -> None:
        options = ResolutionOptions(fuzzy_party_matching=False)
        results = _resolve("Smith v. Jones, 500 F.2d 123 (1990). See Smyth, supra.", options)
        r = results[1].resolution
        assert r is not None
        assert r.failure_reason == 'No full citation found for party "Smyth"'

    def test_ambiguous(self) -> None:
        text = (
            "Smith v. Jones, 500 F.2d 1 (1990); Smoth v. Brown, 501 F.2d 2 (1991). "
            "See Smyth, supra."
        )
        r = _resolve(text)[2].resolution
        assert r is not None
        assert not r.resolved
        assert r.failure_reason is not None
        assert r.failure_reason.startswith('Ambiguous party name "Smyth"')

    def test_no_antecedent(self) -> None:
        (result,) = _resolve("See Smith, supra.")
        r = result.resolution
        assert r is not None
        assert r.failure_reason == "No full citation found in scope"

    def test_party_key(self) -> None:
        assert supra_party_key("Smith v. Jones") == "smith"
        assert supra_party_key("The Acme Corp.") == "acme"


class TestShortFormCase:
    def test_nearest_match(self) -> None:
        text = "Smith v. Jones, 500 F.2d 123 (1990). Later, 500 F. 2d at 125."
        r = _resolve(text)[1].resolution
        assert r is not None
        assert r.resolved_index == 0
        assert r.confidence == pytest.approx(0.7)
        assert r.pincite == 125
        assert r.warnings == ()

    def test_multiple_antecedents_warn(self) -> None:
        text = "500 F.2d 100 (1990); 500 F.2d 200 (1991). 500 F.2d at 210."
        r = _resolve(text)[2].resolution
        assert r is not None
        assert r.resolved_index == 1
        assert len(r.warnings) == 1

    def test_no_match(self) -> None:
        r = _resolve("500 F.2d 100 (1990). 501 F.2d at 5.")[1].resolution
        assert r is not None
        assert r.failure_reason == "No matching full case citation found"

    def test_reporter_key(self) -> None:
        assert reporter_match_key("F. 2d") == reporter_match_key("f.2d") == "f2d"


class TestScopeAndReporting:
    def test_paragraph_scope_blocks_id(self) -> None:
        options = ResolutionOptions(scope_strategy="paragraph")
        r = _resolve("410 U.S. 113 (1973).\n\nId. at 120.", options)[1].resolution
        assert r is not None
        assert r.failure_reason == "Preceding citation outside scope boundary"

    def test_paragraph_scope_blocks_supra(self) -> None:
        options = ResolutionOptions(scope_strategy="paragraph")
        text = "Smith v. Jones, 500 F.2d 123 (1990).\n\nSee Smith, supra."
        r = _resolve(text, options)[1].resolution
        assert r is not None
        assert r.failure_reason == "No full citation found in scope"

    def test_same_paragraph_resolves(self) -> None:
        options = ResolutionOptions(scope_strategy="paragraph")
        r = _resolve("410 U.S. 113 (1973).\nId.", options)[1].resolution
        assert r is not None
        assert r.resolved_index == 0

    def test_paragraph_scope_without_text(self) -> None:
        citations = extract_citations("410 U.S. 113 (1973).\n\nId.")
        options = ResolutionOptions(scope_strategy="paragraph")
        r = resolve_citations(citations, None, options)[1].resolution
        assert r is not None
        assert r.resolved_index == 0

    def test_unresolved_suppressed(self) -> None:
        (result,) = _resolve("Id.", ResolutionOptions(report_unresolved=False))
        assert result.resolution is None

    def test_every_citation_reported_in_order(self) -> None:
        results = _resolve("410 U.S. 113 (1973). Id. Id. at 5.")
        assert [r.index for r in results] == [0, 1, 2]
        assert [r.resolution.resolved_index for r in results[1:]] == [0, 1]  # type: ignore[union-attr]
