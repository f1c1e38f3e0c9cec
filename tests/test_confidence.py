"""Tests for legalcite.confidence."""
from __future__ import annotations

import pytest

from legalcite.confidence import (
    BLANK_PAGE_CONFIDENCE,
    is_common_reporter,
    reporter_key,
    score_case_confidence,
    validation_adjustment,
)


def _score(reporter: str = "F.2d", year: int | None = 2020, **kwargs: object) -> float:
    params: dict[str, object] = {
        "reporter": reporter,
        "year": year,
        "has_blank_page": False,
        "current_year": 2024,
    }
    params.update(kwargs)
    return score_case_confidence(**params).final  # type: ignore[arg-type]


class TestScoreCaseConfidence:
    def test_common_reporter_with_year(self) -> None:
        assert _score() == pytest.approx(1.0)

    def test_base_only(self) -> None:
        assert _score("Foo.", None) == pytest.approx(0.5)

    def test_future_year_never_boosts(self) -> None:
        assert _score(year=2030) == pytest.approx(0.8)

    def test_blank_page_is_fixed(self) -> None:
        assert _score(has_blank_page=True) == BLANK_PAGE_CONFIDENCE
        assert _score(has_blank_page=True, reporter_match_count=0) == BLANK_PAGE_CONFIDENCE

    def test_database_match(self) -> None:
        assert _score(reporter_match_count=1) == pytest.approx(1.0)
        assert _score("Cal.", reporter_match_count=1) == pytest.approx(0.9)

    def test_database_miss(self) -> None:
        assert _score(reporter_match_count=0) == pytest.approx(0.7)

    def test_database_ambiguity(self) -> None:
        assert _score(reporter_match_count=3) == pytest.approx(0.8)

    def test_always_bounded(self) -> None:
        for reporter in ("F.2d", "Foo."):
            for year in (None, 1900, 2999):
                for count in (None, 0, 1, 2, 20):
                    assert 0.0 <= _score(reporter, year, reporter_match_count=count) <= 1.0

    def test_breakdown(self) -> None:
        b = score_case_confidence(
            reporter="F. 2d", year=2020, has_blank_page=False, current_year=2024
        )
        assert b.as_dict() == {
            "base": 0.5,
            "reporter": 0.3,
            "year": 0.2,
            "validation": 0.0,
            "blank_page": False,
            "final": 1.0,
        }


class TestHelpers:
    def test_reporter_key(self) -> None:
        assert reporter_key("F. 2d") == "f.2d"
        assert reporter_key("S.  Ct.") == "s.ct."

    def test_is_common_reporter(self) -> None:
        assert is_common_reporter("F. Supp. 2d")
        assert not is_common_reporter("Trade Cas.")

    def test_validation_adjustment(self) -> None:
        assert validation_adjustment(None) == 0.0
        assert validation_adjustment(1) == pytest.approx(0.2)
        assert validation_adjustment(0) == pytest.approx(-0.3)
        assert validation_adjustment(2) == pytest.approx(-0.1)
