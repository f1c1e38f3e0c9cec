"""Confidence scoring for extracted case citations.

Heuristic components:
- base 0.5 for any structurally valid citation
- +0.3 when the reporter is a common abbreviation
- +0.2 when the parenthetical year is not in the future
The heuristic total is capped at 1.0, then the reporter-database adjustment
(when a database is loaded) is applied and the result clamped to [0, 1].
Blank-page citations are pinned at 0.8.
"""

from __future__ import annotations

from dataclasses import dataclass

BASE_CONFIDENCE = 0.5
COMMON_REPORTER_BONUS = 0.3
VALID_YEAR_BONUS = 0.2
BLANK_PAGE_CONFIDENCE = 0.8

DB_MATCH_BONUS = 0.2
DB_MISS_PENALTY = 0.3
DB_AMBIGUITY_PENALTY = 0.1

COMMON_REPORTERS: tuple[str, ...] = (
    "F.", "F.2d", "F.3d", "F.4th",
    "F. Supp.", "F. Supp. 2d", "F. Supp. 3d", "F. App'x",
    "U.S.", "S. Ct.", "L. Ed.", "L. Ed. 2d",
    "P.", "P.2d", "P.3d",
    "A.", "A.2d", "A.3d",
    "N.E.", "N.E.2d", "N.E.3d",
    "N.W.", "N.W.2d",
    "S.E.", "S.E.2d",
    "S.W.", "S.W.2d", "S.W.3d",
    "So.", "So. 2d", "So. 3d",
)


def reporter_key(reporter: str) -> str:
    """Spacing- and case-insensitive comparison key for reporter abbreviations."""
    return "".join(reporter.split()).lower()


_COMMON_KEYS = frozenset(reporter_key(r) for r in COMMON_REPORTERS)


@dataclass(frozen=True, slots=True)
class ConfidenceBreakdown:
    base: float
    reporter: float
    year: float
    validation: float
    blank_page: bool
    final: float

    def as_dict(self) -> dict[str, float | bool]:
        return {
            "base": self.base,
            "reporter": self.reporter,
            "year": self.year,
            "validation": self.validation,
            "blank_page": self.blank_page,
            "final": self.final,
        }


def _bounded(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def is_common_reporter(reporter: str) -> bool:
    return reporter_key(reporter) in _COMMON_KEYS


def validation_adjustment(match_count: int | None) -> float:
    """Reporter-database adjustment; None means no database was consulted."""
    if match_count is None:
        return 0.0
    if match_count == 0:
        return -DB_MISS_PENALTY
    if match_count == 1:
        return DB_MATCH_BONUS
    return -DB_AMBIGUITY_PENALTY * (match_count - 1)


def score_case_confidence(
    *,
    reporter: str,
    year: int | None,
    has_blank_page: bool,
    current_year: int,
    reporter_match_count: int | None = None,
) -> ConfidenceBreakdown:
    """Score a full case citation."""
    if has_blank_page:
        return ConfidenceBreakdown(
            base=BLANK_PAGE_CONFIDENCE,
            reporter=0.0,
            year=0.0,
            validation=0.0,
            blank_page=True,
            final=BLANK_PAGE_CONFIDENCE,
        )

    reporter_component = COMMON_REPORTER_BONUS if is_common_reporter(reporter) else 0.0
    year_component = VALID_YEAR_BONUS if year is not None and year <= current_year else 0.0
    heuristic = min(1.0, BASE_CONFIDENCE + reporter_component + year_component)
    validation = validation_adjustment(reporter_match_count)
    return ConfidenceBreakdown(
        base=BASE_CONFIDENCE,
        reporter=reporter_component,
        year=year_component,
        validation=validation,
        blank_page=False,
        final=round(_bounded(heuristic + validation), 4),
    )
