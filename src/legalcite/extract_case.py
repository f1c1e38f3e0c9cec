"""Full case-citation extraction.

One case token becomes one ``FullCaseCitation``. The token itself only holds
``volume reporter page``; everything else is recovered from the surrounding
cleaned text:

- pincite directly after the core (``500 F.2d 123, 125``)
- case name, searched backwards from the volume
- parentheticals and subsequent history, scanned forward from the core (or
  from the last parallel citation when the token heads a parallel group)

Missing metadata is left as None and never lowers confidence.
"""

from __future__ import annotations

import datetime
import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from legalcite.case_names import CASE_NAME_WINDOW, find_case_name, normalize_party_name
from legalcite.citation_types import (
    CitationParseError,
    CitationWarning,
    Err,
    FullCaseCitation,
    Ok,
    ParallelCitation,
    Result,
    Token,
)
from legalcite.confidence import reporter_key, score_case_confidence
from legalcite.parenthetical import FULL_SPAN_WINDOW, scan_parentheticals, summarize_parentheticals
from legalcite.positions import PositionMap
from legalcite.reporters import ReporterDatabase

logger = logging.getLogger(__name__)

_CORE_RE = re.compile(
    r"^(?P<volume>\d+(?:-\d+)?)\s+(?P<reporter>\S.*?)\s+(?P<page>\d+|[_-]{3,})$"
)
_PINCITE_RE = re.compile(r",\s*(\d+)(?:\s*[-–]\s*\d+)?(?=\s*(?:[,;.)(]|n\.|$))")

# Reporters that only print Supreme Court opinions.
_SUPREME_COURT_REPORTERS = frozenset({"u.s.", "s.ct.", "l.ed.", "l.ed.2d"})



@dataclass(frozen=True, slots=True)
class CaseStructure:
    volume: int | str
    reporter: str
    page: int | None
    has_blank_page: bool


def parse_volume(raw: str) -> int | str:
    """Hyphenated volumes (``1984-1``) stay strings."""
    return int(raw) if raw.isdigit() else raw


def parse_case_structure(text: str) -> Result[CaseStructure, str]:
    """Split a case token into volume, reporter and page.

    The page position takes digits or a blank-page placeholder of three or
    more underscores/hyphens. Reporter spacing is preserved as written.
    """
    m = _CORE_RE.match(text.strip())
    if m is None:
        return Err(f"not a volume-reporter-page citation: {text!r}")
    page_raw = m.group("page")
    blank = not page_raw.isdigit()
    return Ok(
        CaseStructure(
            volume=parse_volume(m.group("volume")),
            reporter=m.group("reporter"),
            page=None if blank else int(page_raw),
            has_blank_page=blank,
        )
    )


def find_pincite(text: str, pos: int) -> tuple[int | None, int]:
    """Pincite immediately after *pos* and where it ends.

    A number followed by a reporter is the next (parallel) citation, not a
    pincite.
    """
    m = _PINCITE_RE.match(text, pos)
    if m is None:
        return None, pos
    return int(m.group(1)), m.end()


def _structure(token: Token) -> CaseStructure:
    match parse_case_structure(token.text):
        case Ok(value=structure):
            return structure
        case Err(error=reason):
            raise CitationParseError(reason, token)


def extract_case(
    token: Token,
    text: str,
    position_map: PositionMap,
    *,
    parallel: Sequence[Token] = (),
    reporter_db: ReporterDatabase | None = None,
    current_year: int | None = None,
    case_name_window: int = CASE_NAME_WINDOW,
    full_span_window: int = FULL_SPAN_WINDOW,
) -> FullCaseCitation:
    """Extract one full case citation from its token.

    *parallel* lists the secondary tokens when this token heads a parallel
    group; the shared parenthetical is then scanned from the end of the last
    one. *reporter_db* is the snapshot taken by the caller; None means no
    validation adjustment.
    """
    structure = _structure(token)
    span = position_map.span(token.clean_start, token.clean_end)
    pincite, scan_from = find_pincite(text, token.clean_end)

    secondaries: list[ParallelCitation] = []
    for secondary in parallel:
        sec = _structure(secondary)
        secondaries.append(ParallelCitation(sec.volume, sec.reporter, sec.page))
        _, scan_from = find_pincite(text, secondary.clean_end)

    scan = scan_parentheticals(text, scan_from, window=full_span_window)
    summary = summarize_parentheticals(scan.parentheticals)
    info = summary.info
    court = info.court
    if court is None and reporter_key(structure.reporter) in _SUPREME_COURT_REPORTERS:
        court = "scotus"

    case_name = plaintiff = defendant = procedural_prefix = None
    full_span = None
    match find_case_name(text, token.clean_start, window=case_name_window):
        case Ok(value=name):
            case_name = name.case_name
            plaintiff = name.plaintiff
            defendant = name.defendant
            procedural_prefix = name.procedural_prefix
            full_span = position_map.span(name.start, max(scan.end, token.clean_end))
        case Err(error=reason):
            logger.debug("no case name for %r: %s", token.text, reason)

    warnings: list[CitationWarning] = []
    match_count: int | None = None
    normalized_reporter: str | None = None
    if reporter_db is not None:
        validation = reporter_db.validate(structure.reporter)
        match_count = len(validation.matches)
        normalized_reporter = validation.canonical
        if validation.warning:
            warnings.append(
                CitationWarning(
                    level="warning",
                    message=validation.warning,
                    position=(span.original_start, span.original_end),
                )
            )

    breakdown = score_case_confidence(
        reporter=structure.reporter,
        year=info.year,
        has_blank_page=structure.has_blank_page,
        current_year=current_year or datetime.date.today().year,
        reporter_match_count=match_count,
    )

    return FullCaseCitation(
        text=token.text,
        span=span,
        confidence=breakdown.final,
        matched_text=token.text,
        warnings=tuple(warnings),
        volume=structure.volume,
        reporter=structure.reporter,
        page=structure.page,
        pincite=pincite,
        court=court,
        year=info.year,
        date=info.date,
        case_name=case_name,
        plaintiff=plaintiff,
        defendant=defendant,
        plaintiff_normalized=normalize_party_name(plaintiff) if plaintiff else None,
        defendant_normalized=normalize_party_name(defendant) if defendant else None,
        procedural_prefix=procedural_prefix,
        disposition=info.disposition,
        full_span=full_span,
        parallel_citations=tuple(secondaries),
        has_blank_page=structure.has_blank_page,
        explanatory_parenthetical=summary.explanatory,
        subsequent_history=scan.subsequent_history,
        normalized_reporter=normalized_reporter,
    )
