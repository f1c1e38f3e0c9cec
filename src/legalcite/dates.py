"""Date recognition inside citation parentheticals.

Formats are tried in order; the first that yields a valid calendar date
wins:

1. abbreviated month  ``Jan. 15, 2020`` / ``Sept. 5, 2019``
2. full month         ``January 15, 2020``
3. numeric US         ``1/15/2020``
4. month and year     ``Jan. 2020``
5. bare year          ``2020``

Components absent from the text are left as None; nothing is defaulted.
"""

from __future__ import annotations

import datetime
import re
from dataclasses import dataclass

from legalcite.citation_types import ParsedDate, StructuredDate

MONTHS: dict[str, int] = {
    "jan": 1, "january": 1,
    "feb": 2, "february": 2,
    "mar": 3, "march": 3,
    "apr": 4, "april": 4,
    "may": 5,
    "jun": 6, "june": 6,
    "jul": 7, "july": 7,
    "aug": 8, "august": 8,
    "sep": 9, "sept": 9, "september": 9,
    "oct": 10, "october": 10,
    "nov": 11, "november": 11,
    "dec": 12, "december": 12,
}

_ABBREV = r"Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sept|Sep|Oct|Nov|Dec"
_FULL = r"January|February|March|April|May|June|July|August|September|October|November|December"

_ABBREV_DATE_RE = re.compile(r"\b(" + _ABBREV + r")\.?\s+(\d{1,2}),?\s+(\d{4})\b")
_FULL_DATE_RE = re.compile(r"\b(" + _FULL + r")\s+(\d{1,2}),?\s+(\d{4})\b")
_NUMERIC_DATE_RE = re.compile(r"\b(\d{1,2})/(\d{1,2})/(\d{4})\b")
_MONTH_YEAR_RE = re.compile(r"\b(" + _FULL + r"|" + _ABBREV + r")\.?\s+(\d{4})\b")
_YEAR_RE = re.compile(r"\b(1[6-9]\d{2}|2[01]\d{2})\b")


@dataclass(frozen=True, slots=True)
class DateMatch:
    """A recognized date and where it sits in the searched text."""

    date: StructuredDate
    start: int
    end: int


def _valid(year: int, month: int, day: int | None) -> bool:
    try:
        datetime.date(year, month, day or 1)
    except ValueError:
        return False
    return True


def find_date(text: str) -> DateMatch | None:
    """Find the first date in *text*, most specific format first."""
    for regex in (_ABBREV_DATE_RE, _FULL_DATE_RE):
        for m in regex.finditer(text):
            month = MONTHS[m.group(1).lower()]
            day, year = int(m.group(2)), int(m.group(3))
            if _valid(year, month, day):
                return DateMatch(
                    StructuredDate.from_parsed(ParsedDate(year, month, day)), m.start(), m.end()
                )

    for m in _NUMERIC_DATE_RE.finditer(text):
        month, day, year = int(m.group(1)), int(m.group(2)), int(m.group(3))
        if _valid(year, month, day):
            return DateMatch(
                StructuredDate.from_parsed(ParsedDate(year, month, day)), m.start(), m.end()
            )

    m = _MONTH_YEAR_RE.search(text)
    if m:
        parsed = ParsedDate(int(m.group(2)), MONTHS[m.group(1).lower()])
        return DateMatch(StructuredDate.from_parsed(parsed), m.start(), m.end())

    m = _YEAR_RE.search(text)
    if m:
        return DateMatch(StructuredDate.from_parsed(ParsedDate(int(m.group(1)))), m.start(), m.end())
    return None


def parse_date(text: str) -> StructuredDate | None:
    match = find_date(text)
    return match.date if match else None
