"""Parenthetical parsing and the forward full-span scan.

A case citation is usually followed by one or more parentheticals:

    500 F.2d 123 (9th Cir. 2020) (en banc), aff'd, 510 F.3d 300 (2021)

``parse_parenthetical`` reads one parenthetical's content into court, date
and disposition. ``scan_parentheticals`` walks forward from the citation core
with depth tracking to find where the citation (including chained
parentheticals and subsequent history) ends.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from legalcite.citation_types import StructuredDate
from legalcite.dates import find_date

FULL_SPAN_WINDOW = 200

_DISPOSITION_RE = re.compile(r"\b(en banc|per curiam)\b", re.IGNORECASE)

_HISTORY_RE = re.compile(
    r"\s*,?\s*(?P<marker>"
    r"aff'd(?: in part)?(?:(?:,| and) rev'd in part)?"
    r"|aff'g|rev'd(?: in part)?|rev'g"
    r"|cert\. (?:denied|granted|dismissed)"
    r"|vacated(?: and remanded)?"
    r"|(?:overruled|abrogated|superseded) by"
    r"|modified|reh'g (?:denied|granted)|appeal dismissed|withdrawn"
    r")(?=[,\s]|$)",
    re.IGNORECASE,
)

_LETTER_RE = re.compile(r"[A-Za-z]")
_MAX_COURT_LENGTH = 40


@dataclass(frozen=True, slots=True)
class ParentheticalInfo:
    court: str | None = None
    year: int | None = None
    date: StructuredDate | None = None
    disposition: str | None = None


@dataclass(frozen=True, slots=True)
class ScannedParenthetical:
    """Content of one balanced parenthetical and its clean-text bounds."""

    content: str
    start: int
    end: int


@dataclass(frozen=True, slots=True)
class ParentheticalScan:
    parentheticals: tuple[ScannedParenthetical, ...]
    subsequent_history: str | None
    end: int


@dataclass(frozen=True, slots=True)
class ParentheticalSummary:
    info: ParentheticalInfo
    explanatory: str | None


def parse_parenthetical(content: str) -> ParentheticalInfo:
    """Parse court, date and disposition from one parenthetical's content.

    The court is whatever remains after removing the recognized date (with
    its trailing comma) and the disposition phrase, provided a letter is
    left. "en banc" and "per curiam" are mutually exclusive; the first one
    in the text wins.
    """
    date_match = find_date(content)
    remainder = content
    if date_match is not None:
        remainder = content[: date_match.start] + content[date_match.end :].lstrip(",")

    disposition = None
    disp = _DISPOSITION_RE.search(content)
    if disp:
        disposition = disp.group(1).lower()
        remainder = _DISPOSITION_RE.sub(" ", remainder)

    court = " ".join(remainder.split()).strip(" ,;:")
    date = date_match.date if date_match is not None else None
    return ParentheticalInfo(
        court=court if _LETTER_RE.search(court) else None,
        year=date.parsed.year if date is not None else None,
        date=date,
        disposition=disposition,
    )


def _looks_like_court(court: str | None) -> bool:
    if not court or len(court) > _MAX_COURT_LENGTH:
        return False
    first_word = court.split()[0]
    return first_word[0].isupper() or first_word[0].isdigit()


def _disposition_only(content: str) -> bool:
    return _DISPOSITION_RE.search(content) is not None and not _LETTER_RE.search(
        _DISPOSITION_RE.sub("", content)
    )


def summarize_parentheticals(
    parentheticals: tuple[ScannedParenthetical, ...],
) -> ParentheticalSummary:
    """Combine a citation's own parentheticals.

    Parentheticals holding only "en banc"/"per curiam" supply the
    disposition. The first of the others supplies court and date when it
    reads like a court/date parenthetical; the first one left over is
    explanatory.
    """
    court: str | None = None
    year: int | None = None
    date: StructuredDate | None = None
    disposition: str | None = None
    explanatory: str | None = None
    court_checked = False

    for paren in parentheticals:
        parsed = parse_parenthetical(paren.content)
        if _disposition_only(paren.content):
            if disposition is None:
                disposition = parsed.disposition
            continue
        if not court_checked:
            court_checked = True
            court_ok = _looks_like_court(parsed.court)
            if (parsed.year is not None and (parsed.court is None or court_ok)) or (
                parsed.year is None and court_ok
            ):
                court, year, date = parsed.court, parsed.year, parsed.date
                if disposition is None:
                    disposition = parsed.disposition
                continue
        if explanatory is None:
            explanatory = " ".join(paren.content.split())

    return ParentheticalSummary(
        info=ParentheticalInfo(court=court, year=year, date=date, disposition=disposition),
        explanatory=explanatory,
    )


def balanced_close(text: str, open_pos: int, limit: int) -> int | None:
    """Index of the ``)`` matching ``text[open_pos]``, or None before *limit*."""
    depth = 0
    for i in range(open_pos, min(limit, len(text))):
        ch = text[i]
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    return None


def _skip_spaces(text: str, pos: int, limit: int) -> int:
    while pos < limit and text[pos].isspace():
        pos += 1
    return pos


def scan_parentheticals(
    text: str,
    start: int,
    *,
    window: int = FULL_SPAN_WINDOW,
) -> ParentheticalScan:
    """Scan forward from *start* over chained parentheticals and history.

    After each balanced parenthetical the scan peeks past whitespace: another
    ``(`` continues it, as does a subsequent-history marker (``, aff'd,``
    ...) followed by a parenthetical. Anything else stops it. Parentheticals
    before the first history marker are the citation's own.
    """
    limit = min(len(text), start + window)
    own: list[ScannedParenthetical] = []
    history: str | None = None
    stop = start
    pos = start

    while pos < limit:
        p = _skip_spaces(text, pos, limit)
        if p < limit and text[p] == "(":
            close = balanced_close(text, p, limit)
            if close is None:
                break
            if history is None:
                own.append(ScannedParenthetical(text[p + 1 : close], p, close + 1))
            stop = pos = close + 1
            continue

        m = _HISTORY_RE.match(text, pos)
        if m is None or m.end() > limit:
            break
        nxt = text.find("(", m.end(), limit)
        if nxt == -1 or ";" in text[m.end() : nxt]:
            break
        close = balanced_close(text, nxt, limit)
        if close is None:
            break
        if history is None:
            history = m.group("marker")
        stop = pos = close + 1

    return ParentheticalScan(parentheticals=tuple(own), subsequent_history=history, end=stop)
