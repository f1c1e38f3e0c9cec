"""Extractors for the non-case full citation types.

Each extractor parses its token's text into the variant's fields and raises
``CitationParseError`` when the text does not have the shape the token type
promises. Confidence is fixed per type, except statutes, which score higher
for a recognized code.
"""

from __future__ import annotations

import re

from legalcite.citation_types import (
    CitationParseError,
    FederalRegisterCitation,
    JournalCitation,
    NeutralCitation,
    PublicLawCitation,
    StatuteCitation,
    StatutesAtLargeCitation,
    Token,
)
from legalcite.dates import parse_date
from legalcite.extract_case import find_pincite
from legalcite.positions import PositionMap

STATUTE_BASE_CONFIDENCE = 0.5
KNOWN_CODE_BONUS = 0.3
JOURNAL_CONFIDENCE = 0.6
NEUTRAL_CONFIDENCE = 1.0
PUBLIC_LAW_CONFIDENCE = 0.9
FEDERAL_REGISTER_CONFIDENCE = 0.9
STATUTES_AT_LARGE_CONFIDENCE = 0.9

KNOWN_CODES: tuple[str, ...] = (
    "U.S.C.",
    "C.F.R.",
    "Cal. Civ. Code",
    "Cal. Penal Code",
    "N.Y. Civ. Prac. L. & R.",
    "Tex. Civ. Prac. & Rem. Code",
)

_STATUTE_RE = re.compile(
    r"^(?:(?P<title>\d+)\s+)?(?P<code>\S.*?)\s*(?:§{1,2}|pt\.)?\s*"
    r"(?P<section>\d[\w\-.]*(?:\([A-Za-z0-9]+\))*)$"
)
_JOURNAL_RE = re.compile(r"^(?P<volume>\d+)\s+(?P<journal>\S.*?)\s+(?P<page>\d+)$")
_NEUTRAL_RE = re.compile(r"^(?P<year>\d{4})\s+(?P<court>\S.*?)\s+(?P<number>\d+)$")
_PUBLIC_LAW_RE = re.compile(r"^Pub\.\s?L\.\s?(?:No\.\s?)?(?P<congress>\d+)-(?P<law>\d+)$")
_FEDERAL_REGISTER_RE = re.compile(r"^(?P<volume>\d+)\s+Fed\.\s?Reg\.\s+(?P<page>\d+)$")
_STATUTES_AT_LARGE_RE = re.compile(r"^(?P<volume>\d+)\s+Stat\.\s+(?P<page>\d+)$")

_FOLLOWING_PAREN_RE = re.compile(r"[ \t]*\(([^()\n]{1,80})\)")


def _parse(regex: re.Pattern[str], token: Token, kind: str) -> re.Match[str]:
    m = regex.match(token.text)
    if m is None:
        raise CitationParseError(f"failed to parse {kind} citation: {token.text!r}", token)
    return m


def _following_year(text: str, pos: int) -> int | None:
    """Year from a parenthetical directly after *pos*, e.g. ``(2010)``."""
    m = _FOLLOWING_PAREN_RE.match(text, pos)
    if m is None:
        return None
    date = parse_date(m.group(1))
    return date.parsed.year if date is not None else None


def is_known_code(code: str) -> bool:
    squashed = "".join(code.split())
    return any("".join(known.split()) in squashed for known in KNOWN_CODES)


def extract_statute(token: Token, text: str, position_map: PositionMap) -> StatuteCitation:
    m = _parse(_STATUTE_RE, token, "statute")
    code = " ".join(m.group("code").split())
    confidence = STATUTE_BASE_CONFIDENCE
    if is_known_code(code):
        confidence += KNOWN_CODE_BONUS
    return StatuteCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=min(confidence, 1.0),
        matched_text=token.text,
        title=int(m.group("title")) if m.group("title") else None,
        code=code,
        section=m.group("section"),
    )


def extract_journal(token: Token, text: str, position_map: PositionMap) -> JournalCitation:
    m = _parse(_JOURNAL_RE, token, "journal")
    pincite, after = find_pincite(text, token.clean_end)
    journal = " ".join(m.group("journal").split())
    return JournalCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=JOURNAL_CONFIDENCE,
        matched_text=token.text,
        volume=int(m.group("volume")),
        journal=journal,
        abbreviation=journal,
        page=int(m.group("page")),
        pincite=pincite,
        year=_following_year(text, after),
    )


def extract_neutral(token: Token, text: str, position_map: PositionMap) -> NeutralCitation:
    """Westlaw/Lexis database citations: ``2021 WL 123456``."""
    m = _parse(_NEUTRAL_RE, token, "neutral")
    return NeutralCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=NEUTRAL_CONFIDENCE,
        matched_text=token.text,
        year=int(m.group("year")),
        court=" ".join(m.group("court").split()),
        document_number=m.group("number"),
    )


def extract_public_law(token: Token, text: str, position_map: PositionMap) -> PublicLawCitation:
    m = _parse(_PUBLIC_LAW_RE, token, "public law")
    return PublicLawCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=PUBLIC_LAW_CONFIDENCE,
        matched_text=token.text,
        congress=int(m.group("congress")),
        law_number=int(m.group("law")),
    )


def extract_federal_register(
    token: Token, text: str, position_map: PositionMap
) -> FederalRegisterCitation:
    m = _parse(_FEDERAL_REGISTER_RE, token, "Federal Register")
    return FederalRegisterCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=FEDERAL_REGISTER_CONFIDENCE,
        matched_text=token.text,
        volume=int(m.group("volume")),
        page=int(m.group("page")),
        year=_following_year(text, token.clean_end),
    )


def extract_statutes_at_large(
    token: Token, text: str, position_map: PositionMap
) -> StatutesAtLargeCitation:
    m = _parse(_STATUTES_AT_LARGE_RE, token, "Statutes at Large")
    return StatutesAtLargeCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=STATUTES_AT_LARGE_CONFIDENCE,
        matched_text=token.text,
        volume=int(m.group("volume")),
        page=int(m.group("page")),
        year=_following_year(text, token.clean_end),
    )
