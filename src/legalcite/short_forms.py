"""Short-form citation extraction: ``Id.``, ``supra`` and ``500 F.2d at 125``.

Short forms carry only what they say; linking them to a full citation is the
resolver's job.
"""

from __future__ import annotations

import re

from legalcite.citation_types import (
    CitationParseError,
    IdCitation,
    ShortFormCaseCitation,
    SupraCitation,
    Token,
)
from legalcite.extract_case import parse_volume
from legalcite.positions import PositionMap

ID_CONFIDENCE = 1.0
SUPRA_CONFIDENCE = 0.9
SHORT_FORM_CASE_CONFIDENCE = 0.7

_ID_RE = re.compile(r"^(?:[Ii]d|[Ii]bid)\.(?:,?\s+at\s+(?P<pincite>\d+))?$")
_SUPRA_RE = re.compile(
    r"^(?P<party>\S.*?)\s?,?\s+supra(?:,?\s+(?:at\s+)?(?P<pincite>\d+))?$"
)
_SHORT_FORM_CASE_RE = re.compile(
    r"^(?P<volume>\d+(?:-\d+)?)\s+(?P<reporter>\S.*?)\s+at\s+(?P<pincite>\d+)$"
)
_LEADING_SIGNAL_RE = re.compile(
    r"^(?:(?:see|but\s+see|see\s+also|cf\.?|accord|compare|contra|e\.g\.,?)\s+)+",
    re.IGNORECASE,
)


def _match(regex: re.Pattern[str], token: Token, kind: str) -> re.Match[str]:
    m = regex.match(token.text)
    if m is None:
        raise CitationParseError(f"failed to parse {kind} citation: {token.text!r}", token)
    return m


def _pincite(m: re.Match[str]) -> int | None:
    raw = m.group("pincite")
    return int(raw) if raw else None


def extract_id(token: Token, text: str, position_map: PositionMap) -> IdCitation:
    m = _match(_ID_RE, token, "Id.")
    return IdCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=ID_CONFIDENCE,
        matched_text=token.text,
        pincite=_pincite(m),
    )


def extract_supra(token: Token, text: str, position_map: PositionMap) -> SupraCitation:
    """Party name is the capitalized word(s) before ``, supra``; signals dropped."""
    m = _match(_SUPRA_RE, token, "supra")
    party = _LEADING_SIGNAL_RE.sub("", m.group("party")).strip(" ,")
    if not party:
        raise CitationParseError(f"supra citation without party name: {token.text!r}", token)
    return SupraCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=SUPRA_CONFIDENCE,
        matched_text=token.text,
        party_name=" ".join(party.split()),
        pincite=_pincite(m),
    )


def extract_short_form_case(
    token: Token, text: str, position_map: PositionMap
) -> ShortFormCaseCitation:
    m = _match(_SHORT_FORM_CASE_RE, token, "short-form case")
    return ShortFormCaseCitation(
        text=token.text,
        span=position_map.span(token.clean_start, token.clean_end),
        confidence=SHORT_FORM_CASE_CONFIDENCE,
        matched_text=token.text,
        volume=parse_volume(m.group("volume")),
        reporter=m.group("reporter"),
        pincite=_pincite(m),
    )
