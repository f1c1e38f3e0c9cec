"""Citation regex patterns, grouped by the token type they produce.

Patterns are deliberately broad: they find candidate spans in cleaned text
and leave structural parsing to the extractors. Group order is priority
order for de-duplication when two patterns claim the same span.

All quantifiers are bounded or anchored on literal separators; no nested
repetition over the same characters.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from legalcite.citation_types import TokenType


@dataclass(frozen=True, slots=True)
class Pattern:
    id: str
    regex: re.Pattern[str]
    type: TokenType
    description: str = ""


# ---------------------------------------------------------------------------
# Shared fragments
# ---------------------------------------------------------------------------

_VOLUME = r"(\d+(?:-\d+)?)"
_PAGE = r"(\d+|_{3,}|-{3,})"
_CASE_END = r"(?=\s|$|\(|\)|,|;|\.)"
_SERIES = r"(?:\s?(?:2d|3d|4th|5th))"

FEDERAL_REPORTERS = (
    r"F\.\s?Supp\.(?:\s?(?:2d|3d|4th))?"
    r"|F\.\s?App'x"
    r"|F\.\s?(?:2d|3d|4th)"
    r"|F\."
)
SUPREME_COURT_REPORTERS = r"U\.\s?S\.|S\.\s?Ct\.|L\.\s?Ed\.(?:\s?2d)?"
MULTIWORD_STATE_REPORTERS = (
    r"Cal\.\s?Rptr\." + _SERIES + r"?"
    r"|Cal\.\s?App\." + _SERIES + r"?"
    r"|N\.Y\.S\." + _SERIES + r"?"
    r"|A\.D\." + _SERIES + r"?"
    r"|Ill\.\s?App\." + _SERIES + r"?"
    r"|Ohio\s?App\." + _SERIES + r"?"
    r"|Wash\.\s?App\." + _SERIES + r"?"
    r"|Mich\.\s?App\."
    r"|Pa\.\s?Super\."
    r"|Mass\.\s?App\.\s?Ct\."
)
# Generic state/regional reporter: abbreviation words ending in a period,
# optional series. Statutory and register abbreviations are excluded.
GENERIC_REPORTER = (
    r"(?!U\.S\.C\.|C\.F\.R\.|Stat\.|Fed\.\s?Reg\.|Pub\.)"
    r"[A-Z][A-Za-z]*\.(?:[A-Za-z]{1,4}\.){0,3}" + _SERIES + r"?"
)


def _case_regex(reporters: str) -> re.Pattern[str]:
    return re.compile(r"\b" + _VOLUME + r"\s+(" + reporters + r")\s+" + _PAGE + _CASE_END)


# ---------------------------------------------------------------------------
# Pattern groups
# ---------------------------------------------------------------------------

NEUTRAL_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="westlaw",
        regex=re.compile(r"\b(\d{4})\s+(WL)\s+(\d+)\b"),
        type="neutral",
        description='Westlaw citations, e.g. "2021 WL 123456"',
    ),
    Pattern(
        id="lexis",
        regex=re.compile(r"\b(\d{4})\s+((?:[A-Z][A-Za-z.]*\s+){1,3}LEXIS)\s+(\d+)\b"),
        type="neutral",
        description='Lexis citations, e.g. "2020 U.S. Dist. LEXIS 12345"',
    ),
    Pattern(
        id="public-law",
        regex=re.compile(r"\bPub\.\s?L\.\s?(?:No\.\s?)?(\d+)-(\d+)\b"),
        type="public_law",
        description='Public laws, e.g. "Pub. L. No. 111-148"',
    ),
    Pattern(
        id="federal-register",
        regex=re.compile(r"\b(\d+)\s+Fed\.\s?Reg\.\s+(\d+)\b"),
        type="federal_register",
        description='Federal Register, e.g. "85 Fed. Reg. 12345"',
    ),
    Pattern(
        id="statutes-at-large",
        regex=re.compile(r"\b(\d+)\s+Stat\.\s+(\d+)\b"),
        type="statutes_at_large",
        description='Statutes at Large, e.g. "124 Stat. 119"',
    ),
)

SHORT_FORM_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="id",
        regex=re.compile(r"\b[Ii]d\.(?:,?\s+at\s+(\d+))?"),
        type="id",
        description='"Id." or "Id. at 253"',
    ),
    Pattern(
        id="ibid",
        regex=re.compile(r"\b[Ii]bid\.(?:,?\s+at\s+(\d+))?"),
        type="id",
        description='"Ibid." or "Ibid. at 125"',
    ),
    Pattern(
        id="supra",
        regex=re.compile(
            r"\b(?!(?:See|Cf|But|Accord|Compare|Also|In|E\.g)\b)"
            r"([A-Z][A-Za-z'\-]+(?:(?:\s+v\.?\s+|\s+)[A-Z][A-Za-z'\-]+){0,5})"
            r"\s?,?\s+supra(?:,?\s+(?:at\s+)?(\d+))?"
        ),
        type="supra",
        description='"Smith, supra" or "Smith, supra, at 460"',
    ),
    Pattern(
        id="short-form-case",
        regex=re.compile(
            r"\b(\d+)\s+([A-Z][A-Za-z.']*(?:\s[A-Z][A-Za-z.']*){0,3}" + _SERIES + r"?)"
            r"\s+at\s+(\d+)\b"
        ),
        type="short_form_case",
        description='"500 F.2d at 125"',
    ),
)

CASE_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="federal-reporter",
        regex=_case_regex(FEDERAL_REPORTERS),
        type="case",
        description="F., F.2d-F.4th, F. Supp., F. App'x",
    ),
    Pattern(
        id="supreme-court",
        regex=_case_regex(SUPREME_COURT_REPORTERS),
        type="case",
        description="U.S., S. Ct., L. Ed.",
    ),
    Pattern(
        id="state-reporter-multiword",
        regex=_case_regex(MULTIWORD_STATE_REPORTERS),
        type="case",
        description="Cal. Rptr., N.Y.S., A.D., Ill. App. and similar",
    ),
    Pattern(
        id="state-reporter",
        regex=_case_regex(GENERIC_REPORTER),
        type="case",
        description="Regional and state reporters (P.2d, N.E.3d, Cal. 3d ...)",
    ),
)

STATUTE_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="usc",
        regex=re.compile(
            r"\b(\d+)\s+U\.\s?S\.\s?C\.(?:\s?A\.)?\s*§{1,2}\s*(\d[\w\-]*(?:\([A-Za-z0-9]+\))*)"
        ),
        type="statute",
        description='"42 U.S.C. § 1983"',
    ),
    Pattern(
        id="cfr",
        regex=re.compile(
            r"\b(\d+)\s+C\.\s?F\.\s?R\.\s*(?:§{1,2}\s*|pt\.\s*)?(\d+(?:\.\d+[\w\-]*)?(?:\([A-Za-z0-9]+\))*)"
        ),
        type="statute",
        description='"17 C.F.R. § 240.10b-5"',
    ),
    Pattern(
        id="state-code",
        regex=re.compile(
            r"\b(?!(?:See|Cf|But|Accord|Compare|Also|Under|In)\b)"
            r"((?:[A-Z][A-Za-z.]*)(?:\s+(?:[A-Z][A-Za-z.]*|&)){0,5}\s+(?:Code|Law|Stat\.|Ann\.))"
            r"(?:\s+Ann\.)?\s*§{1,2}\s*(\d[\w\-.]*\w(?:\([A-Za-z0-9]+\))*|\d)"
        ),
        type="statute",
        description='"Cal. Civ. Code § 1714", "Tex. Civ. Prac. & Rem. Code § 16.003"',
    ),
)

JOURNAL_PATTERNS: tuple[Pattern, ...] = (
    Pattern(
        id="law-review",
        regex=re.compile(
            r"\b(\d+)\s+([A-Z][A-Za-z.&']*"
            r"(?:\s+(?:[A-Z][A-Za-z.&']*|&|of|on|and|the|for)){0,6})"
            r"\s+(\d+)\b"
        ),
        type="journal",
        description='"100 Harv. L. Rev. 1234"',
    ),
)

DEFAULT_PATTERNS: tuple[Pattern, ...] = (
    NEUTRAL_PATTERNS
    + SHORT_FORM_PATTERNS
    + CASE_PATTERNS
    + STATUTE_PATTERNS
    + JOURNAL_PATTERNS
)
