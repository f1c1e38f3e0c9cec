"""Case-name discovery and party-name normalization.

The case name of a full citation sits immediately before its volume, e.g.
``See Smith v. Jones, 500 F.2d 123``. ``find_case_name`` searches a bounded
window backwards from the citation core, trying the adversarial
``Party v. Party`` form first and a procedural prefix (``In re``,
``Ex parte`` ...) second.

Party names are normalized for matching short-form ``supra`` references:
``The Smith Corp., Inc. et al.`` -> ``smith``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from legalcite.citation_types import Err, Ok, Result

CASE_NAME_WINDOW = 150

PROCEDURAL_PREFIXES: tuple[str, ...] = (
    "In re",
    "Ex parte",
    "Matter of",
    "Estate of",
    "State ex rel.",
    "United States ex rel.",
    "Application of",
    "Petition of",
)
_CANONICAL_PREFIX = {p.lower(): p for p in PROCEDURAL_PREFIXES}

_PROCEDURAL_RE = re.compile(
    r"\b(" + "|".join(re.escape(p) for p in PROCEDURAL_PREFIXES) + r")\s+",
    re.IGNORECASE,
)
_SEPARATOR_RE = re.compile(r"\s+(?:v\.|vs\.?)\s+")

# A volume-reporter-page shape; a "party" containing one is really the tail
# of an earlier citation.
_CITATION_SHAPE_RE = re.compile(r"\b\d+(?:-\d+)?\s+[A-Z][A-Za-z.' ]{0,25}?\s(?:\d+|_{3,})")

_SIGNAL_WORDS = frozenset({
    "see", "cf.", "cf", "accord", "compare", "contra", "but", "also",
    "e.g.", "e.g", "in", "under", "as", "citing", "quoting", "following",
    "from", "with", "by",
})
_CONNECTORS = frozenset({
    "of", "and", "the", "for", "de", "del", "la", "le", "von", "van", "der",
    "ex", "rel.", "et", "al.", "al", "&", "d/b/a", "aka", "a/k/a", "on", "to",
})
_WORD_RE = re.compile(r"\S+")

# Period-ended abbreviations that appear inside party names.
_NAME_ABBREVIATIONS = frozenset({
    "am", "ave", "bankr", "bd", "bhd", "bldg", "bros", "cas", "cent", "chem",
    "cnty", "co", "comm", "corp", "cty", "dev", "dir", "dist", "div", "dr",
    "educ", "elec", "emps", "envtl", "equip", "exch", "exec", "fed", "fin",
    "gen", "grp", "hosp", "hous", "inc", "indus", "info", "ins", "inv", "jr",
    "lab", "liab", "ltd", "mach", "med", "mfg", "mgmt", "mkt", "mr", "mrs",
    "ms", "mun", "mut", "no", "org", "pac", "prods", "prop", "pub", "res",
    "rest", "ry", "sav", "sch", "sec", "serv", "soc", "sr", "st", "sys",
    "tech", "tel", "transp", "twp", "univ", "util",
})

_ET_AL_RE = re.compile(r"\bet\s+al\.?", re.IGNORECASE)
_DBA_RE = re.compile(r"\bd/b/a\b", re.IGNORECASE)
_AKA_RE = re.compile(r"\b(?:a/k/a|aka)\b", re.IGNORECASE)
_CORPORATE_SUFFIX_RE = re.compile(
    r"[,\s]+(?:Inc|L\.?L\.?C|Corp|Ltd|Co|L\.?L\.?P|L\.?P|P\.?C)\.?\s*$",
    re.IGNORECASE,
)
_LEADING_ARTICLE_RE = re.compile(r"^(?:the|an|a)\s+", re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class CaseNameMatch:
    case_name: str
    start: int
    plaintiff: str
    defendant: str | None = None
    procedural_prefix: str | None = None


# ---------------------------------------------------------------------------
# Party handling
# ---------------------------------------------------------------------------


def split_parties(case_name: str) -> tuple[str, str | None]:
    """Split on the first ``v.``/``vs.`` only; raw substrings are kept."""
    m = _SEPARATOR_RE.search(case_name)
    if m is None:
        return case_name.strip(), None
    return case_name[: m.start()].strip(), case_name[m.end() :].strip()


def normalize_party_name(raw: str) -> str:
    """Normalize a party name for matching.

    Truncates at "et al.", "d/b/a" and "aka"; strips trailing corporate
    suffixes (repeatedly) and one leading article; collapses whitespace and
    lowercases.
    """
    name = raw
    for cut in (_ET_AL_RE, _DBA_RE, _AKA_RE):
        m = cut.search(name)
        if m:
            name = name[: m.start()]
    name = name.strip(" ,")
    while True:
        stripped = _CORPORATE_SUFFIX_RE.sub("", name).strip(" ,")
        if stripped == name or not stripped:
            break
        name = stripped
    name = _LEADING_ARTICLE_RE.sub("", name.strip())
    return " ".join(name.split()).strip(" ,").lower()


# ---------------------------------------------------------------------------
# Backward search
# ---------------------------------------------------------------------------


def _ends_sentence(word: str) -> bool:
    """True when *word* closes a sentence rather than abbreviating a name.

    A period ends the sentence unless the word is a single initial, carries
    internal periods or an apostrophe (``U.S.``, ``Dep't.``) or is a known
    party-name abbreviation.
    """
    if word.endswith(("!", "?", ":", ";")):
        return True
    if not word.endswith("."):
        return False
    bare = word[:-1]
    if "." in bare or "'" in bare:
        return False
    if sum(ch.isalpha() for ch in bare) <= 1:
        return False
    return bare.lower() not in _NAME_ABBREVIATIONS


def _plaintiff_start(left: str) -> int | None:
    """Offset in *left* where the plaintiff begins, walking right to left."""
    words = list(_WORD_RE.finditer(left))
    collected: list[re.Match[str]] = []
    for idx in range(len(words) - 1, -1, -1):
        word = words[idx].group(0)
        bare = word.rstrip(",")
        lower = bare.lower()
        if word.startswith(("(", "[")) or word.endswith((")", "]", ";")):
            break
        if lower in _SIGNAL_WORDS:
            break
        if bare.isdigit():
            break
        if collected and _ends_sentence(word):
            break
        if bare[:1].isupper() or bare[:1].isdigit() or lower in _CONNECTORS:
            collected.append(words[idx])
            continue
        break
    while collected and collected[-1].group(0).lower() in _CONNECTORS:
        collected.pop()
    if not collected:
        return None
    return collected[-1].start()


def _name_like(party: str) -> bool:
    """Every word is capitalized, numeric-led or a party connector."""
    words = party.split()
    for idx, word in enumerate(words):
        bare = word.rstrip(",")
        if not (bare[:1].isupper() or bare[:1].isdigit() or bare.lower() in _CONNECTORS):
            return False
        if idx < len(words) - 1 and _ends_sentence(word):
            return False
    return True


def _valid_party(party: str) -> bool:
    if not party or not re.search(r"[A-Za-z]", party):
        return False
    if "(" in party or ")" in party:
        return False
    if not party[0].isalnum():
        return False
    return _CITATION_SHAPE_RE.search(party) is None and _name_like(party)


def find_case_name(
    text: str,
    core_start: int,
    *,
    window: int = CASE_NAME_WINDOW,
) -> Result[CaseNameMatch, str]:
    """Search backwards from *core_start* for the case name.

    Both forms are anchored at the citation: only a trailing comma and
    whitespace may separate the name from the volume. A semicolon inside the
    captured name disqualifies it.
    """
    win_start = max(0, core_start - window)
    segment = text[win_start:core_start]
    body = segment.rstrip(", \t\n")
    if not body:
        return Err("no text before citation")

    separators = list(_SEPARATOR_RE.finditer(body))
    if separators:
        sep = separators[-1]
        start = _plaintiff_start(body[: sep.start()])
        defendant = body[sep.end() :].strip()
        if start is not None and _valid_party(defendant):
            name = body[start:]
            if ";" not in name:
                plaintiff, defendant_raw = split_parties(name)
                return Ok(
                    CaseNameMatch(
                        case_name=" ".join(name.split()),
                        start=win_start + start,
                        plaintiff=plaintiff,
                        defendant=defendant_raw,
                    )
                )

    for m in _PROCEDURAL_RE.finditer(body):
        subject = body[m.end() :].strip()
        name = body[m.start() :]
        if ";" in name or _SEPARATOR_RE.search(name):
            continue
        if not _valid_party(subject):
            continue
        return Ok(
            CaseNameMatch(
                case_name=" ".join(name.split()),
                start=win_start + m.start(),
                plaintiff=subject,
                procedural_prefix=_CANONICAL_PREFIX[" ".join(m.group(1).lower().split())],
            )
        )

    return Err("no case name before citation")
