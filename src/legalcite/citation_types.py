"""Core types shared by every layer of the citation pipeline.

All span coordinates are absolute character offsets. Clean offsets index the
cleaned text the tokenizer ran over; original offsets index the caller's raw
input. All dataclasses use slots=True.

Type hierarchy:
  Ok[T] / Err[E]: strict algebraic Result type
  Span: clean + original coordinates of one region
  Token: typed tokenizer match (input to extraction)
  CitationWarning: non-fatal diagnostic attached to a citation/resolution
  ParsedDate / StructuredDate: dates recovered from parentheticals
  ParallelCitation: volume/reporter/page of a linked parallel cite
  Citation variants: one frozen record per citation type
  ResolutionResult: outcome of resolving one short-form citation
  ResolvedCitation: citation + its resolution, side by side
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, ClassVar, Literal

# ---------------------------------------------------------------------------
# Result ADT
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Success case of Result[T, E].

    Usage::

        match find_case_name(text, start):
            case Ok(value=m): print(m.case_name)
            case Err(error=reason): print(reason)
    """

    value: T


@dataclass(frozen=True, slots=True)
class Err[E]:
    """Failure case of Result[T, E]; keeps the typed reason."""

    error: E


type Result[T, E] = Ok[T] | Err[E]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CitationParseError(ValueError):
    """A token did not match the structural shape its type promises.

    This is a tokenizer/extractor contract violation and is fatal for the
    document being processed.
    """

    def __init__(self, message: str, token: Token | None = None) -> None:
        super().__init__(message)
        self.token = token


# ---------------------------------------------------------------------------
# Spans and tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Span:
    """A region in both coordinate systems.

    Clean offsets are validated. Original offsets come straight from the
    position map and are never validated, so a lookup miss cannot raise.
    """

    clean_start: int
    clean_end: int
    original_start: int
    original_end: int

    def __post_init__(self) -> None:
        if self.clean_start < 0:
            raise ValueError(f"clean_start must be non-negative, got {self.clean_start}")
        if self.clean_end < self.clean_start:
            raise ValueError(
                f"clean_end ({self.clean_end}) must be >= clean_start ({self.clean_start})"
            )

    @property
    def clean_length(self) -> int:
        return self.clean_end - self.clean_start

    def overlaps(self, other: Span) -> bool:
        return self.original_start < other.original_end and other.original_start < self.original_end


type TokenType = Literal[
    "case",
    "statute",
    "journal",
    "neutral",
    "public_law",
    "federal_register",
    "statutes_at_large",
    "id",
    "supra",
    "short_form_case",
]


@dataclass(frozen=True, slots=True)
class Token:
    """One tokenizer match over cleaned text."""

    text: str
    clean_start: int
    clean_end: int
    type: TokenType
    pattern_id: str

    def __post_init__(self) -> None:
        if self.clean_end - self.clean_start != len(self.text):
            raise ValueError(
                f"token span {self.clean_start}-{self.clean_end} does not match "
                f"text length {len(self.text)}"
            )


type WarningLevel = Literal["error", "warning", "info"]


@dataclass(frozen=True, slots=True)
class CitationWarning:
    level: WarningLevel
    message: str
    position: tuple[int, int]


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParsedDate:
    """Calendar components; month/day stay None unless present in the text."""

    year: int
    month: int | None = None
    day: int | None = None

    def __post_init__(self) -> None:
        if self.day is not None and self.month is None:
            raise ValueError("day requires month")


@dataclass(frozen=True, slots=True)
class StructuredDate:
    iso: str
    parsed: ParsedDate

    @classmethod
    def from_parsed(cls, parsed: ParsedDate) -> StructuredDate:
        iso = f"{parsed.year:04d}"
        if parsed.month is not None:
            iso += f"-{parsed.month:02d}"
            if parsed.day is not None:
                iso += f"-{parsed.day:02d}"
        return cls(iso=iso, parsed=parsed)


# ---------------------------------------------------------------------------
# Citation variants
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ParallelCitation:
    volume: int | str
    reporter: str
    page: int | None


@dataclass(frozen=True, slots=True, kw_only=True)
class _CitationBase:
    text: str
    span: Span
    confidence: float
    matched_text: str
    warnings: tuple[CitationWarning, ...] = ()

    citation_type: ClassVar[str] = ""


@dataclass(frozen=True, slots=True, kw_only=True)
class FullCaseCitation(_CitationBase):
    """Full case citation: volume, reporter, page plus recovered metadata.

    ``span`` always covers only volume/reporter/page. ``full_span`` runs from
    the start of the case name through the last parenthetical and is present
    only when a case name was found.
    """

    citation_type: ClassVar[str] = "case"

    volume: int | str
    reporter: str
    page: int | None = None
    pincite: int | None = None
    court: str | None = None
    year: int | None = None
    date: StructuredDate | None = None
    case_name: str | None = None
    plaintiff: str | None = None
    defendant: str | None = None
    plaintiff_normalized: str | None = None
    defendant_normalized: str | None = None
    procedural_prefix: str | None = None
    disposition: str | None = None
    full_span: Span | None = None
    parallel_citations: tuple[ParallelCitation, ...] = ()
    has_blank_page: bool = False
    explanatory_parenthetical: str | None = None
    subsequent_history: str | None = None
    normalized_reporter: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StatuteCitation(_CitationBase):
    citation_type: ClassVar[str] = "statute"

    title: int | None = None
    code: str
    section: str


@dataclass(frozen=True, slots=True, kw_only=True)
class JournalCitation(_CitationBase):
    citation_type: ClassVar[str] = "journal"

    volume: int | None = None
    journal: str
    abbreviation: str
    page: int | None = None
    pincite: int | None = None
    year: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NeutralCitation(_CitationBase):
    citation_type: ClassVar[str] = "neutral"

    year: int
    court: str
    document_number: str


@dataclass(frozen=True, slots=True, kw_only=True)
class PublicLawCitation(_CitationBase):
    citation_type: ClassVar[str] = "public_law"

    congress: int
    law_number: int


@dataclass(frozen=True, slots=True, kw_only=True)
class FederalRegisterCitation(_CitationBase):
    citation_type: ClassVar[str] = "federal_register"

    volume: int
    page: int
    year: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class StatutesAtLargeCitation(_CitationBase):
    citation_type: ClassVar[str] = "statutes_at_large"

    volume: int
    page: int
    year: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class IdCitation(_CitationBase):
    citation_type: ClassVar[str] = "id"

    pincite: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class SupraCitation(_CitationBase):
    citation_type: ClassVar[str] = "supra"

    party_name: str
    pincite: int | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ShortFormCaseCitation(_CitationBase):
    citation_type: ClassVar[str] = "short_form_case"

    volume: int | str
    reporter: str
    pincite: int | None = None


type FullCitation = (
    FullCaseCitation
    | StatuteCitation
    | JournalCitation
    | NeutralCitation
    | PublicLawCitation
    | FederalRegisterCitation
    | StatutesAtLargeCitation
)
type ShortFormCitation = IdCitation | SupraCitation | ShortFormCaseCitation
type Citation = FullCitation | ShortFormCitation

SHORT_FORM_TYPES: tuple[type, ...] = (IdCitation, SupraCitation, ShortFormCaseCitation)


def is_short_form(citation: Citation) -> bool:
    return isinstance(citation, SHORT_FORM_TYPES)


# ---------------------------------------------------------------------------
# Resolution records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    """Outcome of resolving one short-form citation.

    ``resolved_index`` is None when resolution failed; ``failure_reason`` then
    explains why and the same text appears as a warning.
    """

    resolved_index: int | None
    confidence: float
    warnings: tuple[CitationWarning, ...] = ()
    failure_reason: str | None = None
    pincite: int | None = None

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0, 1], got {self.confidence}")
        if self.resolved_index is None and self.failure_reason is None:
            raise ValueError("unresolved result requires failure_reason")

    @property
    def resolved(self) -> bool:
        return self.resolved_index is not None


@dataclass(frozen=True, slots=True)
class ResolvedCitation:
    index: int
    citation: Citation
    resolution: ResolutionResult | None = None


# ---------------------------------------------------------------------------
# Serialization
# ---------------------------------------------------------------------------


def citation_to_dict(citation: Citation) -> dict[str, Any]:
    """Serialize a citation to a plain dict with a ``type`` discriminant."""
    payload: dict[str, Any] = {"type": citation.citation_type}
    payload.update(dataclasses.asdict(citation))
    return payload


def resolved_to_dict(resolved: ResolvedCitation) -> dict[str, Any]:
    payload = citation_to_dict(resolved.citation)
    payload["index"] = resolved.index
    payload["resolution"] = (
        dataclasses.asdict(resolved.resolution) if resolved.resolution is not None else None
    )
    return payload
