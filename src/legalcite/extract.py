"""Extraction pipeline: raw text -> clean -> tokenize -> citations.

Usage::

    from legalcite import extract_citations, load_reporters

    load_reporters()  # optional; enables reporter validation
    for citation in extract_citations(text):
        print(citation.citation_type, citation.text, citation.span.original_start)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from legalcite.citation_types import Citation, CitationParseError, Token
from legalcite.clean import CleanResult, clean_text
from legalcite.config import CitationConfig, ExtractionSettings
from legalcite.extract_case import extract_case
from legalcite.extract_other import (
    extract_federal_register,
    extract_journal,
    extract_neutral,
    extract_public_law,
    extract_statute,
    extract_statutes_at_large,
)
from legalcite.parallel import detect_parallel_citations
from legalcite.patterns import DEFAULT_PATTERNS, Pattern
from legalcite.positions import PositionMap
from legalcite.reporters import ReporterDatabase, get_cached_reporters
from legalcite.short_forms import extract_id, extract_short_form_case, extract_supra
from legalcite.tokenizer import tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    clean: CleanResult
    tokens: tuple[Token, ...]
    citations: tuple[Citation, ...]


def extract_from_tokens(
    tokens: Sequence[Token],
    cleaned_text: str,
    position_map: PositionMap,
    *,
    settings: ExtractionSettings | None = None,
    reporter_db: ReporterDatabase | None = None,
) -> list[Citation]:
    """Turn ordered, de-duplicated tokens into one citation each.

    Parallel groups are detected once over the whole token list before any
    token is extracted. Raises ``CitationParseError`` for a token whose type
    is unknown or whose text does not fit that type.
    """
    settings = settings or ExtractionSettings()
    groups = detect_parallel_citations(
        tokens,
        cleaned_text,
        max_gap=settings.parallel_max_gap,
        lookahead=settings.parallel_lookahead,
    )

    citations: list[Citation] = []
    for idx, token in enumerate(tokens):
        citation: Citation
        match token.type:
            case "case":
                citation = extract_case(
                    token,
                    cleaned_text,
                    position_map,
                    parallel=[tokens[j] for j in groups.get(idx, ())],
                    reporter_db=reporter_db,
                    current_year=settings.current_year,
                    case_name_window=settings.case_name_window,
                    full_span_window=settings.full_span_window,
                )
            case "statute":
                citation = extract_statute(token, cleaned_text, position_map)
            case "journal":
                citation = extract_journal(token, cleaned_text, position_map)
            case "neutral":
                citation = extract_neutral(token, cleaned_text, position_map)
            case "public_law":
                citation = extract_public_law(token, cleaned_text, position_map)
            case "federal_register":
                citation = extract_federal_register(token, cleaned_text, position_map)
            case "statutes_at_large":
                citation = extract_statutes_at_large(token, cleaned_text, position_map)
            case "id":
                citation = extract_id(token, cleaned_text, position_map)
            case "supra":
                citation = extract_supra(token, cleaned_text, position_map)
            case "short_form_case":
                citation = extract_short_form_case(token, cleaned_text, position_map)
            case _:
                raise CitationParseError(f"unknown token type {token.type!r}", token)
        citations.append(citation)
    return citations


def extract_document(
    text: str,
    config: CitationConfig | None = None,
    *,
    patterns: Sequence[Pattern] = DEFAULT_PATTERNS,
) -> ExtractionResult:
    """Run the full pipeline and keep the intermediate cleaning result."""
    config = config or CitationConfig()
    cleaning = config.cleaning
    clean = clean_text(
        text,
        strip_html=cleaning.strip_html,
        decode_entities=cleaning.decode_entities,
        normalize_unicode=cleaning.normalize_unicode,
        collapse_whitespace=cleaning.collapse_whitespace,
    )
    tokens = tokenize(clean.cleaned, patterns)

    reporter_db = None
    if config.extraction.use_reporter_db:
        reporter_db = get_cached_reporters()
        if reporter_db is None:
            logger.debug("reporter database not loaded; validation skipped")

    citations = extract_from_tokens(
        tokens,
        clean.cleaned,
        clean.position_map,
        settings=config.extraction,
        reporter_db=reporter_db,
    )
    return ExtractionResult(clean=clean, tokens=tuple(tokens), citations=tuple(citations))


def extract_citations(text: str, config: CitationConfig | None = None) -> list[Citation]:
    """Extract every citation in *text*, in document order."""
    return list(extract_document(text, config).citations)
