"""legalcite: legal citation extraction and short-form resolution."""

from legalcite.annotate import AnnotationResult, AnnotationTemplate, annotate
from legalcite.citation_store import CitationStore, SchemaVersionError
from legalcite.citation_types import (
    Citation,
    CitationParseError,
    CitationWarning,
    Err,
    FederalRegisterCitation,
    FullCaseCitation,
    IdCitation,
    JournalCitation,
    NeutralCitation,
    Ok,
    ParallelCitation,
    ParsedDate,
    PublicLawCitation,
    ResolutionResult,
    ResolvedCitation,
    ShortFormCaseCitation,
    Span,
    StatuteCitation,
    StatutesAtLargeCitation,
    StructuredDate,
    SupraCitation,
    Token,
    citation_to_dict,
    is_short_form,
    resolved_to_dict,
)
from legalcite.clean import CleanResult, clean_text
from legalcite.config import CitationConfig, ConfigError, ResolutionOptions
from legalcite.extract import (
    ExtractionResult,
    extract_citations,
    extract_document,
    extract_from_tokens,
)
from legalcite.positions import PositionMap
from legalcite.reporters import (
    ReporterDatabase,
    clear_reporter_cache,
    get_cached_reporters,
    load_reporters,
    load_reporters_async,
)
from legalcite.resolve import ResolutionContext, resolve_citations
from legalcite.tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    "AnnotationResult",
    "AnnotationTemplate",
    "Citation",
    "CitationConfig",
    "CitationParseError",
    "CitationStore",
    "CitationWarning",
    "CleanResult",
    "ConfigError",
    "Err",
    "ExtractionResult",
    "FederalRegisterCitation",
    "FullCaseCitation",
    "IdCitation",
    "JournalCitation",
    "NeutralCitation",
    "Ok",
    "ParallelCitation",
    "ParsedDate",
    "PositionMap",
    "PublicLawCitation",
    "ReporterDatabase",
    "ResolutionContext",
    "ResolutionOptions",
    "ResolutionResult",
    "ResolvedCitation",
    "SchemaVersionError",
    "ShortFormCaseCitation",
    "Span",
    "StatuteCitation",
    "StatutesAtLargeCitation",
    "StructuredDate",
    "SupraCitation",
    "Token",
    "annotate",
    "citation_to_dict",
    "clean_text",
    "clear_reporter_cache",
    "extract_citations",
    "extract_document",
    "extract_from_tokens",
    "get_cached_reporters",
    "is_short_form",
    "load_reporters",
    "load_reporters_async",
    "resolve_citations",
    "resolved_to_dict",
    "tokenize",
]
