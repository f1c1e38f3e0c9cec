"""Pipeline configuration, loadable from JSON.

Example ``citation_config.json``::

    {
      "cleaning": {"strip_html": true},
      "extraction": {"case_name_window": 150, "use_reporter_db": true},
      "resolution": {"scope_strategy": "paragraph", "party_match_threshold": 0.85}
    }

Every section and key is optional; omitted values keep their defaults.
Unknown keys are rejected so a typo never silently falls back to a default.
"""

from __future__ import annotations

import dataclasses
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

import orjson

type ScopeStrategy = Literal["none", "paragraph"]

SCOPE_STRATEGIES: tuple[str, ...] = ("none", "paragraph")


class ConfigError(ValueError):
    """Invalid configuration value or file."""


@dataclass(frozen=True, slots=True)
class CleaningSettings:
    strip_html: bool = True
    decode_entities: bool = True
    normalize_unicode: bool = True
    collapse_whitespace: bool = True


@dataclass(frozen=True, slots=True)
class ExtractionSettings:
    """Scan windows and validation switches for the extraction engine.

    ``current_year`` pins the "year not in the future" check; None means
    today's year.
    """

    case_name_window: int = 150
    full_span_window: int = 200
    parallel_max_gap: int = 5
    parallel_lookahead: int = 200
    use_reporter_db: bool = True
    current_year: int | None = None

    def __post_init__(self) -> None:
        for name in ("case_name_window", "full_span_window", "parallel_lookahead"):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.parallel_max_gap < 0:
            raise ConfigError(f"parallel_max_gap must be >= 0, got {self.parallel_max_gap}")


@dataclass(frozen=True, slots=True)
class ResolutionOptions:
    """How short-form citations are matched to their antecedents.

    ``scope_strategy="none"`` searches the whole document history;
    ``"paragraph"`` only accepts antecedents in the same paragraph of the
    original text, with paragraphs split on ``paragraph_pattern``.
    """

    scope_strategy: ScopeStrategy = "none"
    paragraph_pattern: str = r"\n\n+"
    fuzzy_party_matching: bool = True
    party_match_threshold: float = 0.8
    report_unresolved: bool = True

    def __post_init__(self) -> None:
        if self.scope_strategy not in SCOPE_STRATEGIES:
            raise ConfigError(
                f"scope_strategy must be one of {SCOPE_STRATEGIES}, got {self.scope_strategy!r}"
            )
        if not 0.0 <= self.party_match_threshold <= 1.0:
            raise ConfigError(
                f"party_match_threshold must be in [0, 1], got {self.party_match_threshold}"
            )
        try:
            re.compile(self.paragraph_pattern)
        except re.error as exc:
            raise ConfigError(f"invalid paragraph_pattern: {exc}") from exc


def _section[T](cls: type[T], data: Any, name: str) -> T:
    if data is None:
        return cls()
    if not isinstance(data, Mapping):
        raise ConfigError(f"{name} must be an object")
    known = {f.name for f in dataclasses.fields(cls)}  # type: ignore[arg-type]
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"unknown {name} keys: {', '.join(unknown)}")
    try:
        return cls(**data)
    except TypeError as exc:
        raise ConfigError(f"invalid {name} section: {exc}") from exc


@dataclass(frozen=True, slots=True)
class CitationConfig:
    cleaning: CleaningSettings = field(default_factory=CleaningSettings)
    extraction: ExtractionSettings = field(default_factory=ExtractionSettings)
    resolution: ResolutionOptions = field(default_factory=ResolutionOptions)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CitationConfig:
        unknown = sorted(set(data) - {"cleaning", "extraction", "resolution"})
        if unknown:
            raise ConfigError(f"unknown config sections: {', '.join(unknown)}")
        return cls(
            cleaning=_section(CleaningSettings, data.get("cleaning"), "cleaning"),
            extraction=_section(ExtractionSettings, data.get("extraction"), "extraction"),
            resolution=_section(ResolutionOptions, data.get("resolution"), "resolution"),
        )

    @classmethod
    def from_json(cls, path: Path) -> CitationConfig:
        """Load from a citation_config.json file."""
        try:
            data = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise ConfigError(f"{path}: invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be an object")
        return cls.from_dict(data)
