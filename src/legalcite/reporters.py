"""Reporter-abbreviation database with lazy, process-wide caching.

The database maps reporter abbreviations (every edition and known variant
spelling) to reporter entries. It is optional: extraction snapshots whatever
is cached when it starts and runs in degraded mode (no validation
adjustment) when nothing is loaded. Nothing in the extraction path ever
blocks waiting for a load.

Usage::

    load_reporters()                  # once, at startup
    citations = extract_citations(text)   # now validated against the DB

Data layout (``legalcite/data/reporters.json``)::

    {"F.": [{"name": "Federal Reporter", "cite_type": "federal",
             "editions": {"F.2d": {"start": ..., "end": ...}, ...},
             "variations": {"F. 2d": "F.2d", ...},
             "mlz_jurisdiction": ["us:c"]}], ...}
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

import orjson

from legalcite.confidence import reporter_key

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReporterEdition:
    abbreviation: str
    start: str | None = None
    end: str | None = None


@dataclass(frozen=True, slots=True)
class ReporterEntry:
    name: str
    cite_type: str
    editions: tuple[ReporterEdition, ...]
    variations: tuple[tuple[str, str], ...] = ()
    jurisdictions: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ReporterEntry:
        editions = tuple(
            ReporterEdition(
                abbreviation=abbr,
                start=(info or {}).get("start"),
                end=(info or {}).get("end"),
            )
            for abbr, info in dict(data.get("editions") or {}).items()
        )
        if not editions:
            raise ValueError(f"reporter {data.get('name')!r} has no editions")
        return cls(
            name=str(data["name"]),
            cite_type=str(data.get("cite_type", "")),
            editions=editions,
            variations=tuple(
                (str(k), str(v)) for k, v in dict(data.get("variations") or {}).items() if v
            ),
            jurisdictions=tuple(str(j) for j in data.get("mlz_jurisdiction") or ()),
        )


@dataclass(frozen=True, slots=True)
class ReporterValidation:
    """Result of checking one reporter abbreviation against the database."""

    matches: tuple[ReporterEntry, ...]
    canonical: str | None
    warning: str | None


class ReporterDatabase:
    """Case- and spacing-insensitive index over editions and variants."""

    def __init__(self, entries: list[ReporterEntry]) -> None:
        self._entries = tuple(entries)
        self._by_key: dict[str, list[ReporterEntry]] = {}
        self._canonical: dict[str, str] = {}
        for entry in self._entries:
            for edition in entry.editions:
                self._index(edition.abbreviation, entry)
                self._canonical.setdefault(reporter_key(edition.abbreviation), edition.abbreviation)
            for variant, canonical in entry.variations:
                self._index(variant, entry)
                self._canonical.setdefault(reporter_key(variant), canonical)

    def _index(self, abbreviation: str, entry: ReporterEntry) -> None:
        bucket = self._by_key.setdefault(reporter_key(abbreviation), [])
        if entry not in bucket:
            bucket.append(entry)

    @classmethod
    def from_mapping(cls, data: Mapping[str, list[Mapping[str, Any]]]) -> ReporterDatabase:
        entries = [ReporterEntry.from_dict(raw) for group in data.values() for raw in group]
        return cls(entries)

    @classmethod
    def from_json(cls, path: Path) -> ReporterDatabase:
        return cls.from_mapping(orjson.loads(path.read_bytes()))

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> tuple[ReporterEntry, ...]:
        return self._entries

    def find(self, abbreviation: str) -> tuple[ReporterEntry, ...]:
        """All entries known under *abbreviation*; empty when unknown."""
        return tuple(self._by_key.get(reporter_key(abbreviation), ()))

    def canonical_abbreviation(self, abbreviation: str) -> str | None:
        return self._canonical.get(reporter_key(abbreviation))

    def validate(self, reporter: str) -> ReporterValidation:
        matches = self.find(reporter)
        warning = None
        if not matches:
            warning = f'Reporter "{reporter}" not found in database'
        elif len(matches) > 1:
            warning = "Ambiguous reporter: " + ", ".join(m.name for m in matches)
        return ReporterValidation(
            matches=matches,
            canonical=self.canonical_abbreviation(reporter) if matches else None,
            warning=warning,
        )


# ---------------------------------------------------------------------------
# Process-wide cache
# ---------------------------------------------------------------------------

_cached: ReporterDatabase | None = None
_lock = threading.Lock()


def _bundled_data() -> bytes:
    return (resources.files("legalcite") / "data" / "reporters.json").read_bytes()


def load_reporters(path: Path | None = None, *, reload: bool = False) -> ReporterDatabase:
    """Load (once) and cache the reporter database.

    Subsequent calls return the cached instance unless *reload* is set.
    *path* overrides the bundled data file.
    """
    global _cached
    with _lock:
        if _cached is not None and not reload:
            return _cached
        if path is not None:
            db = ReporterDatabase.from_json(path)
        else:
            db = ReporterDatabase.from_mapping(orjson.loads(_bundled_data()))
        logger.info("loaded %d reporters from %s", len(db), path or "bundled data")
        _cached = db
        return db


async def load_reporters_async(path: Path | None = None) -> ReporterDatabase:
    """Load the database in a worker thread."""
    return await asyncio.to_thread(load_reporters, path)


def get_cached_reporters() -> ReporterDatabase | None:
    """Return the cached database without loading; None means degraded mode."""
    return _cached


def clear_reporter_cache() -> None:
    global _cached
    with _lock:
        _cached = None
