"""DuckDB store for extracted and resolved citations.

Tables:
    documents       one row per processed document
    citations       one row per citation keyed by (doc_id, idx), full record as JSON
    resolutions     resolution outcome per short-form citation
    _schema_version schema version tracking

A new file is created with the current schema; an existing file must carry
the same schema version or opening it raises ``SchemaVersionError``.
"""
from __future__ import annotations

import importlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import orjson

from legalcite.citation_types import ResolvedCitation, citation_to_dict
from legalcite.confidence import reporter_key

# Dynamic DuckDB import for pyright compatibility
_duckdb_mod = importlib.import_module("duckdb")

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1.0.0"


class SchemaVersionError(RuntimeError):
    """Raised when a citation DB schema version does not match expected."""


_SCHEMA_DDL = """
CREATE TABLE IF NOT EXISTS _schema_version (
    table_name VARCHAR PRIMARY KEY,
    version VARCHAR NOT NULL,
    created_at VARCHAR
);

CREATE TABLE IF NOT EXISTS documents (
    doc_id VARCHAR NOT NULL,
    body VARCHAR NOT NULL,
    citation_count INTEGER NOT NULL,
    stored_at VARCHAR NOT NULL
);

CREATE TABLE IF NOT EXISTS citations (
    doc_id VARCHAR NOT NULL,
    idx INTEGER NOT NULL,
    citation_type VARCHAR NOT NULL,
    cite_text VARCHAR NOT NULL,
    volume VARCHAR,
    reporter VARCHAR,
    reporter_key VARCHAR,
    page INTEGER,
    original_start INTEGER NOT NULL,
    original_end INTEGER NOT NULL,
    confidence DOUBLE NOT NULL,
    payload VARCHAR NOT NULL
);

CREATE TABLE IF NOT EXISTS resolutions (
    doc_id VARCHAR NOT NULL,
    idx INTEGER NOT NULL,
    resolved_index INTEGER,
    confidence DOUBLE NOT NULL,
    failure_reason VARCHAR,
    pincite INTEGER
)
"""


def _now() -> str:
    return datetime.now(UTC).isoformat()


def _table_names(conn: Any) -> set[str]:
    return {str(r[0]) for r in conn.execute("SHOW TABLES").fetchall()}


def _read_schema_version(conn: Any) -> str:
    """Read the citation schema version from an open DuckDB connection."""
    if "_schema_version" not in _table_names(conn):
        return "unknown"
    result = conn.execute(
        "SELECT version FROM _schema_version WHERE table_name = 'citations'"
    ).fetchone()
    return str(result[0]) if result else "unknown"


def ensure_schema_version(
    conn: Any,
    *,
    db_path: Path | None = None,
    expected: str = SCHEMA_VERSION,
) -> str:
    """Validate schema version for an open DuckDB connection.

    Returns actual schema version on success.
    Raises SchemaVersionError on mismatch.
    """
    actual = _read_schema_version(conn)
    if actual != expected:
        where = f" in {db_path}" if db_path is not None else ""
        raise SchemaVersionError(
            f"Schema version mismatch{where}: expected {expected}, got {actual}"
        )
    return actual


@dataclass(frozen=True, slots=True)
class StoredResolution:
    resolved_index: int | None
    confidence: float
    failure_reason: str | None
    pincite: int | None


@dataclass(frozen=True, slots=True)
class StoredCitation:
    doc_id: str
    index: int
    citation_type: str
    text: str
    original_start: int
    original_end: int
    confidence: float
    payload: dict[str, Any]
    resolution: StoredResolution | None = None


class CitationStore:
    """Read/write interface to a citation DuckDB file."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = Path(db_path)
        self._conn: Any = _duckdb_mod.connect(str(self._db_path))
        try:
            if not _table_names(self._conn):
                self._create_schema()
            else:
                ensure_schema_version(self._conn, db_path=self._db_path)
        except Exception:
            self._conn.close()
            raise

    def _create_schema(self) -> None:
        for stmt in _SCHEMA_DDL.split(";"):
            stmt = stmt.strip()
            if stmt:
                self._conn.execute(stmt)
        self._conn.execute(
            "INSERT INTO _schema_version VALUES ('citations', ?, ?)",
            [SCHEMA_VERSION, _now()],
        )
        logger.info("created citation store %s (schema %s)", self._db_path, SCHEMA_VERSION)

    def close(self) -> None:
        """Close the database connection."""
        self._conn.close()

    def __enter__(self) -> CitationStore:
        return self

    def __exit__(self, *_args: object) -> None:
        self.close()

    @property
    def schema_version(self) -> str:
        return _read_schema_version(self._conn)

    # ── Writes ─────────────────────────────────────────────────────────

    def write_document(
        self,
        doc_id: str,
        text: str,
        resolved: Sequence[ResolvedCitation],
    ) -> int:
        """Replace everything stored for *doc_id*. Returns the citation count."""
        citation_rows: list[list[Any]] = []
        resolution_rows: list[list[Any]] = []
        for item in resolved:
            c = item.citation
            volume = getattr(c, "volume", None)
            reporter = getattr(c, "reporter", None)
            page = getattr(c, "page", None)
            citation_rows.append([
                doc_id,
                item.index,
                c.citation_type,
                c.text,
                str(volume) if volume is not None else None,
                reporter,
                reporter_key(reporter) if reporter else None,
                page if isinstance(page, int) else None,
                c.span.original_start,
                c.span.original_end,
                c.confidence,
                orjson.dumps(citation_to_dict(c)).decode("utf-8"),
            ])
            if item.resolution is not None:
                r = item.resolution
                resolution_rows.append(
                    [doc_id, item.index, r.resolved_index, r.confidence, r.failure_reason, r.pincite]
                )

        self._conn.execute("BEGIN TRANSACTION")
        try:
            for table in ("resolutions", "citations", "documents"):
                self._conn.execute(f"DELETE FROM {table} WHERE doc_id = ?", [doc_id])
            self._conn.execute(
                "INSERT INTO documents VALUES (?, ?, ?, ?)",
                [doc_id, text, len(citation_rows), _now()],
            )
            if citation_rows:
                self._conn.executemany(
                    "INSERT INTO citations VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    citation_rows,
                )
            if resolution_rows:
                self._conn.executemany(
                    "INSERT INTO resolutions VALUES (?, ?, ?, ?, ?, ?)",
                    resolution_rows,
                )
            self._conn.execute("COMMIT")
        except Exception:
            self._conn.execute("ROLLBACK")
            raise
        logger.debug("stored %d citations for %s", len(citation_rows), doc_id)
        return len(citation_rows)

    # ── Reads ──────────────────────────────────────────────────────────

    _SELECT = """
        SELECT c.doc_id, c.idx, c.citation_type, c.cite_text, c.original_start,
               c.original_end, c.confidence, c.payload,
               r.idx IS NOT NULL, r.resolved_index, r.confidence,
               r.failure_reason, r.pincite
        FROM citations c
        LEFT JOIN resolutions r ON r.doc_id = c.doc_id AND r.idx = c.idx
    """

    @staticmethod
    def _from_row(row: tuple[Any, ...]) -> StoredCitation:
        resolution = None
        if row[8]:
            resolution = StoredResolution(
                resolved_index=row[9],
                confidence=float(row[10]),
                failure_reason=row[11],
                pincite=row[12],
            )
        return StoredCitation(
            doc_id=str(row[0]),
            index=int(row[1]),
            citation_type=str(row[2]),
            text=str(row[3]),
            original_start=int(row[4]),
            original_end=int(row[5]),
            confidence=float(row[6]),
            payload=orjson.loads(row[7]),
            resolution=resolution,
        )

    def document_ids(self) -> list[str]:
        rows = self._conn.execute("SELECT doc_id FROM documents ORDER BY doc_id").fetchall()
        return [str(r[0]) for r in rows]

    def citations_for(self, doc_id: str) -> list[StoredCitation]:
        """Citations of one document in document order."""
        rows = self._conn.execute(
            self._SELECT + " WHERE c.doc_id = ? ORDER BY c.idx", [doc_id]
        ).fetchall()
        return [self._from_row(r) for r in rows]

    def find_by_reporter(self, volume: int | str, reporter: str) -> list[StoredCitation]:
        """Every stored citation to *volume* *reporter*, spacing/case-insensitive."""
        rows = self._conn.execute(
            self._SELECT
            + " WHERE c.reporter_key = ? AND c.volume = ? ORDER BY c.doc_id, c.idx",
            [reporter_key(reporter), str(volume)],
        ).fetchall()
        return [self._from_row(r) for r in rows]
