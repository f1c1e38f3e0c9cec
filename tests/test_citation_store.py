"""Tests for the DuckDB citation store."""
from __future__ import annotations

from pathlib import Path

import duckdb
import pytest

from legalcite.citation_store import SCHEMA_VERSION, CitationStore, SchemaVersionError
from legalcite.extract import extract_citations
from legalcite.resolve import resolve_citations

DOC = "Smith v. Jones, 500 F.2d 123 (9th Cir. 2020). Id. at 125."


def _write(store: CitationStore, doc_id: str, text: str) -> int:
    return store.write_document(doc_id, text, resolve_citations(extract_citations(text), text))


class TestCitationStore:
    def test_creates_schema(self, tmp_path: Path) -> None:
        with CitationStore(tmp_path / "cites.duckdb") as store:
            assert store.schema_version == SCHEMA_VERSION
            assert store.document_ids() == []

    def test_write_and_read(self, tmp_path: Path) -> None:
        with CitationStore(tmp_path / "cites.duckdb") as store:
            assert _write(store, "op1", DOC) == 2
            assert store.document_ids() == ["op1"]
            full, short = store.citations_for("op1")

        assert full.citation_type == "case"
        assert full.text == "500 F.2d 123"
        assert DOC[full.original_start : full.original_end] == "500 F.2d 123"
        assert full.payload["case_name"] == "Smith v. Jones"
        assert full.resolution is None
        assert short.citation_type == "id"
        assert short.resolution is not None
        assert short.resolution.resolved_index == 0
        assert short.resolution.pincite == 125

    def test_rewrite_replaces(self, tmp_path: Path) -> None:
        with CitationStore(tmp_path / "cites.duckdb") as store:
            _write(store, "op1", DOC)
            _write(store, "op1", "42 U.S.C. § 1983")
            (only,) = store.citations_for("op1")
            assert only.citation_type == "statute"

    def test_find_by_reporter(self, tmp_path: Path) -> None:
        with CitationStore(tmp_path / "cites.duckdb") as store:
            _write(store, "op1", DOC)
            _write(store, "op2", "See 500 F. 2d 123 (2020); 7 P.3d 9 (2001).")
            hits = store.find_by_reporter(500, "F.2d")
            assert [(h.doc_id, h.index) for h in hits] == [("op1", 0), ("op2", 0)]
            assert store.find_by_reporter(501, "F.2d") == []

    def test_reopen(self, tmp_path: Path) -> None:
        path = tmp_path / "cites.duckdb"
        with CitationStore(path) as store:
            _write(store, "op1", DOC)
        with CitationStore(path) as store:
            assert store.document_ids() == ["op1"]

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "cites.duckdb"
        CitationStore(path).close()
        con = duckdb.connect(str(path))
        con.execute("UPDATE _schema_version SET version = '0.9.0'")
        con.close()
        with pytest.raises(SchemaVersionError, match="expected 1.0.0, got 0.9.0"):
            CitationStore(path)

    def test_foreign_database(self, tmp_path: Path) -> None:
        path = tmp_path / "other.duckdb"
        con = duckdb.connect(str(path))
        con.execute("CREATE TABLE things (id INTEGER)")
        con.close()
        with pytest.raises(SchemaVersionError, match="got unknown"):
            CitationStore(path)
