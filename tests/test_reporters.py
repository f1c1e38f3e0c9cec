"""Tests for legalcite.reporters."""
from __future__ import annotations

import asyncio
from pathlib import Path

import orjson
import pytest

from legalcite.reporters import (
    ReporterDatabase,
    ReporterEntry,
    clear_reporter_cache,
    get_cached_reporters,
    load_reporters,
    load_reporters_async,
)

_AMBIGUOUS = {
    "X.": [{"name": "Alpha Reports", "cite_type": "state", "editions": {"X.": {}}}],
    "X2.": [{"name": "Beta Reports", "cite_type": "state", "editions": {"X.": {}, "X2.": {}}}],
}


class TestBundledDatabase:
    def test_load_and_cache(self) -> None:
        assert get_cached_reporters() is None
        db = load_reporters()
        assert len(db) > 30
        assert get_cached_reporters() is db
        assert load_reporters() is db

    def test_reload(self) -> None:
        first = load_reporters()
        assert load_reporters(reload=True) is not first

    def test_clear(self) -> None:
        load_reporters()
        clear_reporter_cache()
        assert get_cached_reporters() is None

    def test_find_is_case_and_space_insensitive(self) -> None:
        db = load_reporters()
        (entry,) = db.find("F.2d")
        assert entry.name == "Federal Reporter"
        assert db.find("f. 2d") == (entry,)
        assert db.find("Nope.") == ()

    def test_variants_and_canonical(self) -> None:
        db = load_reporters()
        assert db.canonical_abbreviation("F. 2d") == "F.2d"
        assert db.canonical_abbreviation("F.Supp.2d") == "F. Supp. 2d"
        assert db.canonical_abbreviation("Nope.") is None

    def test_validate(self) -> None:
        db = load_reporters()
        ok = db.validate("F.3d")
        assert ok.warning is None
        assert ok.canonical == "F.3d"
        miss = db.validate("Zz.")
        assert miss.matches == ()
        assert miss.warning == 'Reporter "Zz." not found in database'

    def test_async_load(self) -> None:
        db = asyncio.run(load_reporters_async())
        assert get_cached_reporters() is db


class TestCustomDatabase:
    def test_ambiguity(self) -> None:
        db = ReporterDatabase.from_mapping(_AMBIGUOUS)
        result = db.validate("X.")
        assert len(result.matches) == 2
        assert result.warning == "Ambiguous reporter: Alpha Reports, Beta Reports"

    def test_load_from_path(self, tmp_path: Path) -> None:
        path = tmp_path / "reporters.json"
        path.write_bytes(orjson.dumps(_AMBIGUOUS))
        db = load_reporters(path)
        assert len(db) == 2
        assert get_cached_reporters() is db

    def test_entry_without_editions_rejected(self) -> None:
        with pytest.raises(ValueError):
            ReporterEntry.from_dict({"name": "Empty", "editions": {}})
