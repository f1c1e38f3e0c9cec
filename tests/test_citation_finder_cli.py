"""Smoke tests for scripts/citation_finder.py."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SCRIPT = ROOT / "scripts" / "citation_finder.py"


def _run(*args: str, check: bool = True) -> subprocess.CompletedProcess[str]:
    env = os.environ.copy()
    env["PYTHONPATH"] = str(ROOT / "src")
    return subprocess.run(
        [sys.executable, str(SCRIPT), *args],
        cwd=str(ROOT),
        env=env,
        capture_output=True,
        text=True,
        check=check,
    )


class TestCitationFinderCli:
    def test_inline_text(self) -> None:
        proc = _run("--text", "Smith v. Jones, 500 F.2d 123 (9th Cir. 2020)")
        out = json.loads(proc.stdout)
        assert out["total_citations"] == 1
        (doc,) = out["documents"]
        assert doc["doc_id"] == "text"
        assert doc["citations"][0]["type"] == "case"
        assert doc["citations"][0]["court"] == "9th Cir."
        assert "Found 1 citations" in proc.stderr

    def test_resolve_and_annotate(self, tmp_path: Path) -> None:
        path = tmp_path / "opinion.html"
        path.write_text("<p>Roe v. Wade, 410 U.S. 113 (1973).</p><p>Id. at 120.</p>")
        proc = _run("--input", str(path), "--resolve", "--annotate")
        (doc,) = json.loads(proc.stdout)["documents"]
        assert doc["doc_id"] == "opinion"
        short = doc["citations"][1]
        assert short["resolution"]["resolved_index"] == 0
        assert short["resolution"]["pincite"] == 120
        assert "<cite>410 U.S. 113</cite>" in doc["annotated_text"]
        assert doc["skipped"] == 0

    def test_jsonl_to_store_and_file(self, tmp_path: Path) -> None:
        src = tmp_path / "docs.jsonl"
        src.write_text(
            json.dumps({"doc_id": "a", "text": "42 U.S.C. § 1983"})
            + "\n"
            + json.dumps({"doc_id": "b", "text": "500 F.2d 1 (1990). Id."})
            + "\n"
        )
        out_path = tmp_path / "results.jsonl"
        db_path = tmp_path / "cites.duckdb"
        _run("--jsonl", str(src), "--db", str(db_path), "--output", str(out_path))
        rows = [json.loads(line) for line in out_path.read_text().splitlines()]
        assert [r["doc_id"] for r in rows] == ["a", "b"]
        assert [r["citation_count"] for r in rows] == [1, 2]
        assert db_path.exists()

    def test_missing_input(self, tmp_path: Path) -> None:
        proc = _run("--input", str(tmp_path / "nope.txt"), check=False)
        assert proc.returncode == 1
        assert "input not found" in proc.stderr

    def test_bad_config(self, tmp_path: Path) -> None:
        cfg = tmp_path / "citation_config.json"
        cfg.write_text('{"resolution": {"scope_strategy": "chapter"}}')
        proc = _run("--text", "Id.", "--config", str(cfg), check=False)
        assert proc.returncode == 1
        assert "invalid config" in proc.stderr
