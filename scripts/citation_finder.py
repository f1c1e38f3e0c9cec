#!/usr/bin/env python3
"""Extract (and optionally resolve) legal citations from text or files.

Writes structured JSON to stdout with summary messages to stderr.

Usage:
    python3 scripts/citation_finder.py --text "Smith v. Jones, 500 F.2d 123 (9th Cir. 2020)"

    # Files (HTML is converted to text first), with resolution and a store
    python3 scripts/citation_finder.py --input opinion.html --input brief.txt \
      --resolve --load-reporters --db citations.duckdb

    # JSONL batch (one {"doc_id": ..., "text": ...} per line) to a file
    python3 scripts/citation_finder.py --jsonl opinions.jsonl --resolve \
      --output results.jsonl

    # Wrap every citation in markup
    python3 scripts/citation_finder.py --input brief.txt --annotate \
      --before '<cite>' --after '</cite>'
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import orjson

from legalcite.annotate import AnnotationTemplate, annotate
from legalcite.citation_store import CitationStore, SchemaVersionError
from legalcite.citation_types import (
    CitationParseError,
    ResolvedCitation,
    citation_to_dict,
    resolved_to_dict,
)
from legalcite.config import CitationConfig, ConfigError
from legalcite.extract import extract_document
from legalcite.html_utils import read_document
from legalcite.io_utils import load_jsonl, save_json, save_jsonl
from legalcite.reporters import load_reporters
from legalcite.resolve import resolve_citations

logger = logging.getLogger("citation_finder")


def dump_json(obj: object) -> None:
    sys.stdout.buffer.write(orjson.dumps(obj, option=orjson.OPT_INDENT_2))
    sys.stdout.buffer.write(b"\n")


def log(msg: str) -> None:
    print(msg, file=sys.stderr)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract and resolve legal citations."
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input",
        type=Path,
        action="append",
        help="Input file (.txt or .html/.htm); repeatable",
    )
    source.add_argument("--text", help="Inline text to scan")
    source.add_argument(
        "--jsonl", type=Path, help="JSONL file of {\"doc_id\", \"text\"} records"
    )
    parser.add_argument(
        "--resolve", action="store_true", help="Resolve Id./supra/short-form citations"
    )
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to citation_config.json"
    )
    parser.add_argument(
        "--load-reporters",
        nargs="?",
        const="",
        default=None,
        metavar="PATH",
        help="Load the reporter database (bundled data unless PATH is given)",
    )
    parser.add_argument(
        "--annotate", action="store_true", help="Include annotated text in the output"
    )
    parser.add_argument("--before", default="<cite>", help="Markup before each citation")
    parser.add_argument("--after", default="</cite>", help="Markup after each citation")
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write results here instead of stdout (.jsonl: one document per line)",
    )
    parser.add_argument(
        "--db", type=Path, default=None, help="Store results in this DuckDB file"
    )
    parser.add_argument("--verbose", action="store_true", help="Verbose logging")
    return parser


def _sources(args: argparse.Namespace) -> list[tuple[str, str]]:
    if args.text is not None:
        return [("text", args.text)]
    out: list[tuple[str, str]] = []
    if args.jsonl is not None:
        if not args.jsonl.exists():
            log(f"Error: input not found: {args.jsonl}")
            sys.exit(1)
        for lineno, record in enumerate(load_jsonl(args.jsonl), 1):
            if "text" not in record:
                log(f"Error: {args.jsonl}:{lineno}: record has no 'text'")
                sys.exit(1)
            out.append((str(record.get("doc_id", lineno)), str(record["text"])))
        return out
    for path in args.input:
        if not path.exists():
            log(f"Error: input not found: {path}")
            sys.exit(1)
        out.append((path.stem, read_document(path)))
    return out


def process(
    doc_id: str,
    text: str,
    config: CitationConfig,
    args: argparse.Namespace,
    store: CitationStore | None,
) -> dict[str, Any]:
    extraction = extract_document(text, config)
    logger.debug("%s: %d tokens", doc_id, len(extraction.tokens))
    citations = list(extraction.citations)

    if args.resolve or store is not None:
        resolved = resolve_citations(citations, text, config.resolution)
    else:
        resolved = [ResolvedCitation(index=i, citation=c) for i, c in enumerate(citations)]

    result: dict[str, Any] = {
        "doc_id": doc_id,
        "citation_count": len(citations),
        "citations": (
            [resolved_to_dict(r) for r in resolved]
            if args.resolve
            else [citation_to_dict(c) for c in citations]
        ),
    }
    if args.annotate:
        annotated = annotate(
            text, citations, template=AnnotationTemplate(args.before, args.after)
        )
        result["annotated_text"] = annotated.text
        result["skipped"] = len(annotated.skipped)
    if store is not None:
        store.write_document(doc_id, text, resolved)
    return result


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = CitationConfig.from_json(args.config) if args.config else CitationConfig()
    except (OSError, ConfigError) as exc:
        log(f"Error: invalid config: {exc}")
        sys.exit(1)

    if args.load_reporters is not None:
        load_reporters(Path(args.load_reporters) if args.load_reporters else None)

    sources = _sources(args)
    store: CitationStore | None = None
    if args.db is not None:
        try:
            store = CitationStore(args.db)
        except SchemaVersionError as exc:
            log(f"Error: {exc}")
            sys.exit(1)

    results: list[dict[str, Any]] = []
    try:
        for doc_id, text in sources:
            try:
                results.append(process(doc_id, text, config, args, store))
            except CitationParseError as exc:
                log(f"Error: {doc_id}: {exc}")
                sys.exit(1)
    finally:
        if store is not None:
            store.close()

    total = sum(r["citation_count"] for r in results)
    log(f"Found {total} citations in {len(results)} document(s)")
    if args.output is None:
        dump_json({"documents": results, "total_citations": total})
    elif args.output.suffix == ".jsonl":
        save_jsonl(results, args.output)
        log(f"Wrote {len(results)} record(s) to {args.output}")
    else:
        save_json({"documents": results, "total_citations": total}, args.output)
        log(f"Wrote {args.output}")


if __name__ == "__main__":
    main()
