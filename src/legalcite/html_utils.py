"""HTML document text extraction and encoding-safe file reading.

Whole-document input (opinions saved from a court website, briefs exported
to HTML) goes through BeautifulSoup here before citation extraction. Inline
markup inside plain text is handled by ``legalcite.clean`` instead, which
keeps offsets into the raw string.
"""
from __future__ import annotations

import re
from pathlib import Path

from bs4 import BeautifulSoup

_BLOCK_TAGS: list[str] = [
    "p", "div", "br", "tr", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "blockquote",
]

_PARAGRAPH_TAGS = frozenset({"p", "div", "table", "blockquote", "h1", "h2", "h3", "h4", "h5", "h6"})

_NON_CONTENT_TAGS: list[str] = ["script", "style", "head", "noscript"]


def html_to_text(raw_html: str) -> str:
    """Extract readable text from an HTML document.

    Block-level elements start on a new line; runs of blank lines are
    limited to one paragraph break. Footnote markers and citations keep
    their inline position.
    """
    if not raw_html:
        return ""

    soup = BeautifulSoup(raw_html, "html.parser")
    for tag in soup.find_all(_NON_CONTENT_TAGS):
        tag.decompose()
    _insert_block_newlines(soup)
    text = soup.get_text(separator="")
    return _collapse_whitespace(text).strip()


def looks_like_html(path: Path, head: str) -> bool:
    if path.suffix.lower() in {".html", ".htm", ".xhtml"}:
        return True
    return bool(re.match(r"\s*<(?:!doctype|html)\b", head, re.IGNORECASE))


def read_file(fpath: Path, *, min_size: int = 0) -> str:
    """Read a text file with encoding fallback: UTF-8 -> CP1252 -> replace.

    Returns an empty string when the file is missing or smaller than
    *min_size* bytes.
    """
    try:
        if min_size > 0 and fpath.stat().st_size < min_size:
            return ""
        try:
            return fpath.read_text(encoding="utf-8")
        except UnicodeDecodeError:
            try:
                return fpath.read_text(encoding="cp1252")
            except UnicodeDecodeError:
                with open(fpath, errors="replace") as f:
                    return f.read()
    except OSError:
        return ""


def read_document(fpath: Path) -> str:
    """Read *fpath*, converting HTML documents to text."""
    raw = read_file(fpath)
    if looks_like_html(fpath, raw[:512]):
        return html_to_text(raw)
    return raw


def _insert_block_newlines(soup: BeautifulSoup) -> None:
    """Insert newlines before block-level elements; paragraphs get a blank line."""
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.insert_before("\n\n" if tag.name in _PARAGRAPH_TAGS else "\n")


def _collapse_whitespace(text: str) -> str:
    """Collapse horizontal whitespace (preserving newlines) and limit blanks."""
    text = re.sub(r"[^\S\n]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text
