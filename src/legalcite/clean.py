"""Deterministic text cleaning with reversible offset maps.

Citations are matched against cleaned text but must be reported against the
caller's raw input, so cleaning records where every emitted character came
from. Transforms, applied in a single left-to-right walk:

1. Strip inline HTML/XML tags and comments; block-level tags become a newline.
2. Decode HTML entities (``&amp;``, ``&sect;``, ``&#167;``).
3. Normalize characters: CRLF -> LF, nbsp -> space, smart quotes -> straight,
   zero-width characters removed, everything else NFKC.
4. Collapse whitespace runs (two or more newlines -> paragraph break).
"""

from __future__ import annotations

import html
import re
import unicodedata
from dataclasses import dataclass

from legalcite.positions import PositionMap

_ZERO_WIDTH_CHARS = frozenset({"\u200b", "\u200c", "\u200d", "\u2060", "\ufeff"})

_CHAR_MAP: dict[str, str] = {
    "\u00a0": " ",
    "\u2018": "'",
    "\u2019": "'",
    "\u201a": "'",
    "\u2032": "'",
    "\u201c": '"',
    "\u201d": '"',
    "\u201e": '"',
    "\u2033": '"',
}

_TAG_RE = re.compile(r"<!--.*?-->|<(/?)([A-Za-z][A-Za-z0-9]*)\b[^<>]*>", re.DOTALL)
_ENTITY_RE = re.compile(r"&(?:#[0-9]{1,7}|#[xX][0-9a-fA-F]{1,6}|[A-Za-z][A-Za-z0-9]{1,31});")

_BLOCK_TAGS = frozenset({
    "p", "div", "br", "tr", "li",
    "h1", "h2", "h3", "h4", "h5", "h6",
    "table", "blockquote",
})

# (emitted char, raw start, raw end)
_Unit = tuple[str, int, int]


@dataclass(frozen=True, slots=True)
class CleanResult:
    original: str
    cleaned: str
    position_map: PositionMap
    flags: dict[str, bool]


def _normalize_char(ch: str, flags: dict[str, bool], *, normalize_unicode: bool) -> str:
    if ch in _ZERO_WIDTH_CHARS:
        flags["zero_width_removed"] = True
        return ""
    if not normalize_unicode or ch.isascii():
        return ch
    mapped = _CHAR_MAP.get(ch)
    if mapped is None:
        mapped = unicodedata.normalize("NFKC", ch)
    if mapped != ch:
        flags["unicode_normalized"] = True
    return mapped


def _collapse(units: list[_Unit], flags: dict[str, bool]) -> list[_Unit]:
    """Collapse whitespace runs.

    A collapsed run keeps the raw start of its first char and the raw end of
    its last.
    """
    out: list[_Unit] = []
    i = 0
    while i < len(units):
        ch = units[i][0]
        if not ch.isspace():
            out.append(units[i])
            i += 1
            continue
        j = i
        newlines = 0
        while j < len(units) and units[j][0].isspace():
            if units[j][0] == "\n":
                newlines += 1
            j += 1
        if newlines >= 2:
            replacement = "\n\n"
        elif newlines == 1:
            replacement = "\n"
        else:
            replacement = " "
        if replacement != "".join(u[0] for u in units[i:j]):
            flags["whitespace_collapsed"] = True
        raw_start, raw_end = units[i][1], units[j - 1][2]
        out.extend((c, raw_start, raw_end) for c in replacement)
        i = j
    return out


def clean_text(
    text: str,
    *,
    strip_html: bool = True,
    decode_entities: bool = True,
    normalize_unicode: bool = True,
    collapse_whitespace: bool = True,
) -> CleanResult:
    """Clean *text* and emit the clean<->original position table.

    Every emitted character maps to the raw offset it came from. Raw offsets
    that were dropped (tag bodies, entity tails, collapsed whitespace) map to
    the next clean offset. ``len(cleaned)`` always maps to ``len(text)``.
    Span ends are translated through a separate table that points just past
    the raw text of the preceding emitted character.
    """
    raw = text or ""
    flags = {
        "html_stripped": False,
        "entities_decoded": False,
        "crlf_normalized": False,
        "zero_width_removed": False,
        "unicode_normalized": False,
        "whitespace_collapsed": False,
    }

    units: list[_Unit] = []
    i = 0
    while i < len(raw):
        ch = raw[i]

        if strip_html and ch == "<":
            m = _TAG_RE.match(raw, i)
            if m:
                tag = (m.group(2) or "").lower()
                if tag in _BLOCK_TAGS:
                    units.append(("\n", i, m.end()))
                flags["html_stripped"] = True
                i = m.end()
                continue

        if decode_entities and ch == "&":
            m = _ENTITY_RE.match(raw, i)
            if m:
                decoded = html.unescape(m.group(0))
                if decoded != m.group(0):
                    flags["entities_decoded"] = True
                    for dch in decoded:
                        for out_ch in _normalize_char(dch, flags, normalize_unicode=normalize_unicode):
                            units.append((out_ch, i, m.end()))
                    i = m.end()
                    continue

        if ch == "\r":
            flags["crlf_normalized"] = True
            if i + 1 < len(raw) and raw[i + 1] == "\n":
                i += 1
                continue
            units.append(("\n", i, i + 1))
            i += 1
            continue

        for out_ch in _normalize_char(ch, flags, normalize_unicode=normalize_unicode):
            units.append((out_ch, i, i + 1))
        i += 1

    if collapse_whitespace:
        units = _collapse(units, flags)

    cleaned = "".join(u[0] for u in units)

    clean_to_original = [u[1] for u in units]
    clean_to_original.append(len(raw))
    # Offset k as a span end: just past the raw text of clean char k - 1.
    clean_end_to_original = [clean_to_original[0]] + [u[2] for u in units]

    original_to_clean: list[int] = []
    k = 0
    for raw_pos in range(len(raw) + 1):
        while k < len(units) and units[k][1] < raw_pos:
            k += 1
        original_to_clean.append(k)

    if cleaned == raw:
        position_map = PositionMap.identity()
    else:
        position_map = PositionMap.from_offsets(
            clean_to_original, original_to_clean, clean_end_to_original
        )

    return CleanResult(
        original=raw,
        cleaned=cleaned,
        position_map=position_map,
        flags=flags,
    )
