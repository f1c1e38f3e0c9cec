"""Parallel-citation detection.

The same decision is often reported in several reporters, cited back to
back and sharing one parenthetical:

    Roe v. Wade, 410 U.S. 113, 93 S. Ct. 705, 35 L. Ed. 2d 147 (1973)

Adjacent case tokens are linked when only a comma (optionally after a
pincite) and a few spaces separate them, and a balanced parenthetical
follows the later one before any semicolon.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from legalcite.citation_types import Token
from legalcite.parenthetical import balanced_close

PARALLEL_MAX_GAP = 5
PARALLEL_LOOKAHEAD = 200

_GAP_RE = re.compile(r"(?:,\s*\d+(?:\s*[-–]\s*\d+)?)?,(\s*)")


def _linked(
    first: Token,
    second: Token,
    text: str,
    *,
    max_gap: int,
    lookahead: int,
) -> bool:
    if first.type != "case" or second.type != "case":
        return False
    gap = _GAP_RE.fullmatch(text, first.clean_end, second.clean_start)
    if gap is None or len(gap.group(1)) > max_gap:
        return False

    limit = min(len(text), second.clean_end + lookahead)
    open_pos = text.find("(", second.clean_end, limit)
    if open_pos == -1:
        return False
    between = text[second.clean_end : open_pos]
    if ";" in between or ")" in between:
        return False
    return balanced_close(text, open_pos, limit) is not None


def detect_parallel_citations(
    tokens: Sequence[Token],
    text: str,
    *,
    max_gap: int = PARALLEL_MAX_GAP,
    lookahead: int = PARALLEL_LOOKAHEAD,
) -> dict[int, list[int]]:
    """Return ``{primary_index: [secondary_index, ...]}`` for every group.

    One pass over the whole token list; chains of three or more reporters
    form a single group headed by the first token.
    """
    groups: dict[int, list[int]] = {}
    i = 0
    n = len(tokens)
    while i < n:
        j = i
        members: list[int] = []
        while j + 1 < n and _linked(tokens[j], tokens[j + 1], text, max_gap=max_gap, lookahead=lookahead):
            members.append(j + 1)
            j += 1
        if members:
            groups[i] = members
        i = j + 1
    return groups
