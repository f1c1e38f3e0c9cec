"""Regex tokenizer: cleaned text -> ordered, non-overlapping typed tokens."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass

from legalcite.citation_types import Token
from legalcite.patterns import DEFAULT_PATTERNS, Pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class _Candidate:
    token: Token
    priority: int


def tokenize(cleaned_text: str, patterns: Sequence[Pattern] = DEFAULT_PATTERNS) -> list[Token]:
    """Apply every pattern to *cleaned_text* and de-duplicate the matches.

    Pattern order is priority order. A pattern that fails at match time is
    logged and skipped; the remaining patterns still run.
    """
    candidates: list[_Candidate] = []
    for priority, pattern in enumerate(patterns):
        try:
            matches = list(pattern.regex.finditer(cleaned_text))
        except (re.error, RecursionError, TypeError) as exc:
            logger.warning("pattern %s failed, skipping: %s", pattern.id, exc)
            continue
        for m in matches:
            if not m.group(0):
                continue
            candidates.append(
                _Candidate(
                    token=Token(
                        text=m.group(0),
                        clean_start=m.start(),
                        clean_end=m.end(),
                        type=pattern.type,
                        pattern_id=pattern.id,
                    ),
                    priority=priority,
                )
            )
    return _deduplicate(candidates)


def _deduplicate(candidates: list[_Candidate]) -> list[Token]:
    """Keep the longest, then highest-priority, token at each position.

    Tokens overlapping an already-kept token are dropped, so the output is
    sorted by ``clean_start`` with no two tokens sharing a character.
    """
    candidates.sort(
        key=lambda c: (c.token.clean_start, -(c.token.clean_end - c.token.clean_start), c.priority)
    )
    kept: list[Token] = []
    covered_until = -1
    for cand in candidates:
        if cand.token.clean_start < covered_until:
            continue
        kept.append(cand.token)
        covered_until = cand.token.clean_end
    if len(kept) != len(candidates):
        logger.debug("tokenizer dropped %d overlapping matches", len(candidates) - len(kept))
    return kept
