"""Paragraph boundaries for scoped short-form resolution."""

from __future__ import annotations

import bisect
import re


class ParagraphScope:
    """Maps original-text offsets to paragraph numbers.

    A paragraph starts at offset 0 and after every match of *pattern*
    (blank lines by default).
    """

    def __init__(self, text: str, pattern: str = r"\n\n+") -> None:
        self._starts = [0] + [m.end() for m in re.finditer(pattern, text)]

    def __len__(self) -> int:
        return len(self._starts)

    @property
    def starts(self) -> tuple[int, ...]:
        return tuple(self._starts)

    def paragraph_of(self, offset: int) -> int:
        return max(0, bisect.bisect_right(self._starts, offset) - 1)

    def same_paragraph(self, a: int, b: int) -> bool:
        return self.paragraph_of(a) == self.paragraph_of(b)
