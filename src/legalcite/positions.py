"""Bidirectional offset translation between cleaned and original text.

The position table is built once while cleaning a document and then shared
read-only by every extractor. Every lookup goes through ``_translate`` so
the miss policy (identity fallback) lives in exactly one place.

Span ends use their own table: a clean end offset maps to just past the raw
text of the last emitted character, so a citation followed by a removed tag
(``<i>500 F.2d 123</i>``) ends before the tag rather than after it.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from legalcite.citation_types import Span


def _translate(table: Mapping[int, int], offset: int) -> int:
    """Look up *offset*; a miss returns the offset unchanged."""
    return table.get(offset, offset)


@dataclass(frozen=True, slots=True)
class PositionMap:
    """Read-only clean<->original offset tables.

    An empty table is the identity map, which is what plain text that needed
    no cleaning produces. An empty ``clean_end_to_original`` falls back to
    ``clean_to_original`` for span ends.
    """

    clean_to_original: Mapping[int, int] = field(default_factory=dict)
    original_to_clean: Mapping[int, int] = field(default_factory=dict)
    clean_end_to_original: Mapping[int, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for name in ("clean_to_original", "original_to_clean", "clean_end_to_original"):
            table = getattr(self, name)
            if not isinstance(table, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(table)))

    @classmethod
    def identity(cls) -> PositionMap:
        return cls()

    @classmethod
    def from_offsets(
        cls,
        clean_to_original: Sequence[int],
        original_to_clean: Sequence[int],
        clean_end_to_original: Sequence[int] = (),
    ) -> PositionMap:
        """Build from dense offset arrays (index = source offset)."""
        return cls(
            clean_to_original=dict(enumerate(clean_to_original)),
            original_to_clean=dict(enumerate(original_to_clean)),
            clean_end_to_original=dict(enumerate(clean_end_to_original)),
        )

    @property
    def is_identity(self) -> bool:
        return not (
            self.clean_to_original or self.original_to_clean or self.clean_end_to_original
        )

    def to_original(self, clean_offset: int) -> int:
        return _translate(self.clean_to_original, clean_offset)

    def to_original_end(self, clean_end: int) -> int:
        return _translate(self.clean_end_to_original or self.clean_to_original, clean_end)

    def to_clean(self, original_offset: int) -> int:
        return _translate(self.original_to_clean, original_offset)

    def span(self, clean_start: int, clean_end: int) -> Span:
        """Build a Span; each boundary is translated independently."""
        return Span(
            clean_start=clean_start,
            clean_end=clean_end,
            original_start=self.to_original(clean_start),
            original_end=self.to_original_end(clean_end),
        )
