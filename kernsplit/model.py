"""In-memory descriptors shared by the split passes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from bs4.element import Tag


@dataclass(frozen=True)
class Grapheme:
    """A user-perceived character and its pre-mutation left edge."""

    text: str
    original_left: float


@dataclass(frozen=True)
class Word:
    graphemes: Tuple[Grapheme, ...]
    start_left: float
    no_space_before: bool = False

    @property
    def text(self) -> str:
        return "".join(g.text for g in self.graphemes)

    def expected_gaps(self) -> List[Optional[float]]:
        """Gap from each grapheme to its predecessor; None for the first."""
        lefts = [g.original_left for g in self.graphemes]
        return [None, *(cur - prev for prev, cur in zip(lefts, lefts[1:]))][: len(lefts)]


@dataclass
class WordBox:
    """A materialized word wrapper with its char wrappers.

    ``expected_gaps`` is consumed by kerning compensation and cleared after.
    """

    word: Word
    span: Tag
    chars: List[Tag]
    expected_gaps: List[Optional[float]] = field(default_factory=list)

    @property
    def no_space_before(self) -> bool:
        return self.word.no_space_before


@dataclass
class SplitParts:
    """Wrapper references of one split, each list in reading order."""

    chars: List[Tag] = field(default_factory=list)
    words: List[Tag] = field(default_factory=list)
    lines: List[Tag] = field(default_factory=list)
