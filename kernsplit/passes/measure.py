"""Capture every grapheme's original left edge before the container changes.

Positions are read from the live, unsplit text through the Page's range
measurement, so this pass must run before any wrapper exists. Whitespace ends
a word; a forced-break character (em/en dash) ends the word *including*
itself and marks the following word ``no_space_before``.
"""

from __future__ import annotations

from typing import Callable, Iterable, List

from bs4.element import Tag

from kernsplit.framework import Artifact, register, with_metrics
from kernsplit.model import Grapheme, Word
from kernsplit.segmentation import TextPiece, is_boundary, iter_pieces


def group_words(
    pieces: Iterable[TextPiece],
    left_of: Callable[[TextPiece], float],
    break_chars: frozenset,
) -> List[Word]:
    """Fold located graphemes into words, measuring each with ``left_of``."""
    words: List[Word] = []
    current: List[Grapheme] = []
    no_space_next = False

    def push() -> None:
        nonlocal current, no_space_next
        if current:
            words.append(Word(tuple(current), current[0].original_left, no_space_next))
            current = []
            no_space_next = False

    for piece in pieces:
        if is_boundary(piece.text):
            push()
            # a real space after a dash keeps the space
            no_space_next = False
            continue
        current.append(Grapheme(piece.text, left_of(piece)))
        if piece.text in break_chars:
            push()
            no_space_next = True
    push()
    return words


class _MeasurePass:
    name = "measure"
    input_type = Tag
    output_type = list

    def __call__(self, a: Artifact) -> Artifact:
        container = a.payload
        meta = a.meta or {}
        page = meta["page"]
        settings = page.settings

        def left_of(piece: TextPiece) -> float:
            return page.measure_range(piece.node, piece.start, piece.end).left

        words = group_words(
            iter_pieces(container, settings.grapheme_clustering),
            left_of,
            frozenset(settings.break_chars),
        )
        return Artifact(
            payload=words,
            meta=with_metrics(
                {**meta, "container": container},
                self.name,
                words=len(words),
                graphemes=sum(len(w.graphemes) for w in words),
            ),
        )


measure = register(_MeasurePass())
