"""Grapheme segmentation of container text.

Words are separated by whitespace runs; each word is a sequence of extended
grapheme clusters (``regex``'s ``\\X``), so combining marks, flags and emoji
ZWJ sequences stay single units. Without clustering the text degrades to one
code point per unit.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import List, NamedTuple

import regex
from bs4.element import NavigableString, Tag

logger = logging.getLogger(__name__)

WHITESPACE = frozenset({" ", "\n", "\t", "\r", "\r\n", "\f"})

_GRAPHEME_RE = regex.compile(r"\X")


class TextPiece(NamedTuple):
    """One grapheme located inside a live text node."""

    node: NavigableString
    start: int
    end: int
    text: str


def graphemes(text: str, clustering: bool = True) -> List[str]:
    """Split ``text`` into user-perceived characters."""
    if not clustering:
        logger.debug("grapheme clustering disabled; using code points")
        return list(text)
    return _GRAPHEME_RE.findall(text)


def is_boundary(grapheme: str) -> bool:
    return grapheme in WHITESPACE


def text_nodes(container: Tag) -> Iterator[NavigableString]:
    """Yield plain text nodes in document order (comments etc. skipped)."""
    return (d for d in container.descendants if type(d) is NavigableString)


def iter_pieces(container: Tag, clustering: bool = True) -> Iterator[TextPiece]:
    """Yield every grapheme of ``container`` with its node offsets."""
    for node in text_nodes(container):
        offset = 0
        for g in graphemes(str(node), clustering):
            yield TextPiece(node, offset, offset + len(g), g)
            offset += len(g)


def collapse_whitespace(text: str) -> str:
    """Collapse boundary runs to one space and trim, as the split output reads."""
    return " ".join(regex.split(r"[ \n\t\r\f]+", text)).strip()
