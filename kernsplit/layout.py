"""Inline layout engine for Page documents.

The engine flows a block's content greedily into lines of the block's width.
Text is shaped glyph by glyph with pair kerning between adjacent glyphs of
the same run; ``display: inline-block`` elements are atomic boxes whose
content is laid out on its own, so kerning never crosses their edges. Line
breaks are allowed at collapsed whitespace, after a forced-break character
and on either side of an atomic box.

Coordinates are relative to the block root (the nearest structural block
ancestor), which sits at the origin.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PageElement, Tag

from kernsplit.segmentation import graphemes, is_boundary
from kernsplit.styles import style_length, style_of

if TYPE_CHECKING:
    from kernsplit.page import Page

BLOCK_TAGS = frozenset(
    {
        "address",
        "article",
        "aside",
        "blockquote",
        "body",
        "dd",
        "div",
        "dl",
        "dt",
        "figcaption",
        "figure",
        "footer",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        "header",
        "html",
        "li",
        "main",
        "nav",
        "ol",
        "p",
        "pre",
        "section",
        "td",
        "th",
        "ul",
    }
)

EPSILON = 1e-6


@dataclass(frozen=True)
class Rect:
    left: float = 0.0
    top: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def shifted(self, dx: float, dy: float) -> Rect:
        return Rect(self.left + dx, self.top + dy, self.width, self.height)

    @classmethod
    def union(cls, rects: Iterable[Rect]) -> Rect:
        """Bounding rect of ``rects``; the empty rect when there are none."""
        items = list(rects)
        if not items:
            return cls()
        left = min(r.left for r in items)
        top = min(r.top for r in items)
        return cls(
            left,
            top,
            max(r.right for r in items) - left,
            max(r.bottom for r in items) - top,
        )


@dataclass
class _Glyph:
    node: NavigableString
    start: int
    end: int
    text: str
    advance: float
    kern: float
    height: float


@dataclass
class _Space:
    advance: float


@dataclass
class _Break:
    pass


@dataclass
class _Block:
    tag: Tag
    size: float


@dataclass
class _Atomic:
    tag: Tag
    margin: float
    flow: Flow
    width: float
    height: float


_Item = Union[_Glyph, _Space, _Break, _Block, _Atomic]
_Token = Union[_Space, _Break, _Block, List[Union[_Glyph, _Atomic]]]


@dataclass
class Flow:
    """Placed rectangles of one layout, keyed by node identity."""

    rects: Dict[int, Rect] = field(default_factory=dict)
    glyphs: Dict[int, List[Tuple[int, int, Rect]]] = field(default_factory=dict)
    # strong refs keep the ids above from being reused while the flow lives
    nodes: List[PageElement] = field(default_factory=list)
    seen: set = field(default_factory=set)

    def visit(self, node: PageElement) -> None:
        if id(node) not in self.seen:
            self.seen.add(id(node))
            self.nodes.append(node)

    def place_tag(self, tag: Tag, rect: Rect) -> None:
        self.visit(tag)
        self.rects[id(tag)] = rect

    def place_glyph(self, node: NavigableString, start: int, end: int, rect: Rect) -> None:
        self.visit(node)
        self.glyphs.setdefault(id(node), []).append((start, end, rect))

    def merge(self, other: Flow, dx: float, dy: float) -> None:
        for node in other.nodes:
            self.visit(node)
        self.rects.update({k: r.shifted(dx, dy) for k, r in other.rects.items()})
        for k, placed in other.glyphs.items():
            self.glyphs.setdefault(k, []).extend((s, e, r.shifted(dx, dy)) for s, e, r in placed)

    def contains(self, node: PageElement) -> bool:
        return id(node) in self.seen

    def rects_of(self, node: PageElement) -> List[Rect]:
        if id(node) in self.rects:
            return [self.rects[id(node)]]
        return [r for _, _, r in self.glyphs.get(id(node), ())]


def display_of(tag: Tag) -> str:
    declared = style_of(tag).get("display")
    if declared:
        return declared
    return "block" if tag.name in BLOCK_TAGS else "inline"


def _tokens(items: List[_Item], break_chars: frozenset) -> List[_Token]:
    """Group items into unbreakable chunks separated by break opportunities."""
    tokens: List[_Token] = []
    chunk: List[Union[_Glyph, _Atomic]] = []

    def flush() -> None:
        if chunk:
            tokens.append(list(chunk))
            chunk.clear()

    for item in items:
        if isinstance(item, _Space):
            flush()
            if not (tokens and isinstance(tokens[-1], _Space)):
                tokens.append(item)
        elif isinstance(item, (_Break, _Block)):
            flush()
            tokens.append(item)
        elif isinstance(item, _Atomic):
            flush()
            tokens.append([item])
        else:
            chunk.append(item)
            if item.text in break_chars:
                flush()
    flush()
    return tokens


def _chunk_width(chunk: List[Union[_Glyph, _Atomic]], joined: bool) -> float:
    return sum(
        (item.advance + (item.kern if i or joined else 0.0))
        if isinstance(item, _Glyph)
        else item.margin + item.width
        for i, item in enumerate(chunk)
    )


class InlineLayout:
    """Greedy inline layout over a Page's markup."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._cached: Optional[Tuple[tuple, Flow]] = None

    @property
    def _break_chars(self) -> frozenset:
        return frozenset(self.page.settings.break_chars)

    def block_root(self, node: PageElement) -> Tag:
        tag = node if isinstance(node, Tag) else node.parent
        last = tag
        while tag is not None:
            if isinstance(tag, BeautifulSoup) or tag.name in BLOCK_TAGS:
                return tag
            last = tag
            tag = tag.parent
        return last

    def font_size(self, node: PageElement) -> float:
        tag = node if isinstance(node, Tag) else node.parent
        while tag is not None:
            size = style_length(tag, "font-size")
            if size is not None:
                return size
            tag = tag.parent
        return self.page.settings.default_font_size

    def flow_root(self, node: PageElement) -> Tag:
        """Block whose layout places ``node``; a block tag is placed by its parent's."""
        if (
            isinstance(node, Tag)
            and not isinstance(node, BeautifulSoup)
            and node.name in BLOCK_TAGS
            and node.parent is not None
        ):
            return self.block_root(node.parent)
        return self.block_root(node)

    def flow_for(self, node: PageElement) -> Flow:
        root = self.flow_root(node)
        width = self.page.width_of(root)
        key = (id(root), width, root.decode())
        if self._cached is not None:
            cached_key, cached = self._cached
            if cached_key == key and cached.contains(node):
                return cached
        flow = Flow()
        flow.visit(root)
        height = self._layout_block(root, 0.0, 0.0, width, self.font_size(root), flow)
        flow.place_tag(root, Rect(0.0, 0.0, width, height))
        self._cached = (key, flow)
        return flow

    def measure(self, node: PageElement) -> Rect:
        flow = self.flow_for(node)
        own = flow.rects_of(node)
        if own or not isinstance(node, Tag):
            return Rect.union(own)
        return Rect.union(r for d in node.descendants for r in flow.rects_of(d))

    def measure_range(self, node: NavigableString, start: int, end: int) -> Rect:
        flow = self.flow_for(node)
        return Rect.union(
            r for s, e, r in flow.glyphs.get(id(node), ()) if s < end and e > start
        )

    def _layout_block(
        self, tag: Tag, x0: float, y0: float, width: float, size: float, flow: Flow
    ) -> float:
        items: List[_Item] = []
        self._collect(tag, size, items, flow)
        height, _ = self._flow_items(items, x0, y0, width, size, flow)
        return height

    def _collect(self, node: Tag, size: float, items: List[_Item], flow: Flow) -> None:
        for child in node.children:
            if isinstance(child, Tag):
                flow.visit(child)
                self._collect_tag(child, size, items, flow)
            elif type(child) is NavigableString:
                flow.visit(child)
                self._collect_text(child, size, items)

    def _collect_tag(self, tag: Tag, size: float, items: List[_Item], flow: Flow) -> None:
        if tag.name == "br":
            items.append(_Break())
            return
        child_size = style_length(tag, "font-size") or size
        display = display_of(tag)
        if display == "none":
            return
        if display == "block":
            items.append(_Block(tag, child_size))
        elif display == "inline-block":
            items.append(self._atomic(tag, child_size, flow))
        else:
            self._collect(tag, child_size, items, flow)

    def _collect_text(self, node: NavigableString, size: float, items: List[_Item]) -> None:
        metrics = self.page.metrics
        line_height = size * self.page.settings.line_height
        offset = 0
        for g in graphemes(str(node), self.page.settings.grapheme_clustering):
            end = offset + len(g)
            if is_boundary(g):
                items.append(_Space(metrics.advance(" ", size)))
            else:
                prev = items[-1] if items else None
                kern = metrics.kern(prev.text, g, size) if isinstance(prev, _Glyph) else 0.0
                items.append(_Glyph(node, offset, end, g, metrics.advance(g, size), kern, line_height))
            offset = end

    def _atomic(self, tag: Tag, size: float, flow: Flow) -> _Atomic:
        inner = Flow()
        items: List[_Item] = []
        self._collect(tag, size, items, inner)
        height, width = self._flow_items(items, 0.0, 0.0, math.inf, size, inner)
        for node in inner.nodes:
            flow.visit(node)
        margin = style_length(tag, "margin-left") or 0.0
        return _Atomic(tag, margin, inner, width, height or size * self.page.settings.line_height)

    def _flow_items(
        self, items: List[_Item], x0: float, y0: float, width: float, size: float, flow: Flow
    ) -> Tuple[float, float]:
        """Place ``items`` into lines; return (height, widest line extent)."""
        line_height = size * self.page.settings.line_height
        y, x, extent = y0, 0.0, 0.0
        used = False
        space: Optional[_Space] = None
        for tok in _tokens(items, self._break_chars):
            if isinstance(tok, _Space):
                space = tok if used else None
                continue
            if isinstance(tok, _Break):
                y, x, used, space = y + line_height, 0.0, False, None
                continue
            if isinstance(tok, _Block):
                if used:
                    y, x, used = y + line_height, 0.0, False
                space = None
                own = self.page.explicit_width(tok.tag)
                block_width = width if own is None else own
                height = self._layout_block(tok.tag, x0, y, block_width, tok.size, flow)
                flow.place_tag(tok.tag, Rect(x0, y, block_width, height))
                y += height
                continue
            gap = space.advance if space is not None else 0.0
            joined = used and space is None
            chunk_width = _chunk_width(tok, joined)
            if used and x + gap + chunk_width > width + EPSILON:
                y, x, gap, joined = y + line_height, 0.0, 0.0, False
            x = self._place_chunk(tok, x0 + x + gap, y, joined, flow) - x0
            extent = max(extent, x)
            used, space = True, None
        return y - y0 + (line_height if used else 0.0), extent

    def _place_chunk(
        self, chunk: List[Union[_Glyph, _Atomic]], x: float, y: float, joined: bool, flow: Flow
    ) -> float:
        for i, item in enumerate(chunk):
            if isinstance(item, _Glyph):
                if i or joined:
                    x += item.kern
                flow.place_glyph(item.node, item.start, item.end, Rect(x, y, item.advance, item.height))
                x += item.advance
            else:
                x += item.margin
                flow.place_tag(item.tag, Rect(x, y, item.width, item.height))
                flow.merge(item.flow, x, y)
                x += item.width
        return x
