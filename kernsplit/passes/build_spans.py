from __future__ import annotations

from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.element import NavigableString, Tag

from kernsplit.framework import Artifact, register, with_metrics
from kernsplit.model import Word, WordBox
from kernsplit.options import SplitOptions
from kernsplit.styles import set_style_property


def create_span(
    soup: BeautifulSoup,
    class_name: str,
    index: Optional[int] = None,
    display: str = "inline-block",
    *,
    prop_name: Optional[str] = None,
    options: Optional[SplitOptions] = None,
) -> Tag:
    """Return a wrapper span with class, data-index and display set."""
    span = soup.new_tag("span")
    if class_name:
        span["class"] = class_name
    if index is not None:
        span["data-index"] = str(index)
        if options is not None and options.prop_index and prop_name:
            set_style_property(span, f"--{prop_name}-index", str(index))
    set_style_property(span, "display", display)
    if options is not None and options.will_change:
        set_style_property(span, "will-change", "transform, opacity")
    return span


def build_word(soup: BeautifulSoup, word: Word, index: int, options: SplitOptions) -> WordBox:
    span = create_span(soup, options.word_class, index, prop_name="word", options=options)
    chars: List[Tag] = []
    for char_index, grapheme in enumerate(word.graphemes):
        char = create_span(soup, options.char_class, char_index, prop_name="char", options=options)
        char.string = grapheme.text
        span.append(char)
        chars.append(char)
    return WordBox(word, span, chars, word.expected_gaps())


def append_words(parent: Tag, boxes: List[WordBox]) -> None:
    """Append word wrappers with a space between them, except before continuations."""
    for i, box in enumerate(boxes):
        if i and not box.no_space_before:
            parent.append(NavigableString(" "))
        parent.append(box.span)


class _BuildSpansPass:
    """Replace the container's content with word and char wrappers."""

    name = "build_spans"
    input_type = list
    output_type = list

    def __call__(self, a: Artifact) -> Artifact:
        words: List[Word] = a.payload
        meta = a.meta or {}
        container: Tag = meta["container"]
        options: SplitOptions = meta["options"]
        soup = meta["page"].soup

        container.clear()
        boxes = [build_word(soup, word, i, options) for i, word in enumerate(words)]
        append_words(container, boxes)
        return Artifact(
            payload=boxes,
            meta=with_metrics(
                meta,
                self.name,
                chars=sum(len(b.chars) for b in boxes),
                continuations=sum(1 for b in boxes if b.no_space_before),
            ),
        )


build_spans = register(_BuildSpansPass())
