"""Group word wrappers into visual lines after kerning compensation.

Line membership depends on the compensated widths, so it can only be known
once the word layer exists and has been corrected; the word layer is then
torn down and rebuilt inside one block wrapper per line.
"""

from __future__ import annotations

from typing import List, Sequence

from bs4.element import NavigableString, Tag

from kernsplit.framework import Artifact, register, with_metrics
from kernsplit.model import SplitParts, WordBox
from kernsplit.options import SplitOptions
from kernsplit.passes.build_spans import create_span


def group_lines(tops: Sequence[float], tolerance: float) -> List[List[int]]:
    """Indices of ``tops`` grouped by line; the first top of a group anchors it."""
    groups: List[List[int]] = []
    anchor = 0.0
    for i, top in enumerate(tops):
        if groups and abs(top - anchor) < tolerance:
            groups[-1].append(i)
        else:
            groups.append([i])
            anchor = top
    return groups


def render_lines(
    container: Tag, boxes: List[WordBox], groups: List[List[int]], options: SplitOptions, soup
) -> List[Tag]:
    container.clear()
    lines: List[Tag] = []
    for line_index, group in enumerate(groups):
        line = create_span(
            soup, options.line_class, line_index, "block", prop_name="line", options=options
        )
        for position, word_index in enumerate(group):
            box = boxes[word_index]
            if position and not box.no_space_before:
                line.append(NavigableString(" "))
            line.append(box.span)
        container.append(line)
        lines.append(line)
    return lines


class _DetectLinesPass:
    name = "detect_lines"
    input_type = list
    output_type = SplitParts

    def __call__(self, a: Artifact) -> Artifact:
        boxes: List[WordBox] = a.payload
        meta = a.meta or {}
        page = meta["page"]
        container: Tag = meta["container"]
        tolerance = page.settings.line_tolerance(page.font_size(container))
        tops = [round(page.measure(box.span).top) for box in boxes]
        groups = group_lines(tops, tolerance)
        lines = render_lines(container, boxes, groups, meta["options"], page.soup)
        parts = SplitParts(
            chars=[char for box in boxes for char in box.chars],
            words=[box.span for box in boxes],
            lines=lines,
        )
        return Artifact(
            payload=parts,
            meta=with_metrics(meta, self.name, lines=len(lines), tolerance=tolerance),
        )


detect_lines = register(_DetectLinesPass())
