"""Gap-based kerning compensation.

Once every character sits in its own inline-block the layout no longer
applies pair kerning, so the gaps between characters drift from the ones
measured on the original text. For each word the current char positions are
measured once; character ``i`` gets ``margin-left = expected - current`` gap.
A margin only moves its own character relative to the previous one, so the
corrections are independent and one pass is enough. Deltas at or above the
threshold mean the character landed somewhere else (typically another line)
and are left alone.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from kernsplit.framework import Artifact, register, with_metrics
from kernsplit.model import WordBox
from kernsplit.styles import format_px, set_style_property


def gap_corrections(
    positions: List[float],
    expected: List[Optional[float]],
    threshold: float,
    precision: int = 2,
) -> List[Optional[float]]:
    """Per-char margin (None = untouched) restoring ``expected`` gaps."""
    out: List[Optional[float]] = [None] * len(positions)
    for i in range(1, len(positions)):
        gap = expected[i] if i < len(expected) else None
        if gap is None:
            continue
        delta = gap - (positions[i] - positions[i - 1])
        if abs(delta) < threshold:
            out[i] = round(delta, precision)
    return out


def compensate_word(box: WordBox, page, threshold: float, precision: int) -> Tuple[int, int]:
    """Apply margins to ``box``; return (adjusted, skipped) counts."""
    if len(box.chars) < 2:
        box.expected_gaps = []
        return 0, 0
    positions = [page.measure(char).left for char in box.chars]
    margins = gap_corrections(positions, box.expected_gaps, threshold, precision)
    for char, margin in zip(box.chars, margins):
        if margin is not None:
            set_style_property(char, "margin-left", format_px(margin))
    adjusted = sum(1 for m in margins if m is not None)
    box.expected_gaps = []
    return adjusted, len(box.chars) - 1 - adjusted


class _CompensateKerningPass:
    name = "compensate_kerning"
    input_type = list
    output_type = list

    def __call__(self, a: Artifact) -> Artifact:
        boxes: List[WordBox] = a.payload
        meta = a.meta or {}
        page = meta["page"]
        settings = page.settings
        counts = [
            compensate_word(box, page, settings.kerning_threshold, settings.kerning_precision)
            for box in boxes
        ]
        return Artifact(
            payload=boxes,
            meta=with_metrics(
                meta,
                self.name,
                adjusted=sum(c[0] for c in counts),
                skipped=sum(c[1] for c in counts),
            ),
        )


compensate_kerning = register(_CompensateKerningPass())
