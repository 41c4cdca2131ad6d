from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple

from bs4.element import Tag

import kernsplit.passes  # noqa: F401  (registers the split passes)
from kernsplit.framework import Artifact, run_pipeline
from kernsplit.model import SplitParts
from kernsplit.options import SplitOptions

logger = logging.getLogger(__name__)

SPLIT_STEPS: List[str] = ["measure", "build_spans", "compensate_kerning", "detect_lines"]


def run_split(container: Tag, page, options: SplitOptions) -> Tuple[SplitParts, Dict[str, Any]]:
    """Measure, wrap, compensate and regroup ``container``; return parts + metrics."""
    result = run_pipeline(
        SPLIT_STEPS,
        Artifact(payload=container, meta={"page": page, "options": options}),
    )
    metrics = (result.meta or {}).get("metrics", {})
    logger.debug(
        "split %d words into %d lines (%d kerning adjustments, %d skipped)",
        metrics.get("measure", {}).get("words", 0),
        metrics.get("detect_lines", {}).get("lines", 0),
        metrics.get("compensate_kerning", {}).get("adjusted", 0),
        metrics.get("compensate_kerning", {}).get("skipped", 0),
    )
    return result.payload, metrics
