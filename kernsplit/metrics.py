"""Font metrics used by the inline layout engine.

All values are in em units scaled by the font size at lookup time, so the
same table serves every size.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

from kernsplit.segmentation import graphemes

# Try to import fitz, but allow module to load without it for testing
try:
    import fitz
except ImportError:
    fitz = None  # type: ignore

KernPairs = Mapping[Tuple[str, str], float]


@runtime_checkable
class FontMetrics(Protocol):
    def advance(self, grapheme: str, size: float) -> float:
        """Horizontal advance of ``grapheme`` at ``size`` px."""
        ...

    def kern(self, left: str, right: str, size: float) -> float:
        """Pair adjustment applied between adjacent glyphs in one run."""
        ...


def parse_kerning_pairs(pairs: Mapping[str, float]) -> Dict[Tuple[str, str], float]:
    """Turn ``{"AV": -0.08}`` into ``{("A", "V"): -0.08}``.

    Keys that do not hold exactly two graphemes are rejected.
    """
    out: Dict[Tuple[str, str], float] = {}
    for key, value in pairs.items():
        parts = graphemes(key)
        if len(parts) != 2:
            raise ValueError(f"kerning pair {key!r} must contain two characters")
        out[(parts[0], parts[1])] = float(value)
    return out


class TableMetrics:
    """Fixed advance table with optional per-glyph widths and kerning pairs."""

    def __init__(
        self,
        advance: float = 0.5,
        widths: Optional[Mapping[str, float]] = None,
        kerning: Optional[KernPairs] = None,
        space: Optional[float] = None,
    ) -> None:
        self.default_advance = advance
        self.widths = dict(widths or {})
        self.pairs = dict(kerning or {})
        self.space = advance if space is None else space

    def advance(self, grapheme: str, size: float) -> float:
        if grapheme == " ":
            return self.space * size
        return self.widths.get(grapheme, self.default_advance) * size

    def kern(self, left: str, right: str, size: float) -> float:
        return self.pairs.get((left, right), 0.0) * size


class FitzMetrics:
    """Glyph advances from a PyMuPDF font; kerning pairs come from config."""

    def __init__(self, fontname: str = "helv", kerning: Optional[KernPairs] = None) -> None:
        if fitz is None:
            raise RuntimeError("PyMuPDF is required for FitzMetrics")
        self.fontname = fontname
        self._font = fitz.Font(fontname)
        self.pairs = dict(kerning or {})

    def advance(self, grapheme: str, size: float) -> float:
        return self._font.text_length(grapheme, fontsize=size)

    def kern(self, left: str, right: str, size: float) -> float:
        return self.pairs.get((left, right), 0.0) * size


def metrics_from_settings(font: Optional[str], kerning: Mapping[str, float]) -> FontMetrics:
    """Pick metrics for ``font`` (``None`` -> table metrics)."""
    pairs = parse_kerning_pairs(kerning)
    return FitzMetrics(font, pairs) if font else TableMetrics(kerning=pairs)
