from __future__ import annotations

from typing import Any, Callable, Iterator, List, Optional

import pytest

from kernsplit import Page, SplitSettings, TableMetrics

# em-unit pairs; at the default 16px "AV" tightens by exactly 2px
KERNING = {
    ("A", "V"): -0.125,
    ("V", "A"): -0.125,
    ("T", "o"): -0.0635,
    ("W", "W"): -1.5,
}


@pytest.fixture
def metrics() -> TableMetrics:
    return TableMetrics(advance=0.5, kerning=KERNING)


@pytest.fixture
def settings() -> SplitSettings:
    return SplitSettings(resize_debounce=0.05, frame_interval=0.01)


@pytest.fixture
def make_page(metrics: TableMetrics, settings: SplitSettings) -> Iterator[Callable[..., Page]]:
    pages: List[Page] = []
    defaults = settings

    def factory(
        markup: str,
        *,
        width: float = 800.0,
        settings: Optional[SplitSettings] = None,
        **kwargs: Any,
    ) -> Page:
        kwargs.setdefault("metrics", metrics)
        kwargs.setdefault("prefers_reduced_motion", False)
        page = Page(markup, width=width, settings=settings or defaults, **kwargs)
        pages.append(page)
        return page

    yield factory
    for page in pages:
        page.close()
