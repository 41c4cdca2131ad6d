"""Rendered page host: markup tree, layout, event loop and resize observers.

A :class:`Page` plays the part a browser window plays for the split engine.
It owns a BeautifulSoup document, lays it out with :class:`InlineLayout`,
schedules timers and rendering frames on an asyncio loop and delivers resize
notifications to observers.

Usage:
    page = Page("<div><p>Wave — hello</p></div>", width=320)
    result = split_text(page.soup.p, auto_split=True)
    page.resize(page.soup.div, 200)
    page.run_for(0.5)
"""

from __future__ import annotations

import asyncio
import logging
import weakref
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from kernsplit import env_utils
from kernsplit.config import SplitSettings
from kernsplit.layout import InlineLayout, Rect
from kernsplit.metrics import FontMetrics, TableMetrics
from kernsplit.styles import style_length

logger = logging.getLogger(__name__)

_PAGES: "weakref.WeakValueDictionary[int, Page]" = weakref.WeakValueDictionary()


@dataclass(frozen=True)
class ResizeEntry:
    target: Tag
    width: float
    height: Optional[float]


class ResizeObservation:
    """One observer registration; ``disconnect()`` stops deliveries."""

    def __init__(self, page: Page, target: Tag, callback: Callable[[ResizeEntry], None]) -> None:
        self.page = page
        self.target = target
        self.callback = callback
        self.active = True
        self.last_size = page.size_of(target)

    def _deliver(self, entry: ResizeEntry) -> None:
        if self.active:
            self.callback(entry)

    def disconnect(self) -> None:
        if self.active:
            self.active = False
            self.page._forget(self)


class Page:
    def __init__(
        self,
        markup: str,
        *,
        width: float = 800.0,
        metrics: Optional[FontMetrics] = None,
        settings: Optional[SplitSettings] = None,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        prefers_reduced_motion: Optional[bool] = None,
        parser: str = "html.parser",
    ) -> None:
        self.soup = BeautifulSoup(markup, parser)
        self.viewport_width = float(width)
        self.metrics = metrics or TableMetrics()
        self.settings = settings or SplitSettings()
        self._owns_loop = loop is None
        self.loop = loop or asyncio.new_event_loop()
        self.prefers_reduced_motion = (
            env_utils.prefers_reduced_motion() if prefers_reduced_motion is None else prefers_reduced_motion
        )
        self.layout = InlineLayout(self)
        self._sizes: Dict[int, Tuple[Tag, float, Optional[float]]] = {}
        self._observations: List[ResizeObservation] = []
        _PAGES[id(self.soup)] = self

    # geometry -----------------------------------------------------------

    def width_of(self, tag: PageElement) -> float:
        node = tag
        while node is not None:
            if isinstance(node, BeautifulSoup):
                return self.viewport_width
            own = self.explicit_width(node) if isinstance(node, Tag) else None
            if own is not None:
                return own
            node = node.parent
        return self.viewport_width

    def explicit_width(self, tag: Tag) -> Optional[float]:
        """Width set on ``tag`` itself (``resize`` or inline style), if any."""
        explicit = self._sizes.get(id(tag))
        if explicit is not None:
            return explicit[1]
        return style_length(tag, "width")

    def size_of(self, tag: Tag) -> Tuple[float, Optional[float]]:
        explicit = self._sizes.get(id(tag))
        height = explicit[2] if explicit is not None else None
        return self.width_of(tag), height

    def measure(self, node: PageElement) -> Rect:
        return self.layout.measure(node)

    def measure_range(self, node: PageElement, start: int, end: int) -> Rect:
        return self.layout.measure_range(node, start, end)

    def font_size(self, node: PageElement) -> float:
        return self.layout.font_size(node)

    # resizing -----------------------------------------------------------

    def resize(self, tag: Tag, width: float, height: Optional[float] = None) -> None:
        """Give ``tag`` an explicit size and notify affected observers."""
        self._sizes[id(tag)] = (tag, float(width), height)
        logger.debug("resized <%s> to width %.2f", tag.name, width)
        self._notify()

    def resize_viewport(self, width: float) -> None:
        self.viewport_width = float(width)
        self._notify()

    def observe_resize(
        self, target: Tag, callback: Callable[[ResizeEntry], None]
    ) -> ResizeObservation:
        """Observe ``target``; one notification is delivered right away."""
        observation = ResizeObservation(self, target, callback)
        self._observations.append(observation)
        width, height = observation.last_size
        self.loop.call_soon(observation._deliver, ResizeEntry(target, width, height))
        return observation

    def _notify(self) -> None:
        for observation in list(self._observations):
            size = self.size_of(observation.target)
            if size != observation.last_size:
                observation.last_size = size
                entry = ResizeEntry(observation.target, *size)
                self.loop.call_soon(observation._deliver, entry)

    def _forget(self, observation: ResizeObservation) -> None:
        self._observations = [o for o in self._observations if o is not observation]

    # scheduling ---------------------------------------------------------

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)

    def request_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        """Run ``callback`` once the next rendering frame is due."""
        return self.loop.call_later(self.settings.frame_interval, callback)

    def run_for(self, seconds: float) -> None:
        """Drive the event loop for ``seconds``."""
        self.loop.run_until_complete(asyncio.sleep(seconds))

    def close(self) -> None:
        for observation in list(self._observations):
            observation.disconnect()
        if self._owns_loop and not self.loop.is_closed():
            self.loop.close()


def page_of(node: PageElement) -> Optional[Page]:
    """Return the Page whose document contains ``node``, if any."""
    root = node
    while root.parent is not None:
        root = root.parent
    if not isinstance(root, BeautifulSoup):
        return None
    page = _PAGES.get(id(root))
    return page if page is not None and page.soup is root else None


__all__ = ["Page", "ResizeEntry", "ResizeObservation", "page_of"]
