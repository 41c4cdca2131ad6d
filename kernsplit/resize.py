"""Resize-driven re-splitting.

The coordinator watches the container's parent and re-runs the whole split
when its width changes:

    IDLE --width change--> PENDING --quiet for `resize_debounce`--> RESPLITTING
      ^                       |  (every further change restarts the timer)  |
      +-----------------------+---------------------------------------------+

RESPLITTING restores the original markup, waits one rendering frame so the
plain text is laid out, splits again and reports the new parts. A change that
arrives while a resplit is running is picked up after it completes, so two
cycles never overlap. DISPOSED is terminal; every timer or frame callback
checks it before touching the container.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from bs4.element import Tag

from kernsplit.model import SplitParts
from kernsplit.page import Page, ResizeEntry, ResizeObservation

logger = logging.getLogger(__name__)


class ResizeState(enum.Enum):
    IDLE = "idle"
    PENDING = "pending"
    RESPLITTING = "resplitting"
    DISPOSED = "disposed"


@dataclass
class ResizeCoordinator:
    page: Page
    target: Tag
    restore: Callable[[], None]
    resplit: Callable[[], SplitParts]
    on_complete: Callable[[SplitParts], None]
    state: ResizeState = ResizeState.IDLE
    last_width: Optional[float] = None
    skip_first: bool = True
    rerun_after: bool = False
    resplits: int = 0
    observation: Optional[ResizeObservation] = None
    timer: Optional[asyncio.TimerHandle] = None
    frame: Optional[asyncio.TimerHandle] = None

    @property
    def active(self) -> bool:
        return self.state is not ResizeState.DISPOSED

    def start(self) -> None:
        self.last_width = self.page.width_of(self.target)
        self.observation = self.page.observe_resize(self.target, self._on_resize)

    def dispose(self) -> None:
        if not self.active:
            return
        if self.observation is not None:
            self.observation.disconnect()
            self.observation = None
        for handle in (self.timer, self.frame):
            if handle is not None:
                handle.cancel()
        self.timer = self.frame = None
        self.state = ResizeState.DISPOSED
        logger.debug("resize coordinator disposed after %d resplits", self.resplits)

    def _on_resize(self, entry: ResizeEntry) -> None:
        if not self.active:
            return
        if self.skip_first:
            self.skip_first = False
            return
        if self.state is ResizeState.RESPLITTING:
            self.rerun_after = True
            return
        if self.state is ResizeState.IDLE and entry.width == self.last_width:
            return
        self._arm()

    def _arm(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
        self.state = ResizeState.PENDING
        self.timer = self.page.call_later(self.page.settings.resize_debounce, self._on_quiet)

    def _on_quiet(self) -> None:
        self.timer = None
        if not self.active:
            return
        width = self.page.width_of(self.target)
        if width == self.last_width:
            self.state = ResizeState.IDLE
            return
        logger.debug("width %.2f -> %.2f, resplitting", self.last_width or 0.0, width)
        self.last_width = width
        self.state = ResizeState.RESPLITTING
        self.restore()
        self.frame = self.page.request_frame(self._on_frame)

    def _on_frame(self) -> None:
        self.frame = None
        if not self.active:
            return
        parts = self.resplit()
        self.resplits += 1
        self.state = ResizeState.IDLE
        self.on_complete(parts)
        if self.rerun_after and self.active:
            self.rerun_after = False
            self._arm()
