"""Public entry point: split a container into char, word and line wrappers.

``split_text`` measures the original glyph positions, rebuilds the container
as word/char wrappers, restores the original kerning with per-character
margins and regroups the words into line wrappers. The returned
:class:`SplitResult` can revert the container to its exact original markup
and, with ``auto_split``, keeps itself current when the parent's width
changes.
"""

from __future__ import annotations

import asyncio
import copy
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from kernsplit.errors import ContainerValidationError, warn_config
from kernsplit.model import SplitParts
from kernsplit.options import SplitOptions, resolve_options
from kernsplit.page import Page, page_of
from kernsplit.pipeline import run_split
from kernsplit.resize import ResizeCoordinator
from kernsplit.styles import set_style_property

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkupSnapshot:
    """The container's children as they were before the first mutation."""

    nodes: tuple

    @classmethod
    def capture(cls, container: Tag) -> MarkupSnapshot:
        return cls(tuple(copy.copy(n) for n in container.contents))

    def restore(self, container: Tag) -> None:
        container.clear()
        for node in self.nodes:
            container.append(copy.copy(node))


class SplitController:
    """Owns revert/dispose for one split and the optional resize coordinator."""

    def __init__(
        self,
        container: Tag,
        page: Page,
        options: SplitOptions,
        snapshot: MarkupSnapshot,
        previous_label: Optional[str],
    ) -> None:
        self.container = container
        self.page = page
        self.options = options
        self.snapshot = snapshot
        self.previous_label = previous_label
        self.coordinator: Optional[ResizeCoordinator] = None
        self.active = True

    def dispose(self) -> None:
        if not self.active:
            return
        if self.coordinator is not None:
            self.coordinator.dispose()
        self.active = False

    def revert(self) -> None:
        """Restore the snapshot; a disposed split is left as it is."""
        if not self.active:
            return
        self.snapshot.restore(self.container)
        if self.previous_label is None:
            self.container.attrs.pop("aria-label", None)
        else:
            self.container["aria-label"] = self.previous_label
        self.dispose()

    def on_signal_done(self, signal: "asyncio.Future[Any]") -> None:
        # revert() ignores signals that finish after dispose()
        if signal.cancelled():
            logger.warning("revert_on_complete signal was cancelled; not reverting")
            return
        exc = signal.exception()
        if exc is not None:
            logger.warning("revert_on_complete signal failed: %s", exc)
            return
        self.revert()


@dataclass
class SplitResult:
    chars: List[Tag] = field(default_factory=list)
    words: List[Tag] = field(default_factory=list)
    lines: List[Tag] = field(default_factory=list)
    prefers_reduced_motion: bool = False
    controller: Optional[SplitController] = field(default=None, repr=False)

    def revert(self) -> None:
        """Restore the original markup and stop observing; idempotent."""
        if self.controller is not None:
            self.controller.revert()

    def dispose(self) -> None:
        """Stop resize observation and cancel pending timers; idempotent."""
        if self.controller is not None:
            self.controller.dispose()

    def _replace(self, parts: SplitParts) -> None:
        self.chars, self.words, self.lines = parts.chars, parts.words, parts.lines


def _validate(container: Any) -> Page:
    if not isinstance(container, Tag) or isinstance(container, BeautifulSoup):
        raise ContainerValidationError(
            f"split_text: container must be a bs4 Tag, got {type(container).__name__}"
        )
    page = page_of(container)
    if page is None:
        raise ContainerValidationError("split_text: container is not attached to a Page")
    return page


def _parent_element(container: Tag) -> Optional[Tag]:
    parent: Optional[PageElement] = container.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def _completion_future(signal: Any, page: Page) -> "Optional[asyncio.Future[Any]]":
    """Turn ``revert_on_complete`` into a future, or warn and return None.

    Futures bound to another event loop are returned as they are; awaitables
    are scheduled on the page loop.
    """
    if asyncio.isfuture(signal):
        return signal
    if inspect.isawaitable(signal):
        try:
            return asyncio.ensure_future(signal, loop=page.loop)
        except (TypeError, ValueError) as exc:
            warn_config(f"split_text: cannot watch revert_on_complete: {exc}", stacklevel=4)
            return None
    warn_config(
        "split_text: revert_on_complete must be awaitable. "
        "Pass the animation's completion future.",
        stacklevel=4,
    )
    return None


def _watch_completion(future: "asyncio.Future[Any]", controller: SplitController) -> None:
    page = controller.page
    if future.get_loop() is page.loop:
        future.add_done_callback(controller.on_signal_done)
        return

    def hop(done: "asyncio.Future[Any]") -> None:
        if not page.loop.is_closed():
            page.loop.call_soon_threadsafe(controller.on_signal_done, done)

    future.add_done_callback(hop)


def _start_auto_split(result: SplitResult, controller: SplitController, target: Tag) -> None:
    container, page, options = controller.container, controller.page, controller.options

    def complete(parts: SplitParts) -> None:
        result._replace(parts)
        if options.on_resize is not None:
            options.on_resize(result)

    coordinator = ResizeCoordinator(
        page=page,
        target=target,
        restore=lambda: controller.snapshot.restore(container),
        resplit=lambda: run_split(container, page, options)[0],
        on_complete=complete,
    )
    controller.coordinator = coordinator
    coordinator.start()


def split_text(
    container: Any,
    options: SplitOptions | Mapping[str, Any] | None = None,
    **option_kwargs: Any,
) -> SplitResult:
    """Split ``container`` into char, word and line wrappers.

    Raises:
        ContainerValidationError: ``container`` is not a Tag of a Page.
    """
    page = _validate(container)
    opts = resolve_options(options, **option_kwargs)
    prefers_reduced_motion = page.prefers_reduced_motion

    text = container.get_text().strip()
    if not text:
        warn_config("split_text: element has no text content", stacklevel=3)
        return SplitResult(prefers_reduced_motion=prefers_reduced_motion)

    target = _parent_element(container)
    if opts.auto_split and target is None:
        warn_config(
            "split_text: auto_split requires a parent element. AutoSplit will not work.",
            stacklevel=3,
        )

    signal = (
        _completion_future(opts.revert_on_complete, page)
        if opts.revert_on_complete is not None
        else None
    )

    snapshot = MarkupSnapshot.capture(container)
    controller = SplitController(container, page, opts, snapshot, container.get("aria-label"))
    if signal is not None:
        _watch_completion(signal, controller)
    container["aria-label"] = text
    set_style_property(container, "font-variant-ligatures", "none")

    parts, _ = run_split(container, page, opts)
    result = SplitResult(
        chars=parts.chars,
        words=parts.words,
        lines=parts.lines,
        prefers_reduced_motion=prefers_reduced_motion,
        controller=controller,
    )

    if opts.auto_split and target is not None:
        _start_auto_split(result, controller, target)
    return result


__all__ = ["MarkupSnapshot", "SplitResult", "split_text"]
