"""Caller-facing split options.

Options are accepted as a :class:`SplitOptions` instance, a mapping or
keyword arguments, in snake_case or the camelCase spelling
(``charClass``, ``autoSplit``, ``revertOnComplete`` ...).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Callable, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from kernsplit.errors import warn_config

DEFAULT_TYPE = "chars,words,lines"

SPLIT_TYPES = frozenset(
    {
        "chars",
        "words",
        "lines",
        "chars,words",
        "words,lines",
        "chars,lines",
        DEFAULT_TYPE,
    }
)


class SplitOptions(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
        extra="ignore",
    )

    type: str = DEFAULT_TYPE
    char_class: str = "split-char"
    word_class: str = "split-word"
    line_class: str = "split-line"
    auto_split: bool = False
    on_resize: Optional[Callable[..., Any]] = None
    revert_on_complete: Any = None
    prop_index: bool = False
    will_change: bool = False


def _known_keys() -> frozenset:
    fields = SplitOptions.model_fields
    return frozenset(fields) | frozenset(to_camel(name) for name in fields)


def resolve_options(
    options: SplitOptions | Mapping[str, Any] | None = None, **overrides: Any
) -> SplitOptions:
    """Merge ``options`` and ``overrides`` into a validated SplitOptions.

    Unknown keys and unsupported ``type`` values are reported as
    ConfigurationWarning and otherwise ignored.
    """
    base: dict[str, Any] = (
        options.model_dump(exclude_unset=True)
        if isinstance(options, SplitOptions)
        else dict(options or {})
    )
    merged = {**base, **overrides}
    unknown = sorted(k for k in merged if k not in _known_keys())
    if unknown:
        warn_config(f"Unknown split options: {', '.join(unknown)}", stacklevel=4)
    resolved = SplitOptions.model_validate(merged)
    if resolved.type != DEFAULT_TYPE:
        reason = "is not yet implemented" if resolved.type in SPLIT_TYPES else "is not recognized"
        warn_config(
            f'type="{resolved.type}" {reason}. Defaulting to "{DEFAULT_TYPE}".',
            stacklevel=4,
        )
        resolved = resolved.model_copy(update={"type": DEFAULT_TYPE})
    return resolved


__all__ = ["DEFAULT_TYPE", "SplitOptions", "resolve_options"]
