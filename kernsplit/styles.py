"""Inline ``style`` attribute helpers for bs4 tags."""

from __future__ import annotations

import re
from typing import Dict, Optional

from bs4.element import Tag

_LENGTH_RE = re.compile(r"^\s*(-?\d+(?:\.\d+)?|-?\.\d+)\s*(px)?\s*$")


def parse_style(value: Optional[str]) -> Dict[str, str]:
    """Return ``value`` as an ordered ``{property: value}`` mapping."""
    if not value:
        return {}
    pairs = (decl.split(":", 1) for decl in value.split(";") if ":" in decl)
    return {name.strip().lower(): val.strip() for name, val in pairs if name.strip()}


def format_style(props: Dict[str, str]) -> str:
    return "; ".join(f"{name}: {val}" for name, val in props.items())


def style_of(tag: Tag) -> Dict[str, str]:
    return parse_style(tag.get("style"))


def set_style_property(tag: Tag, name: str, value: str) -> None:
    """Set one declaration, keeping the others in place."""
    tag["style"] = format_style({**style_of(tag), name: value})


def parse_length(value: Optional[str]) -> Optional[float]:
    """Parse ``12px``/``12``/``-1.5px``; anything else is None."""
    if value is None:
        return None
    match = _LENGTH_RE.match(value)
    return float(match.group(1)) if match else None


def style_length(tag: Tag, name: str) -> Optional[float]:
    return parse_length(style_of(tag).get(name))


def format_px(value: float) -> str:
    """``-1.25`` -> ``-1.25px``; negative zero prints as ``0px``."""
    return f"{value + 0.0:g}px"
