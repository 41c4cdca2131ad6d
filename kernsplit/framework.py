"""Named split stages and the reducer that chains them.

Each stage is a callable object with ``name``, ``input_type`` and
``output_type``; it receives an :class:`Artifact` and returns a new one.
Stages share state only through ``Artifact.meta`` (the page, the resolved
options, the container and per-stage ``metrics``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Protocol, Type, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Artifact:
    """Immutable carrier of a split stage's payload + metadata."""

    payload: Any
    meta: Dict[str, Any] | None = None


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact:
        """Execute the stage."""
        ...


_REGISTRY: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Register a stage by name; re-registering replaces it."""
    global _REGISTRY
    _REGISTRY = MappingProxyType({**dict(_REGISTRY), p.name: p})
    return p


def run_step(name: str, a: Artifact) -> Artifact:
    """Run one registered stage, checking its payload type on the way in."""
    step = _REGISTRY[name]
    if not isinstance(a.payload, step.input_type):
        raise TypeError(
            f"{name} expects {step.input_type.__name__}, got {type(a.payload).__name__}"
        )
    out = step(a)
    logger.debug("%s: %s", name, ((out.meta or {}).get("metrics") or {}).get(name, {}))
    return out


def run_pipeline(steps: List[str], a: Artifact) -> Artifact:
    """Apply registered stages in order."""
    return reduce(lambda acc, s: run_step(s, acc), steps, a)


def registry() -> Dict[str, Pass]:
    """Shallow copy of the registry for inspection/testing."""
    return dict(_REGISTRY)


def with_metrics(meta: Mapping[str, Any] | None, name: str, **values: Any) -> Dict[str, Any]:
    """Return a copy of ``meta`` with ``values`` merged into ``metrics[name]``."""
    base = dict(meta or {})
    metrics = dict(base.get("metrics") or {})
    metrics[name] = {**metrics.get(name, {}), **values}
    return {**base, "metrics": metrics}
