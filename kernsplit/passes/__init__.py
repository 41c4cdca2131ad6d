"""Split stages, registered with the framework on import."""

from importlib import import_module
from typing import Any

# module name -> registered stage name(s) differ (kerning -> compensate_kerning,
# line_detect -> detect_lines); run_pipeline uses the registered names.
_PASS_MODULES = [
    "measure",
    "build_spans",
    "kerning",
    "line_detect",
]

for _mod in _PASS_MODULES:  # pragma: no cover - import side effects only
    import_module(f".{_mod}", __name__)

__all__ = list(_PASS_MODULES)


def __getattr__(name: str) -> Any:  # pragma: no cover - simple delegation
    if name in __all__:
        return import_module(f".{name}", __name__)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
