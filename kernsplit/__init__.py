# Auto-register passes on package import (e.g., when importing any submodule)
from . import passes  # noqa: F401
from .config import SplitSettings, load_settings
from .errors import ConfigurationWarning, ContainerValidationError, KernsplitError
from .metrics import FitzMetrics, FontMetrics, TableMetrics
from .options import SplitOptions
from .page import Page
from .split import SplitResult, split_text

__all__: list[str] = [
    "ConfigurationWarning",
    "ContainerValidationError",
    "FitzMetrics",
    "FontMetrics",
    "KernsplitError",
    "Page",
    "SplitOptions",
    "SplitResult",
    "SplitSettings",
    "TableMetrics",
    "load_settings",
    "split_text",
]
