"""Exception and warning types raised by kernsplit."""

from __future__ import annotations

import warnings


class KernsplitError(Exception):
    """Base class for kernsplit errors."""


class ContainerValidationError(KernsplitError, TypeError):
    """The split target is not a Tag attached to a rendered Page."""


class ConfigurationWarning(UserWarning):
    """An option or setting was ignored or fell back to its default."""


def warn_config(message: str, *, stacklevel: int = 3) -> None:
    """Emit ``message`` as a :class:`ConfigurationWarning`."""
    warnings.warn(message, ConfigurationWarning, stacklevel=stacklevel)


__all__ = [
    "ConfigurationWarning",
    "ContainerValidationError",
    "KernsplitError",
    "warn_config",
]
