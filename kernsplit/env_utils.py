import os

_TRUTHY = {"true", "1", "yes", "on", "reduce"}


def prefers_reduced_motion() -> bool:
    """Return True if the host asks for reduced motion via env var."""
    val = os.getenv("KERNSPLIT_REDUCED_MOTION")
    if val is None:
        return False
    return val.lower() in _TRUTHY
