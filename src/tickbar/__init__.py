from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from tickbar.errors import InvalidArgument, TickbarConfigError, TickbarError
from tickbar.progress import ProgressBar, monotonic_ms


def _package_version() -> str:
    try:
        return version("tickbar")
    except PackageNotFoundError:
        # Running from a source checkout, or otherwise not installed.
        return "0.0.0"


__version__ = _package_version()

__all__ = [
    "InvalidArgument",
    "ProgressBar",
    "TickbarConfigError",
    "TickbarError",
    "__version__",
    "monotonic_ms",
]
