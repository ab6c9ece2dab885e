"""Error formatting and actionable hints for Tickbar CLI output.

Keep this module small and dependency-light: it is imported by the CLI layer
and only depends on the error hierarchy.
"""

from __future__ import annotations

from tickbar.config import CONFIG_FILENAME
from tickbar.errors import InvalidArgument, TickbarConfigError


def format_hint(exc: BaseException) -> str | None:
    """Return an actionable hint for a known error, or None."""
    msg = str(exc)

    if isinstance(exc, TickbarConfigError):
        if "version" in msg:
            return f"add `version = 1` at the top of {CONFIG_FILENAME}"
        if msg.startswith(f"Missing {CONFIG_FILENAME}"):
            return "check the --config path, or drop it to search upward from the cwd"
        return None

    if isinstance(exc, InvalidArgument):
        if msg.startswith("width"):
            return "pass --width with a positive integer or set [bar] width in tickbar.toml"
        if msg.startswith("total"):
            return "pass --total with a positive number"
        return None

    if isinstance(exc, ImportError) and "watchfiles" in msg and "pip install" not in msg:
        return "install the optional extra: pip install tickbar[watch]"

    return None


def format_error_with_hint(exc: BaseException) -> str:
    """Format error message + optional hint for stderr output."""
    msg = (str(exc) or repr(exc)).strip()

    result = f"error: {msg}"
    hint = format_hint(exc)
    if hint:
        result += f"\nhint: {hint}"
    return result
