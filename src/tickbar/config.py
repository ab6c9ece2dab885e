"""Command-line configuration loading for Tickbar.

The library itself takes no configuration; this module only reads
`tickbar.toml` for the `tickbar` command and performs light validation.
"""

from __future__ import annotations

import math
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from tickbar.errors import TickbarConfigError

CONFIG_FILENAME = "tickbar.toml"


@dataclass(frozen=True)
class BarConfig:
    width: int = 40


@dataclass(frozen=True)
class DemoConfig:
    delay_s: float = 0.05


@dataclass(frozen=True)
class WatchConfig:
    debounce_ms: int = 200
    include_hidden: bool = False


@dataclass(frozen=True)
class TickbarConfig:
    version: int = 1
    bar: BarConfig = field(default_factory=BarConfig)
    demo: DemoConfig = field(default_factory=DemoConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)


def find_config_file(start: Path) -> Path | None:
    """Walk upward from `start` (file or directory) looking for `tickbar.toml`."""

    cur = start
    try:
        if cur.is_file():
            cur = cur.parent
    except OSError:
        cur = cur.parent

    cur = cur.resolve()
    while True:
        candidate = cur / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if cur.parent == cur:
            return None
        cur = cur.parent


def _as_table(value: Any, *, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise TickbarConfigError(f"Expected [{name}] to be a table.")
    return value


def _as_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise TickbarConfigError(f"Expected {name} to be a boolean.")
    return value


def _as_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TickbarConfigError(f"Expected {name} to be an integer.")
    return value


def _as_float(value: Any, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TickbarConfigError(f"Expected {name} to be a number.")
    if not math.isfinite(value):
        raise TickbarConfigError(f"Expected {name} to be a finite number.")
    return float(value)


def load_config(*, config_path: Path | None = None, start: Path | None = None) -> TickbarConfig:
    """Load and validate `tickbar.toml`.

    An explicit `config_path` must exist. Otherwise the file is searched for
    upward from `start` (default: the current directory) and defaults are
    returned when none is found.
    """

    if config_path is None:
        config_path = find_config_file(start if start is not None else Path.cwd())
        if config_path is None:
            return TickbarConfig()

    try:
        raw = config_path.read_bytes()
    except FileNotFoundError as e:
        raise TickbarConfigError(f"Missing {CONFIG_FILENAME} at: {config_path}") from e
    except OSError as e:
        raise TickbarConfigError(f"Failed reading config file: {config_path}") from e

    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise TickbarConfigError(f"Config is not valid UTF-8: {config_path}") from e
    except tomllib.TOMLDecodeError as e:
        raise TickbarConfigError(f"Invalid TOML in {config_path}: {e}") from e

    version = data.get("version", None)
    if version is None:
        raise TickbarConfigError(f"Missing required `version = 1` in {CONFIG_FILENAME}.")
    version_i = _as_int(version, name="version")
    if version_i != 1:
        raise TickbarConfigError(f"Unsupported config version: {version_i} (expected 1).")

    bar_tbl = _as_table(data.get("bar"), name="bar")
    demo_tbl = _as_table(data.get("demo"), name="demo")
    watch_tbl = _as_table(data.get("watch"), name="watch")
    defaults = TickbarConfig()

    if "width" in bar_tbl:
        width = _as_int(bar_tbl["width"], name="bar.width")
    else:
        width = defaults.bar.width

    if "delay_s" in demo_tbl:
        delay_s = _as_float(demo_tbl["delay_s"], name="demo.delay_s")
    else:
        delay_s = defaults.demo.delay_s

    if "debounce_ms" in watch_tbl:
        debounce_ms = _as_int(watch_tbl["debounce_ms"], name="watch.debounce_ms")
    else:
        debounce_ms = defaults.watch.debounce_ms

    if "include_hidden" in watch_tbl:
        include_hidden = _as_bool(watch_tbl["include_hidden"], name="watch.include_hidden")
    else:
        include_hidden = defaults.watch.include_hidden

    # Validation
    if width < 1:
        raise TickbarConfigError("Invalid config: bar.width must be >= 1.")
    if delay_s < 0:
        raise TickbarConfigError("Invalid config: demo.delay_s must be >= 0.")
    if debounce_ms < 0:
        raise TickbarConfigError("Invalid config: watch.debounce_ms must be >= 0.")

    return TickbarConfig(
        version=version_i,
        bar=BarConfig(width=width),
        demo=DemoConfig(delay_s=delay_s),
        watch=WatchConfig(debounce_ms=debounce_ms, include_hidden=include_hidden),
    )
