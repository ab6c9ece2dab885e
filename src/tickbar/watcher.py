"""Watch mode: tick a progress bar for every file that lands in a directory."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Iterable
from pathlib import Path
from typing import Any

from tickbar.progress import ProgressBar

logger = logging.getLogger("tickbar.watcher")

# watchfiles.Change.added; Change is an IntEnum so plain ints compare equal.
_CHANGE_ADDED = 1


def check_watchfiles_available() -> None:
    """Raise ImportError with a helpful message if watchfiles is not installed."""
    import importlib

    try:
        importlib.import_module("watchfiles")
    except ImportError:
        raise ImportError(
            "watchfiles is required for watch mode. Install it with: pip install tickbar[watch]"
        ) from None


def _is_hidden(path: Path, root: Path) -> bool:
    return any(part.startswith(".") for part in path.relative_to(root).parts)


def filter_added_files(
    raw_changes: Iterable[tuple[Any, str]],
    *,
    root: Path,
    include_hidden: bool,
) -> frozenset[Path]:
    """Keep paths under `root` that were added, dropping hidden ones unless asked."""
    kept: set[Path] = set()
    for change, raw_path in raw_changes:
        if change != _CHANGE_ADDED:
            continue
        p = Path(raw_path)
        if not p.is_relative_to(root):
            continue
        if not include_hidden and _is_hidden(p, root):
            continue
        kept.add(p)
    return frozenset(kept)


async def run_watch_loop(
    *,
    changes_iter: AsyncIterator[set[tuple[Any, str]]],
    bar: ProgressBar,
    root: Path,
    include_hidden: bool,
    on_frame: Callable[[str], None],
) -> int:
    """Consume change batches until the bar is full. Returns the files counted."""
    counted = 0
    on_frame(bar.render())
    if bar.percent_complete() >= 100:
        return counted

    async for raw_changes in changes_iter:
        added = filter_added_files(raw_changes, root=root, include_hidden=include_hidden)
        if not added:
            continue

        logger.debug("counted %d new file(s): %s", len(added), sorted(str(p) for p in added))
        bar.add(len(added))
        counted += len(added)
        on_frame(bar.render())
        if bar.percent_complete() >= 100:
            break

    return counted


def make_watchfiles_iter(
    path: Path,
    *,
    debounce_ms: int,
) -> AsyncIterator[set[tuple[Any, str]]]:
    """Create an async iterator using watchfiles.awatch()."""
    import watchfiles  # type: ignore[import-untyped]

    return watchfiles.awatch(path, debounce=debounce_ms, recursive=True)
