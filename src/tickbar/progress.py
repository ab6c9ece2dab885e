"""Single-line terminal progress bar with a windowed time-remaining estimate.

A rendered frame looks like::

    50%   [=====>    ] 5/10  | Estimated time: 4s Left\r

The bar holds no locks; callers that tick it from several threads must
serialize access themselves.
"""

from __future__ import annotations

import logging
import math
import sys
import time
import warnings
from collections.abc import Callable
from typing import IO

from tickbar.errors import InvalidArgument

logger = logging.getLogger("tickbar.progress")

ESTIMATE_WINDOW_MS = 5000

Clock = Callable[[], int]


def monotonic_ms() -> int:
    """Milliseconds from the process monotonic clock."""

    return time.monotonic_ns() // 1_000_000


def _check_real(value: object, *, name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgument(f"{name} must be a real number (got {value!r})")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # ints beyond float range
        finite = False
    if not finite:
        raise InvalidArgument(f"{name} must be finite (got {value!r})")
    return value


def _check_positive(value: object, *, name: str, what: str = "over 0") -> float:
    v = _check_real(value, name=name)
    if v <= 0:
        raise InvalidArgument(f"{name} must be {what} (got {value!r})")
    return v


def _check_non_negative(value: object, *, name: str) -> float:
    v = _check_real(value, name=name)
    if v < 0:
        raise InvalidArgument(f"{name} must be 0 or above (got {value!r})")
    return v


def _round_half_away(x: float) -> int:
    magnitude = abs(x)
    whole = math.floor(magnitude)
    # The subtraction is exact; adding 0.5 first is not.
    if magnitude - whole >= 0.5:
        whole += 1
    return -whole if x < 0 else whole


def _deprecated(name: str, instead: str) -> None:
    warnings.warn(
        f"ProgressBar.{name}() is deprecated; {instead}",
        DeprecationWarning,
        stacklevel=3,
    )


class ProgressBar:
    """Stateful renderer for a fixed-shape progress line.

    `total` is the number of work units a full bar represents and `width` is
    the number of cells in the bar body. Progress is accumulated with `add()`;
    `render()` returns the current frame and, at most once every five seconds,
    refreshes the time-remaining estimate from the motion seen in that window.

    `clock` returns monotonic milliseconds and defaults to `monotonic_ms`.
    `stream` is where `print()` writes; it defaults to `sys.stdout` at call time.
    """

    def __init__(
        self,
        total: float,
        width: int,
        *,
        completed: float = 0,
        clock: Clock | None = None,
        stream: IO[str] | None = None,
    ) -> None:
        self._completed = _check_non_negative(completed, name="completed")
        self._total = _check_positive(total, name="total")
        if isinstance(width, bool) or not isinstance(width, int):
            raise InvalidArgument(f"width must be an integer (got {width!r})")
        if width <= 0:
            raise InvalidArgument(f"width must be over 0 (got {width!r})")
        self._width = width

        self._clock: Clock = clock if clock is not None else monotonic_ms
        self._stream = stream

        self._window_start = self._clock()
        # Seeded with 1 rather than 0.
        self._window_delta: float = 1
        self._last_estimate: int | None = None

    def __repr__(self) -> str:
        return (
            f"ProgressBar(completed={self._completed!r}, total={self._total!r}, "
            f"width={self._width!r})"
        )

    # -- accounting -------------------------------------------------------

    def add(self, delta: float | None = None) -> ProgressBar:
        """Add `delta` work units (one when omitted). Returns the bar."""

        if delta is None:
            delta = 1
        else:
            delta = _check_positive(delta, name="delta", what="over 0 to add")
        completed = self._completed + delta
        if not math.isfinite(completed):
            raise InvalidArgument(f"delta overflows the completed amount (got {delta!r})")
        self._completed = completed
        self._window_delta += delta
        return self

    def remove(self, delta: float | None = None) -> ProgressBar:
        """Take back `delta` work units (one when omitted).

        Deprecated: progress should only move forward. `completed` is clamped
        at zero.
        """

        _deprecated("remove", "progress should only be added")
        if delta is None:
            delta = 1
        else:
            delta = _check_positive(delta, name="delta", what="over 0 to remove")
        self._window_delta += delta
        completed = self._completed - delta
        if completed < 0:
            logger.debug("remove(%s) clamped completed at 0 (was %s)", delta, self._completed)
            completed = 0
        self._completed = completed
        return self

    def set_completed(self, value: float) -> ProgressBar:
        """Overwrite the completed amount. Deprecated: use `add()` instead.

        The estimation window is left untouched.
        """

        _deprecated("set_completed", "use add() instead")
        self._completed = _check_non_negative(value, name="completed")
        return self

    def set_total(self, value: float) -> ProgressBar:
        """Overwrite the total. Deprecated: keep the total fixed after construction."""

        _deprecated("set_total", "keep the total fixed after construction")
        self._total = _check_positive(value, name="total")
        return self

    # -- queries ----------------------------------------------------------

    @property
    def completed(self) -> float:
        return self._completed

    @property
    def total(self) -> float:
        return self._total

    @property
    def width(self) -> int:
        return self._width

    def percent_complete(self) -> float:
        """Completed share of the total in percent, capped at 100."""

        return min(100.0, self._completed / self._total * 100)

    def get_total(self) -> float:
        return self._total

    # -- rendering --------------------------------------------------------

    def _tick_clock(self, now: int) -> None:
        elapsed_ms = now - self._window_start
        if elapsed_ms < ESTIMATE_WINDOW_MS:
            return

        if self._window_delta > 0:
            remaining = int(self._total - self._completed)
            estimate = int((elapsed_ms / self._window_delta) * remaining) // 1000
        else:
            # Nothing moved during the window; there is no rate to project.
            estimate = 0

        logger.debug(
            "estimate refreshed: %sms window, delta=%s, estimate=%ss",
            elapsed_ms,
            self._window_delta,
            estimate,
        )
        self._last_estimate = estimate if estimate > 0 else None
        self._window_start = now
        self._window_delta = 0

    def _body(self, pct: float) -> str:
        bars = math.floor(self._completed / self._total * self._width)
        cells: list[str] = []
        for i in range(self._width):
            if i == bars:
                cells.append(">")
            elif i > bars:
                cells.append(" ")
            else:
                cells.append("=")
        if pct == 100:
            cells.append(">")
        return "".join(cells)

    def _counter(self, pct: float) -> str:
        total_int = int(self._total)
        full = f"{total_int}/{total_int}"
        if pct >= 100:
            return full
        return f"{int(self._completed)}/{total_int}".ljust(len(full))

    def render(self) -> str:
        """Return the current frame, ending in a single carriage return.

        Also refreshes the time-remaining estimate when the current
        estimation window has run for five seconds.
        """

        self._tick_clock(self._clock())

        pct = self.percent_complete()
        shown = str(_round_half_away(pct))
        prefix = f"{shown}%" + " " * max(0, 4 - len(shown))

        if self._last_estimate is None:
            estimate = "Calculating..."
        else:
            estimate = f"{self._last_estimate}s Left"

        return (
            f"{prefix} [{self._body(pct)}] {self._counter(pct)}"
            f" | Estimated time: {estimate}\r"
        )

    def print(self) -> None:
        """Write the current frame plus a line terminator to the output stream."""

        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(self.render() + "\n")
        stream.flush()
