from __future__ import annotations

import tickbar


def test_progress_bar_is_exported() -> None:
    bar = tickbar.ProgressBar(10, 10)
    assert bar.percent_complete() == 0
    assert callable(tickbar.monotonic_ms)


def test_exceptions_are_exported() -> None:
    from tickbar import InvalidArgument, TickbarConfigError, TickbarError  # noqa: PLC0415

    for exc in (TickbarError, InvalidArgument, TickbarConfigError):
        assert issubclass(exc, Exception)


def test_version_is_a_string() -> None:
    assert isinstance(tickbar.__version__, str)
    assert tickbar.__version__
