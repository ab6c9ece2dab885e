from __future__ import annotations

import argparse
import asyncio
import logging
import math
import sys
import time
from pathlib import Path

from tickbar import __version__
from tickbar.config import TickbarConfig, load_config
from tickbar.diagnostics import format_error_with_hint
from tickbar.errors import InvalidArgument, TickbarError
from tickbar.progress import ProgressBar

logger = logging.getLogger("tickbar.cli")

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_MISSING_DEPENDENCY = 3
EXIT_INTERRUPTED = 130


def _add_bar_flags(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--width",
        type=int,
        default=None,
        help="Number of cells in the bar body (defaults to [bar] width, else 40).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tickbar")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr.")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to tickbar.toml (defaults to searching upward from cwd).",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    render_p = subparsers.add_parser("render", help="Print a single progress frame.")
    render_p.add_argument("--total", type=float, required=True, help="Work units in a full bar.")
    render_p.add_argument("--completed", type=float, default=0.0, help="Work units done.")
    _add_bar_flags(render_p)

    demo_p = subparsers.add_parser("demo", help="Animate a simulated workload.")
    demo_p.add_argument("--total", type=float, default=100.0, help="Work units in a full bar.")
    demo_p.add_argument("--step", type=float, default=1.0, help="Work units added per frame.")
    demo_p.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between frames (defaults to [demo] delay_s, else 0.05).",
    )
    _add_bar_flags(demo_p)

    watch_p = subparsers.add_parser(
        "watch", help="Tick once per file added to a directory until the bar is full."
    )
    watch_p.add_argument("path", type=str, help="Directory to watch.")
    watch_p.add_argument("--total", type=float, required=True, help="Files expected.")
    watch_p.add_argument("--debounce-ms", type=int, default=None, help="Debounce override.")
    watch_p.add_argument(
        "--include-hidden",
        action="store_true",
        default=None,
        help="Count dot-files and files under dot-directories.",
    )
    _add_bar_flags(watch_p)

    return parser


def parse_args(argv: list[str]) -> argparse.Namespace:
    return _build_parser().parse_args(argv)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load_config(args: argparse.Namespace) -> TickbarConfig:
    config_path = Path(args.config).resolve() if args.config else None
    return load_config(config_path=config_path)


def _eprint(msg: str) -> None:
    print(msg, file=sys.stderr)


def _write_frame(frame: str) -> None:
    sys.stdout.write(frame)
    sys.stdout.flush()


def _width(args: argparse.Namespace, cfg: TickbarConfig) -> int:
    return args.width if args.width is not None else cfg.bar.width


def cmd_render(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        bar = ProgressBar(args.total, _width(args, cfg), completed=args.completed)
    except TickbarError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE

    bar.print()
    return EXIT_OK


def cmd_demo(args: argparse.Namespace) -> int:
    try:
        cfg = _load_config(args)
        bar = ProgressBar(args.total, _width(args, cfg))
        if not math.isfinite(args.step) or args.step <= 0:
            raise InvalidArgument(f"step must be a finite number over 0 (got {args.step!r})")
        delay = args.delay if args.delay is not None else cfg.demo.delay_s
        if not math.isfinite(delay) or delay < 0:
            raise InvalidArgument(f"delay must be a finite number, 0 or above (got {delay!r})")
    except TickbarError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE

    try:
        _write_frame(bar.render())
        while bar.percent_complete() < 100:
            if delay:
                time.sleep(delay)
            bar.add(args.step)
            _write_frame(bar.render())
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    finally:
        _write_frame("\n")
    return EXIT_OK


def cmd_watch(args: argparse.Namespace) -> int:
    from tickbar import watcher

    try:
        watcher.check_watchfiles_available()
    except ImportError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_MISSING_DEPENDENCY

    try:
        cfg = _load_config(args)
        root = Path(args.path).resolve()
        if not root.is_dir():
            raise InvalidArgument(f"path must be an existing directory (got {args.path!r})")
        bar = ProgressBar(args.total, _width(args, cfg))
    except TickbarError as e:
        _eprint(format_error_with_hint(e))
        return EXIT_USAGE

    debounce_ms = args.debounce_ms if args.debounce_ms is not None else cfg.watch.debounce_ms
    include_hidden = (
        args.include_hidden if args.include_hidden is not None else cfg.watch.include_hidden
    )
    logger.debug(
        "watching %s (debounce=%sms, include_hidden=%s)", root, debounce_ms, include_hidden
    )

    try:
        counted = asyncio.run(
            watcher.run_watch_loop(
                changes_iter=watcher.make_watchfiles_iter(root, debounce_ms=debounce_ms),
                bar=bar,
                root=root,
                include_hidden=include_hidden,
                on_frame=_write_frame,
            )
        )
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED
    finally:
        _write_frame("\n")

    logger.debug("watch finished after %d file(s)", counted)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    try:
        args = parse_args(list(sys.argv[1:] if argv is None else argv))
    except SystemExit as e:
        # argparse uses SystemExit for --help/--version and parse errors.
        code = e.code
        return int(code) if isinstance(code, int) else EXIT_USAGE

    _configure_logging(bool(args.verbose))

    if args.command == "render":
        return cmd_render(args)
    if args.command == "demo":
        return cmd_demo(args)
    if args.command == "watch":
        return cmd_watch(args)

    return EXIT_USAGE


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
