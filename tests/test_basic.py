from __future__ import annotations

import subprocess
import sys


def test_module_invocation_without_command_is_usage_error() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "tickbar"],
        check=False,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 2
    assert "usage: tickbar" in proc.stderr


def test_cli_version_flag() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "tickbar", "--version"],
        check=False,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 0
    assert proc.stdout.startswith("tickbar ")


def test_module_invocation_renders_a_frame() -> None:
    proc = subprocess.run(
        [sys.executable, "-m", "tickbar", "render", "--total", "10", "--width", "10"],
        check=False,
        text=True,
        capture_output=True,
    )
    assert proc.returncode == 0
    assert proc.stdout.startswith("0%    [>         ] 0/10  | Estimated time: Calculating...")
