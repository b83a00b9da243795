"""``fsadmin doctor`` — environment diagnostics command.

Gathers system information and renders a Rich table summarising
whether the runtime environment can launch filesystem commands.

This module lives in the CLI layer; it may import from ``infra``
and ``core``, and it renders via Rich.  It purely collects and
displays diagnostic data.
"""

from __future__ import annotations

import platform
import sys
from collections.abc import Mapping

from fsadmin import exit_codes
from fsadmin.cli.console import console
from fsadmin.exceptions import ConfigurationError
from fsadmin.infra.config import RuntimeConfig
from fsadmin.infra.java_detector import JavaStatus, detect_java
from fsadmin.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = "[green]OK[/green]" if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _config_check(environ: Mapping[str, str] | None) -> tuple[tuple[str, str, str], RuntimeConfig | None]:
    """Return the configuration row and the parsed config, if valid."""
    try:
        config = RuntimeConfig.from_env(environ)
    except ConfigurationError as exc:
        return ("Config", str(exc), "[red]FAIL[/red]"), None
    return ("Config", "environment OK", "[green]OK[/green]"), config


def _java_check(status: JavaStatus) -> tuple[str, str, str]:
    """Return (label, value, status) for the Java runtime row."""
    if status.found:
        path_str = str(status.path) if status.path else "found"
        return "Java", path_str, "[green]OK[/green]"
    return "Java", "not found", "[red]FAIL[/red]"


def _home_check(config: RuntimeConfig) -> tuple[str, str, str]:
    """Return (label, value, status) for the install root row."""
    if config.home.is_dir():
        return "Home", str(config.home), "[green]OK[/green]"
    return "Home", f"{config.home} (missing)", "[yellow]WARN[/yellow]"


def _os_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the OS row."""
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    release = platform.release()
    machine = platform.machine()
    value = f"{system_display} {release} ({machine})"
    return "OS", value, "[green]OK[/green]"


def _fsadmin_version_check() -> tuple[str, str, str]:
    """Return (label, value, status) for the fsadmin version row."""
    return "fsadmin", __version__, "[green]OK[/green]"


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    if "FAIL" in status:
        return "FAIL"
    if "WARN" in status:
        return "WARN"
    if "OK" in status:
        return "OK"
    return status


def _print_plain_doctor_table(checks: list[tuple[str, str, str]]) -> None:
    """Render doctor output without Rich."""
    print("\nfsadmin doctor", file=sys.stderr)
    print("=" * 56, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<32} {'Status':<8}", file=sys.stderr)
    print("-" * 56, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<32} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def run_doctor(environ: Mapping[str, str] | None = None) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when all critical checks pass,
        :data:`exit_codes.GENERAL_ERROR` if a critical check fails.
    """
    config_row, config = _config_check(environ)
    checks = [
        _fsadmin_version_check(),
        _python_version_check(),
        config_row,
    ]
    java_status: JavaStatus | None = None
    if config is not None:
        java_status = detect_java(config.java)
        checks.append(_java_check(java_status))
        checks.append(_home_check(config))
    checks.append(_os_check())

    has_failure = any("FAIL" in status for _, _, status in checks)

    rich_available = True
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        rich_available = False

    if rich_available:
        table = Table(
            title="fsadmin doctor",
            show_header=True,
            header_style="bold cyan",
            border_style="dim",
        )
        table.add_column("Component", style="bold", min_width=12)
        table.add_column("Value", min_width=20)
        table.add_column("Status", justify="center", min_width=8)

        for label, value, status in checks:
            table.add_row(label, value, status)

        console.print()
        console.print(table)
        console.print()
    else:
        _print_plain_doctor_table(checks)

    # Show Java install guidance when missing.
    if java_status is not None and not java_status.found and java_status.install_commands:
        if rich_available:
            console.print("[yellow]No Java runtime was found.[/yellow]")
            console.print("Install using one of the following commands:\n")
            for cmd in java_status.install_commands:
                console.print(f"  [bold]{cmd}[/bold]")
            console.print()
        else:
            print("No Java runtime was found.", file=sys.stderr)
            print("Install using one of the following commands:\n", file=sys.stderr)
            for cmd in java_status.install_commands:
                print(f"  {cmd}", file=sys.stderr)
            print(file=sys.stderr)

    if has_failure:
        if rich_available:
            console.print("[bold red]Some checks failed.[/bold red]")
        else:
            print("Some checks failed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR

    if rich_available:
        console.print("[bold green]All checks passed.[/bold green]")
    else:
        print("All checks passed.", file=sys.stderr)
    return exit_codes.SUCCESS
