"""CLI application entry point and command routing for fsadmin.

This module is the **sole error boundary** for the entire application.
It catches :class:`~fsadmin.exceptions.FsAdminError`, ``KeyboardInterrupt``,
and any unexpected ``Exception``, rendering user-friendly messages via Rich
and returning well-defined exit codes.

Architecture notes
------------------
* No business logic lives here: parsing of command flags, argument
  building and launching belong to the core and infrastructure layers.
* ``print()`` is forbidden outside the CLI layer; Rich console is used
  exclusively.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Mapping

from fsadmin import exit_codes
from fsadmin.cli.console import configure_logging, console
from fsadmin.core.protocols import ProcessLauncher
from fsadmin.core.registry import CommandRegistry
from fsadmin.exceptions import FsAdminError, NonZeroExitError, UnknownCommandError
from fsadmin.version import __version__

logger = logging.getLogger(__name__)

PROG = "fsadmin"
DOCTOR = "doctor"
_HELP_FLAGS = ("-h", "--help")


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser(groups: tuple[str, ...]) -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    Only global options are parsed here; everything after the group name
    is handed to the dispatcher, which parses it against the command's
    own declaration:

    * ``fsadmin <group> <command> [flags] <args>``
    * ``fsadmin <group>``  — list the group's commands
    * ``fsadmin doctor``   — environment diagnostics
    * ``fsadmin --version``
    """
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Filesystem administration for the distributed store.",
        epilog=f"groups: {', '.join((*groups, DOCTOR))}",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log the resolved command line and launch details",
    )
    parser.add_argument(
        "group",
        nargs="?",
        default=None,
        help="command group (e.g. 'fs'), or 'doctor' to run diagnostics.",
    )
    parser.add_argument(
        "rest",
        nargs=argparse.REMAINDER,
        help=argparse.SUPPRESS,
    )
    return parser


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_error(exc: FsAdminError) -> None:
    """Print *exc* and its hint to stderr."""
    console.print(f"[bold red]Error:[/bold red] {exc}")
    if exc.hint:
        console.print(f"[yellow]Hint:[/yellow] {exc.hint}")


def _print_command_table(registry: CommandRegistry, group: str) -> None:
    """List the commands of *group* with their usage lines."""
    descriptors = registry.in_group(group)
    try:
        from rich.table import Table
    except ModuleNotFoundError:
        print(f"\n{PROG} {group} commands", file=sys.stderr)
        for descriptor in descriptors:
            print(f"  {descriptor.usage_line():<40} {descriptor.summary}", file=sys.stderr)
        print(file=sys.stderr)
        return

    table = Table(
        title=f"{PROG} {group}",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Command", style="bold", min_width=10)
    table.add_column("Usage", min_width=20)
    table.add_column("Description")
    for descriptor in descriptors:
        table.add_row(descriptor.name, descriptor.usage_line(), descriptor.summary)

    console.print()
    console.print(table)
    console.print(f"[dim]Run '{PROG} {group} <command> --help' for the flags of a command.[/dim]")
    console.print()


# ---------------------------------------------------------------------------
# Command dispatch
# ---------------------------------------------------------------------------

def _handle_group(
    registry: CommandRegistry,
    group: str,
    rest: list[str],
    *,
    launcher: ProcessLauncher | None,
    environ: Mapping[str, str] | None,
) -> int:
    """Run ``<group> <command> [args]`` through the dispatcher.

    Flow:
    1. Resolve the runtime configuration from the environment.
    2. Build the dispatcher around the registry and the launcher.
    3. Execute exactly once and surface the outcome.
    """
    from fsadmin.core.dispatcher import Dispatcher
    from fsadmin.infra.config import RuntimeConfig
    from fsadmin.infra.launcher import JavaLauncher

    if not rest or rest[0] in _HELP_FLAGS:
        _print_command_table(registry, group)
        return exit_codes.SUCCESS

    command_name, *raw_args = rest
    if command_name in registry and registry.get(command_name).group != group:
        raise UnknownCommandError(
            f"{group} {command_name}",
            available=tuple(d.name for d in registry.in_group(group)),
        )

    config = RuntimeConfig.from_env(environ)
    if launcher is None:
        launcher = JavaLauncher(config)
    dispatcher = Dispatcher(
        registry,
        launcher,
        debug_port=config.debug_port,
        prog=PROG,
    )

    outcome = dispatcher.execute(command_name, raw_args)
    if outcome.error is not None:
        if isinstance(outcome.error, NonZeroExitError):
            # The external process has already reported its own failure.
            logger.info("%s", outcome.error)
        else:
            render_error(outcome.error)
    return outcome.exit_code


def _handle_doctor(environ: Mapping[str, str] | None) -> int:
    """Dispatch the ``doctor`` diagnostics command."""
    from fsadmin.cli.doctor import run_doctor

    return run_doctor(environ)


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(
    argv: list[str] | None = None,
    *,
    registry: CommandRegistry | None = None,
    launcher: ProcessLauncher | None = None,
    environ: Mapping[str, str] | None = None,
) -> int:
    """Run the fsadmin CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    registry:
        Commands to expose.  Defaults to the built-in catalog.
    launcher:
        Launch backend.  Defaults to a :class:`JavaLauncher` configured
        from *environ*.
    environ:
        Environment used for runtime configuration.  Defaults to
        ``os.environ``.

    Returns
    -------
    int
        OS process exit code.
    """
    if registry is None:
        from fsadmin.commands import build_registry

        registry = build_registry()

    groups = registry.groups()
    parser = _build_parser(groups)
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.group is None:
        parser.print_help()
        return exit_codes.SUCCESS

    group: str = args.group

    if group == DOCTOR:
        return _handle_doctor(environ)

    if group not in groups:
        raise UnknownCommandError(group, available=(*groups, DOCTOR))

    return _handle_group(registry, group, args.rest, launcher=launcher, environ=environ)


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.
    """
    try:
        code = main()
        sys.exit(code)
    except FsAdminError as exc:
        render_error(exc)
        sys.exit(exit_codes.exit_code_for(exc))
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        sys.exit(exit_codes.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        console.print(
            "[bold red]Unexpected error.[/bold red] "
            "Please report this issue.\n"
            f"  {type(exc).__name__}: {exc}"
        )
        sys.exit(exit_codes.UNEXPECTED_ERROR)
