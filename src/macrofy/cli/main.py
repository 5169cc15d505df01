"""CLI entry point for macrofy."""
from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from macrofy import __version__, bootstrap
from macrofy.python.expander import ExpansionResult, expand_file
from macrofy.python.printer import config_statements, to_source
from macrofy.registry import WrapperRegistry, build_registry
from macrofy.reporting import TerminalReporter, build_reporters

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


class CliState:
    """Holds global CLI state."""

    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose


def _print_version(_: click.Context, __: click.Parameter, value: bool) -> None:
    if not value or click.get_current_context().resilient_parsing:
        return
    click.echo(f"macrofy {__version__}")
    raise click.exceptions.Exit()


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option("--verbose", is_flag=True, help="Enable verbose logging output.")
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show the macrofy version and exit.",
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Expand property wrapper annotations into plain Python properties."""

    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    bootstrap()
    ctx.obj = CliState(verbose=verbose)


@cli.command()
@click.argument("sources", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--registry",
    "registry_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML registry file with additional wrapper configs.",
)
@click.option("--no-builtins", is_flag=True, help="Do not register the built-in example wrappers.")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False), help="Write the expanded source here.")
@click.option("--in-place", is_flag=True, help="Rewrite each source file with its expansion.")
@click.option("--check", is_flag=True, help="Exit with status 1 when a source would change; write nothing.")
@click.option(
    "--report",
    "report_format",
    type=click.Choice(["terminal", "json"]),
    default="terminal",
    show_default=True,
    help="Report format (terminal by default).",
)
@click.option("--report-path", type=str, help="When --report json, write to this path.")
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
@click.pass_obj
def expand(
    state: CliState,
    sources: Tuple[str, ...],
    registry_path: Optional[str],
    no_builtins: bool,
    output_path: Optional[str],
    in_place: bool,
    check: bool,
    report_format: str,
    report_path: Optional[str],
    no_color: bool,
) -> None:
    """Expand wrapper types and wrapped properties in SOURCES."""

    if output_path and in_place:
        raise click.UsageError("--output and --in-place are mutually exclusive")
    if output_path and len(sources) > 1:
        raise click.UsageError("--output accepts a single source")
    registry = _load_registry(registry_path, no_builtins)
    manager = build_reporters(report_format, report_path, use_color=not no_color)
    manager.start(sources)
    results: List[ExpansionResult] = []
    for index, source in enumerate(sources, start=1):
        result = _expand(source, registry)
        results.append(result)
        manager.handle_result(source, result, index, len(sources))
        if check:
            continue
        if in_place:
            if result.changed:
                Path(source).write_text(result.source, encoding="utf-8")
        elif output_path:
            Path(output_path).write_text(result.source, encoding="utf-8")
        else:
            click.echo(result.source, nl=False)
    manager.complete()
    failed = any(not result.ok for result in results)
    if check and any(result.changed for result in results):
        failed = True
    raise click.exceptions.Exit(1 if failed else 0)


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False))
@click.option("--no-color", is_flag=True, help="Disable ANSI colors in terminal output.")
def introspect(source: str, no_color: bool) -> None:
    """Print the wrapper configs generated for @macrofy types in SOURCE."""

    result = _expand(source, WrapperRegistry())
    reporter = TerminalReporter(use_color=not no_color)
    for diagnostic in result.diagnostics:
        click.echo(reporter.format_diagnostic(diagnostic), err=True)
    for declaration in result.configs:
        click.echo(to_source(config_statements(declaration)))
    raise click.exceptions.Exit(0 if result.ok else 1)


@cli.command()
@click.option(
    "--registry",
    "registry_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML registry file with additional wrapper configs.",
)
@click.option("--no-builtins", is_flag=True, help="Do not list the built-in example wrappers.")
def wrappers(registry_path: Optional[str], no_builtins: bool) -> None:
    """List registered wrappers and their non-default facts."""

    registry = _load_registry(registry_path, no_builtins)
    if not len(registry):
        click.echo("No wrappers registered.")
        return
    for name, config in sorted(registry.items()):
        facts = ", ".join(f"{key}={value!r}" for key, value in config.non_default_facts())
        click.echo(f"{name}: {facts}" if facts else name)


def _load_registry(registry_path: Optional[str], no_builtins: bool) -> WrapperRegistry:
    try:
        return build_registry(registry_path, include_builtins=not no_builtins)
    except (OSError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc


def _expand(source: str, registry: WrapperRegistry) -> ExpansionResult:
    try:
        return expand_file(source, registry)
    except SyntaxError as exc:
        raise click.ClickException(f"{source}: cannot parse: {exc.msg} (line {exc.lineno})") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise click.ClickException(f"{source}: {exc}") from exc


def main(argv: Optional[list[str]] = None) -> int:
    """Program entry point for console_scripts shim."""

    argv = argv if argv is not None else sys.argv[1:]
    try:
        cli.main(args=argv, prog_name="macrofy", standalone_mode=True)
    except click.ClickException as err:  # pragma: no cover - click handles display
        err.show()
        return err.exit_code
    except SystemExit as exc:  # click may raise exit code
        return int(exc.code or 0)
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
