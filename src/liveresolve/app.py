"""Typer application and CLI error boundary for liveresolve.

This module wires together the top-level Typer application, registers the
built-in sub-commands (``resolvers``, ``simulate``, ``config``) and defines
:func:`main`, the console-script entry point declared in ``pyproject.toml``.

:func:`main` is the only place that turns an exception into a process exit
status. Anything a command lets escape is handed to the resolver registry;
a recognised error is explained with its template and exit code, anything
else falls back to the error's own text and the generic failure code.

See Also:
    :mod:`liveresolve.boundary`: The fallback policy.
    :mod:`liveresolve.config`: Configuration resolution used by
    :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
from typing import Any, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from liveresolve import __version__
from liveresolve.exit_codes import EXIT_INTERRUPTED


app = typer.Typer(
    name="liveresolve",
    help="Explain live-apply errors with actionable messages.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

# ------------------------------------------------------------------ #
# Commands
# ------------------------------------------------------------------ #

from liveresolve.commands.config import config_app  # noqa: E402
from liveresolve.commands.resolvers import resolvers_command  # noqa: E402
from liveresolve.commands.simulate import simulate_command  # noqa: E402

app.command("resolvers")(resolvers_command)
app.command("simulate")(simulate_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"liveresolve {__version__}")
        raise typer.Exit()


def _configure_logging(level_name: Optional[str], verbose: bool) -> None:
    """Send log records to stderr through Rich at the effective level.

    ``--verbose`` forces DEBUG; otherwise the configured level is used, with
    WARNING as the default.
    """
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, (level_name or "WARNING").upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        format="%(name)s: %(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    json_output: bool = typer.Option(
        False, "--json", help="JSON output format."
    ),
    plain_output: bool = typer.Option(
        False, "--plain", help="Plain text output."
    ),
    no_color: bool = typer.Option(
        False, "--no-color", help="Disable color output."
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable debug output."
    ),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="Log level: DEBUG, INFO, WARNING, ERROR."
    ),
) -> None:
    """Root callback executed before every sub-command.

    Resolves the effective configuration, configures logging, installs the
    global :class:`~liveresolve.output.OutputManager`, and makes sure a
    sealed resolver registry is available as ``ctx.obj["registry"]``.

    Args:
        ctx: Typer invocation context.
        version: If ``True``, print the version string and exit.
        json_output: Force JSON output format.
        plain_output: Force plain-text output format.
        no_color: Disable all colour and Rich markup.
        quiet: Suppress non-essential diagnostic output.
        verbose: Enable debug-level diagnostic output and logging.
        log_level: Logging level override (highest precedence).
    """
    from liveresolve.config import resolve_config
    from liveresolve.output import OutputFormat, OutputManager, set_output
    from liveresolve.resolver import build_registry

    cli_format: Optional[str] = None
    if json_output:
        cli_format = OutputFormat.JSON.value
    elif plain_output:
        cli_format = OutputFormat.PLAIN.value

    ctx.ensure_object(dict)

    # Install a manager from the flags alone first, so that a broken config
    # file is still reported in the requested format.
    set_output(
        OutputManager(
            format=OutputFormat(cli_format or OutputFormat.AUTO.value),
            no_color=no_color,
            quiet=quiet,
            verbose=verbose,
        )
    )

    config = resolve_config(cli_format=cli_format, cli_log_level=log_level)
    _configure_logging(config.log_level, verbose)

    try:
        fmt = OutputFormat(config.output.format)
    except ValueError:
        fmt = OutputFormat.AUTO
    set_output(OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose))

    ctx.obj["config"] = config
    if "registry" not in ctx.obj:
        ctx.obj["registry"] = build_registry(config, discover=config.discover_resolvers)


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point invoked by the ``liveresolve`` console script.

    Runs the Typer application with a shared state dict as the root context
    object. If a command raises, the registry built during the root callback
    (or a default one, if startup failed before it was built) explains the
    error and the process exits with the resolved code.

    Args:
        argv: Explicit argument list. Defaults to ``sys.argv[1:]``.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    from liveresolve.boundary import report_error
    from liveresolve.resolver import build_registry

    _setup_signal_handlers()
    state: dict[str, Any] = {}
    try:
        app(args=argv, obj=state)
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except Exception as exc:
        registry = state.get("registry")
        if registry is None:
            registry = build_registry()
        logging.getLogger(__name__).debug("Unhandled error", exc_info=exc)
        sys.exit(report_error(exc, registry))
