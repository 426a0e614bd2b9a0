"""Typer application and CLI entry point for openapi2proto.

Commands:

* ``resolve`` -- load an OpenAPI document, inline every external ``$ref``,
  and print the result as JSON or YAML.
* ``inspect`` -- load and validate a document and list its endpoints.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Known :class:`~openapi2proto.exceptions.Openapi2ProtoError`
failures exit with their mapped code; anything else is written to a crash log
under the data directory.

See Also:
    :mod:`openapi2proto.config`: Settings precedence resolution.
    :mod:`openapi2proto.output`: Output formatting initialised in :func:`main_callback`.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from openapi2proto import __version__
from openapi2proto.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="openapi2proto",
    help="Resolve OpenAPI documents on the way to Protocol Buffers.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"openapi2proto {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
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
) -> None:
    """Root callback executed before every sub-command.

    Installs the global :class:`~openapi2proto.output.OutputManager` and,
    with ``--verbose``, routes library debug logging to stderr.
    """
    from openapi2proto.output import OutputManager, set_output

    set_output(OutputManager(no_color=no_color, quiet=quiet, verbose=verbose))
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="[debug] %(name)s: %(message)s",
            stream=sys.stderr,
        )


@app.command("resolve")
def resolve_command(
    spec: str = typer.Argument(..., help="Path or URL of the OpenAPI document."),
    dir: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Base directory for relative $ref locators."
    ),
    as_yaml: bool = typer.Option(False, "--yaml", help="Print YAML instead of JSON."),
) -> None:
    """Print SPEC with every external $ref inlined.

    Example::

        openapi2proto resolve api/openapi.yaml --dir api/shared --yaml
    """
    from openapi2proto.config import resolve_settings
    from openapi2proto.exceptions import Openapi2ProtoError
    from openapi2proto.output import OutputFormat, OutputManager, error, get_output
    from openapi2proto.parser import resolve_document

    try:
        settings = resolve_settings(cli_dir=dir)
        tree = resolve_document(spec, dir=settings.dir)
    except Openapi2ProtoError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    current = get_output()
    writer = OutputManager(
        format=OutputFormat.YAML if as_yaml else OutputFormat.JSON,
        no_color=True,
        quiet=current.is_quiet,
        verbose=current.is_verbose,
    )
    writer.format_document(tree)


@app.command("inspect")
def inspect_command(
    spec: str = typer.Argument(..., help="Path or URL of the OpenAPI document."),
    dir: Optional[str] = typer.Option(
        None, "--dir", "-d", help="Base directory for relative $ref locators."
    ),
) -> None:
    """List the endpoints declared in SPEC.

    Example::

        openapi2proto inspect api/openapi.yaml
    """
    from openapi2proto.config import resolve_settings
    from openapi2proto.exceptions import Openapi2ProtoError
    from openapi2proto.output import error, info, print_table
    from openapi2proto.parser import load_spec

    try:
        settings = resolve_settings(cli_dir=dir)
        parsed = load_spec(spec, dir=settings.dir)
    except Openapi2ProtoError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    rows = [
        [endpoint.verb.upper(), endpoint.path, endpoint.operation_id or "-"]
        for endpoint in parsed.endpoints()
    ]
    if not rows:
        info("No endpoints defined in this spec.")
        return
    title = parsed.info.title or parsed.file_name
    print_table(
        ["Method", "Path", "Operation"], rows, title=f"{title} -- Endpoints ({len(rows)})"
    )


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from openapi2proto.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(traceback.format_exc())
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``openapi2proto`` console script.

    Unhandled :class:`~openapi2proto.exceptions.Openapi2ProtoError` instances
    cause a clean exit with the error's ``exit_code``. All other exceptions
    produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised (either by Typer or explicitly).
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from openapi2proto.exceptions import Openapi2ProtoError
        from openapi2proto.output import error

        if isinstance(exc, Openapi2ProtoError):
            error(str(exc))
            sys.exit(exc.exit_code)
        else:
            log_path = _write_crash_log(exc)
            error(f"Unexpected error. Debug log: {log_path}")
            sys.exit(EXIT_GENERIC_FAILURE)
