"""``jbouquet`` command line: configuration lookup diagnostics.

Purpose
-------
Answer "which file would my service load?" from a shell: show the effective
search list, find the file on disk, or print what the finder resolves as
text, a YAML map, or properties.

Contents
--------
* :func:`cli` – root group; ``--traceback`` switches ``lib_cli_exit_tools``
  to full tracebacks.
* :func:`cli_info` – installed distribution metadata.
* :func:`cli_paths` – effective search list as JSON.
* :func:`cli_locate` – filesystem location of a file.
* :func:`cli_read` – resolved content of a file.
* :func:`main` – console-script entry point returning an exit code.

System Role
-----------
Talks only to :class:`jbouquet.core.ConfigurationFinder`. Errors such as
``NotFound`` and ``ParseError`` propagate to ``lib_cli_exit_tools``, which
prints them and chooses the exit code.
"""

from __future__ import annotations

import json
import sys
from contextlib import contextmanager
from importlib import metadata
from typing import Final, Iterator, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .core import APP_NAME, ConfigurationFinder

HELP_OPTIONS = {"help_option_names": ["-h", "--help"]}
FORMAT_CHOICES: Final[tuple[str, ...]] = ("raw", "map", "properties")

#: Characters of traceback text printed without and with ``--traceback``.
_ERROR_TEXT_LIMIT: Final[int] = 500
_TRACEBACK_TEXT_LIMIT: Final[int] = 10_000

search_path_option = click.option(
    "--path",
    "paths",
    multiple=True,
    metavar="TEMPLATE",
    help="Location template searched after eds.config and before the defaults; repeatable",
)


def _installed_version() -> str:
    try:
        return metadata.version(APP_NAME)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(help="Show where configuration files are found and what they contain", context_settings=HELP_OPTIONS)
@click.version_option(version=_installed_version(), prog_name=APP_NAME, message=f"{APP_NAME} %(version)s")
@click.option("--traceback/--no-traceback", default=False, help="Print the full traceback when a command fails")
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=HELP_OPTIONS)
def cli_info() -> None:
    """Show the installed version and Python requirement."""

    try:
        meta = metadata.metadata(APP_NAME)
    except metadata.PackageNotFoundError:
        click.echo(f"{APP_NAME} (metadata unavailable)")
        return
    rows = [
        ("Version", meta.get("Version", _installed_version())),
        ("Requires-Python", meta.get("Requires-Python")),
        ("Summary", meta.get("Summary")),
    ]
    click.echo(f"{meta.get('Name', APP_NAME)}")
    for label, value in rows:
        if value:
            click.echo(f"  {label:<16}: {value}")


@cli.command("paths", context_settings=HELP_OPTIONS)
@search_path_option
def cli_paths(paths: Sequence[str]) -> None:
    """Print the search list in lookup order as a JSON array."""

    click.echo(json.dumps(list(ConfigurationFinder(*paths).search_paths), indent=2))


@cli.command("locate", context_settings=HELP_OPTIONS)
@click.argument("filename")
@search_path_option
def cli_locate(filename: str, paths: Sequence[str]) -> None:
    """Print the absolute path of FILENAME, or exit 1 when no filesystem template holds it."""

    location = ConfigurationFinder(*paths).locate(filename)
    if location is None:
        click.echo(f"{filename} was not found on the filesystem", err=True)
        raise SystemExit(1)
    click.echo(location)


@cli.command("read", context_settings=HELP_OPTIONS)
@click.argument("filename")
@search_path_option
@click.option(
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="raw",
    show_default=True,
    help="raw text, YAML map as JSON, or properties as JSON",
)
@click.option("--indent", type=int, default=None, help="JSON indent for map and properties output")
def cli_read(filename: str, paths: Sequence[str], output_format: str, indent: Optional[int]) -> None:
    """Resolve FILENAME through the search list and print it."""

    finder = ConfigurationFinder(*paths)
    output_format = output_format.lower()
    if output_format == "map":
        click.echo(json.dumps(finder.as_map(filename), indent=indent, separators=(",", ":"), ensure_ascii=False))
    elif output_format == "properties":
        click.echo(finder.as_properties(filename).to_json(indent=indent))
    else:
        click.echo(finder.raw(filename), nl=False)


@contextmanager
def _preserved_traceback_settings(restore: bool) -> Iterator[None]:
    config = lib_cli_exit_tools.config
    saved = (getattr(config, "traceback", False), getattr(config, "traceback_force_color", False))
    try:
        yield
    finally:
        if restore:
            config.traceback, config.traceback_force_color = saved


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Run the CLI and return its exit code.

    ``--traceback`` only lasts for this call unless *restore_traceback* is
    false.
    """

    with _preserved_traceback_settings(restore_traceback):
        try:
            return lib_cli_exit_tools.run_cli(cli, argv=None if argv is None else list(argv), prog_name=APP_NAME)
        except BaseException as exc:  # noqa: BLE001 - lib_cli_exit_tools prints and maps every failure
            verbose = lib_cli_exit_tools.config.traceback
            lib_cli_exit_tools.print_exception_message(
                trace_back=verbose,
                length_limit=_TRACEBACK_TEXT_LIMIT if verbose else _ERROR_TEXT_LIMIT,
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
