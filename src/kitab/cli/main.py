"""Command-line interface for kitab.

Provides the import, apply and show commands.
"""

import contextlib
import importlib.metadata
import sys
from collections.abc import Iterator
from pathlib import Path

import click

from kitab.api import apply_path, import_path
from kitab.audit import AuditLogger, EventSink, NullSink
from kitab.config import KitabConfig, parse_digest_kinds
from kitab.digest import decode_urn
from kitab.errors import KitabError
from kitab.rdf import subject_digest
from kitab.store import FileStore

__all__ = ["cli"]

try:
    __version__ = importlib.metadata.version("kitab")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.3.0"  # Fallback for development


@contextlib.contextmanager
def _open_sink(log_path: str | None) -> Iterator[EventSink]:
    if log_path is None:
        yield NullSink()
        return
    with AuditLogger(Path(log_path)) as logger:
        yield logger


def _fail(message: str) -> None:
    click.secho(f"Error: {message}", fg="red", err=True)
    sys.exit(1)


store_option = click.option(
    "--store",
    "-s",
    "store_dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Store directory (default: $KITAB_STORE_DIR or $XDG_DATA_HOME/kitab/idx)",
)
log_option = click.option(
    "--log",
    "log_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Append diagnostic events to this JSONL file",
)
recursive_option = click.option(
    "--recursive",
    "-r",
    is_flag=True,
    help="Search recursively in subdirectories (for folder input)",
)
verbose_option = click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")


@click.group()
@click.version_option(version=__version__, prog_name="kitab")
def cli() -> None:
    """Content-addressed metadata store for local files.

    Use 'kitab COMMAND --help' for command-specific help.
    """


@cli.command(name="import")
@click.argument("input_path", type=click.Path(exists=True))
@click.option(
    "--digest",
    "-d",
    "digests",
    multiple=True,
    help="Digest URN (e.g. sha512:<hex>) to store bibliography entries under",
)
@store_option
@recursive_option
@log_option
@verbose_option
def import_cmd(
    input_path: str,
    digests: tuple[str, ...],
    store_dir: str | None,
    recursive: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Import metadata from INPUT_PATH into the store.

    INPUT_PATH can be a single file or a folder. Each file is read, in order,
    as extended attributes, serialized records, or a BibTeX bibliography.

    Examples
    --------
        kitab import paper.pdf
        kitab import refs.bib -d sha512:<hex>
        kitab import library/ --recursive
    """
    try:
        config = KitabConfig.from_env(store_dir=store_dir, recursive=recursive)
        explicit = [decode_urn(d) for d in digests]
    except (KitabError, ValueError) as e:
        _fail(str(e))
        return

    store = FileStore(config.store_dir)
    if verbose:
        click.echo(f"Store: {store.path}", err=True)

    try:
        with _open_sink(log_path) as sink:
            report = import_path(
                input_path, store, explicit, recursive=config.recursive, sink=sink
            )
    except (KitabError, OSError) as e:
        _fail(str(e))
        return

    for result in report.file_results:
        if result.ok:
            if verbose:
                click.echo(f"{result.filepath}: {result.strategy}", err=True)
                for urn in result.urns:
                    click.echo(f"  {urn}", err=True)
        else:
            click.secho(f"✗ {result.filepath}: {result.error}", fg="red", err=True)

    click.secho(
        f"✓ Stored {report.total_records} records from "
        f"{report.total_files - report.total_errors} of {report.total_files} files",
        fg="green" if report.total_errors == 0 else "yellow",
    )
    if report.total_errors:
        sys.exit(1)


@cli.command(name="apply")
@click.argument("input_path", type=click.Path(exists=True))
@click.option(
    "--digest-type",
    "-t",
    "digest_types",
    multiple=True,
    help="Digest scheme to match with, in order (default: sha512, sha256, md5)",
)
@store_option
@recursive_option
@log_option
@verbose_option
def apply_cmd(
    input_path: str,
    digest_types: tuple[str, ...],
    store_dir: str | None,
    recursive: bool,
    log_path: str | None,
    verbose: bool,
) -> None:
    """Write stored metadata onto the files under INPUT_PATH.

    Files are matched against the store by content digest; matches get their
    metadata written as extended attributes.
    """
    try:
        kinds = parse_digest_kinds(",".join(digest_types)) if digest_types else None
        config = KitabConfig.from_env(store_dir=store_dir, recursive=recursive, digest_kinds=kinds)
    except (KitabError, ValueError) as e:
        _fail(str(e))
        return

    store = FileStore(config.store_dir)
    try:
        with _open_sink(log_path) as sink:
            report = apply_path(
                input_path, store, config.digest_kinds, recursive=config.recursive, sink=sink
            )
    except (KitabError, OSError) as e:
        _fail(str(e))
        return

    for result in report.file_results:
        if result.error is not None:
            click.secho(f"✗ {result.filepath}: {result.error}", fg="red", err=True)
        elif verbose:
            click.echo(f"{result.filepath}: {result.urn or 'no match'}", err=True)

    click.secho(
        f"✓ Applied metadata to {report.total_matched} of {report.total_files} files",
        fg="green" if report.total_errors == 0 else "yellow",
    )
    if report.total_errors:
        sys.exit(1)


@cli.command(name="show")
@click.argument("key")
@store_option
def show_cmd(key: str, store_dir: str | None) -> None:
    """Print the stored record for KEY.

    KEY is a lowercase hex digest, a digest URN or a ``URN:`` subject.
    """
    try:
        config = KitabConfig.from_env(store_dir=store_dir)
        hex_key = key if ":" not in key else subject_digest(key).hex
        text = FileStore(config.store_dir).lookup(hex_key)
    except (KitabError, ValueError) as e:
        _fail(str(e))
        return

    if text is None:
        _fail(f"no record for {key}")
        return
    click.echo(text, nl=False)


if __name__ == "__main__":
    cli()
