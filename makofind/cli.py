"""CLI interface for makofind."""

import io
import logging
import sys
from typing import TextIO

import click

from makofind import __version__
from makofind.config import Config
from makofind.manifest import ManifestRunner

EXIT_FAILURE = 1


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("roots", nargs=-1, type=click.Path(path_type=str))
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of directory levels held open at once",
)
@click.option("--fail-fast", is_flag=True, help="Stop at the first root that aborts")
@click.option("--progress-interval", type=int, default=None, help="Log status every N files")
@click.option("-v", "--verbose", is_flag=True, help="Log debug details to stderr")
@click.version_option(version=__version__, prog_name="makofind")
def cli(
    roots: tuple[str, ...],
    max_depth: int | None,
    fail_fast: bool,
    progress_interval: int | None,
    verbose: bool,
) -> None:
    """Print a manifest line for every file under each ROOT.

    Each line holds the path, logical size in bytes, modification time and
    physical size in kilobytes, separated by tabs. Symbolic links are not
    followed and mount points are not crossed.
    """
    config = Config()

    if not roots:
        click.echo("usage: makofind dir1 dir2 ... dirN", err=True)
        sys.exit(EXIT_FAILURE)

    _configure_logging(config, verbose)

    walker_config = config.walker
    runner = ManifestRunner(
        _manifest_stream(),
        max_depth=max_depth or walker_config.max_depth,
        fail_fast=fail_fast or walker_config.fail_fast,
        progress_interval=(
            progress_interval if progress_interval is not None else walker_config.progress_interval
        ),
    )
    result = runner.run(roots)

    if result.failed:
        sys.exit(EXIT_FAILURE)


def _manifest_stream() -> TextIO:
    # Paths that are not valid UTF-8 carry surrogate escapes; write their raw bytes.
    if isinstance(sys.stdout, io.TextIOWrapper):
        sys.stdout.reconfigure(errors="surrogateescape")
    return sys.stdout


def _configure_logging(config: Config, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=config.log_format,
        stream=sys.stderr,
    )


def main() -> None:
    """Entry point for the CLI."""
    cli(standalone_mode=True)  # pylint: disable=no-value-for-parameter


if __name__ == "__main__":
    main()
