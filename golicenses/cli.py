"""CLI entry point: golicenses.

Subcommands:
    golicenses csv ./...                         # CSV report on stdout
    golicenses csv ./cmd/app -o licenses.csv     # save report to a file
"""

from __future__ import annotations

import click
import structlog

from golicenses.classifier import PhraseClassifier
from golicenses.core.config import Settings
from golicenses.core.logging import setup_logging
from golicenses.exceptions import GraphError
from golicenses.finder import FileSystemLicenseFinder
from golicenses.graph import GoListWalker
from golicenses.grouper import group_libraries
from golicenses.report import build_report, skipped_rows, write_csv

log = structlog.get_logger("golicenses.cli")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option(
    "--log-format",
    type=click.Choice(["console", "json"]),
    default=None,
    help="Log output format (default: $GOLICENSES_LOG_FORMAT or console)",
)
def main(verbose: bool, log_format: str | None) -> None:
    """golicenses: inventory the licenses of a Go module's dependencies."""
    setup_logging(level="DEBUG" if verbose else None, fmt=log_format)


@main.command("csv")
@click.argument("packages", nargs=-1, required=True)
@click.option(
    "--git-remote",
    "git_remotes",
    multiple=True,
    help="Remote Git repositories to try, in order (default: origin, upstream)",
)
@click.option("-o", "--output", default="-", help="File to save the license report to")
@click.option(
    "--skipped-libs-path",
    default="-",
    help="File to save the skipped libraries to",
)
@click.option(
    "--confidence-threshold",
    type=float,
    default=None,
    help="Minimum confidence required to identify a license (0-1)",
)
@click.option("--workers", type=int, default=None, help="Parallel lookups")
def csv_cmd(
    packages: tuple[str, ...],
    git_remotes: tuple[str, ...],
    output: str,
    skipped_libs_path: str,
    confidence_threshold: float | None,
    workers: int | None,
) -> None:
    """Print or save all licenses that apply to PACKAGES and their dependencies."""
    try:
        settings = Settings.from_env().with_overrides(
            git_remotes=git_remotes or None,
            confidence_threshold=confidence_threshold,
            workers=workers,
        )
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    click.echo(f"Generating CSV file for {packages[0]!r}...", err=True)

    classifier = PhraseClassifier(settings.confidence_threshold)
    try:
        graph = GoListWalker().load(list(packages))
        # Searches never climb out of the Go source roots.
        settings = settings.with_stop_dirs(graph.search_roots())
        finder = FileSystemLicenseFinder(classifier, stop_dirs=settings.stop_dirs)
        libraries, skipped = group_libraries(graph, finder, workers=settings.workers)
    except GraphError as e:
        raise click.ClickException(str(e)) from e

    rows = build_report(
        libraries,
        classifier,
        git_remotes=settings.git_remotes,
        stop_dirs=settings.stop_dirs,
        workers=settings.workers,
    )

    _write_report(output, rows)
    _write_report(skipped_libs_path, skipped_rows(skipped))

    log.info("cli.csv_done", libraries=len(rows), skipped=len(skipped))
    click.echo(
        f"Processed {len(rows)} Go licenses. Skipped {len(skipped)} Go libraries",
        err=True,
    )


def _write_report(path: str, rows: list) -> None:
    try:
        with click.open_file(path, "w") as out:
            write_csv(rows, out)
    except OSError as e:
        raise click.ClickException(f"cannot write {path}: {e}") from e


if __name__ == "__main__":
    main()
