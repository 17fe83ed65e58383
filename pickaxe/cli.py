"""
pickaxe command line.

Usage:
    pickaxe NOTES_DIR
    pickaxe NOTES_DIR --output-dir build/guides
    pickaxe NOTES_DIR --no-format -v
"""

import asyncio
import logging
import shutil
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from pickaxe import __version__
from pickaxe.config import PipelineConfig, load_config
from pickaxe.core.coordinator import Coordinator
from pickaxe.core.discovery import VaultDiscovery
from pickaxe.core.models import ConfigError, DiscoveryError, NoteOutput, RunReport
from pickaxe.core.permalinks import build_index
from pickaxe.core.processor import TransformPipeline
from pickaxe.core.writer import OutputWriter
from pickaxe.transforms import formatters
from pickaxe.transforms.frontmatter import FrontmatterTransform, annotate, compose, select

EXIT_FAILURES = 1
EXIT_FATAL = 2


def setup_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def build_frontmatter_transform(config: PipelineConfig) -> Optional[FrontmatterTransform]:
    """Chain the frontmatter transforms the configuration asks for, if any."""
    transforms: List[FrontmatterTransform] = []
    if config.frontmatter_keep is not None or config.frontmatter_remove is not None or config.frontmatter_add:
        transforms.append(select(
            keep=config.frontmatter_keep,
            drop=config.frontmatter_remove,
            extra=config.frontmatter_add,
        ))
    if config.annotate_frontmatter:
        transforms.append(annotate(config.title_case))
    return compose(*transforms) if transforms else None


def build_pipeline(config: PipelineConfig, index, no_format: bool = False) -> TransformPipeline:
    """Assemble a TransformPipeline from configuration."""
    formatter = formatters.passthrough() if no_format else formatters.command(config.formatter_command)
    frontmatter_transform = build_frontmatter_transform(config)
    return TransformPipeline(
        index,
        formatter=formatter,
        frontmatter_transform=frontmatter_transform,
        block_name=config.block_name,
        code_import=config.code_import,
        warn_on_missing_link=config.warn_on_missing_link,
    )


async def transform_tree(
    root: Path,
    config: PipelineConfig,
    no_format: bool = False,
    output_dir: Optional[Path] = None,
) -> RunReport:
    """Index the corpus, transform every note under root, optionally write results.

    Raises:
        DiscoveryError: if the notes or the permalink corpus cannot be walked
    """
    permalink_root = Path(config.permalink_root) if config.permalink_root else root
    index = build_index(permalink_root, ignore=config.ignore, extensions=config.extensions)

    discovery = VaultDiscovery(root, ignore=config.ignore, extensions=config.extensions)
    pipeline = build_pipeline(config, index, no_format=no_format)
    report = await Coordinator(pipeline.process, config.concurrency).run(discovery.iter_notes())

    if output_dir is not None:
        writer = OutputWriter(output_dir, extension=config.output_extension)
        report.replace(await writer.write_all(report.successes))
    return report


def echo_report(report: RunReport, show_content: bool = False) -> None:
    """Echo every result to stdout, and the failures again to stderr.

    With show_content, each transformed module follows its status line.
    """
    for result in report.results:
        if isinstance(result, NoteOutput):
            click.echo(f"ok      {result.path}")
            if show_content:
                click.echo(result.content)
        else:
            click.echo(f"failed  {result.path} ({result.kind})")

    failures = report.failures
    if failures:
        click.secho(f"{len(failures)} of {len(report.results)} notes failed:", fg="red", err=True)
        for failure in failures:
            click.echo(f"  {failure.error}", err=True)
    else:
        click.secho(f"{len(report.results)} notes transformed", fg="green")


@click.command()
@click.version_option(version=__version__, prog_name="pickaxe")
@click.argument("root", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to pickaxe.yaml (default: ./pickaxe.yaml if present).",
)
@click.option("--concurrency", "-j", type=click.IntRange(min=1), default=None, help="Notes processed at once.")
@click.option("--ignore", "ignore", multiple=True, help="Glob pattern to skip (repeatable).")
@click.option(
    "--permalink-root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory whose notes wiki-links resolve against (default: ROOT).",
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Write generated modules here. Nothing is written without it.",
)
@click.option("--no-format", is_flag=True, help="Skip the external formatter.")
@click.option("--print", "show_content", is_flag=True, help="Echo each generated module to stdout.")
@click.option("--verbose", "-v", count=True, help="Increase log verbosity (-v, -vv).")
def main(
    root: Path,
    config_path: Optional[Path],
    concurrency: Optional[int],
    ignore: Tuple[str, ...],
    permalink_root: Optional[Path],
    output_dir: Optional[Path],
    no_format: bool,
    show_content: bool,
    verbose: int,
) -> None:
    """Transform the Markdown notes under ROOT into JSX component modules."""
    setup_logging(verbose)

    try:
        config = load_config(config_path).merged(
            concurrency=concurrency,
            ignore=list(ignore) or None,
            permalink_root=str(permalink_root) if permalink_root else None,
        )
    except ConfigError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_FATAL)

    if not no_format and shutil.which(config.formatter_command[0]) is None:
        click.secho(
            f"Error: formatter {config.formatter_command[0]!r} not found on PATH "
            "(install it or pass --no-format)",
            fg="red", err=True,
        )
        sys.exit(EXIT_FATAL)

    try:
        report = asyncio.run(transform_tree(root, config, no_format=no_format, output_dir=output_dir))
    except DiscoveryError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(EXIT_FATAL)

    echo_report(report, show_content=show_content)
    if not report.ok:
        sys.exit(EXIT_FAILURES)


if __name__ == "__main__":
    main()
