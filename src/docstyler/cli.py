"""docstyler CLI entrypoint."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from docstyler.errors import DocstylerError
from docstyler.layout import LAYOUT_STYLES
from docstyler.pipeline import ProcessingOptions, convert
from docstyler.renderer.base import OUTPUT_FORMATS

LOG = logging.getLogger("docstyler")


def setup_logging(verbose: bool, debug: bool) -> None:
    level = logging.DEBUG if debug else (logging.INFO if verbose else logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")
    LOG.setLevel(level)


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None, help="Output path (default: <title>.<format>)")
@click.option(
    "--style",
    type=click.Choice(LAYOUT_STYLES, case_sensitive=False),
    default="modern",
    show_default=True,
    help="Layout preset",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS, case_sensitive=False),
    default=None,
    help="Output format (default: from --output suffix, else pdf)",
)
@click.option("--toc", is_flag=True, help="Insert a table of contents")
@click.option("--harvard", is_flag=True, help="Normalize citations to Harvard (Author, Year)")
@click.option("--download-images/--no-download-images", default=True, show_default=True, help="Download linked images")
@click.option("--ai-review", is_flag=True, help="Score rendered pages with a vision model")
@click.option("--margin", type=float, default=None, help="Page margin in cm")
@click.option("--font-family", type=str, default=None, help="Font for titles, headings and body")
@click.option("--verbose", "-v", is_flag=True, help="Verbose progress logs")
@click.option("--debug", is_flag=True, help="Debug logs")
def main(
    input_path: Path,
    output: Path | None,
    style: str,
    output_format: str | None,
    toc: bool,
    harvard: bool,
    download_images: bool,
    ai_review: bool,
    margin: float | None,
    font_family: str | None,
    verbose: bool,
    debug: bool,
) -> None:
    """Convert a Markdown or Word document into a styled PDF or DOCX file."""
    setup_logging(verbose, debug)

    output_format = (output_format or _format_from_output(output)).lower()
    options = ProcessingOptions(
        table_of_contents=toc,
        harvard_citations=harvard,
        download_images=download_images,
        ai_review=ai_review,
        margin=margin,
        font_family=font_family,
    )

    try:
        result = convert(input_path, style=style.lower(), output_format=output_format, options=options)
    except DocstylerError as exc:
        raise click.ClickException(str(exc)) from exc

    target = output or Path.cwd() / result.output.filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(result.output.data)

    click.echo(f"Rendered: {target}")
    for review in result.ai_review_results:
        click.echo(f"Page {review.page}: score {review.score}/10")
        for issue in review.issues:
            click.echo(f"  issue: {issue}")
        for suggestion in review.suggestions:
            click.echo(f"  suggestion: {suggestion}")


def _format_from_output(output: Path | None) -> str:
    if output is not None and output.suffix.lower() == ".docx":
        return "docx"
    return "pdf"


if __name__ == "__main__":  # pragma: no cover
    main()
