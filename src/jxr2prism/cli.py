"""CLI interface for jxr2prism."""

import logging
from pathlib import Path
from typing import Annotated

import typer

from jxr2prism import __version__
from jxr2prism.convert.converter import SourceRenderConverter
from jxr2prism.convert.session import open_session, schedule_conversion
from jxr2prism.fileio import atomic_write_text
from jxr2prism.highlight.engine import PygmentsHighlightEngine
from jxr2prism.ingest.feature_logger import log_converter_configuration, log_engine_availability
from jxr2prism.model.options import ConverterOptions, SiteOptions
from jxr2prism.site.landing import generate_landing_pages
from jxr2prism.site.processor import process_site
from jxr2prism.ui.progress import ProgressReporter

app = typer.Typer(
    name="jxr2prism",
    help="Re-highlight JXR source pages with Prism-style markup and theme Maven sites.",
    no_args_is_help=True,
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging based on verbosity level."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        force=True,
    )


def _build_converter(language: str, anchor_mode: str) -> SourceRenderConverter:
    try:
        options = ConverterOptions.from_cli(language=language, anchor_mode=anchor_mode)
    except ValueError as exc:
        typer.echo(f"Error: {exc}")
        raise typer.Exit(1) from exc

    engine = PygmentsHighlightEngine()
    log_engine_availability(engine, options.language)
    log_converter_configuration(options)
    return SourceRenderConverter(engine, options)


@app.command()
def convert(
    html_file: Annotated[
        Path,
        typer.Argument(
            help="JXR source page to convert",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the result here instead of in place"),
    ] = None,
    language: Annotated[
        str,
        typer.Option("--language", help="Grammar used to re-highlight the source"),
    ] = "java",
    anchor_mode: Annotated[
        str,
        typer.Option(
            "--anchor-mode",
            help="Line anchor naming: 'sequential' (L1..LN) or 'preserve' (original names)",
        ),
    ] = "sequential",
) -> None:
    """
    Convert the JXR source block of a single HTML page.

    Examples:

        # Convert in place
        jxr2prism convert target/site/xref/com/example/Foo.html

        # Write to a separate file, keeping the original anchor names
        jxr2prism convert Foo.html -o Foo.prism.html --anchor-mode preserve
    """
    converter = _build_converter(language, anchor_mode)

    try:
        session = open_session(html_file)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Error: cannot read {html_file}: {exc}")
        raise typer.Exit(1) from exc
    schedule_conversion(session, converter)
    result = session.results[-1]

    typer.echo(f"📄 {html_file}: {result.status.value}")
    if result.message:
        typer.echo(f"   {result.message}")

    if result.changed and session.document is not None:
        target = output or html_file
        atomic_write_text(target, session.document.render())
        typer.echo(f"✅ Wrote {target} ({result.line_count} lines)")
    elif output is not None:
        typer.echo("   Nothing converted; output file not written.")
    session.discard()


@app.command()
def site(
    build_dir: Annotated[
        Path,
        typer.Argument(
            help="Maven build directory containing staging/ or site/",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    styles_dir: Annotated[
        str,
        typer.Option("--styles-dir", help="Directory (under the site root) holding the theme assets"),
    ] = "terminal-styles",
    convert_jxr: Annotated[
        bool,
        typer.Option("--convert/--no-convert", help="Re-highlight JXR source pages (default: yes)"),
    ] = True,
    inject: Annotated[
        bool,
        typer.Option("--inject/--no-inject", help="Inject theme stylesheet and script (default: yes)"),
    ] = True,
    skip: Annotated[
        bool,
        typer.Option("--skip", help="Do nothing; for build profiles that disable theming"),
    ] = False,
    language: Annotated[
        str,
        typer.Option("--language", help="Grammar used to re-highlight JXR sources"),
    ] = "java",
    anchor_mode: Annotated[
        str,
        typer.Option("--anchor-mode", help="Line anchor naming: 'sequential' or 'preserve'"),
    ] = "sequential",
) -> None:
    """Process every page of a generated site: convert JXR pages and inject styles."""
    options = SiteOptions(styles_dir=styles_dir, skip=skip, convert_jxr=convert_jxr, inject=inject)
    converter = _build_converter(language, anchor_mode) if convert_jxr else None

    with ProgressReporter() as pr:
        report = process_site(build_dir, options, converter, on_progress=pr.emit)

    if report.root is None:
        typer.echo("ℹ️  Nothing processed.")
        return
    typer.echo(f"📁 Site root: {report.root}")
    typer.echo(
        f"✅ {report.pages} pages: {report.converted} converted, "
        f"{report.injected} injected, {report.failed} failed"
    )


@app.command()
def landing(
    build_dir: Annotated[
        Path,
        typer.Argument(help="Aggregator build directory receiving the landing pages"),
    ],
    modules: Annotated[
        list[Path],
        typer.Option(
            "--module",
            "-m",
            help="Module build directory to scan for reports (repeatable)",
            exists=True,
            file_okay=False,
            dir_okay=True,
        ),
    ],
    project_name: Annotated[
        str,
        typer.Option("--project-name", help="Project name shown on the landing pages"),
    ] = "",
) -> None:
    """Generate coverage.html and source-xref.html landing pages."""
    name = project_name or build_dir.resolve().parent.name
    written = generate_landing_pages(build_dir, modules, name)
    if not written:
        typer.echo("ℹ️  No modules with coverage or xref reports found.")
        return
    for path in written:
        typer.echo(f"📝 Wrote {path}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"jxr2prism version {__version__}")


def version_callback(value: bool) -> None:
    """Version callback for --version flag."""
    if value:
        typer.echo(f"jxr2prism version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
) -> None:
    """
    jxr2prism - Theme Maven documentation sites and re-highlight JXR sources.

    JXR cross-reference pages are re-highlighted with Pygments into Prism-style
    token markup with a separate line-number column, and every page gets the
    theme stylesheet for its type (javadoc, coverage, jxr, landing, site).

    For detailed usage, run: jxr2prism convert --help
    """
    setup_logging(verbose)


if __name__ == "__main__":  # pragma: no cover - executed only via `python -m`
    app()
