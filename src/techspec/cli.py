"""
CLI for tech spec generation.

Provides command-line interface for rendering tech specs from answers
files, converting Markdown to wiki markup, and browsing the section guide.

Usage:
    techspec render payments.yaml -o docs/payments.md
    techspec render payments.yaml --format wiki
    techspec convert docs/payments.md -o payments.wiki
    techspec sections
    techspec guide risk
    techspec questions
    techspec rules
    techspec init -o payments.yaml
"""

import sys
from pathlib import Path

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from techspec import __version__
from techspec.builder import TechSpecBuilder
from techspec.config import TechSpecConfig
from techspec.converter import MarkupConverter, conversion_table
from techspec.errors import MissingRequiredSectionError, TechSpecError
from techspec.guide import guide_for, questionnaire, skeleton_content
from techspec.logging import configure_logging
from techspec.renderers import OUTPUT_FORMATS, GuideRenderer
from techspec.schema import iter_sections
from techspec.settings import TechSpecSettings

console = Console(stderr=True)


def _fail(error: TechSpecError) -> None:
    """Report a library error and exit with status 1."""
    console.print(f"[bold red]❌ {escape(error.message)}[/bold red]")
    if isinstance(error, MissingRequiredSectionError):
        for key in error.missing:
            console.print(f"  - {key}")
    context = error.context.to_dict()
    if context:
        for key, value in context.items():
            console.print(f"  {key}: {escape(str(value))}")
    sys.exit(1)


def _emit(text: str) -> None:
    click.echo(text, nl=False)


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML configuration file (overrides TECHSPEC_CONFIG_FILE).",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides TECHSPEC_LOG_LEVEL).",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, log_level: str | None):
    """Tech spec generation CLI.

    Render tech spec documents from answers files and convert them to
    wiki markup.
    """
    settings = TechSpecSettings()
    if config_file is not None:
        settings.config_file = config_file
    try:
        configure_logging(level=log_level or settings.log_level, json_format=settings.log_json)
        config = settings.load_config()
    except TechSpecError as e:
        _fail(e)

    ctx.obj = {"config": config, "settings": settings}


@cli.command()
@click.argument("content_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write. Prints to stdout if not specified.",
)
@click.option(
    "--format", "-f", "fmt",
    type=click.Choice(OUTPUT_FORMATS),
    default="markdown",
    show_default=True,
    help="Output markup.",
)
@click.pass_obj
def render(obj: dict, content_file: Path, output: Path | None, fmt: str):
    """Render a tech spec from a YAML or JSON answers file.

    Examples:
        techspec render payments.yaml -o docs/payments.md
        techspec render payments.yaml --format wiki
    """
    builder = TechSpecBuilder(obj["config"])

    try:
        result = builder.build(content_file, output, fmt=fmt)
    except TechSpecError as e:
        _fail(e)

    if output is None:
        _emit(result.content)
    else:
        console.print(f"✅ {result.output_path} ({result.size:,} bytes, {len(result.sections)} sections)")


@cli.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="File to write. Prints to stdout if not specified.",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on unrecognized markup instead of passing it through.",
)
@click.pass_obj
def convert(obj: dict, input_file: Path, output: Path | None, strict: bool):
    """Convert a Markdown file to wiki markup."""
    builder = TechSpecBuilder(obj["config"])

    try:
        result = builder.convert_file(input_file, output, strict=True if strict else None)
    except TechSpecError as e:
        _fail(e)

    if output is None:
        _emit(result.content)
    else:
        console.print(f"✅ {result.output_path} ({result.size:,} bytes)")

    if result.unknown_lines:
        lines = ", ".join(str(n) for n in result.unknown_lines)
        console.print(f"[yellow]⚠️  Passed through unrecognized markup on line(s) {lines}[/yellow]")


@cli.command()
def sections():
    """List the document sections in order."""
    table = Table(title="Tech Spec Sections")
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Title")
    table.add_column("Requirement")

    for number, spec in enumerate(iter_sections(), start=1):
        style = "bold" if spec.mandatory else "dim"
        table.add_row(str(number), spec.key, spec.title, f"[{style}]{spec.requirement.value}[/{style}]")

    Console().print(table)


@cli.command()
@click.argument("keys", nargs=-1)
@click.option("--no-conversion", is_flag=True, help="Omit the wiki markup conversion table.")
@click.pass_obj
def guide(obj: dict, keys: tuple, no_conversion: bool):
    """Print the section guide (all sections, or only KEYS) as Markdown."""
    renderer = GuideRenderer(obj["config"])
    try:
        text = renderer.render(list(keys) or None, include_conversion=not no_conversion and not keys)
    except TechSpecError as e:
        _fail(e)
    _emit(text)


@cli.command()
@click.option("--section", "-s", "section", help="Only questions for this section key.")
def questions(section: str | None):
    """Print the questions that gather each section's content."""
    try:
        pairs = (
            [(section, q) for q in guide_for(section).questions]
            if section
            else questionnaire()
        )
    except TechSpecError as e:
        _fail(e)

    out = Console()
    current = None
    for key, question in pairs:
        if key != current:
            out.print(f"\n[bold cyan]{key}[/bold cyan]")
            current = key
        out.print(f"  • {question}")


@cli.command()
@click.pass_obj
def rules(obj: dict):
    """Show the Markdown to wiki markup conversion table."""
    config: TechSpecConfig = obj["config"]
    table = Table(title="Markdown → Wiki Markup")
    table.add_column("Construct", style="cyan")
    table.add_column("Markdown")
    table.add_column("Wiki")

    for construct, source, target in conversion_table(MarkupConverter.from_config(config)):
        table.add_row(construct, escape(source), escape(target))

    Console().print(table)


@cli.command()
@click.option(
    "--output", "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path("techspec.yaml"),
    show_default=True,
    help="Answers file to create.",
)
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def init(output: Path, force: bool):
    """Write a starter answers file with every required section."""
    if output.exists() and not force:
        console.print(f"[bold red]❌ {output} already exists (use --force to overwrite)[/bold red]")
        sys.exit(1)

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(
        yaml.safe_dump(skeleton_content(), sort_keys=False, allow_unicode=True),
        encoding="utf-8",
    )
    console.print(f"✅ Wrote {output}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
