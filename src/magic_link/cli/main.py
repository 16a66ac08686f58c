"""CLI entry point for markdown-magic-link.

Invoked as::

    magic-link [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m magic_link.cli.main

Commands
--------
render      Render a Markdown file to HTML with magic links
resolve     Show how a single token payload resolves
handlers    List registered handlers
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from magic_link.config import ConfigError, MagicLinkOptions, load_options
from magic_link.core.engine import MagicLinkEngine
from magic_link.plugins.registry import PluginNotFoundError

console = Console()
err_console = Console(stderr=True)

ENGINES = ("markdown-it", "python-markdown")


def _read_source(path: str) -> str:
    """Read a Markdown source file, exiting on error."""
    try:
        return Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)


def _options_or_exit(config: str | None) -> MagicLinkOptions:
    """Load options from ``config``, printing errors and exiting on failure."""
    if config is None:
        return MagicLinkOptions()
    try:
        return load_options(config)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] Config file not found: {config}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {config}: {exc}")
        sys.exit(1)
    except ConfigError as exc:
        err_console.print(f"[red]Config error[/red] in {config}: {exc}")
        sys.exit(1)


def _engine_or_exit(options: MagicLinkOptions) -> MagicLinkEngine:
    """Build the engine, exiting if the handler chain names unknown handlers."""
    try:
        return MagicLinkEngine(options)
    except PluginNotFoundError as exc:
        err_console.print(f"[red]Error:[/red] {exc.args[0]}")
        sys.exit(1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="markdown-magic-link")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable debug logging")
def cli(verbose: bool) -> None:
    """Magic links for Markdown: {@user}, {Name|url} and friends."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
        )


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from magic_link import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]markdown-magic-link[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# handlers command
# ---------------------------------------------------------------------------


@cli.command(name="handlers")
def handlers_command() -> None:
    """List built-in handlers and those installed via entry-points."""
    from magic_link.plugins.registry import DEFAULT_HANDLER_NAMES, handler_registry

    handler_registry.load_entrypoints()

    table = Table(title="Registered handlers")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Class")
    table.add_column("Order")
    for name in handler_registry:
        cls = handler_registry.get(name)
        position = (
            str(DEFAULT_HANDLER_NAMES.index(name) + 1)
            if name in DEFAULT_HANDLER_NAMES
            else "-"
        )
        table.add_row(name, f"{cls.__module__}.{cls.__qualname__}", position)
    console.print(table)


# ---------------------------------------------------------------------------
# resolve command
# ---------------------------------------------------------------------------


@cli.command(name="resolve")
@click.argument("payload")
@click.option("--config", "-c", default=None, help="YAML or JSON options file")
def resolve_command(payload: str, config: str | None) -> None:
    """Show how PAYLOAD (the text between the braces) resolves.

    Examples:

    \b
        magic-link resolve "@antfu"
        magic-link resolve "VueUse|https://vueuse.org"
        magic-link resolve "@bilibili:lu-jiejie" --config links.yaml
    """
    engine = _engine_or_exit(_options_or_exit(config))
    resolved = engine.resolve(payload)

    if resolved is None:
        console.print(
            f"[yellow]Unresolved[/yellow] {escape('{' + payload + '}')} is left as literal text",
            highlight=False,
        )
        sys.exit(1)

    table = Table(title=escape("{" + payload + "}"), show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value", overflow="fold")
    table.add_row("text", resolved.text)
    table.add_row("link", resolved.link)
    table.add_row("type", resolved.type)
    table.add_row("class", resolved.class_name)
    table.add_row("image", resolved.image_url)
    console.print(table)


# ---------------------------------------------------------------------------
# render command
# ---------------------------------------------------------------------------


@cli.command(name="render")
@click.argument("file", type=click.Path(exists=False))
@click.option("--config", "-c", default=None, help="YAML or JSON options file")
@click.option(
    "--engine",
    "engine_name",
    type=click.Choice(ENGINES, case_sensitive=False),
    default="markdown-it",
    help="Markdown parser to render with (default: markdown-it).",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def render_command(file: str, config: str | None, engine_name: str, output: str | None) -> None:
    """Render a Markdown FILE to HTML with magic links."""
    source = _read_source(file)
    options = _options_or_exit(config)

    try:
        if engine_name == "python-markdown":
            import markdown

            from magic_link.integrations.pymd_extension import MagicLinkExtension

            html = markdown.markdown(source, extensions=[MagicLinkExtension(options=options)])
        else:
            from magic_link import create_markdown

            html = create_markdown(options).render(source)
    except PluginNotFoundError as exc:
        err_console.print(f"[red]Error:[/red] {exc.args[0]}")
        sys.exit(1)

    if output:
        Path(output).write_text(html, encoding="utf-8")
        console.print(f"[green]HTML written to[/green] {output}")
    else:
        click.echo(html, nl=not html.endswith("\n"))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
