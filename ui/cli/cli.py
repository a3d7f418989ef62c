"""CLI entrypoint for icon-studio."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from ui.cli import commands

app = typer.Typer(help="Turn a home-screen screenshot into a themed icon set")
config_app = typer.Typer(help="Configuration commands")

_ROOT_HELP = "Project root holding config/ (defaults to the install location)"
_PROVIDER_HELP = "Override the active provider: openai or mock"


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log progress to stderr"),
) -> None:
    commands.configure_logging(verbose)


@app.command("extract")
def extract_cmd(
    screenshot: Path = typer.Argument(..., exists=True, dir_okay=False, help="Screenshot image"),
    root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
    provider: Optional[str] = typer.Option(None, help=_PROVIDER_HELP),
) -> None:
    """List the app names visible on a screenshot."""
    commands.extract(screenshot=screenshot, root=root, provider=provider)


@app.command("generate")
def generate_cmd(
    screenshot: Optional[Path] = typer.Argument(
        None, exists=True, dir_okay=False, help="Screenshot image"
    ),
    theme: str = typer.Option(..., "--theme", "-t", help="Style applied to every icon"),
    names: Optional[str] = typer.Option(
        None, "--names", help="Comma-separated app names; skips extraction"
    ),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Directory for PNGs"),
    save: bool = typer.Option(True, "--save/--no-save", help="Write icons to disk"),
    root: Optional[Path] = typer.Option(None, help=_ROOT_HELP),
    provider: Optional[str] = typer.Option(None, help=_PROVIDER_HELP),
) -> None:
    """Generate one themed icon per app name, then save them."""
    commands.generate(
        screenshot=screenshot,
        theme=theme,
        names=names,
        output=output,
        save=save,
        root=root,
        provider=provider,
    )


@config_app.command("show")
def config_show_cmd(root: Optional[Path] = typer.Option(None, help=_ROOT_HELP)) -> None:
    """Show effective configuration."""
    commands.config_show(root=root)


app.add_typer(config_app, name="config")


def main() -> None:
    """Console script entrypoint."""
    app()


if __name__ == "__main__":
    main()
