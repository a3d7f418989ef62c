"""Typer command handlers."""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

import typer

from core.generation_loop import BatchResult
from core.orchestrator import Orchestrator, RuntimeBundle
from core.studio import IconStudio, StudioError
from storage.icon_store import InvalidIconNameError, StoragePermissionError


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@contextmanager
def _runtime(root: Path | None = None, provider: str | None = None) -> Iterator[RuntimeBundle]:
    """Build the runtime and close its network clients when the command ends."""
    overrides: dict[str, Any] = {}
    if provider:
        overrides["models"] = {"service": {"active_provider": provider}}
    bundle = Orchestrator(root=root, overrides=overrides).build()
    try:
        yield bundle
    finally:
        bundle.service.close()


def _split_names(raw: str) -> list[str]:
    return [token.strip() for token in raw.split(",")]


def extract(screenshot: Path, root: Path | None = None, provider: str | None = None) -> None:
    """Print the app names found on a screenshot."""
    with _runtime(root, provider) as bundle:
        studio = bundle.studio
        studio.load_screenshot(screenshot)
        names = studio.extract_app_names()
    if studio.state.last_error:
        typer.echo(f"Failed to extract app names: {studio.state.last_error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(json.dumps(names, indent=2))


def _run_batch(studio: IconStudio) -> BatchResult:
    """Run a batch on a worker thread so Ctrl-C can cancel between requests."""
    cancel = threading.Event()
    outcome: dict[str, Any] = {}

    def work() -> None:
        try:
            outcome["batch"] = studio.generate_icons(cancel_event=cancel)
        except Exception as exc:  # surfaced on the main thread below
            outcome["error"] = exc

    worker = threading.Thread(target=work, name="icon-generation", daemon=True)
    worker.start()
    try:
        while worker.is_alive():
            worker.join(0.5)
    except KeyboardInterrupt:
        typer.echo("Cancelling after the current request...", err=True)
        cancel.set()
        worker.join()
    if "error" in outcome:
        raise outcome["error"]
    return outcome["batch"]


def generate(
    screenshot: Path | None,
    theme: str,
    names: str | None = None,
    output: Path | None = None,
    save: bool = True,
    root: Path | None = None,
    provider: str | None = None,
) -> None:
    """Extract names (or use the given ones), generate icons and save them."""
    with _runtime(root, provider) as bundle:
        _generate(bundle.studio, screenshot, theme, names, output, save)


def _generate(
    studio: IconStudio,
    screenshot: Path | None,
    theme: str,
    names: str | None,
    output: Path | None,
    save: bool,
) -> None:
    if names:
        studio.set_app_names(_split_names(names))
    elif screenshot is not None:
        studio.load_screenshot(screenshot)
        studio.extract_app_names()
        if studio.state.last_error:
            typer.echo(f"Failed to extract app names: {studio.state.last_error}", err=True)
            raise typer.Exit(code=1)
    else:
        raise typer.BadParameter("Pass a screenshot or --names.")

    studio.set_theme(theme)
    typer.echo(f"App names: {', '.join(studio.state.app_names)}")
    try:
        batch = _run_batch(studio)
    except StudioError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=2) from exc

    typer.echo(f"Generated: {len(batch.generated)}/{len(studio.state.app_names)}")
    if batch.rate_limit_retries:
        typer.echo(f"Rate-limit retries: {batch.rate_limit_retries}")
    if not batch.completed:
        typer.echo(f"Stopped at {batch.halted_on!r}: {batch.message}", err=True)

    if save and studio.state.generated_icons:
        try:
            written = studio.save_icons(output)
        except StoragePermissionError as exc:
            typer.echo(f"Storage permission denied! {exc}", err=True)
            raise typer.Exit(code=3) from exc
        except (OSError, InvalidIconNameError) as exc:
            typer.echo(f"Error saving icons: {exc}", err=True)
            raise typer.Exit(code=3) from exc
        typer.echo(f"Icons saved to {studio.state.saved_to} ({len(written)} files)")

    if batch.error is not None:
        raise typer.Exit(code=1)


def config_show(root: Path | None = None) -> None:
    """Show effective runtime config."""
    with _runtime(root) as bundle:
        payload = {
            "config": bundle.config,
            "service": bundle.settings.model_dump(),
            "paths": {key: str(value) for key, value in bundle.paths.items()},
        }
    typer.echo(json.dumps(payload, indent=2, default=str))
