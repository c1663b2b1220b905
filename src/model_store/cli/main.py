"""
CLI entry point for the model store.

Commands:
    model-store list <lang>            - List stored models, newest first
    model-store show <lang> [--hash]   - Summarize the latest (or a given) model
    model-store prune <lang> [--keep]  - Enforce the retention bound
    model-store config [--show]        - Show effective configuration
    model-store version                - Show version
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from model_store.config.settings import StoreConfig
from model_store.logging import configure_logging
from model_store.storage.backends.disk import DiskBackend
from model_store.storage.naming import content_hash_from_name
from model_store.storage.store import ModelStore

app = typer.Typer(
    name="model-store",
    help="Versioned NLU model artifact store",
    no_args_is_help=True,
)
console = Console()


def _get_config_file() -> Path:
    """Get the config file path. Computed at runtime for test compatibility."""
    return Path.home() / ".config" / "nlu-model-store" / "config.yaml"


def _load_config_defaults() -> dict[str, Any]:
    """Load defaults from config file if it exists.

    Returns:
        Dictionary with default values from config file, or empty dict if not found.
    """
    config_file = _get_config_file()
    if not config_file.exists():
        return {}

    try:
        config = yaml.safe_load(config_file.read_text()) or {}
        defaults: dict[str, Any] = config.get("defaults", {}) or {}
        return defaults
    except (yaml.YAMLError, OSError, AttributeError):
        return {}


def _build_config(keep: int | None = None) -> StoreConfig:
    """Environment config overlaid with config-file defaults and CLI overrides."""
    base = StoreConfig.from_env()
    defaults = _load_config_defaults()
    overrides: dict[str, Any] = {
        key: defaults[key] for key in ("models_dir", "max_models_to_keep") if key in defaults
    }
    if keep is not None:
        overrides["max_models_to_keep"] = keep
    return StoreConfig(**{**base.model_dump(), **overrides}) if overrides else base


def _build_store(root: Path, keep: int | None = None) -> ModelStore:
    return ModelStore(DiskBackend(root), _build_config(keep))


@app.command("list")
def list_command(
    language: str = typer.Argument(..., help="Language code (e.g. en)"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Backend root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """List stored models for a language, newest first."""
    configure_logging(verbose)
    store = _build_store(root)
    try:
        names = asyncio.run(store.list_models(language))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if not names:
        console.print(f"[yellow]No models stored for '{language}'.[/yellow]")
        return

    table = Table(title=f"Models ({language})")
    table.add_column("#", style="dim")
    table.add_column("Content hash", style="cyan")
    table.add_column("File")
    for index, name in enumerate(names):
        table.add_row(str(index), content_hash_from_name(name), name)
    console.print(table)


@app.command()
def show(
    language: str = typer.Argument(..., help="Language code (e.g. en)"),
    content_hash: str | None = typer.Option(
        None, "--hash", help="Content hash (default: latest model)"
    ),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Backend root directory"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Summarize the latest model for a language, or a specific one."""
    configure_logging(verbose)
    store = _build_store(root)
    try:
        if content_hash:
            model = asyncio.run(store.get(content_hash, language))
        else:
            model = asyncio.run(store.get_latest(language))
    except Exception as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if model is None:
        console.print(f"[yellow]No model found for '{language}'.[/yellow]")
        sys.exit(1)

    output = model.data.output
    lines = [
        f"Language: {model.language_code}",
        f"Hash: {model.hash or '-'}",
        f"Entities: {len(output.list_entities)}",
        f"Slots model: {len(output.slots_model)} bytes",
    ]
    if model.finished_at:
        lines.append(f"Finished: {model.finished_at.isoformat()}")
    console.print(Panel("\n".join(lines), title="[green]Model[/green]", border_style="green"))


@app.command()
def prune(
    language: str = typer.Argument(..., help="Language code (e.g. en)"),
    keep: int | None = typer.Option(None, "--keep", "-k", min=1, help="Models to keep"),
    root: Path = typer.Option(Path("."), "--root", "-r", help="Backend root directory"),
    output_json: bool = typer.Option(False, "--json", help="Output as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Delete all but the newest models for a language."""
    configure_logging(verbose)
    store = _build_store(root, keep)
    try:
        report = asyncio.run(store.prune(language))
    except Exception as e:
        if output_json:
            print(json.dumps({"error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    if output_json:
        print(json.dumps(report.to_dict(), indent=2))
    else:
        style = "green" if report.ok else "yellow"
        console.print(f"[{style}]{report.to_summary()}[/{style}]")
    if not report.ok:
        sys.exit(1)


@app.command()
def config(
    show: bool = typer.Option(False, "--show", help="Show effective configuration"),
) -> None:
    """Show model store configuration."""
    if show:
        effective = _build_config()
        console.print(json.dumps(effective.model_dump(), indent=2))
        config_file = _get_config_file()
        if not config_file.exists():
            console.print(f"[dim]No config file at {config_file}[/dim]")
        return

    console.print("Usage: model-store config --show")


@app.command()
def version() -> None:
    """Show version information."""
    from model_store import __version__

    console.print(f"NLU Model Store v{__version__}")


if __name__ == "__main__":
    app()
