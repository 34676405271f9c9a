"""
Secret Command - validate secrets and apply them to the cluster
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from kubeweave.config.project import ProjectConfig, load_project_config
from kubeweave.secrets.orchestrator import EffectOptions, SecretsOrchestrator
from kubeweave.shared.domain.exceptions import KubeweaveError
from kubeweave.shared.infrastructure.config import settings
from kubeweave.shared.infrastructure.logging import get_logger
from kubeweave.shared.utils.masking import censor_secret_payload

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = get_logger(__name__)

# Exit code for any kubeweave domain failure
EXIT_FAILURE = 3


def build_orchestrator(config_path: Path | None, root: Path | None) -> SecretsOrchestrator:
    root_dir = (root or Path.cwd()).resolve()
    path = config_path or root_dir / settings.config_file
    config: ProjectConfig = load_project_config(path)
    return SecretsOrchestrator(config, EffectOptions(working_dir=root_dir))


def fail(error: KubeweaveError) -> None:
    logger.error("command_failed", error=error.message, error_type=type(error).__name__)
    console.print(f"[bold red]✗ {type(error).__name__}:[/bold red] {error.message}")
    raise typer.Exit(code=EXIT_FAILURE)


@app.command()
def validate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Project config module (.py)"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Project root; also the connectors' working dir"),
):
    """Load every declared secret and report missing ones"""
    try:
        orchestrator = build_orchestrator(config, root)
        managers = asyncio.run(orchestrator.validate_async())
    except KubeweaveError as e:
        fail(e)
        return

    table = Table(title="Secret Managers", show_header=True, header_style="bold cyan")
    table.add_column("Manager")
    table.add_column("Secrets", justify="right")
    table.add_column("Providers")
    for name, entry in managers.items():
        table.add_row(
            name,
            str(len(entry.secret_manager.get_secrets())),
            ", ".join(entry.secret_manager.get_providers()),
        )
    console.print(table)
    console.print("[bold green]✓ All secrets resolved[/bold green]")


@app.command()
def apply(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Project config module (.py)"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Project root; also the connectors' working dir"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show what would be applied without touching the cluster"),
):
    """Validate, prepare and apply secrets with kubectl"""
    try:
        orchestrator = build_orchestrator(config, root)
        effects = asyncio.run(orchestrator.apply_async(dry_run=dry_run))
    except KubeweaveError as e:
        fail(e)
        return

    if not effects:
        console.print("[yellow]No secrets to apply.[/yellow]")
        return

    if dry_run:
        for effect in effects:
            manifest = yaml.safe_dump(censor_secret_payload(effect.payload), sort_keys=False)
            console.print(Panel(
                Syntax(manifest, "yaml", theme="monokai"),
                title=f"[DRY RUN] {effect.secret_name}",
                border_style="yellow",
            ))
        console.print(f"[yellow]Dry run: {len(effects)} effect(s) would be applied[/yellow]")
    else:
        console.print(f"[bold green]✓ Applied {len(effects)} effect(s)[/bold green]")
