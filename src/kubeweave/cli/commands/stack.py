"""
Stack Command - render the configured stacks with their secret injections
"""

from pathlib import Path
from typing import Optional

import typer
import yaml
from rich.console import Console
from rich.syntax import Syntax

from kubeweave.cli.commands.secret import build_orchestrator, fail
from kubeweave.shared.domain.exceptions import KubeweaveError
from kubeweave.shared.infrastructure.logging import get_logger

app = typer.Typer(no_args_is_help=True)
console = Console()
logger = get_logger(__name__)


def render_stack(manifests: dict[str, dict]) -> str:
    """One YAML document per resource, in composition order."""
    return yaml.safe_dump_all(list(manifests.values()), sort_keys=False)


@app.command()
def generate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Project config module (.py)"),
    root: Optional[Path] = typer.Option(None, "--root", "-r", help="Project root"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write <stack>.yml files here instead of printing"),
):
    """Build every stack in the project config, secret references included"""
    try:
        stacks = build_orchestrator(config, root).build_stacks()
    except KubeweaveError as e:
        fail(e)
        return

    console.print(f"[green]✓ Found {len(stacks)} stack(s) in config[/green]")
    if output is not None:
        output.mkdir(parents=True, exist_ok=True)

    for name, manifests in stacks.items():
        rendered = render_stack(manifests)
        if output is None:
            console.print(f"[bold blue]# {name}[/bold blue]")
            console.print(Syntax(rendered, "yaml", theme="monokai"))
            continue

        target = output / f"{name}.yml"
        target.write_text(rendered, encoding="utf-8")
        logger.info("stack_written", stack=name, path=str(target), resources=len(manifests))
        console.print(f"  [blue]•[/blue] {name} → {target}")
