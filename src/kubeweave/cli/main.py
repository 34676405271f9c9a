"""
kubeweave CLI
Main entry point for the command-line interface

Usage:
    kubeweave secret validate [--config PATH] [--root DIR]
    kubeweave secret apply [--config PATH] [--root DIR] [--dry-run]
    kubeweave stack generate [--config PATH] [--root DIR] [--output DIR]
    kubeweave version
"""

import typer
from rich.console import Console
from rich.panel import Panel

from kubeweave import __version__
from kubeweave.cli.commands import secret, stack
from kubeweave.shared.infrastructure.logging import configure_logging

app = typer.Typer(
    name="kubeweave",
    help="kubeweave - Kubernetes secret orchestration and injection",
    add_completion=False,
    no_args_is_help=True,
)
console = Console()

app.add_typer(secret.app, name="secret", help="Validate and apply secrets")
app.add_typer(stack.app, name="stack", help="Render stacks with secret injections")


@app.callback()
def setup():
    configure_logging()


@app.command()
def version():
    """Show kubeweave version information"""
    console.print(Panel.fit(
        "[bold cyan]kubeweave[/bold cyan]\n"
        f"[dim]Version:[/dim] {__version__}\n",
        title="About kubeweave",
        border_style="cyan",
    ))


def main():
    """Main entry point"""
    app()


if __name__ == "__main__":
    main()
