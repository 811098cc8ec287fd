"""
Main CLI application
"""
import typer
from pathlib import Path
from typing import Optional

from ...core.logging import setup_logging
from .sync import register_sync_commands

app = typer.Typer(
    name="proxysync",
    add_completion=False,
    help="Synchronize generated HAProxy configuration to a remote host",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

register_sync_commands(app)


@app.callback()
def main(
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Log file path",
    ),
):
    """
    proxysync - HAProxy configuration reconciliation
    
    - reconcile: build, diff, write and reload on the remote host
    - render: print the generated configuration locally
    """
    setup_logging(level=log_level, log_file=log_file)


def run():
    """CLI entry point"""
    app()


if __name__ == "__main__":
    run()
