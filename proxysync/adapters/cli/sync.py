"""
Reconcile and render CLI commands
"""
import typer
from pathlib import Path
from typing import Any, Dict, Optional

from ...core.logging import get_logger, get_stdout_console, get_stderr_console
from ...core.exceptions import (
    ConfigError,
    ConnectionError,
    RemoteCommandError,
    TopologyError,
)
from ...core.session import ConnectionManager
from ...domain.sync import Synchronizer, SyncConfig
from ...domain.topology import Topology, build
from ..config.loader import ConfigLoader
from ..config.sync_parser import parse_sync_config, load_topology
from .connection import RemoteConnectionFactory

logger = get_logger(__name__)
stdout_console = get_stdout_console()
stderr_console = get_stderr_console()


def register_sync_commands(app: typer.Typer) -> None:
    """Register reconcile and render commands on the main app"""
    app.command(name="reconcile")(reconcile_run)
    app.command(name="render")(render_run)


def _load_inputs(
    config_path: str,
    topology_path: str,
    overrides: Optional[Dict[str, Any]] = None,
) -> tuple[SyncConfig, Topology]:
    cfg = ConfigLoader().load(toml_path=Path(config_path).expanduser(), cli_overrides=overrides)
    config = parse_sync_config(cfg)
    topology = load_topology(Path(topology_path).expanduser())
    return config, topology


def reconcile_run(
    config_path: str = typer.Argument(..., help="Configuration file path (TOML)"),
    topology_path: str = typer.Argument(..., help="Service topology file path (TOML)"),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Report artifacts that would change without writing or reloading"
    ),
    host: Optional[str] = typer.Option(None, "--host", "-H", help="Remote host (overrides config)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="SSH port (overrides config)"),
    user: Optional[str] = typer.Option(None, "--user", "-u", help="SSH user (overrides config)"),
    key_file: Optional[str] = typer.Option(None, "--key", "-k", help="Private key path (overrides config)"),
    transport: Optional[str] = typer.Option(
        None, "--transport", "-t", help="Write transport: sftp or command (overrides config)"
    ),
):
    """
    Reconcile remote HAProxy configuration with the topology
    
    Examples:
        proxysync reconcile proxy.toml services.toml
        proxysync reconcile proxy.toml services.toml --dry-run
        proxysync reconcile proxy.toml services.toml -H 10.0.0.2 -t command
    """
    try:
        overrides = {
            "host": host,
            "port": port,
            "user": user,
            "key_file": key_file,
            "transport": transport,
        }
        config, topology = _load_inputs(config_path, topology_path, overrides)
        
        connections = ConnectionManager(RemoteConnectionFactory(), config.connection_params())
        with Synchronizer(config, connections) as synchronizer:
            result = synchronizer.reconcile(topology, dry_run=dry_run)
        
        verb = "Would update" if dry_run else "Updated"
        for path in result.written:
            stdout_console.print(f"[green]✓[/green] {verb} [cyan]{path}[/cyan]")
        for path in result.orphans:
            stdout_console.print(f"[yellow]⚠[/yellow] Unmanaged remote file: {path}")
        
        if result.reloaded:
            stdout_console.print(f"[green]✓[/green] Reloaded with: {config.reload_command}")
        elif not result.written:
            stdout_console.print("[green]✓[/green] Configuration up to date, nothing to do")
    
    except ConfigError as e:
        stderr_console.print(f"[red]Config Error:[/red] {e}")
        raise typer.Exit(1)
    except TopologyError as e:
        stderr_console.print(f"[red]Topology Error:[/red] {e}")
        raise typer.Exit(1)
    except ConnectionError as e:
        stderr_console.print(f"[red]Connection Error:[/red] {e}")
        raise typer.Exit(1)
    except RemoteCommandError as e:
        stderr_console.print(f"[red]Remote Error:[/red] {e}")
        raise typer.Exit(1)


def render_run(
    config_path: str = typer.Argument(..., help="Configuration file path (TOML)"),
    topology_path: str = typer.Argument(..., help="Service topology file path (TOML)"),
    output_dir: Optional[Path] = typer.Option(
        None, "--output-dir", "-o", help="Write artifacts into this local directory instead of printing"
    ),
):
    """
    Render the generated configuration without connecting
    
    Examples:
        proxysync render proxy.toml services.toml
        proxysync render proxy.toml services.toml -o ./rendered
    """
    try:
        config, topology = _load_inputs(config_path, topology_path)
        result = build(topology, config)
    except ConfigError as e:
        stderr_console.print(f"[red]Config Error:[/red] {e}")
        raise typer.Exit(1)
    except TopologyError as e:
        stderr_console.print(f"[red]Topology Error:[/red] {e}")
        raise typer.Exit(1)
    
    for artifact in result.artifacts:
        if output_dir:
            target = output_dir / Path(artifact.path).name
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(artifact.content, encoding="utf-8")
            stdout_console.print(f"[green]✓[/green] Wrote [cyan]{target}[/cyan]")
        else:
            stdout_console.rule(artifact.path)
            stdout_console.print(artifact.content, markup=False, highlight=False, soft_wrap=True, end="")
