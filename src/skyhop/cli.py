"""
Skyhop CLI - Command-line interface for the hop maneuver controller.

Provides commands for flying a vessel over kRPC, running the maneuver
against the built-in simulated vehicle, and configuration diagnostics.
"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from skyhop.version import __version__

app = typer.Typer(
    name="skyhop",
    help="Skyhop - Autonomous hop maneuver controller.",
    add_completion=False,
)

console = Console()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"[bold blue]Skyhop[/bold blue] v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Skyhop - Autonomous hop maneuver controller."""
    pass


def _load(config: Optional[Path], log_level: Optional[str]):
    """Load configuration (defaults if no file) and configure logging."""
    from skyhop.config.loader import get_default_config, load_config
    from skyhop.logging.setup import configure_logging

    cfg = load_config(config) if config is not None else get_default_config()
    if log_level:
        cfg.project.log_level = log_level.upper()
    configure_logging(
        str(getattr(cfg.project.log_level, "value", cfg.project.log_level)),
        cfg.project.run_id,
        json_format=cfg.project.json_logs,
    )
    return cfg


def _print_result(result) -> None:
    """Render a flight result as a table."""
    table = Table(title="Flight Summary")
    table.add_column("Item", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Final phase", result.phase.name)
    for phase, ticks in result.phase_ticks.items():
        table.add_row(f"Ticks ({phase})", str(ticks))
    if result.translate_target is not None:
        north, east = result.translate_target
        table.add_row("Translate target", f"north={north:.2f} east={east:.2f}")
    table.add_row("Gear deployed", "yes" if result.gear_deployed else "no")

    console.print(table)


@app.command()
def fly(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    address: Optional[str] = typer.Option(
        None, "--address", "-a", help="Override kRPC server address."
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Lateral actuation mode (direct, incremental)."
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override log level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Fly the hop maneuver on the active kRPC vessel."""
    from skyhop.control.sequencer import PhaseSequencer
    from skyhop.errors import SkyhopError
    from skyhop.session.interface import DeadlineSession
    from skyhop.sim.krpc_bridge import KrpcSession

    try:
        cfg = _load(config, log_level)
        if address:
            cfg.session.address = address

        krpc_session = KrpcSession(
            address=cfg.session.address,
            rpc_port=cfg.session.rpc_port,
            stream_port=cfg.session.stream_port,
            client_name=cfg.session.client_name,
        )
        krpc_session.connect()
        console.print(f"[green]✓[/green] Connected to {cfg.session.address}")

        session = DeadlineSession(krpc_session, cfg.session.call_timeout_s)
        try:
            sequencer = PhaseSequencer(session, cfg.plan, mode=mode)
            result = sequencer.run()
        finally:
            session.close()

        _print_result(result)

    except (SkyhopError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def simulate(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    mode: Optional[str] = typer.Option(
        None, "--mode", "-m", help="Lateral actuation mode (direct, incremental)."
    ),
    tick_period: Optional[float] = typer.Option(
        None, "--tick-period", "-t", help="Override loop period in seconds."
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override log level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Fly the hop maneuver against the simulated vehicle."""
    from skyhop.control.sequencer import PhaseSequencer
    from skyhop.errors import SkyhopError
    from skyhop.sim.simulated import SimulatedVehicle

    try:
        cfg = _load(config, log_level)
        plan = cfg.plan
        if tick_period is not None:
            plan = plan.model_copy(update={"tick_period_s": tick_period})

        vehicle = SimulatedVehicle(cfg.simulation, plan.site)
        sequencer = PhaseSequencer(vehicle, plan, mode=mode, sleep=vehicle.advance)
        result = sequencer.run()

        _print_result(result)
        console.print(
            f"[bold green]Touchdown after {vehicle.state.time_s:.1f}s "
            f"simulated.[/bold green]"
        )

    except (SkyhopError, ValueError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)


@app.command()
def diagnostics(
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to configuration file.",
    ),
) -> None:
    """Run configuration validation and show the effective flight plan."""
    from skyhop.config.loader import get_default_config, load_config

    console.print("[bold]Skyhop Diagnostics[/bold]\n")

    table = Table(title="System Information")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")

    table.add_row("Skyhop Version", __version__)

    try:
        if config is None:
            cfg = get_default_config()
            table.add_row("Configuration", "✓ Defaults")
        else:
            cfg = load_config(config)
            table.add_row("Configuration", f"✓ Valid ({config})")
        table.add_row("Actuation Mode", cfg.plan.mode.value)
        table.add_row("Tick Period", f"{cfg.plan.tick_period_s}s")
        table.add_row(
            "Site",
            f"{cfg.plan.site.latitude_deg}, {cfg.plan.site.longitude_deg}",
        )
        table.add_row("kRPC Server", f"{cfg.session.address}:{cfg.session.rpc_port}")
    except FileNotFoundError:
        table.add_row("Configuration", f"⚠ Not found ({config})")
    except Exception as e:
        table.add_row("Configuration", f"✗ Error: {e}")

    console.print(table)


@app.command(name="version")
def show_version() -> None:
    """Show version information."""
    console.print(f"[bold blue]Skyhop[/bold blue] v{__version__}")
    console.print("Autonomous hop maneuver controller.")


if __name__ == "__main__":
    app()
