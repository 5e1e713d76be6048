"""Main entry point for Onboard using Typer and Pydantic Settings."""

import asyncio

import typer
import uvicorn
from loguru import logger
from rich.console import Console
from rich.table import Table

from onboard.cli import WizardConsole
from onboard.client import HttpTransport
from onboard.configuration import Action, Check, Configuration, load_configuration
from onboard.exceptions import ConfigurationError, OnboardError
from onboard.logging import setup_logging
from onboard.settings import Settings, get_settings

app = typer.Typer(
    name="onboard",
    help="Onboard a device onto a network",
    no_args_is_help=True,
)
console = Console()


HOST_OPTION = typer.Option(
    None,
    help="Host to bind the server to (overrides ONBOARD_HOST)",
    metavar="<server>",
)  # fmt: skip
PORT_OPTION = typer.Option(
    None,
    help="Port to bind the server to (overrides ONBOARD_PORT)",
    metavar="<port>",
)  # fmt: skip
LOG_LEVEL_OPTION = typer.Option(
    None,
    help="Log level (overrides ONBOARD_LOG_LEVEL)",
    metavar="<level>",
    case_sensitive=False,
)  # fmt: skip
CONFIG_OPTION = typer.Option(
    None,
    "-c",
    "--config",
    help="Configuration file or glob pattern, may be repeated (overrides ONBOARD_CONFIG_PATHS)",
    metavar="<path>",
)  # fmt: skip
INTERFACE_OPTION = typer.Option(
    None,
    help="Network interface to report on (overrides ONBOARD_INTERFACE)",
    metavar="<interface>",
)  # fmt: skip
IP_ADDRESS_OPTION = typer.Option(
    None,
    "--ip-address",
    help="Address of the device announced over mDNS (overrides ONBOARD_IP_ADDRESS)",
    metavar="<address>",
)  # fmt: skip
ADVERTISE_OPTION = typer.Option(
    None,
    "--advertise/--no-advertise",
    help="Announce the device API over mDNS (overrides ONBOARD_ADVERTISE)",
)  # fmt: skip
SERVER_URL_OPTION = typer.Option(
    None,
    "--server-url",
    help="Base URL of the device API (overrides ONBOARD_SERVER_URL)",
    metavar="<url>",
)  # fmt: skip


def _update_settings(
    host: str | None = None,
    port: int | None = None,
    log_level: str | None = None,
    config_paths: list[str] | None = None,
    interface: str | None = None,
    server_url: str | None = None,
    ip_address: str | None = None,
    advertise: bool | None = None,
) -> Settings:
    """Update settings with CLI overrides.

    Returns:
        Settings: The updated, cached settings
    """
    settings = get_settings()

    # Apply overrides
    if host is not None:
        settings.host = host
    if port is not None:
        settings.port = port
    if log_level is not None:
        settings.log_level = log_level.upper()
    if config_paths:
        settings.config_paths = config_paths
    if interface is not None:
        settings.interface = interface
    if server_url is not None:
        settings.server_url = server_url
    if ip_address is not None:
        settings.ip_address = ip_address
    if advertise is not None:
        settings.advertise = advertise
    return settings


def _load_configuration(settings: Settings) -> Configuration:
    if not settings.config_paths:
        logger.error("No configuration given, use --config or ONBOARD_CONFIG_PATHS")
        raise typer.Exit(1)
    try:
        return load_configuration(settings.config_paths)
    except ConfigurationError as e:
        for error in e.errors:
            logger.error(error)
        raise typer.Exit(1) from None


@app.command()
def serve(
    host: str = HOST_OPTION,
    port: int = PORT_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
    config: list[str] = CONFIG_OPTION,
    interface: str = INTERFACE_OPTION,
    ip_address: str = IP_ADDRESS_OPTION,
    advertise: bool = ADVERTISE_OPTION,
) -> None:
    """Run the device API."""
    settings = _update_settings(
        host=host,
        port=port,
        log_level=log_level,
        config_paths=config,
        interface=interface,
        ip_address=ip_address,
        advertise=advertise,
    )
    setup_logging(settings.log_level)

    configuration = _load_configuration(settings)
    logger.info(f"Starting Onboard server on {settings.host}:{settings.port}")

    from onboard.app import create_app

    uvicorn.run(
        create_app(settings, configuration),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
    )


def _check_details(check: Check) -> str:
    if check.dns is not None:
        return f"dns {check.dns.value}"
    if check.systemd is not None:
        return f"systemd {check.systemd.unit}"
    return ""


def _action_details(action: Action) -> str:
    if action.file is not None:
        return f"file {action.file.path}"
    if action.systemd is not None:
        return f"systemd {action.systemd.command} {action.systemd.unit}"
    return ""


@app.command()
def validate(
    log_level: str = LOG_LEVEL_OPTION,
    config: list[str] = CONFIG_OPTION,
) -> None:
    """Load and validate the configuration, then print a summary."""
    settings = _update_settings(log_level=log_level, config_paths=config)
    setup_logging(settings.log_level, compact=True)

    configuration = _load_configuration(settings)

    table = Table(title="Configuration")
    table.add_column("Kind")
    table.add_column("Name")
    table.add_column("Details")
    for value in configuration.values:
        table.add_row("value", value.name, value.description + (" (secret)" if value.secret else ""))
    for check in configuration.checks:
        table.add_row("check", check.name, _check_details(check))
    for action in configuration.actions:
        table.add_row("action", action.name, _action_details(action))
    console.print(table)
    console.print("[green]Configuration is valid[/green]")


async def _run_wizard(settings: Settings) -> bool:
    async with HttpTransport(settings.server_url, timeout=settings.request_timeout) as transport:
        configuration = await transport.configuration()
        return await WizardConsole(transport, configuration, settings, console=console).run()


@app.command()
def wizard(
    server_url: str = SERVER_URL_OPTION,
    log_level: str = LOG_LEVEL_OPTION,
) -> None:
    """Onboard a device interactively from the terminal."""
    settings = _update_settings(log_level=log_level or "WARNING", server_url=server_url)
    setup_logging(settings.log_level, compact=True)

    try:
        succeeded = asyncio.run(_run_wizard(settings))
    except OnboardError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1) from None
    if not succeeded:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
