"""
NetDeploy CLI - Command line interface for the device registry.
"""

import asyncio
import logging
import sys
from typing import Optional

import aiohttp
import click
from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from .config import get_config
from .client import ClientConfig, NetDeployClient, NetDeployClientError
from .registry.devices import DeviceType

console = Console()

DEVICE_TYPE_STYLES = {
    "GATEWAY": "bold magenta",
    "SWITCH": "cyan",
    "ACCESS_POINT": "green",
}


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[logging.StreamHandler()]
    )


def run_async(coro):
    """Run an async function."""
    return asyncio.run(coro)


def _client_config(host: Optional[str], port: Optional[int]) -> ClientConfig:
    config = get_config()
    return ClientConfig(
        host=host or "localhost",
        port=port or config.server.port,
        timeout=config.client_timeout,
    )


def _call_api(ctx, action):
    """Run action(client) against the API, exiting on failure."""
    async def runner():
        async with NetDeployClient(_client_config(ctx.obj.get('host'), ctx.obj.get('port'))) as client:
            return await action(client)

    try:
        return run_async(runner())
    except NetDeployClientError as e:
        console.print(f"[red]✗ {e.detail}[/red]")
        sys.exit(1)
    except aiohttp.ClientError as e:
        console.print(f"[red]✗ Cannot reach NetDeploy API: {e}[/red]")
        sys.exit(1)
    except asyncio.TimeoutError:
        console.print("[red]✗ NetDeploy API timed out[/red]")
        sys.exit(1)


def _label(device: dict) -> str:
    device_type = device["deviceType"]
    style = DEVICE_TYPE_STYLES.get(device_type, "white")
    return f"[{style}]{device_type}[/{style}] {device['macAddress']}"


def build_rich_tree(node: dict, tree: Optional[Tree] = None) -> Tree:
    """Convert a device node document into a rich Tree."""
    if tree is None:
        tree = Tree(_label(node))
    else:
        tree = tree.add(_label(node))
    for child in node.get("downlinkDevices", []):
        build_rich_tree(child, tree)
    return tree


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.pass_context
def main(ctx, verbose):
    """NetDeploy - networking device registry"""
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose
    setup_logging(verbose)


@main.command()
@click.option('--host', '-h', default=None, help='Host to bind to')
@click.option('--port', '-p', default=None, type=int, help='Port to bind to')
@click.option('--reload', is_flag=True, help='Enable auto-reload')
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Start the NetDeploy API server."""

    config = get_config()
    if host:
        config.server.host = host
    if port:
        config.server.port = port
    config.save()

    console.print(f"\n[bold blue]Starting NetDeploy Server[/bold blue]")
    console.print(f"   Listening on: http://{config.server.host}:{config.server.port}")
    console.print(f"   Press Ctrl+C to stop\n")

    from .api.server import run_server

    run_server(host=config.server.host, port=config.server.port, reload=reload)


@main.command()
@click.option('--host', default=None, help='API host (default: localhost)')
@click.option('--port', default=None, type=int, help='API port (default: from config)')
def status(host: Optional[str], port: Optional[int]):
    """Show configuration and API status."""

    config = get_config()
    client_config = _client_config(host, port)

    async def check():
        async with NetDeployClient(client_config) as client:
            return await client.health_check()

    reachable = run_async(check())

    console.print("\n[bold]NetDeploy Status[/bold]")

    table = Table(show_header=False, box=None)
    table.add_column("Key", style="dim")
    table.add_column("Value")

    table.add_row("Config File", str(config.config_path))
    table.add_row("Server Bind", f"{config.server.host}:{config.server.port}")
    table.add_row("API", client_config.base_url)
    table.add_row("Reachable", "[green]yes[/green]" if reachable else "[red]no[/red]")

    console.print(table)
    console.print()


@main.group()
@click.option('--host', default=None, help='API host (default: localhost)')
@click.option('--port', default=None, type=int, help='API port (default: from config)')
@click.pass_context
def devices(ctx, host: Optional[str], port: Optional[int]):
    """Manage devices on a running server."""
    ctx.ensure_object(dict)
    ctx.obj['host'] = host
    ctx.obj['port'] = port


@devices.command('register')
@click.argument('device_type', type=click.Choice([t.value for t in DeviceType], case_sensitive=False))
@click.argument('mac_address')
@click.option('--uplink', '-u', default=None, help='MAC address of the uplink device')
@click.pass_context
def devices_register(ctx, device_type: str, mac_address: str, uplink: Optional[str]):
    """Register a device. Omit --uplink only for the root device."""

    _call_api(ctx, lambda client: client.register_device(device_type.upper(), mac_address, uplink))

    where = f"below {uplink}" if uplink else "as root"
    console.print(f"[bold green]✓ Registered {device_type.upper()} {mac_address} {where}[/bold green]")


@devices.command('list')
@click.pass_context
def devices_list(ctx):
    """List all devices."""

    items = _call_api(ctx, lambda client: client.list_devices())

    if not items:
        console.print("[yellow]No devices registered.[/yellow]")
        return

    table = Table(title="Devices")
    table.add_column("MAC Address", style="cyan")
    table.add_column("Type")

    for device in items:
        style = DEVICE_TYPE_STYLES.get(device["deviceType"], "white")
        table.add_row(device["macAddress"], f"[{style}]{device['deviceType']}[/{style}]")

    console.print(table)


@devices.command('get')
@click.argument('mac_address')
@click.pass_context
def devices_get(ctx, mac_address: str):
    """Show a single device."""

    device = _call_api(ctx, lambda client: client.get_device(mac_address))
    console.print(_label(device))


@devices.command('tree')
@click.argument('mac_address', required=False)
@click.pass_context
def devices_tree(ctx, mac_address: Optional[str]):
    """Show the device tree, or the subtree below MAC_ADDRESS."""

    node = _call_api(ctx, lambda client: client.get_device_tree(mac_address))
    console.print(build_rich_tree(node))


if __name__ == "__main__":
    main()
