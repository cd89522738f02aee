"""Command-line interface for the CVP inventory client.

Each subcommand performs one ``InventoryClient`` operation and prints the
result as JSON. Connection settings come from ``CVPINV_*`` environment
variables or the matching global options.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections.abc import Callable

import click
from pydantic import BaseModel, ValidationError

from cvp_inventory.config import (
    API_TOKEN_ENV,
    BASE_URL_ENV,
    PASSWORD_ENV,
    USERNAME_ENV,
    Settings,
)
from cvp_inventory.libs.inventory import InventoryClient, InventoryError
from cvp_inventory.libs.rest import CvpRestTransport, CvpTransportError

# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def _setup_logging(verbose: bool) -> None:
    """Configure global logging.

    Args:
        verbose: If *True* log at *DEBUG*, otherwise only warnings reach stderr
        so that stdout stays valid JSON.
    """
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level)

    from cvp_inventory.logging_security import install_filter

    install_filter()


def _apply_environment_overrides(
    base_url: str | None,
    api_token: str | None,
    username: str | None,
    password: str | None,
) -> None:
    """Copy CLI option values into the environment read by ``Settings``."""
    if base_url:
        os.environ[BASE_URL_ENV] = base_url
    if api_token:
        os.environ[API_TOKEN_ENV] = api_token
    if username:
        os.environ[USERNAME_ENV] = username
    if password:
        os.environ[PASSWORD_ENV] = password


def _create_settings() -> Settings:
    """Return validated settings, exiting with status 1 if validation fails."""
    try:
        from cvp_inventory.config import get_settings

        get_settings.cache_clear()
        return get_settings()
    except ValidationError as exc:
        click.echo(f"✗ Configuration error: {exc}", err=True)
        click.echo("\nRequired environment variables or CLI options:", err=True)
        click.echo(f"  --base-url or {BASE_URL_ENV}", err=True)
        click.echo(
            f"  --api-token or {API_TOKEN_ENV}, "
            f"or --username/--password ({USERNAME_ENV}/{PASSWORD_ENV})",
            err=True,
        )
        sys.exit(1)


def _to_jsonable(result: object) -> object:
    if isinstance(result, BaseModel):
        return result.model_dump(mode="json", by_alias=True, exclude_none=True)
    if isinstance(result, list):
        return [_to_jsonable(item) for item in result]
    return result


def _run(ctx: click.Context, action: Callable[[InventoryClient], object]) -> object:
    """Open a transport, run *action* with a client, and print its result as JSON."""
    settings: Settings = ctx.obj.get("settings") or _create_settings()
    try:
        connection = settings.connection_config()
    except ValidationError as exc:
        click.echo(f"✗ Configuration error: {exc}", err=True)
        sys.exit(1)

    try:
        with CvpRestTransport(connection) as transport:
            result = action(InventoryClient(transport))
    except (InventoryError, CvpTransportError) as exc:
        click.echo(f"✗ {exc}", err=True)
        sys.exit(1)

    if result is not None:
        click.echo(json.dumps(_to_jsonable(result), indent=2))
    return result


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@click.group()
@click.option(
    "--base-url",
    envvar=BASE_URL_ENV,
    help=f"CloudVision Portal origin, e.g. https://cvp.example.com (env: {BASE_URL_ENV})",
)
@click.option(
    "--api-token",
    envvar=API_TOKEN_ENV,
    help=f"Service account token (env: {API_TOKEN_ENV})",
)
@click.option("--username", envvar=USERNAME_ENV, help=f"CVP username (env: {USERNAME_ENV})")
@click.option("--password", envvar=PASSWORD_ENV, help=f"CVP password (env: {PASSWORD_ENV})")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def main(
    ctx: click.Context,
    base_url: str | None,
    api_token: str | None,
    username: str | None,
    password: str | None,
    verbose: bool,
) -> None:
    """Query and manage the CloudVision Portal device inventory."""
    _setup_logging(verbose)
    _apply_environment_overrides(base_url, api_token, username, password)
    ctx.ensure_object(dict)


@main.command()
@click.option("--container", "container_name", help="Only devices in this container")
@click.option("--undefined", is_flag=True, help="Only devices in the Undefined container")
@click.option("--query", default=None, help="Raw inventory search string")
@click.option("--start", default=0, type=int, help="Start index for --query")
@click.option("--end", default=0, type=int, help="End index for --query (0 = all)")
@click.pass_context
def devices(
    ctx: click.Context,
    container_name: str | None,
    undefined: bool,
    query: str | None,
    start: int,
    end: int,
) -> None:
    """List inventory devices."""
    if sum([container_name is not None, undefined, query is not None]) > 1:
        raise click.UsageError("--container, --undefined and --query are mutually exclusive")

    if container_name is not None:
        _run(ctx, lambda client: client.list_devices_in_container(container_name))
    elif undefined:
        _run(ctx, lambda client: client.list_undefined_devices())
    elif query is not None:
        _run(ctx, lambda client: client.query_inventory(query, start, end))
    else:
        _run(ctx, lambda client: client.list_all_devices())


@main.command()
@click.argument("fqdn")
@click.pass_context
def device(ctx: click.Context, fqdn: str) -> None:
    """Show the device named FQDN."""
    if _run(ctx, lambda client: client.get_device_by_name(fqdn)) is None:
        click.echo(f"✗ Device {fqdn} not found", err=True)
        sys.exit(1)


@main.command("device-container")
@click.argument("mac_address")
@click.pass_context
def device_container(ctx: click.Context, mac_address: str) -> None:
    """Show the container holding the device with MAC_ADDRESS."""
    if _run(ctx, lambda client: client.get_device_container(mac_address)) is None:
        click.echo(f"✗ Device {mac_address} not found", err=True)
        sys.exit(1)


@main.command("device-config")
@click.argument("mac_address")
@click.pass_context
def device_config(ctx: click.Context, mac_address: str) -> None:
    """Show the running configuration of the device with MAC_ADDRESS."""
    _run(ctx, lambda client: client.get_inventory_configuration(mac_address))


@main.command()
@click.option("--query", default="", help="Container search string")
@click.pass_context
def containers(ctx: click.Context, query: str) -> None:
    """List containers (CVP never includes the Undefined container here)."""
    if query:
        _run(ctx, lambda client: client.query_containers(query, 0, 0).data)
    else:
        _run(ctx, lambda client: client.list_all_containers())


@main.command()
@click.argument("name")
@click.pass_context
def container(ctx: click.Context, name: str) -> None:
    """Show the container called NAME."""
    if _run(ctx, lambda client: client.get_container_by_name(name)) is None:
        click.echo(f"✗ Container {name} not found", err=True)
        sys.exit(1)


@main.command("non-connected")
@click.pass_context
def non_connected(ctx: click.Context) -> None:
    """Print the number of devices not connected to CVP."""
    _run(ctx, lambda client: client.count_non_connected_devices())


@main.command()
@click.pass_context
def save(ctx: click.Context) -> None:
    """Save the inventory and print the per-status counts."""
    _run(ctx, lambda client: client.save_inventory())


@main.command()
@click.argument("ip_address")
@click.option("--container-name", required=True, help="Existing parent container name")
@click.option("--container-id", required=True, help="Existing parent container key")
@click.pass_context
def add(ctx: click.Context, ip_address: str, container_name: str, container_id: str) -> None:
    """Add the device at IP_ADDRESS to an existing container."""
    _run(ctx, lambda client: client.add_device(ip_address, container_name, container_id))
    click.echo(f"✓ Added {ip_address} to {container_name}", err=True)


@main.command()
@click.argument("mac_addresses", nargs=-1, required=True)
@click.pass_context
def remove(ctx: click.Context, mac_addresses: tuple[str, ...]) -> None:
    """Remove the devices with the given MAC_ADDRESSES from the inventory."""
    if len(mac_addresses) == 1:
        _run(ctx, lambda client: client.remove_device(mac_addresses[0]))
    else:
        _run(ctx, lambda client: client.remove_devices(list(mac_addresses)))
    click.echo(f"✓ Removed {len(mac_addresses)} device(s)", err=True)


if __name__ == "__main__":
    main()
