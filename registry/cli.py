"""CLI entry point for the land registry."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from .api import RegistryService
from .config import Settings
from .core import SystemStatus, open_registry
from .observability import setup_logging


def _emit(envelope: dict) -> None:
    click.echo(json.dumps(envelope, sort_keys=True))
    if "Err" in envelope:
        sys.exit(1)


@click.group()
@click.option("--db", "db_path", default=None, type=click.Path(dir_okay=False), help="Ledger database file")
@click.option("--config", "config_path", default=None, type=click.Path(dir_okay=False), help="Config file path")
@click.option(
    "--verb",
    default="run",
    type=click.Choice(["serve", "run", "deploy"]),
    help="Deployment context used to locate the config file",
)
@click.pass_context
def main(ctx: click.Context, db_path: str | None, config_path: str | None, verb: str) -> None:
    """Land registry ledger."""
    settings = Settings(
        database_path=db_path,
        config_path=Path(config_path) if config_path else None,
        verb=verb,
    )
    setup_logging(settings.log_level, settings.log_format)
    registry = ctx.with_resource(open_registry(settings=settings))
    ctx.obj = RegistryService(registry)
    ctx.meta["registry"] = registry


@main.command("lands")
@click.pass_obj
def lands(service: RegistryService) -> None:
    """List every land."""
    _emit(service.get_lands())


@main.command("land")
@click.argument("land_id")
@click.pass_obj
def land(service: RegistryService, land_id: str) -> None:
    """Show one land."""
    _emit(service.get_land(land_id))


@main.command("transactions")
@click.pass_obj
def transactions(service: RegistryService) -> None:
    """List every recorded transfer."""
    _emit(service.get_transactions())


@main.command("add")
@click.option("--location", required=True, help="Parcel location")
@click.option("--owner", required=True, help="Initial owner")
@click.option("--identifier", "unique_identifier", required=True, help="Cadastral reference")
@click.pass_obj
def add(service: RegistryService, location: str, owner: str, unique_identifier: str) -> None:
    """Register a new land."""
    _emit(service.add_land({
        "location": location,
        "owner": owner,
        "uniqueIdentifier": unique_identifier,
    }))


@main.command("update")
@click.argument("land_id")
@click.option("--location", required=True, help="Parcel location")
@click.option("--owner", required=True, help="Owner")
@click.option("--identifier", "unique_identifier", required=True, help="Cadastral reference")
@click.pass_obj
def update(
    service: RegistryService, land_id: str, location: str, owner: str, unique_identifier: str
) -> None:
    """Overwrite every field of a land."""
    _emit(service.update_land(land_id, {
        "location": location,
        "owner": owner,
        "uniqueIdentifier": unique_identifier,
    }))


@main.command("delete")
@click.argument("land_id")
@click.pass_obj
def delete(service: RegistryService, land_id: str) -> None:
    """Delete a land; its transactions are kept."""
    _emit(service.delete_land(land_id))


@main.command("transfer")
@click.argument("land_id")
@click.argument("to_owner")
@click.pass_obj
def transfer(service: RegistryService, land_id: str, to_owner: str) -> None:
    """Transfer a land to a new owner."""
    _emit(service.transfer_land(land_id, to_owner))


@main.command("check")
@click.pass_context
def check(ctx: click.Context) -> None:
    """Check the ledger for unreadable or misfiled records."""
    status = ctx.meta["registry"].check_consistency()
    click.echo(json.dumps({"status": status.value}))
    if status != SystemStatus.NORMAL:
        sys.exit(1)
