"""CLI interface for the GDPR service client"""

import json
import logging
from pathlib import Path
from typing import Any, Optional

import click
from pydantic import BaseModel

from gdpr_client.domain.models.gdpr_request import RequestStatus, RequestType
from gdpr_client.domain.models.inputs import (
    CreateDeleteRequestInput,
    CreateInfoRequestInput,
    DeleteRequestInput,
    FetchAllRequestInput,
    FetchByCreatorInput,
    FetchByStatusInput,
    FetchByTypeInput,
    FetchRequestInput,
    UpdateRequestInput,
)
from gdpr_client.infrastructure.config.config_manager import ConfigManager, ConfigurationError
from gdpr_client.infrastructure.gdpr.client import GDPRClient
from gdpr_client.infrastructure.gdpr.errors import GDPRClientError

logger = logging.getLogger(__name__)

KIND_CHOICE = click.Choice(["info", "delete"], case_sensitive=False)
TYPE_CHOICE = click.Choice([t.value for t in RequestType], case_sensitive=False)
STATUS_CHOICE = click.Choice([s.value for s in RequestStatus], case_sensitive=False)

_UNSET = object()


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration"""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )
    logging.getLogger().setLevel(level)
    # urllib3 connection chatter is noise even in verbose mode
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def _die(message: str, verbose: bool = False, exc: Optional[Exception] = None) -> None:
    """Exit with a user-friendly error message"""
    if exc is not None:
        logger.error(message, exc_info=verbose)
    else:
        logger.error(message)
    raise click.ClickException(message)


def _echo_json(value: Any) -> None:
    if isinstance(value, BaseModel):
        value = value.model_dump(mode="json", by_alias=True, exclude_none=True)
    click.echo(json.dumps(value, indent=2, sort_keys=True))


def _load_config_manager(ctx: click.Context) -> ConfigManager:
    try:
        return ConfigManager(config_path=ctx.obj.get("config_path"))
    except ConfigurationError as e:
        _die(str(e), verbose=ctx.obj.get("verbose", False), exc=e)


def _create_client(ctx: click.Context) -> GDPRClient:
    """Create GDPR client from config

    Args:
        ctx: Click context holding config path, base URL override and verbosity

    Returns:
        GDPRClient instance
    """
    verbose = ctx.obj.get("verbose", False)
    config = _load_config_manager(ctx).config
    url = ctx.obj.get("base_url")
    if url:
        config = config.model_copy(
            update={"service": config.service.model_copy(update={"base_url": url})}
        )

    try:
        return GDPRClient(config)
    except ValueError as e:
        _die(str(e), verbose=verbose, exc=e)


def _run(ctx: click.Context, operation) -> Any:
    """Run a client operation, mapping client errors to CLI errors"""
    verbose = ctx.obj.get("verbose", False)
    client = _create_client(ctx)
    try:
        with client:
            return operation(client)
    except GDPRClientError as e:
        _die(str(e), verbose=verbose, exc=e)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to .gdpr-client.yml config file",
)
@click.option(
    "--base-url",
    type=str,
    help="GDPR service URL (default: from config or GDPR_SERVICE_URL env)",
)
@click.pass_context
def cli(ctx, verbose: bool, config: Path, base_url: str):
    """gdpr-client - submit and query data subject requests"""
    ctx.ensure_object(dict)
    setup_logging(verbose)
    ctx.obj["config_path"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["base_url"] = base_url


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("partition_key", type=str)
@click.option("--created-by", required=True, help="Principal submitting the request")
@click.pass_context
def create(ctx, kind: str, partition_key: str, created_by: str):
    """Create an info or delete request.

    KIND: info or delete
    PARTITION_KEY: Data subject identifier
    """
    if kind.lower() == "info":
        result = _run(
            ctx,
            lambda c: c.create_info_request(
                CreateInfoRequestInput(partition_key=partition_key, created_by=created_by)
            ),
        )
    else:
        result = _run(
            ctx,
            lambda c: c.create_delete_request(
                CreateDeleteRequestInput(partition_key=partition_key, created_by=created_by)
            ),
        )
    _echo_json(result)


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("partition_key", type=str)
@click.argument("range_key", type=str)
@click.pass_context
def fetch(ctx, kind: str, partition_key: str, range_key: str):
    """Fetch a single request by its keys."""
    input = FetchRequestInput(partition_key=partition_key, range_key=range_key)
    if kind.lower() == "info":
        result = _run(ctx, lambda c: c.fetch_info_request(input))
    else:
        result = _run(ctx, lambda c: c.fetch_delete_request(input))
    _echo_json(result)


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("partition_key", type=str)
@click.argument("range_key", type=str)
@click.option("--status", type=STATUS_CHOICE, help="New status")
@click.option("--type", "request_type", type=TYPE_CHOICE, help="New request type")
@click.pass_context
def update(ctx, kind: str, partition_key: str, range_key: str, status: str, request_type: str):
    """Update status and/or type of a request."""
    if not status and not request_type:
        raise click.UsageError("Nothing to update: pass --status and/or --type")

    input = UpdateRequestInput(
        partition_key=partition_key,
        range_key=range_key,
        status=status.upper() if status else None,
        type=request_type.upper() if request_type else None,
    )
    if kind.lower() == "info":
        _run(ctx, lambda c: c.update_info_request(input))
    else:
        _run(ctx, lambda c: c.update_delete_request(input))
    click.echo("Updated")


@cli.command()
@click.argument("kind", type=KIND_CHOICE)
@click.argument("partition_key", type=str)
@click.argument("range_key", type=str)
@click.option("--hard", is_flag=True, help="Hard delete instead of marking as deleted")
@click.pass_context
def delete(ctx, kind: str, partition_key: str, range_key: str, hard: bool):
    """Delete a request."""
    input = DeleteRequestInput(partition_key=partition_key, range_key=range_key, is_hard_delete=hard)
    if kind.lower() == "info":
        _run(ctx, lambda c: c.delete_info_request(input))
    else:
        _run(ctx, lambda c: c.delete_request(input))
    click.echo("Deleted")


@cli.command(name="list")
@click.argument("kind", type=KIND_CHOICE)
@click.option("--partition-key", help="All info requests of a data subject")
@click.option("--type", "request_type", type=TYPE_CHOICE, help="Info requests of a type")
@click.option("--status", type=STATUS_CHOICE, help="Delete requests in a status")
@click.option("--created-by", help="Requests created by a principal")
@click.option("--last-range-key", help="Cursor from a previous page")
@click.pass_context
def list_requests(
    ctx,
    kind: str,
    partition_key: str,
    request_type: str,
    status: str,
    created_by: str,
    last_range_key: str,
):
    """List requests by a single filter.

    info supports --partition-key, --type and --created-by;
    delete supports --status and --created-by.
    """
    filters = [f for f in (partition_key, request_type, status, created_by) if f]
    if len(filters) != 1:
        raise click.UsageError("Pass exactly one of --partition-key, --type, --status, --created-by")

    kind = kind.lower()
    if kind == "info":
        if status:
            raise click.UsageError("--status is only supported for delete requests")
        if partition_key:
            input = FetchAllRequestInput(partition_key=partition_key, last_range_key=last_range_key)
            result = _run(ctx, lambda c: c.fetch_all_info_requests(input))
        elif request_type:
            input = FetchByTypeInput(type=request_type.upper(), last_range_key=last_range_key)
            result = _run(ctx, lambda c: c.fetch_info_requests_by_type(input))
        else:
            input = FetchByCreatorInput(created_by=created_by, last_range_key=last_range_key)
            result = _run(ctx, lambda c: c.fetch_requests_by_creator(input))
    else:
        if partition_key or request_type:
            raise click.UsageError("delete requests can only be listed by --status or --created-by")
        if status:
            input = FetchByStatusInput(status=status.upper(), last_range_key=last_range_key)
            result = _run(ctx, lambda c: c.fetch_delete_requests_by_status(input))
        else:
            input = FetchByCreatorInput(created_by=created_by, last_range_key=last_range_key)
            result = _run(ctx, lambda c: c.fetch_delete_requests_by_creator(input))
    _echo_json(result)


@cli.command(name="config")
@click.argument("key", required=False)
@click.pass_context
def show_config(ctx, key: Optional[str]):
    """Show the effective configuration (file, env overrides and defaults).

    KEY: Optional dotted key, e.g. retry.max_retries
    """
    config_manager = _load_config_manager(ctx)
    if key is None:
        value = {section: config_manager.get(section) for section in ("service", "retry")}
    else:
        value = config_manager.get(key, _UNSET)
        if value is _UNSET:
            raise click.UsageError(f"Unknown config key: {key}")
    _echo_json(value)


def main():
    """Main entry point"""
    cli(obj={})


if __name__ == "__main__":
    main()
