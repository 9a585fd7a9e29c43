"""CLI entry point for Cosmos Explorer."""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from cosmos_explorer import __version__
from cosmos_explorer.accounts.prompts import TerminalPrompter
from cosmos_explorer.accounts.registry import AttachedAccountsRegistry
from cosmos_explorer.config import Config, ConfigError, load_config
from cosmos_explorer.exceptions import ExplorerError, UserCancelledError
from cosmos_explorer.experiences import API, get_experience, parse_api
from cosmos_explorer.secrets import load_secret_store
from cosmos_explorer.state import JsonStateStore

_API_CHOICES = [api.name.lower() for api in API]


def _configure_logging(config: Config) -> None:
    """Send logs to a file so they never draw over the TUI."""
    log_path = config.log_path
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        click.echo(f"Warning: cannot create log directory {log_path.parent}: {e}", err=True)
        return
    logging.basicConfig(
        filename=str(log_path),
        level=getattr(logging, config.logging.level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _build_registry(config: Config) -> AttachedAccountsRegistry:
    secret_store = load_secret_store(config.secrets.enabled)
    if secret_store is None:
        click.echo(
            "Warning: no secret store available; attached accounts last for "
            "this session only.",
            err=True,
        )
    return AttachedAccountsRegistry(
        JsonStateStore(config.state_path),
        secret_store,
        prompter=TerminalPrompter(),
        emulator=config.emulator,
    )


def _run(coro) -> object:
    try:
        return asyncio.run(coro)
    except UserCancelledError:
        sys.exit(1)
    except ExplorerError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="cosmos-explorer")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to cosmos-explorer.toml configuration file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Cosmos Explorer: attached database accounts.

    When invoked without a subcommand, launches the interactive TUI.
    """
    ctx.ensure_object(dict)
    try:
        config = load_config(config_path)
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    _configure_logging(config)
    ctx.obj["config"] = config

    if ctx.invoked_subcommand is None:
        _launch_tui(config)


def _launch_tui(config: Config) -> None:
    from cosmos_explorer.tui.app import ExplorerApp

    app = ExplorerApp(_build_registry(config))
    app.run()


@cli.command(name="list")
@click.pass_context
def list_accounts(ctx: click.Context) -> None:
    """List attached database accounts."""
    registry = _build_registry(ctx.obj["config"])
    accounts = _run(registry.list_accounts())
    if not accounts:
        click.echo("No attached database accounts.")
        return
    for account in accounts:
        short_name = get_experience(account.api).short_name
        suffix = "  (emulator)" if account.is_emulator else ""
        click.echo(f"{account.id}\t{short_name}\t{account.label}{suffix}")


@cli.command()
@click.option(
    "--api", "api_name",
    type=click.Choice(_API_CHOICES, case_sensitive=False),
    default=None,
    help="Account API. Prompts interactively when omitted.",
)
@click.option(
    "--connection-string",
    default=None,
    help="Connection string. Prompts interactively when omitted.",
)
@click.pass_context
def attach(ctx: click.Context, api_name: str | None, connection_string: str | None) -> None:
    """Attach a database account by connection string."""
    registry = _build_registry(ctx.obj["config"])
    if api_name and connection_string:
        attached = _run(registry.attach_connection_string(parse_api(api_name), connection_string))
    elif api_name or connection_string:
        raise click.UsageError("--api and --connection-string must be given together.")
    else:
        attached = _run(registry.attach_new_account())
    if attached:
        click.echo("Attached.")


@cli.command(name="attach-emulator")
@click.option(
    "--api", "api_name",
    type=click.Choice(["mongodb", "documentdb"], case_sensitive=False),
    default=None,
    help="Emulator API. Prompts interactively when omitted.",
)
@click.pass_context
def attach_emulator(ctx: click.Context, api_name: str | None) -> None:
    """Attach the local database emulator."""
    registry = _build_registry(ctx.obj["config"])
    api = parse_api(api_name) if api_name else None
    attached = _run(registry.attach_emulator(api=api))
    if attached:
        click.echo("Attached.")
    else:
        click.echo("Nothing attached.")


@cli.command()
@click.argument("account_id")
@click.pass_context
def detach(ctx: click.Context, account_id: str) -> None:
    """Detach the account with ACCOUNT_ID."""
    registry = _build_registry(ctx.obj["config"])
    if _run(registry.detach(account_id)):
        click.echo(f"Detached {account_id}.")
    else:
        click.echo(f"No attached account with id {account_id}.", err=True)
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
