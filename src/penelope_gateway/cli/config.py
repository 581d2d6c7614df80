"""CLI: penelope config show|set|clear"""

from typing import Optional

import click
from rich.console import Console
from rich.table import Table

import penelope_gateway.config as settings
from penelope_gateway.config import GatewayConfig, load_config, save_config

console = Console()


def _mask(token: str) -> str:
    if not token:
        return "[dim](not set)[/dim]"
    if len(token) <= 8:
        return "•" * len(token)
    return f"{token[:4]}…{token[-4:]}"


@click.group()
def config():
    """Gateway connection settings."""


@config.command("show")
def config_show():
    """Show the gateway URL and (masked) token."""
    cfg = load_config()
    table = Table(title="Gateway configuration", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    table.add_row("Gateway URL", cfg.gateway_url or "[dim](not set)[/dim]")
    table.add_row("Auth token", _mask(cfg.auth_token))
    table.add_row("File", str(settings.CONFIG_FILE))
    console.print(table)


@config.command("set")
@click.option("--url", "gateway_url", default=None, help="Gateway base URL")
@click.option("--token", "auth_token", default=None, help="Gateway auth token")
def config_set(gateway_url: Optional[str], auth_token: Optional[str]):
    """Store the gateway URL and/or token."""
    if gateway_url is None and auth_token is None:
        gateway_url = click.prompt("Gateway URL", default=load_config(use_env=False).gateway_url)
        auth_token = click.prompt("Auth token", hide_input=True)

    cfg = load_config(use_env=False)
    updates = {}
    if gateway_url is not None:
        updates["gateway_url"] = gateway_url.strip()
    if auth_token is not None:
        updates["auth_token"] = auth_token.strip()
    save_config(cfg.model_copy(update=updates))
    console.print(f"[green]Saved to {settings.CONFIG_FILE}[/green]")


@config.command("clear")
def config_clear():
    """Reset to defaults (placeholder URL, no token)."""
    save_config(GatewayConfig())
    console.print("[green]Configuration cleared.[/green]")
