"""CLI: penelope status, penelope test"""

import json
import time
from typing import Optional

import click
from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from penelope_gateway.errors import GatewayError
from penelope_gateway.formatting import format_time_ago, format_tokens
from penelope_gateway.models.status import NOT_AVAILABLE, GatewayStatus

console = Console()

DEFAULT_REFRESH_MINUTES = 15


def _get_client():
    from penelope_gateway.cli.main import _get_client
    return _get_client()


def _run(coro):
    from penelope_gateway.cli.main import _run
    return _run(coro)


def render_status(status: GatewayStatus, gateway_url: str = "") -> Panel:
    """Medium-widget layout: header with state and model, then sessions / tokens / activity."""
    header = Text()
    header.append("● ", style="green" if status.is_online else "red")
    header.append("Running" if status.is_online else "Offline", style="bold green" if status.is_online else "bold red")
    if status.is_online and status.model != NOT_AVAILABLE:
        header.append("   ")
        header.append(f" {status.model} ", style="white on blue")

    if status.is_online:
        stats = Table.grid(padding=(0, 4))
        for _ in range(3):
            stats.add_column(justify="center")
        stats.add_row(Text("SESSIONS", style="dim"), Text("TOKENS", style="dim"), Text("ACTIVITY", style="dim"))
        stats.add_row(
            Text(str(status.session_count), style="bold"),
            Text(format_tokens(status.total_tokens), style="bold"),
            Text(format_time_ago(status.last_activity), style="bold"),
        )
        body = Group(header, Text(""), stats)
    else:
        body = Group(
            header,
            Text(""),
            Text("Gateway Unreachable", style="bold red"),
            Text(status.error or "Unable to connect to gateway", style="dim"),
        )

    footer = f"Updated: {time.strftime('%H:%M:%S')}"
    host = _short_host(gateway_url)
    if host:
        footer += f"  ·  {host}"
    return Panel(body, title="[bold #e94560]Penelope Gateway[/bold #e94560]", subtitle=footer, expand=False)


def _short_host(gateway_url: str) -> str:
    # first label of the hostname, e.g. "penelope" for penelope.tailnet.ts.net
    host = gateway_url.split("://", 1)[-1].split("/", 1)[0].split(":", 1)[0]
    return host.split(".", 1)[0]


@click.command("status")
@click.option("--json-output", "--json", is_flag=True, help="Print the raw status as JSON.")
@click.option("-w", "--watch", is_flag=True, help="Keep polling on a fixed schedule.")
@click.option("--interval", default=DEFAULT_REFRESH_MINUTES, type=click.FloatRange(min=0, min_open=True),
              show_default=True, help="Minutes between refreshes with --watch.")
def status_cmd(json_output: bool, watch: bool, interval: float):
    """Fetch gateway status."""

    async def _fetch(client) -> GatewayStatus:
        async with client:
            return await client.fetch_status()

    def _show() -> GatewayStatus:
        client = _get_client()
        try:
            status = _run(_fetch(client))
        except GatewayError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)
        if json_output:
            click.echo(json.dumps(status.model_dump(mode="json"), indent=2))
        else:
            console.print(render_status(status, client.gateway_url))
        return status

    if not watch:
        status = _show()
        if not status.is_online:
            raise SystemExit(2)
        return

    try:
        while True:
            _show()
            time.sleep(interval * 60)
    except KeyboardInterrupt:
        console.print("[dim]Stopped.[/dim]")


@click.command("test")
@click.option("--url", "gateway_url", default=None, help="Override the configured gateway URL")
@click.option("--token", "auth_token", default=None, help="Override the configured auth token")
def test_cmd(gateway_url: Optional[str], auth_token: Optional[str]):
    """Test the connection to the gateway."""

    async def _test() -> str:
        from penelope_gateway.client import AsyncGatewayClient
        from penelope_gateway.cli.main import _load_config
        async with AsyncGatewayClient(_load_config()) as client:
            with console.status("Testing connection..."):
                return await client.test_connection(gateway_url, auth_token)

    result = _run(_test())
    if result.startswith("Success"):
        console.print(f"[green]✓ {result}[/green]")
    else:
        console.print(f"[red]✗ {result}[/red]")
        raise SystemExit(1)
