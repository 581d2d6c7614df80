"""
Penelope CLI — `penelope` command.

Commands:
  penelope status          Fetch and show gateway status (--watch to poll)
  penelope test            One-line connection check
  penelope config <cmd>    Show / set / clear gateway URL and token
"""

import asyncio
import logging

try:
    import click
    from rich.console import Console
    from rich.logging import RichHandler
except ImportError:
    raise SystemExit("CLI requires extras: pip install penelope-gateway[cli]")

from penelope_gateway.client import AsyncGatewayClient
from penelope_gateway.config import GatewayConfig, load_config

console = Console()


def _load_config() -> GatewayConfig:
    return load_config()


def _get_client() -> AsyncGatewayClient:
    cfg = _load_config()
    if not cfg.is_configured:
        console.print("[red]Gateway not configured. Run `penelope config set --url ... --token ...` first.[/red]")
        raise SystemExit(1)
    return AsyncGatewayClient(cfg)


def _run(coro):
    return asyncio.run(coro)


@click.group()
@click.version_option("0.1.0")
@click.option("-v", "--verbose", is_flag=True, help="Log requests and failures.")
def main(verbose: bool):
    """Penelope — monitor your Moltbot gateway."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        )


# Register subcommands from separate modules
from penelope_gateway.cli.config import config
from penelope_gateway.cli.status import status_cmd, test_cmd

main.add_command(config)
main.add_command(status_cmd)
main.add_command(test_cmd)


if __name__ == "__main__":
    main()
