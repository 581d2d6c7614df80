"""
penelope-gateway — status client for a Moltbot/Penelope gateway.

Polls the gateway's tools/invoke endpoint for session and token stats and
summarizes them for widgets, status bars and the `penelope` CLI.
"""

from penelope_gateway.client import GatewayClient, AsyncGatewayClient
from penelope_gateway.config import GatewayConfig, load_config, save_config
from penelope_gateway.aggregator import aggregate
from penelope_gateway.formatting import format_model_name, format_time_ago, format_tokens
from penelope_gateway.errors import GatewayError, MissingConfigurationError, InvalidURLError, InvalidTokenError
from penelope_gateway.models.session import Session
from penelope_gateway.models.status import GatewayStatus, SessionSummary

__version__ = "0.1.0"
__all__ = [
    "GatewayClient",
    "AsyncGatewayClient",
    "GatewayConfig",
    "load_config",
    "save_config",
    "aggregate",
    "format_model_name",
    "format_time_ago",
    "format_tokens",
    "GatewayError",
    "MissingConfigurationError",
    "InvalidURLError",
    "InvalidTokenError",
    "Session",
    "GatewayStatus",
    "SessionSummary",
]
