"""
Gateway connection settings.

Stored as JSON in ~/.penelope/config.json; PENELOPE_GATEWAY_URL and
PENELOPE_AUTH_TOKEN override the file. The settings are read once and passed
explicitly to the client.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ValidationError

CONFIG_FILE = Path.home() / ".penelope" / "config.json"
DEFAULT_GATEWAY_URL = "https://your-hostname.your-tailnet.ts.net"

ENV_GATEWAY_URL = "PENELOPE_GATEWAY_URL"
ENV_AUTH_TOKEN = "PENELOPE_AUTH_TOKEN"


class GatewayConfig(BaseModel):
    gateway_url: str = DEFAULT_GATEWAY_URL
    auth_token: str = ""

    @property
    def is_configured(self) -> bool:
        return bool(self.gateway_url) and bool(self.auth_token)


def load_config(path: Optional[Path] = None, use_env: bool = True) -> GatewayConfig:
    path = path or CONFIG_FILE
    try:
        cfg = GatewayConfig.model_validate(json.loads(path.read_text()))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, ValidationError):
        cfg = GatewayConfig()

    if use_env:
        overrides = {}
        if os.environ.get(ENV_GATEWAY_URL):
            overrides["gateway_url"] = os.environ[ENV_GATEWAY_URL]
        if os.environ.get(ENV_AUTH_TOKEN):
            overrides["auth_token"] = os.environ[ENV_AUTH_TOKEN]
        if overrides:
            cfg = cfg.model_copy(update=overrides)
    return cfg


def save_config(cfg: GatewayConfig, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg.model_dump(), indent=2))
