"""
Penelope gateway error types.

Only setup defects are raised. Runtime failures (network, HTTP, malformed
response, ok=false) are folded into GatewayStatus.error; their codes are
listed here so logs and callers can tell them apart.
"""

from typing import Any, Optional

NETWORK_ERROR = "network_error"
HTTP_ERROR = "http_error"
MALFORMED_RESPONSE = "malformed_response"
API_ERROR = "api_error"


class GatewayError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class MissingConfigurationError(GatewayError):
    def __init__(self, message: str = "Gateway URL or token not configured"):
        super().__init__("missing_configuration", message)


class InvalidURLError(GatewayError):
    def __init__(self, url: str, message: str = "Invalid gateway URL"):
        super().__init__("invalid_url", message, {"url": url})


class InvalidTokenError(GatewayError):
    def __init__(self, message: str = "Auth token must be printable ASCII"):
        super().__init__("invalid_token", message)
