from penelope_gateway.models.session import (
    APIError,
    Session,
    SessionListDetails,
    ToolInvokeResponse,
    ToolResult,
    build_tool_request,
)
from penelope_gateway.models.status import GatewayStatus, SessionSummary

__all__ = [
    "APIError",
    "Session",
    "SessionListDetails",
    "ToolInvokeResponse",
    "ToolResult",
    "build_tool_request",
    "GatewayStatus",
    "SessionSummary",
]
