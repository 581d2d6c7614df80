"""
Gateway wire models for the sessions_list tool invocation.

POST {baseURL}/tools/invoke
    {"tool": "sessions_list", "action": "json", "args": {}}
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAIN_SESSION_KEY = "agent:main:main"


def epoch_ms_to_datetime(value: int) -> datetime:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


class Session(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    model: Optional[str] = None
    total_tokens: Optional[int] = Field(default=None, ge=0, alias="totalTokens")
    updated_at: Optional[int] = Field(default=None, alias="updatedAt")  # epoch ms

    @field_validator("updated_at")
    @classmethod
    def _representable(cls, v: Optional[int]) -> Optional[int]:
        if v is not None:
            try:
                epoch_ms_to_datetime(v)
            except (ValueError, OverflowError, OSError) as e:
                raise ValueError(f"updatedAt out of range: {v}") from e
        return v

    @property
    def is_main(self) -> bool:
        return self.key == MAIN_SESSION_KEY


class SessionListDetails(BaseModel):
    count: int = Field(ge=0)
    sessions: list[Session]


class ToolResult(BaseModel):
    details: Optional[SessionListDetails] = None


class APIError(BaseModel):
    type: str
    message: str


class ToolInvokeResponse(BaseModel):
    """Envelope wrapping every tool invocation result."""
    ok: bool
    result: Optional[ToolResult] = None
    error: Optional[APIError] = None


def build_tool_request(tool: str, action: str = "json", args: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Build a tools/invoke request body."""
    return {"tool": tool, "action": action, "args": args or {}}
