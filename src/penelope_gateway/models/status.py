"""
GatewayStatus, built fresh on every fetch and never mutated.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

NOT_AVAILABLE = "N/A"


class SessionSummary(BaseModel):
    """Aggregated view of one sessions_list response."""
    model_config = ConfigDict(frozen=True)

    session_count: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    model: str = NOT_AVAILABLE
    last_activity: Optional[datetime] = None


class GatewayStatus(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_online: bool
    session_count: int = Field(default=0, ge=0)
    total_tokens: int = Field(default=0, ge=0)
    model: str = NOT_AVAILABLE
    last_activity: Optional[datetime] = None
    error: Optional[str] = None  # only set when offline

    @classmethod
    def online(cls, summary: SessionSummary) -> "GatewayStatus":
        return cls(
            is_online=True,
            session_count=summary.session_count,
            total_tokens=summary.total_tokens,
            model=summary.model,
            last_activity=summary.last_activity,
        )

    @classmethod
    def offline(cls, error: str = "Gateway offline") -> "GatewayStatus":
        return cls(is_online=False, error=error)
