"""
Display formatters for gateway stats: model names, token counts, activity age.

All functions are pure; the presentation layer calls them, the client never does.
"""

import math
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

MODEL_NAMES = {
    "claude-opus-4-5": "Claude Opus",
    "claude-sonnet-4": "Claude Sonnet",
    "claude-3-5-sonnet": "Sonnet 3.5",
    "claude-3-opus": "Opus 3",
    "gpt-4": "GPT-4",
    "gpt-4-turbo": "GPT-4 Turbo",
}

_ONE_DECIMAL = Decimal("0.1")


def format_model_name(raw_id: str) -> str:
    """Map a raw model id to its display label, e.g. llama-3-70b -> Llama 3 70b."""
    if raw_id in MODEL_NAMES:
        return MODEL_NAMES[raw_id]
    words = raw_id.replace("-", " ").split(" ")
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _scaled(n: int, unit: int) -> str:
    return str((Decimal(n) / Decimal(unit)).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def format_tokens(n: int) -> str:
    """Abbreviate a token count: 2500000 -> 2.5M, 1500 -> 1.5K, 999 -> 999."""
    if n >= 1_000_000:
        return f"{_scaled(n, 1_000_000)}M"
    if n >= 1_000:
        return f"{_scaled(n, 1_000)}K"
    return str(n)


def format_time_ago(timestamp: Optional[datetime], now: Optional[datetime] = None) -> str:
    """Bucket the age of ``timestamp`` into Just now / Nm / Nh / Nd ago.

    Naive datetimes (for either argument) are taken as local time.
    """
    if timestamp is None:
        return "Never"
    if now is None:
        now = datetime.now(timezone.utc)
    if timestamp.tzinfo is None:
        timestamp = timestamp.astimezone()
    if now.tzinfo is None:
        now = now.astimezone()
    age = math.floor((now - timestamp).total_seconds())

    if age < 60:
        return "Just now"
    if age < 3600:
        return f"{age // 60}m ago"
    if age < 86400:
        return f"{age // 3600}h ago"
    return f"{age // 86400}d ago"
