"""
Session aggregation: folds a sessions_list payload into a SessionSummary.
"""

from datetime import datetime
from typing import Optional, Sequence

from penelope_gateway.formatting import format_model_name
from penelope_gateway.models.session import Session, epoch_ms_to_datetime
from penelope_gateway.models.status import NOT_AVAILABLE, SessionSummary


def aggregate(count: int, sessions: Sequence[Session]) -> SessionSummary:
    """Sum tokens, pick the primary session's model and the latest activity.

    ``count`` is the gateway's own figure and is echoed as-is, even when it
    disagrees with ``len(sessions)``. If several sessions carry the primary
    key, the last one in received order supplies the model.
    """
    total_tokens = 0
    model = NOT_AVAILABLE
    last_activity: Optional[datetime] = None

    for session in sessions:
        total_tokens += session.total_tokens or 0

        if session.is_main and session.model is not None:
            model = format_model_name(session.model)

        if session.updated_at is not None:
            updated = epoch_ms_to_datetime(session.updated_at)
            # strict: equal timestamps keep the first one seen
            if last_activity is None or updated > last_activity:
                last_activity = updated

    return SessionSummary(
        session_count=count,
        total_tokens=total_tokens,
        model=model,
        last_activity=last_activity,
    )
