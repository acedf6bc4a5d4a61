from __future__ import annotations

from datetime import datetime
from typing import List

from extensions import db
from models import ActivityLog


def log_activity(
    guardian_id: int,
    action: str,
    details: str | None = None,
    timestamp: datetime | None = None,
    commit: bool = True,
) -> ActivityLog:
    """Append one activity log entry for ``guardian_id``.

    With ``commit=False`` the entry joins the caller's unit of work.
    """
    entry = ActivityLog(
        guardian_id=guardian_id,
        action=action,
        details=details,
        timestamp=timestamp or datetime.utcnow(),
    )
    db.session.add(entry)
    if commit:
        db.session.commit()
    return entry


def fetch_activity(guardian_id: int) -> List[ActivityLog]:
    return (
        ActivityLog.query.filter_by(guardian_id=guardian_id)
        .order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
        .all()
    )
