from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..breaks.model import SessionBreak
from ..core.enums import ActivityStatus
from ..core.exceptions import AggregationError
from ..sessions.model import WorkSession
from .model import DailyActivitySummary

logger = logging.getLogger(__name__)


class DailyActivityAggregator:
    """Build the daily summary from that day's sessions and their breaks.

    Totals only count completed sessions; an in-progress session or break is
    reflected in ``status``, ``last_logged_in`` and ``last_break_start`` but
    never in the sums. Nothing is read from the previous row except its id, so
    a lost row is rebuilt exactly from the ledgers.
    """

    def recompute(
        self,
        *,
        employee_id: int,
        work_date: date,
        sessions: Sequence[WorkSession],
        breaks: Sequence[SessionBreak] = (),
        previous: Optional[DailyActivitySummary] = None,
    ) -> DailyActivitySummary:
        for s in sessions:
            if s.employee_id != employee_id or s.work_date != work_date:
                raise AggregationError(
                    f"Session {s.session_id} does not belong to employee {employee_id} on {work_date}"
                )

        session_ids = {s.session_id for s in sessions}
        for b in breaks:
            if b.session_id not in session_ids:
                raise AggregationError(f"Break {b.break_id} does not belong to a session of {work_date}")

        completed = [s for s in sessions if not s.is_ongoing]
        has_ongoing = any(s.is_ongoing for s in sessions)

        if has_ongoing:
            on_break = any(b.is_active for b in breaks)
            status = ActivityStatus.ON_BREAK if on_break else ActivityStatus.ACTIVE
        else:
            status = ActivityStatus.LOGGED_OUT

        ends = [s.end_time for s in completed if s.end_time is not None]
        break_ends = [b.end_time for b in breaks if b.end_time is not None]

        summary = DailyActivitySummary(
            employee_id=employee_id,
            work_date=work_date,
            status=status,
            session_duration=sum(s.session_duration for s in completed),
            login_count=len(sessions),
            total_break_time=sum(s.total_break_duration for s in completed),
            last_logged_in=max((s.start_time for s in sessions), default=None),
            last_logged_out=max(ends, default=None),
            last_break_start=max((b.start_time for b in breaks), default=None),
            last_break_end=max(break_ends, default=None),
            total_shift_hours=sum(s.shift_hours for s in completed),
            total_overtime=sum(s.total_overtime for s in completed),
            total_undertime=sum(s.undertime for s in completed),
            activity_id=previous.activity_id if previous else None,
        )

        logger.debug(
            "daily summary recomputed from %d sessions",
            len(sessions),
            extra={"employee_id": employee_id, "work_date": work_date},
        )
        return summary
