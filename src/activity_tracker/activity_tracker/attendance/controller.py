from __future__ import annotations

import csv
import io
import logging
from datetime import timedelta
from functools import wraps

from flask import Flask, jsonify, request, session

from ..common.datetime_utils import now_local, parse_iso_date
from ..container import Container
from ..core.constants import DEFAULT_SUMMARY_DAYS
from ..core.exceptions import AggregationError, ConflictError, DomainError, NotFoundError
from .model import summary_to_dict

logger = logging.getLogger(__name__)

SUMMARY_CSV_FIELDS = [
    "date",
    "status",
    "login_count",
    "session_duration",
    "total_break_time",
    "total_shift_hours",
    "total_overtime",
    "total_undertime",
    "last_logged_in",
    "last_logged_out",
    "last_break_start",
    "last_break_end",
]


def _error(message: str, status_code: int):
    return jsonify({"success": False, "error": message}), status_code


def _domain_error_response(exc: DomainError):
    # Missing session/break is reported as a conflict with the client's view of the state.
    if isinstance(exc, (ConflictError, NotFoundError)):
        return _error(str(exc), 409)
    if isinstance(exc, AggregationError):
        return _error("Failed to update attendance summary", 500)
    return _error(str(exc), 400)


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return _error("Unauthorized", 401)
            return view(*args, **kwargs)

        return wrapper

    def _current_employee_id() -> int:
        return int(session["user_id"])

    def _date_range():
        today = now_local().date()
        start_raw = request.args.get("start")
        end_raw = request.args.get("end")
        end = parse_iso_date(end_raw) if end_raw else today
        start = parse_iso_date(start_raw) if start_raw else end - timedelta(days=DEFAULT_SUMMARY_DAYS - 1)
        return start, end

    @app.route("/api/activity/check-ongoing", methods=["GET"], endpoint="activity_check_ongoing")
    @login_required
    def check_ongoing():
        try:
            view = service.get_status(_current_employee_id())
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("check-ongoing failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to check status.", 500)

        return jsonify({"success": True, **view.to_dict()}), 200

    @app.route("/api/activity/start-session", methods=["POST"], endpoint="activity_start_session")
    @login_required
    def start_session():
        try:
            started = service.start_session(_current_employee_id())
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("start-session failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to start session.", 500)

        return jsonify({"success": True, "message": "Session started.", "session_id": started.session_id}), 200

    @app.route("/api/activity/end-session", methods=["POST"], endpoint="activity_end_session")
    @login_required
    def end_session():
        try:
            closed = service.end_session(_current_employee_id())
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("end-session failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to end session.", 500)

        return jsonify(
            {
                "success": True,
                "message": "Session ended.",
                "session_id": closed.session_id,
                "duration": closed.session_duration,
                "break_duration": closed.total_break_duration,
                "break_count": closed.break_count,
                "shift_hours": closed.shift_hours,
                "overtime_early": closed.overtime_early,
                "overtime_late": closed.overtime_late,
                "total_overtime": closed.total_overtime,
                "undertime": closed.undertime,
            }
        ), 200

    @app.route("/api/activity/start-break", methods=["POST"], endpoint="activity_start_break")
    @login_required
    def start_break():
        data = request.get_json(silent=True) or {}
        try:
            brk = service.start_break(
                _current_employee_id(),
                data.get("reason"),
                notes=data.get("notes"),
            )
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("start-break failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to start break.", 500)

        return jsonify({"success": True, "message": "Break started.", "break_id": brk.break_id}), 200

    @app.route("/api/activity/end-break", methods=["POST"], endpoint="activity_end_break")
    @login_required
    def end_break():
        try:
            brk = service.end_break(_current_employee_id())
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("end-break failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to end break.", 500)

        return jsonify({"success": True, "message": "Break ended.", "break_duration": brk.duration}), 200

    @app.route("/api/activity/summary", methods=["GET"], endpoint="activity_summary")
    @login_required
    def summary():
        try:
            start, end = _date_range()
            days = service.get_daily_summaries(_current_employee_id(), start=start, end=end)
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("summary failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to load summary.", 500)

        return jsonify(
            {
                "success": True,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "days": [summary_to_dict(d) for d in days],
            }
        ), 200

    @app.route("/api/activity/summary/export", methods=["GET"], endpoint="activity_summary_export")
    @login_required
    def summary_export():
        try:
            start, end = _date_range()
            days = service.get_daily_summaries(_current_employee_id(), start=start, end=end)
        except DomainError as e:
            return _domain_error_response(e)
        except Exception:
            logger.exception("summary export failed", extra={"path": request.path, "method": request.method})
            return _error("Failed to export summary.", 500)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=SUMMARY_CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for d in days:
            writer.writerow(summary_to_dict(d))

        filename = f"activity_{start:%Y%m%d}_{end:%Y%m%d}.csv"
        return app.response_class(
            out.getvalue().encode("utf-8-sig"),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
