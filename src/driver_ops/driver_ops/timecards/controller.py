from __future__ import annotations

import logging
from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import format_duration, now_local, week_window
from ..common.responses import error_response, ok
from ..common.validators import optional_date, require_id
from ..container import Container
from .model import LiveClockEntry, WeekTimecardSummary

logger = logging.getLogger(__name__)


def _summary_json(summary: WeekTimecardSummary) -> dict:
    return {
        "driver_id": summary.driver_id,
        "full_name": summary.full_name,
        "week_start": summary.week_start.isoformat(),
        "week_end": summary.week_end.isoformat(),
        "days": [
            {
                "date": day.work_date.isoformat(),
                "total_seconds": day.total_seconds,
                "total": format_duration(day.total_seconds),
                "open": day.has_open_interval,
            }
            for day in summary.days
        ],
        "total_seconds": summary.total_seconds,
        "total": format_duration(summary.total_seconds),
        "active_since": summary.active_since.isoformat() if summary.active_since else None,
    }


def _live_json(entry: LiveClockEntry) -> dict:
    return {
        "driver_id": entry.driver_id,
        "full_name": entry.full_name,
        "license_number": entry.license_number,
        "clocked_in": entry.clocked_in,
        "active_since": entry.active_since.isoformat() if entry.active_since else None,
        "running_seconds": entry.running_seconds,
        "running": format_duration(entry.running_seconds),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/timecards", methods=["GET"], endpoint="api_admin_timecards")
    def api_admin_timecards():
        """Weekly totals per driver (mode=range, default) or who is on the clock now (mode=live)."""
        try:
            now = now_local()
            mode = (request.args.get("mode") or "range").strip().lower()

            if mode == "live":
                work_date = optional_date(request.args.get("date"), "date") or now.date()
                entries = container.timecard_aggregator.live_clock(work_date, now)
                return ok({"date": work_date.isoformat(), "drivers": [_live_json(e) for e in entries]})

            week_start = optional_date(request.args.get("weekStart"), "weekStart")
            week_end = optional_date(request.args.get("weekEnd"), "weekEnd")
            span = timedelta(days=container.week_display_days - 1)
            if week_start is None and week_end is None:
                week_start, week_end = week_window(
                    now.date(),
                    starts_on=container.week_starts_on,
                    days=container.week_display_days,
                )
            elif week_end is None:
                week_end = week_start + span
            elif week_start is None:
                week_start = week_end - span

            raw_ids = (request.args.get("driverIds") or "").strip()
            driver_ids = [require_id(i, "driverIds") for i in raw_ids.split(",") if i.strip()] if raw_ids else None

            summaries = container.timecard_aggregator.summarize(driver_ids, week_start, week_end, now)
        except Exception as e:
            return error_response(e, context="timecards")

        logger.info("[Timecards] Served %s timecards for %s..%s", len(summaries), week_start, week_end)
        return ok(
            {
                "week_start": week_start.isoformat(),
                "week_end": week_end.isoformat(),
                "timecards": [_summary_json(s) for s in summaries],
            }
        )
