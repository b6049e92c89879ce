from __future__ import annotations

from typing import Any, Dict, Optional

from flask import Flask, jsonify, request

from ..common.datetime_utils import format_date, format_hhmm, format_minutes, parse_hhmm, parse_iso_date, parse_period
from ..common.http import api_errors
from ..common.validators import require_lunch_minutes, require_punch_location
from ..container import Container
from ..core.constants import DEFAULT_LOG_LIMIT
from ..core.enums import Location
from ..core.exceptions import NoEventsForDateError
from ..days.model import DayRecord
from ..summary.model import DaySummary
from .service import PairPatch


def _optional_time(payload: Dict[str, Any], key: str):
    raw = payload.get(key)
    if raw is None or not str(raw).strip():
        return None
    return parse_hhmm(str(raw))


def _day_to_dict(record: Optional[DayRecord]) -> Optional[Dict[str, Any]]:
    if record is None:
        return None
    return {
        "date": format_date(record.date),
        "position": record.position.value,
        "start": format_hhmm(record.start_time),
        "end": format_hhmm(record.end_time),
        "lunch": record.lunch_minutes,
    }


def summary_to_dict(s: DaySummary) -> Dict[str, Any]:
    return {
        "date": format_date(s.date),
        "position": s.position.value if s.position else None,
        "position_label": s.position.label if s.position else None,
        "events": [
            {
                "id": p.event.id,
                "time": format_hhmm(p.event.time),
                "kind": p.event.kind.value,
                "position": p.event.location.value,
                "lunch": p.event.lunch,
                "pair": p.pair,
                "unmatched": p.unmatched,
            }
            for p in s.paired_events
        ],
        "pairs": [
            {
                "index": idx,
                "in": format_hhmm(p.in_event.time),
                "out": format_hhmm(p.out_event.time) if p.out_event else None,
                "duration": p.duration_minutes,
                "lunch": p.lunch_minutes,
                "position": p.location.value,
                "open": p.is_open,
            }
            for idx, p in enumerate(s.timeline.pairs, start=1)
        ],
        "gaps": [
            {"start": format_hhmm(g.start), "end": format_hhmm(g.end), "duration": g.duration_minutes}
            for g in s.timeline.gaps
        ],
        "lunch_minutes": s.lunch_minutes,
        "worked_minutes": s.worked_minutes,
        "expected_minutes": s.expected_minutes,
        "surplus_minutes": s.surplus_minutes,
        "surplus": format_minutes(s.surplus_minutes),
        "expected_exit": s.expected_exit.strftime("%Y-%m-%d %H:%M") if s.expected_exit else None,
    }


def register(app: Flask, container: Container) -> None:
    punches = container.punch_service
    summaries = container.summary_service

    @app.route("/api/days/<day>/punches", methods=["POST"], endpoint="add_punch")
    @api_errors
    def add_punch(day: str):
        work_date = parse_iso_date(day)
        payload = request.get_json(silent=True) or {}
        record = punches.apply_add(
            work_date,
            position=require_punch_location(payload.get("position")),
            start=_optional_time(payload, "start"),
            end=_optional_time(payload, "end"),
            lunch=require_lunch_minutes(payload.get("lunch")),
        )
        return jsonify({"success": True, "day": _day_to_dict(record)}), 201

    @app.route("/api/days/<day>/pairs/<int:index>", methods=["PATCH"], endpoint="edit_pair")
    @api_errors
    def edit_pair(day: str, index: int):
        work_date = parse_iso_date(day)
        payload = request.get_json(silent=True) or {}
        patch = PairPatch(
            position=require_punch_location(payload.get("position")),
            start=_optional_time(payload, "start"),
            end=_optional_time(payload, "end"),
            lunch=require_lunch_minutes(payload.get("lunch")),
        )
        record = punches.apply_edit(work_date, index, patch)
        return jsonify({"success": True, "day": _day_to_dict(record)}), 200

    @app.route("/api/days/<day>/pairs/<int:index>", methods=["DELETE"], endpoint="delete_pair")
    @api_errors
    def delete_pair(day: str, index: int):
        record = punches.apply_delete(parse_iso_date(day), index)
        return jsonify({"success": True, "day": _day_to_dict(record)}), 200

    @app.route("/api/days/<day>", methods=["DELETE"], endpoint="delete_day")
    @api_errors
    def delete_day(day: str):
        punches.apply_delete(parse_iso_date(day))
        return jsonify({"success": True, "day": None}), 200

    @app.route("/api/days/<day>", methods=["GET"], endpoint="get_day")
    @api_errors
    def get_day(day: str):
        work_date = parse_iso_date(day)
        summary = summaries.day_summary(work_date)
        if not summary.paired_events:
            raise NoEventsForDateError(format_date(work_date))
        return jsonify({"success": True, "summary": summary_to_dict(summary)}), 200

    @app.route("/api/days", methods=["GET"], endpoint="list_days")
    @api_errors
    def list_days():
        start, end = parse_period(request.args.get("range", ""))
        position = request.args.get("position")
        location = Location.from_code(position) if position else None
        period = summaries.period_summary(start, end, location=location)
        return jsonify(
            {
                "success": True,
                "start": format_date(period.start),
                "end": format_date(period.end),
                "days": [summary_to_dict(d) for d in period.days],
                "totals": {
                    "worked_minutes": period.total_worked_minutes,
                    "expected_minutes": period.total_expected_minutes,
                    "surplus_minutes": period.total_surplus_minutes,
                    "surplus": format_minutes(period.total_surplus_minutes),
                },
            }
        ), 200

    @app.route("/api/log", methods=["GET"], endpoint="list_log")
    @api_errors
    def list_log():
        limit = request.args.get("limit", type=int) or DEFAULT_LOG_LIMIT
        entries = punches.list_log(limit)
        return jsonify(
            {
                "success": True,
                "entries": [
                    {
                        "id": e.log_id,
                        "date": e.logged_at,
                        "operation": e.operation,
                        "target": e.target,
                        "message": e.message,
                    }
                    for e in entries
                ],
            }
        ), 200
