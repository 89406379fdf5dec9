# bkchart/routes/chart_routes.py
from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..auth import can_access_member
from ..chart_core import (
    aggregate_progress,
    chart_today,
    daily_sheet,
    date_window,
    INT_COLUMN_MAX,
    normalize_effort,
    normalize_period,
    upsert_record,
)
from ..errors import ChartError

chart_bp = Blueprint("chart", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _parse_date(value):
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        return None


def _forbidden():
    return jsonify({"message": "not allowed to access this member"}), 403


def _chart_error(e: ChartError):
    if e.status_code >= 500:
        current_app.logger.exception(f"[chart] {e.message}")
    return jsonify({"message": e.message}), e.status_code


# ------------------------------
# GET /api/members/<id>/daily/<YYYY-MM-DD>
# ------------------------------
@chart_bp.route("/<int:member_id>/daily/<day>", methods=["GET"])
@jwt_required()
def get_daily(member_id, day):
    if not can_access_member(member_id):
        return _forbidden()

    the_day = _parse_date(day)
    if the_day is None:
        return jsonify({"message": "invalid date, expected YYYY-MM-DD"}), 400

    try:
        entries = daily_sheet(member_id, the_day)
    except ChartError as e:
        return _chart_error(e)

    return jsonify(
        {
            "date": the_day.isoformat(),
            "efforts": {str(e.point_id): e.effort for e in entries},
            "entries": [e.to_dict() for e in entries],
        }
    ), 200


# ------------------------------
# POST /api/members/<id>/daily
# ------------------------------
@chart_bp.route("/<int:member_id>/daily", methods=["POST"])
@jwt_required()
def post_daily(member_id):
    """
    Expected body:
    {
      "date": "2024-03-15",   # optional, defaults to today
      "pointId": 3,
      "effort": 80            # or "completed": true
    }
    """
    if not can_access_member(member_id):
        return _forbidden()

    data = request.get_json(silent=True) or {}

    raw_date = data.get("date")
    the_day = chart_today() if not raw_date else _parse_date(raw_date)
    if the_day is None:
        return jsonify({"message": "invalid date, expected YYYY-MM-DD"}), 400

    point_id = data.get("pointId", data.get("point_id"))
    if isinstance(point_id, bool) or (isinstance(point_id, float) and not point_id.is_integer()):
        return jsonify({"message": "pointId must be an integer"}), 400
    try:
        point_id = int(point_id)
    except (TypeError, ValueError, OverflowError):
        return jsonify({"message": "pointId must be an integer"}), 400
    if not 0 < point_id <= INT_COLUMN_MAX:
        return jsonify({"message": "Unknown member or point"}), 400

    effort = data.get("effort", data.get("completed"))
    if effort is None:
        return jsonify({"message": "effort or completed is required"}), 400

    try:
        effort = normalize_effort(effort)
        record = upsert_record(member_id, point_id, the_day, effort)
    except ChartError as e:
        return _chart_error(e)

    return jsonify({"message": "Saved", "record": record.to_dict()}), 200


# ------------------------------
# GET /api/members/<id>/progress/<period>
# ------------------------------
@chart_bp.route("/<int:member_id>/progress/<period>", methods=["GET"])
@jwt_required()
def get_progress(member_id, period):
    if not can_access_member(member_id):
        return _forbidden()

    today = chart_today()
    start, end = date_window(period, today)

    try:
        progress = aggregate_progress(member_id, period, today=today)
    except ChartError as e:
        return _chart_error(e)

    return jsonify(
        {
            "period": normalize_period(period),
            "start": start.isoformat(),
            "end": end.isoformat(),
            "progress": [p.to_dict() for p in progress],
        }
    ), 200
