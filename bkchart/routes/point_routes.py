# bkchart/routes/point_routes.py
from flask import Blueprint, jsonify

from ..chart_core import ordered_points

points_bp = Blueprint("points", __name__)


@points_bp.route("", methods=["GET"])
def list_points():
    return jsonify({"points": [p.to_dict() for p in ordered_points()]}), 200
