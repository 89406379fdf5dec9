# bkchart/routes/admin_routes.py

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy import func

from .. import db
from ..auth import admin_required, create_admin_token
from ..models.admin import Admin
from ..models.member import MEMBER_STATUSES, Member
from ..models.point import Point

admin_bp = Blueprint("admin", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _safe_int_or_none(v):
    if v is None or isinstance(v, bool):
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


# ------------------------------
# POST /api/admin/login
# ------------------------------
@admin_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}

    username = (data.get("username") or "").strip()
    password = data.get("password") or ""

    if not username or not password:
        return jsonify({"message": "username and password are required"}), 400

    admin = Admin.query.filter_by(username=username).first()
    if not admin or not admin.check_password(password):
        current_app.logger.info(f"[admin/login] invalid credentials for '{username}'")
        return jsonify({"message": "Invalid credentials"}), 401

    token = create_admin_token(admin)
    return jsonify({"token": token, "admin": admin.to_dict()}), 200


# ------------------------------
# Members
# ------------------------------
@admin_bp.route("/members", methods=["GET"])
@admin_required
def list_members():
    q = Member.query
    status = request.args.get("status")
    if status:
        q = q.filter(Member.status == status)

    members = q.order_by(Member.name.asc(), Member.id.asc()).all()
    return jsonify({"members": [m.to_dict() for m in members]}), 200


@admin_bp.route("/members/<int:member_id>/status", methods=["PATCH"])
@admin_required
def set_member_status(member_id):
    data = request.get_json(silent=True) or {}
    status = (data.get("status") or "").strip().lower()

    if status not in MEMBER_STATUSES:
        return jsonify({"message": f"status must be one of {', '.join(MEMBER_STATUSES)}"}), 400

    member = db.session.get(Member, member_id)
    if not member:
        return jsonify({"message": "member not found"}), 404

    member.status = status
    db.session.commit()
    return jsonify({"member": member.to_dict()}), 200


@admin_bp.route("/members/<int:member_id>", methods=["DELETE"])
@admin_required
def delete_member(member_id):
    member = db.session.get(Member, member_id)
    if not member:
        return jsonify({"message": "member not found"}), 404

    try:
        # daily records and reset codes go with the member
        db.session.delete(member)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete member error: {e}")
        return jsonify({"message": "Server error"}), 500

    return jsonify({"message": "Member deleted"}), 200


# ------------------------------
# Points
# ------------------------------
@admin_bp.route("/points", methods=["POST"])
@admin_required
def create_point():
    data = request.get_json(silent=True) or {}
    text = (data.get("text") or "").strip()
    if not text:
        return jsonify({"message": "text is required"}), 400

    order_num = _safe_int_or_none(data.get("order"))
    if order_num is None:
        max_order = db.session.query(func.max(Point.order_num)).scalar()
        order_num = (max_order or 0) + 1

    point = Point(text=text, order_num=order_num)
    db.session.add(point)
    db.session.commit()
    return jsonify({"point": point.to_dict()}), 201


@admin_bp.route("/points/<int:point_id>", methods=["PUT"])
@admin_required
def update_point(point_id):
    point = db.session.get(Point, point_id)
    if not point:
        return jsonify({"message": "point not found"}), 404

    data = request.get_json(silent=True) or {}

    if "text" in data:
        text = (data.get("text") or "").strip()
        if not text:
            return jsonify({"message": "text cannot be empty"}), 400
        point.text = text

    if "order" in data:
        order_num = _safe_int_or_none(data.get("order"))
        if order_num is None:
            return jsonify({"message": "order must be an integer"}), 400
        point.order_num = order_num

    db.session.commit()
    return jsonify({"point": point.to_dict()}), 200


@admin_bp.route("/points/<int:point_id>", methods=["DELETE"])
@admin_required
def delete_point(point_id):
    point = db.session.get(Point, point_id)
    if not point:
        return jsonify({"message": "point not found"}), 404

    try:
        db.session.delete(point)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Delete point error: {e}")
        return jsonify({"message": "Server error"}), 500

    return jsonify({"message": "Point deleted"}), 200
