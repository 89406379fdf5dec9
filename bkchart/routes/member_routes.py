# bkchart/routes/member_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity

from .. import db
from ..auth import create_member_token, member_required
from ..models.member import Member
from ..password_reset import request_reset, reset_password

members_bp = Blueprint("members", __name__)

MIN_PASSWORD_LENGTH = 6
RESET_REQUESTED_MESSAGE = "If the mobile is registered with an email, a reset code has been sent"


# -----------------------------
# Register / login
# -----------------------------
@members_bp.route("/register", methods=["POST"])
def register():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    centre = (data.get("centre") or "").strip()
    mobile = (data.get("mobile") or "").strip()
    email = (data.get("email") or "").strip().lower() or None
    password = data.get("password") or ""  # do NOT strip passwords

    if not name or not centre or not mobile or not password:
        return jsonify({"message": "name, centre, mobile and password are required"}), 400

    if len(password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": f"password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400

    if Member.query.filter_by(mobile=mobile).first():
        return jsonify({"message": "Mobile already registered"}), 400

    member = Member(
        name=name,
        centre=centre,
        mobile=mobile,
        email=email,
        status=current_app.config.get("MEMBER_DEFAULT_STATUS", "approved"),
    )
    member.set_password(password)

    try:
        db.session.add(member)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Registration Error: {e}")
        return jsonify({"message": "Server error"}), 500

    return jsonify({"member": member.to_dict()}), 201


@members_bp.route("/login", methods=["POST"])
def login():
    data = request.get_json(silent=True) or {}

    mobile = (data.get("mobile") or "").strip()
    password = data.get("password") or ""

    if not mobile or not password:
        return jsonify({"message": "mobile and password are required"}), 400

    member = Member.query.filter_by(mobile=mobile).first()
    if not member or not member.check_password(password):
        current_app.logger.info(f"[members/login] invalid credentials for mobile='{mobile}'")
        return jsonify({"message": "Invalid credentials"}), 401

    if member.status != "approved":
        return jsonify({"message": f"Account is {member.status}"}), 403

    token = create_member_token(member)
    return jsonify({"token": token, "member": member.to_dict()}), 200


@members_bp.route("/me", methods=["GET"])
@member_required
def me():
    member = db.session.get(Member, int(get_jwt_identity()))
    if not member:
        return jsonify({"message": "member not found"}), 404
    return jsonify({"member": member.to_dict()}), 200


# -----------------------------
# Password reset by code
# -----------------------------
@members_bp.route("/password/forgot", methods=["POST"])
def forgot_password():
    data = request.get_json(silent=True) or {}
    mobile = (data.get("mobile") or "").strip()
    if not mobile:
        return jsonify({"message": "mobile is required"}), 400

    try:
        request_reset(mobile)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Password reset request error: {e}")
        return jsonify({"message": "Server error"}), 500

    # same answer whether or not the mobile exists
    return jsonify({"message": RESET_REQUESTED_MESSAGE}), 200


@members_bp.route("/password/reset", methods=["POST"])
def reset():
    data = request.get_json(silent=True) or {}
    mobile = (data.get("mobile") or "").strip()
    code = (data.get("code") or "").strip()
    new_password = data.get("new_password") or ""

    if not mobile or not code or not new_password:
        return jsonify({"message": "mobile, code and new_password are required"}), 400

    if len(new_password) < MIN_PASSWORD_LENGTH:
        return jsonify({"message": f"password must be at least {MIN_PASSWORD_LENGTH} characters"}), 400

    try:
        ok = reset_password(mobile, code, new_password)
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"Password reset error: {e}")
        return jsonify({"message": "Server error"}), 500

    if not ok:
        return jsonify({"message": "Invalid or expired code"}), 400
    return jsonify({"message": "Password updated"}), 200
