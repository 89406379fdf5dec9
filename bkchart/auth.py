# bkchart/auth.py
from functools import wraps

from flask import jsonify
from flask_jwt_extended import create_access_token, get_jwt, get_jwt_identity, verify_jwt_in_request

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"


def create_member_token(member) -> str:
    return create_access_token(identity=str(member.id), additional_claims={"role": ROLE_MEMBER})


def create_admin_token(admin) -> str:
    return create_access_token(identity=str(admin.id), additional_claims={"role": ROLE_ADMIN})


def current_role():
    return get_jwt().get("role")


def current_member_id():
    """Member id of the caller, None for admin tokens."""
    if current_role() != ROLE_MEMBER:
        return None
    return int(get_jwt_identity())


def can_access_member(member_id: int) -> bool:
    # members see their own chart, admins see everyone's
    if current_role() == ROLE_ADMIN:
        return True
    return current_member_id() == int(member_id)


def admin_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if current_role() != ROLE_ADMIN:
            return jsonify({"message": "admin access required"}), 403
        return fn(*args, **kwargs)

    return wrapper


def member_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        verify_jwt_in_request()
        if current_role() != ROLE_MEMBER:
            return jsonify({"message": "member access required"}), 403
        return fn(*args, **kwargs)

    return wrapper
