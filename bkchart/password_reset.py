# bkchart/password_reset.py
import hashlib
import logging
import secrets
from datetime import datetime, timedelta

from flask import current_app

from . import db
from .mailer import send_reset_code
from .models.member import Member
from .models.password_reset import PasswordResetCode

logger = logging.getLogger(__name__)

CODE_DIGITS = 6


def generate_reset_code() -> str:
    return "".join(secrets.choice("0123456789") for _ in range(CODE_DIGITS))


def hash_code(code: str) -> str:
    return hashlib.sha256(code.strip().encode()).hexdigest()


def request_reset(mobile: str) -> bool:
    """
    Issue a reset code for the member with this mobile and mail it.

    Returns True when a code was sent. Unknown mobiles and members without an
    email return False; callers answer both cases the same way.
    """
    cleanup_expired_codes()

    member = Member.query.filter_by(mobile=mobile).first()
    if not member or not member.email:
        logger.info("reset requested for mobile without mail target")
        return False

    now = datetime.utcnow()
    minutes = int(current_app.config.get("RESET_CODE_EXPIRY_MINUTES", 15))

    # a new code supersedes any earlier unused one
    PasswordResetCode.query.filter_by(member_id=member.id, used=False).update(
        {"used": True, "used_at": now}
    )

    code = generate_reset_code()
    reset = PasswordResetCode(
        member_id=member.id,
        code_hash=hash_code(code),
        expires_at=now + timedelta(minutes=minutes),
        used=False,
    )
    db.session.add(reset)
    db.session.commit()

    if not send_reset_code(member.email, member.name, code):
        db.session.delete(reset)
        db.session.commit()
        return False

    return True


def reset_password(mobile: str, code: str, new_password: str) -> bool:
    """Replace the password when ``code`` is a live code for this member."""
    member = Member.query.filter_by(mobile=mobile).first()
    if not member or not code:
        return False

    now = datetime.utcnow()
    reset = PasswordResetCode.query.filter(
        PasswordResetCode.member_id == member.id,
        PasswordResetCode.code_hash == hash_code(code),
        PasswordResetCode.used.is_(False),
        PasswordResetCode.expires_at > now,
    ).first()
    if not reset:
        return False

    member.set_password(new_password)
    reset.used = True
    reset.used_at = now
    db.session.commit()
    logger.info("password reset for member_id=%s", member.id)
    return True


def cleanup_expired_codes() -> int:
    """Delete expired codes, returns how many were removed."""
    count = PasswordResetCode.query.filter(
        PasswordResetCode.expires_at < datetime.utcnow()
    ).delete(synchronize_session=False)
    db.session.commit()
    return count
