# bkchart/mailer.py
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app

logger = logging.getLogger(__name__)


def _reset_code_text(name: str, code: str, minutes: int) -> str:
    return (
        f"Om Shanti {name},\n\n"
        f"Your BK Chart password reset code is: {code}\n\n"
        f"The code is valid for {minutes} minutes. "
        "If you did not ask for a reset you can ignore this mail.\n"
    )


def send_reset_code(to_email: str, name: str, code: str) -> bool:
    """
    Mail a password reset code.

    Without MAIL_SERVER the code is only written to the log, which is what
    local development uses. Returns False when the SMTP delivery failed.
    """
    cfg = current_app.config
    minutes = cfg.get("RESET_CODE_EXPIRY_MINUTES", 15)

    if not cfg.get("MAIL_SERVER"):
        logger.warning("MAIL_SERVER not configured, reset code for %s: %s", to_email, code)
        return True

    msg = MIMEMultipart("alternative")
    msg["Subject"] = "BK Chart password reset code"
    msg["From"] = cfg.get("MAIL_FROM")
    msg["To"] = to_email
    msg.attach(MIMEText(_reset_code_text(name or "Member", code, minutes), "plain", "utf-8"))

    try:
        with smtplib.SMTP(cfg["MAIL_SERVER"], cfg.get("MAIL_PORT", 587), timeout=10) as server:
            if cfg.get("MAIL_USE_TLS"):
                server.starttls()
            if cfg.get("MAIL_USERNAME"):
                server.login(cfg["MAIL_USERNAME"], cfg.get("MAIL_PASSWORD") or "")
            server.sendmail(msg["From"], [to_email], msg.as_string())
    except (smtplib.SMTPException, OSError):
        logger.exception("sending reset code to %s failed", to_email)
        return False

    return True
