# bkchart/models/member.py
from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from .. import db

MEMBER_STATUSES = ("pending", "approved", "blocked")


class Member(db.Model):
    __tablename__ = "members"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    centre = db.Column(db.String(255), nullable=False)
    mobile = db.Column(db.String(20), unique=True, nullable=False)
    email = db.Column(db.String(255))
    password_hash = db.Column(db.String(255), nullable=False)
    status = db.Column(
        db.Enum(*MEMBER_STATUSES, name="member_status_enum"),
        nullable=False,
        default="approved",
    )

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    records = db.relationship(
        "DailyRecord",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reset_codes = db.relationship(
        "PasswordResetCode",
        back_populates="member",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "centre": self.centre,
            "mobile": self.mobile,
            "email": self.email,
            "status": self.status,
        }
