# bkchart/models/daily_record.py
from .. import db


class DailyRecord(db.Model):
    """One effort value per member, point and calendar day."""

    __tablename__ = "daily_records"
    __table_args__ = (
        db.UniqueConstraint(
            "member_id", "point_id", "date", name="uq_daily_records_member_point_date"
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    member_id = db.Column(
        db.Integer,
        db.ForeignKey("members.id", ondelete="CASCADE"),
        nullable=False,
    )
    point_id = db.Column(
        db.Integer,
        db.ForeignKey("points.id", ondelete="CASCADE"),
        nullable=False,
    )
    record_date = db.Column("date", db.Date, nullable=False)
    effort = db.Column(db.Integer, nullable=False, default=0)

    member = db.relationship("Member", back_populates="records")
    point = db.relationship("Point", back_populates="records")

    def to_dict(self):
        return {
            "id": self.id,
            "member_id": self.member_id,
            "point_id": self.point_id,
            "date": self.record_date.isoformat() if self.record_date else None,
            "effort": self.effort,
        }
