# bkchart/models/point.py
from .. import db


class Point(db.Model):
    __tablename__ = "points"

    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.Text, nullable=False)
    # display / aggregation sequence
    order_num = db.Column(db.Integer, nullable=False)

    records = db.relationship(
        "DailyRecord",
        back_populates="point",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def to_dict(self):
        return {
            "id": self.id,
            "text": self.text,
            "order": self.order_num,
        }
