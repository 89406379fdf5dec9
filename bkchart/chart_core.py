# bkchart/chart_core.py
"""
Daily effort recording and period progress.

``upsert_record`` keeps at most one row per (member, point, day) and relies
on the database's own conflict handling to stay atomic under concurrent
writers. ``aggregate_progress`` walks the whole ordered point catalog and
folds the per-point averages of the requested window into it, so every point
is reported even before anything was logged against it.
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from flask import current_app
from sqlalchemy import func
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import DataError, DBAPIError, IntegrityError

from . import db
from .errors import InvalidEffort, RecordReferenceError, StorageUnavailable
from .models.daily_record import DailyRecord
from .models.point import Point

logger = logging.getLogger(__name__)

PERIODS = ("daily", "weekly", "monthly", "yearly")
DEFAULT_PERIOD = "daily"

# signed 32-bit INTEGER, the narrowest integer column across supported databases
INT_COLUMN_MIN = -(2 ** 31)
INT_COLUMN_MAX = 2 ** 31 - 1


@dataclass(frozen=True)
class PointProgress:
    point_id: int
    text: str
    percentage: float

    def to_dict(self):
        return {
            "point_id": self.point_id,
            "text": self.text,
            "percentage": self.percentage,
        }


@dataclass(frozen=True)
class DailyEntry:
    point_id: int
    text: str
    effort: int

    def to_dict(self):
        return {"point_id": self.point_id, "text": self.text, "effort": self.effort}


# -----------------------------
# Clock / windows
# -----------------------------
def _chart_timezone() -> ZoneInfo:
    name = current_app.config.get("CHART_TIMEZONE") or "UTC"
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("unknown CHART_TIMEZONE %r, falling back to UTC", name)
        return ZoneInfo("UTC")


def chart_today() -> date:
    """Current calendar day in the deployment-wide chart timezone."""
    return datetime.now(_chart_timezone()).date()


def normalize_period(period: Optional[str]) -> str:
    period = (period or "").strip().lower()
    return period if period in PERIODS else DEFAULT_PERIOD


def date_window(period: Optional[str], today: date) -> Tuple[date, date]:
    """
    Inclusive [start, end] window for a period keyword, anchored on ``today``.

    Unrecognised keywords use the daily window.
    """
    period = normalize_period(period)
    if period == "weekly":
        return today - timedelta(days=6), today
    if period == "monthly":
        return today.replace(day=1), today
    if period == "yearly":
        return today.replace(month=1, day=1), today
    return today, today


def normalize_effort(value) -> int:
    """
    Coerce a reported effort to an int the effort column can hold.

    The 0-100 scale is not enforced; only non-integral or unstorable values
    raise ``InvalidEffort``.
    """
    # completion flags are the 0/100 case of an effort score
    if isinstance(value, bool):
        return 100 if value else 0
    if isinstance(value, float) and not (math.isfinite(value) and value.is_integer()):
        raise InvalidEffort()
    try:
        effort = int(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise InvalidEffort() from exc
    if not INT_COLUMN_MIN <= effort <= INT_COLUMN_MAX:
        raise InvalidEffort("effort is out of range")
    return effort


# -----------------------------
# Upsert
# -----------------------------
def _upsert_statement(member_id: int, point_id: int, record_date: date, effort: int, dialect: Optional[str] = None):
    table = DailyRecord.__table__
    values = {
        "member_id": member_id,
        "point_id": point_id,
        "date": record_date,
        "effort": effort,
    }
    dialect = dialect or db.session.get_bind().dialect.name

    if dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(table).values(**values)
        return stmt.on_duplicate_key_update(effort=stmt.inserted.effort)

    if dialect == "postgresql":
        insert = postgresql.insert
    elif dialect == "sqlite":
        insert = sqlite.insert
    else:
        raise NotImplementedError(f"no atomic upsert for dialect {dialect!r}")

    stmt = insert(table).values(**values)
    return stmt.on_conflict_do_update(
        index_elements=[table.c.member_id, table.c.point_id, table.c.date],
        set_={"effort": stmt.excluded.effort},
    )


def upsert_record(member_id: int, point_id: int, record_date: date, effort) -> DailyRecord:
    """
    Store ``effort`` for (member, point, day), replacing any earlier value.

    Effort is not held to the 0-100 scale here. Raises ``RecordReferenceError``
    when the member or point does not exist, ``InvalidEffort`` when the value
    cannot be stored and ``StorageUnavailable`` when the database fails; the
    session is rolled back in each case.
    """
    member_id = int(member_id)
    point_id = int(point_id)
    effort = normalize_effort(effort)

    try:
        db.session.execute(_upsert_statement(member_id, point_id, record_date, effort))
        db.session.commit()
    except IntegrityError as exc:
        db.session.rollback()
        logger.info(
            "upsert rejected member_id=%s point_id=%s date=%s: %s",
            member_id, point_id, record_date, exc.orig,
        )
        raise RecordReferenceError() from exc
    except (DataError, OverflowError) as exc:
        db.session.rollback()
        raise InvalidEffort("effort is out of range") from exc
    except DBAPIError as exc:
        db.session.rollback()
        raise StorageUnavailable() from exc

    # populate_existing: the identity map may still hold the pre-upsert effort
    try:
        return (
            db.session.query(DailyRecord)
            .filter_by(member_id=member_id, point_id=point_id, record_date=record_date)
            .populate_existing()
            .one()
        )
    except DBAPIError as exc:
        db.session.rollback()
        raise StorageUnavailable() from exc


# -----------------------------
# Read side
# -----------------------------
def ordered_points() -> List[Point]:
    return Point.query.order_by(Point.order_num.asc(), Point.id.asc()).all()


def aggregate_progress(member_id: int, period: Optional[str], today: Optional[date] = None) -> List[PointProgress]:
    """
    Average effort per catalog point over the period window.

    Points without records in the window report 0. A member that does not
    exist simply has no records.
    """
    today = today or chart_today()
    start, end = date_window(period, today)

    try:
        points = ordered_points()
        rows = (
            db.session.query(DailyRecord.point_id, func.avg(DailyRecord.effort))
            .filter(
                DailyRecord.member_id == member_id,
                DailyRecord.record_date >= start,
                DailyRecord.record_date <= end,
            )
            .group_by(DailyRecord.point_id)
            .all()
        )
    except DBAPIError as exc:
        db.session.rollback()
        raise StorageUnavailable() from exc

    averages = {point_id: float(avg) for point_id, avg in rows if avg is not None}

    return [
        PointProgress(
            point_id=p.id,
            text=p.text,
            percentage=averages.get(p.id, 0.0),
        )
        for p in points
    ]


def daily_sheet(member_id: int, day: date) -> List[DailyEntry]:
    """Recorded effort per catalog point for one day, 0 where nothing was logged."""
    try:
        points = ordered_points()
        rows = (
            db.session.query(DailyRecord.point_id, DailyRecord.effort)
            .filter(
                DailyRecord.member_id == member_id,
                DailyRecord.record_date == day,
            )
            .all()
        )
    except DBAPIError as exc:
        db.session.rollback()
        raise StorageUnavailable() from exc

    efforts = dict(rows)
    return [
        DailyEntry(point_id=p.id, text=p.text, effort=efforts.get(p.id, 0))
        for p in points
    ]
