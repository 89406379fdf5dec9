# bkchart/models/__init__.py
from .admin import Admin  # noqa: F401
from .daily_record import DailyRecord  # noqa: F401
from .member import Member  # noqa: F401
from .password_reset import PasswordResetCode  # noqa: F401
from .point import Point  # noqa: F401
