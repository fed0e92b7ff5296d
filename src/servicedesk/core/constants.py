"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

WEEKDAY_KEYS = ("mon", "tue", "wed", "thu", "fri", "sat", "sun")

DEFAULT_START_TIME = time(9, 0)
DEFAULT_END_TIME = time(18, 0)
DEFAULT_LUNCH = (time(12, 0), time(13, 0))
DEFAULT_BREAK_1 = (time(10, 0), time(10, 15))
DEFAULT_BREAK_2 = (time(15, 0), time(15, 15))
DEFAULT_ACTIVE_DAYS = ("mon", "tue", "wed", "thu", "fri")

ABSENCE_REASONS = (
    "Service Desk Day",
    "Examen Leave",
    "Recognition (ScoreCard)",
    "Vacation Leave",
    "Moving Leave",
    "Sick Leave",
    "Marriage Leave",
    "Unpaid Leave",
)
ABSENCE_DETAILS_MIN_LENGTH = 10
ABSENCE_MAX_DAYS = 366
CALENDAR_MAX_RANGE_DAYS = 366
HIDDEN_ABSENCE_LABEL = "Day OFF"

TASK_TITLE_MIN_LENGTH = 3
TASK_PRIORITY_MIN = 1
TASK_PRIORITY_MAX = 5

PASSWORD_MIN_LENGTH = 6
DEFAULT_SESSION_DAYS = 7
DEFAULT_LIST_LIMIT = 200
