"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_LEADERBOARD_LIMIT = 50
DEFAULT_RECENT_BADGES = 5
DEFAULT_STREAK_BONUS_EVERY = 5
DEFAULT_WORK_START_TIME = "09:00"
DEFAULT_WORKING_DAYS = (1, 2, 3, 4, 5)
DEFAULT_TIMEZONE = "Asia/Bangkok"

# Monthly badges require at least this many attendance records in the month.
MONTHLY_MIN_ATTENDANCE = 15

SETTING_PREFIX = "gamify_"
TRANSACTION_BATCH_SIZE = 100
