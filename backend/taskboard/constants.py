# backend/taskboard/constants.py
"""
Global Constants for the Taskboard backend.

Centralized location for application constants to avoid hardcoded values
throughout the codebase.
"""

# ====================================================================
# TIMEZONE CONSTANTS
# ====================================================================

# Zone used when a timezone identifier cannot be resolved
DEFAULT_TIMEZONE = "UTC"

# Preference applied to owners that never stored one
DEFAULT_USER_TIMEZONE = "America/Sao_Paulo"

# Key inside user_settings.settings holding the IANA identifier
USER_SETTINGS_TIMEZONE_KEY = "timezone"

# ====================================================================
# RECURRENCE CONSTANTS
# ====================================================================

# Sunday = 0 ... Saturday = 6
WEEKDAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]
DAYS_PER_WEEK = 7
MIN_RECURRENCE_INTERVAL = 1

# Tag carried by the daily-board copies of a task; they are reset through
# their source task, never on their own by the interactive path
MIRROR_DAILY_TAG = "espelho-diário"

# ====================================================================
# RESET JOB CONSTANTS
# ====================================================================

DEFAULT_RESET_MAX_CONCURRENCY = 4
DEFAULT_RESET_DEADLINE_SECONDS = 600
DEFAULT_RESET_SCHEDULE_HOUR = 23
DEFAULT_RESET_SCHEDULE_MINUTE = 59
RESET_DEADLINE_EXCEEDED_MESSAGE = "deadline exceeded"

# APScheduler registration of the daily reset
RESET_JOB_ID = "recurrence_reset_daily"
SCHEDULER_MAX_INSTANCES = 1
SCHEDULER_MISFIRE_GRACE_SECONDS = 300

# ====================================================================
# LOGGING CONSTANTS
# ====================================================================

LOG_FILE_ROTATION = "10 MB"
LOG_FILE_RETENTION = "14 days"
LOG_FILE_COMPRESSION = "gz"
LOG_CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{extra[logger_name]}</cyan> - <level>{message}</level>"
)
LOG_FILE_FORMAT = (
    "{time:YYYY-MM-DDTHH:mm:ss.SSSZZ} | {level: <8} | {extra[source]} | "
    "{extra[logger_name]} | {message}"
)
