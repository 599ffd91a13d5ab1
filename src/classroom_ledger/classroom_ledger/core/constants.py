"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_BONUS_VALUE = 3.50
DEFAULT_MIN_FREQUENT_STUDENTS = 100
DEFAULT_HOURLY_RATE = 25.00

FREQUENT_THRESHOLD_PERCENT = 50
AT_RISK_FLOOR_PERCENT = 40
DEFAULT_EVOLUTION_MONTHS = 6
MAX_EVOLUTION_MONTHS = 24

GRADE_MIN = 0.0
GRADE_MAX = 10.0

ORPHANED_BOOK_PREFIX = "orphaned_book_"

BACKUP_APP_NAME = "Lumen"
BACKUP_VERSION = "2.24"
