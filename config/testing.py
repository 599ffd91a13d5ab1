from config.config import BONUS_VALUE, HOURLY_RATE, MIN_FREQUENT_STUDENTS

DEBUG = False
TESTING = True

# Tests build their own stores; never read a backup from disk.
DATA_PATH = ""
LOG_LEVEL = "WARNING"
