import os

from config.config import BONUS_VALUE, DATA_PATH, HOURLY_RATE, MIN_FREQUENT_STUDENTS

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
