import os


class Config:
    # Dữ liệu sao lưu (JSON) nạp khi khởi động, để trống = bắt đầu rỗng
    DATA_PATH = os.environ.get("DATA_PATH", "")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Giá trị mặc định khi bản sao lưu không có "settings"
    BONUS_VALUE = float(os.environ.get("BONUS_VALUE", "3.50"))
    MIN_FREQUENT_STUDENTS = int(os.environ.get("MIN_FREQUENT_STUDENTS", "100"))
    HOURLY_RATE = float(os.environ.get("HOURLY_RATE", "25.00"))


DATA_PATH = Config.DATA_PATH
LOG_LEVEL = Config.LOG_LEVEL
BONUS_VALUE = Config.BONUS_VALUE
MIN_FREQUENT_STUDENTS = Config.MIN_FREQUENT_STUDENTS
HOURLY_RATE = Config.HOURLY_RATE

DEBUG = bool(int(os.environ.get("DEBUG", "1")))
