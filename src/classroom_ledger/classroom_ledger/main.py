from __future__ import annotations

import importlib
import json
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import build_container
from .core.logger import get_logger, set_level
from .grades.controller import register as register_grades
from .payroll.controller import register as register_payroll
from .progress.controller import register as register_progress
from .records.model import Settings
from .records.repository import RecordRepository
from .reports.controller import register as register_reports
from .transfers.controller import register as register_transfers

logger = get_logger(__name__)


def create_app(records: Optional[RecordRepository] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    set_level(str(getattr(settings, "LOG_LEVEL", "INFO")))

    default_settings = Settings(
        bonus_value=float(getattr(settings, "BONUS_VALUE")),
        min_frequent_students=int(getattr(settings, "MIN_FREQUENT_STUDENTS")),
        hourly_rate=float(getattr(settings, "HOURLY_RATE")),
    )
    container = build_container(records=records, default_settings=default_settings)

    data_path = str(getattr(settings, "DATA_PATH", "") or "")
    if records is None and data_path:
        path = Path(data_path)
        if path.is_file():
            with path.open(encoding="utf-8") as fh:
                report = container.backup_service.restore(json.load(fh))
            logger.info("Loaded %s (%d student(s) checked)", path, report.students_checked)
        else:
            logger.warning("DATA_PATH %s does not exist, starting empty", path)

    logger.debug("settings=%s", settings_module)

    register_progress(app, container)
    register_grades(app, container)
    register_payroll(app, container)
    register_transfers(app, container)
    register_reports(app, container)

    return app
