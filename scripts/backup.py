"""Reconciled backup of the data file.

Note: Đọc file JSON ở DATA_PATH, chạy đối soát tiến độ rồi ghi bản sao
vào thư mục `backups/`. File gốc không bị sửa.
"""

from __future__ import annotations

import importlib
import json
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

from config import get_settings_module
from src.classroom_ledger.classroom_ledger.container import build_container


def main() -> None:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    data_path = Path(str(getattr(settings, "DATA_PATH", "") or ""))
    if not data_path.is_file():
        raise SystemExit("DATA_PATH chưa được cấu hình hoặc không tồn tại.")

    container = build_container()
    with data_path.open(encoding="utf-8") as fh:
        report = container.backup_service.restore(json.load(fh))

    out_dir = Path(__file__).resolve().parents[1] / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"classroom_ledger_{ts}.json"
    with out_file.open("w", encoding="utf-8") as fh:
        json.dump(container.backup_service.export(), fh, ensure_ascii=False, indent=2)

    print(f"OK: Backup created: {out_file} ({report.records_folded} duplicate record(s) merged)")


if __name__ == "__main__":
    main()
