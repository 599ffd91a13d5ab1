from __future__ import annotations

import io
from typing import Optional

import pandas as pd
from flask import Flask, request, send_file

from ..common.datetime_utils import require_month
from ..common.http import json_endpoint
from ..container import Container
from ..core.constants import AT_RISK_FLOOR_PERCENT, DEFAULT_EVOLUTION_MONTHS
from ..core.enums import RoomKind
from ..core.exceptions import ValidationError
from .model import StudentMonthStats

_KINDS = {
    "regular": RoomKind.REGULAR,
    "fixed": RoomKind.REGULAR,
    "hourly": RoomKind.HOURLY,
    "horista": RoomKind.HOURLY,
}


def _stats_rows(stats: list[StudentMonthStats]) -> list[dict]:
    return [
        {
            "Aluno": s.student_name,
            "Sala": s.room_name,
            "Presenças": s.present,
            "Aulas": s.total,
            "Frequência (%)": round(s.percent, 1),
            "Faltam": s.missing_to_threshold,
        }
        for s in stats
    ]


def register(app: Flask, container: Container) -> None:
    def _kind() -> Optional[RoomKind]:
        raw = (request.args.get("kind") or "").strip().lower()
        if not raw or raw == "all":
            return None
        if raw not in _KINDS:
            raise ValidationError(f"Unknown room kind: {raw}")
        return _KINDS[raw]

    def _float_arg(name: str, default: float) -> float:
        raw = request.args.get(name)
        if raw is None or raw == "":
            return default
        try:
            return float(raw)
        except ValueError:
            raise ValidationError(f"{name} must be a number")

    @app.route("/api/compensation/<month>", methods=["GET"], endpoint="api_compensation")
    @json_endpoint
    def api_compensation(month: str):
        comp = container.compensation_service.monthly(month, kind=_kind())
        return {
            "month": comp.month,
            "fixed": comp.fixed,
            "hourly": comp.hourly,
            "total": comp.total,
            "frequent_by_room": comp.frequent_by_room,
        }

    @app.route("/api/compensation/<month>/at-risk", methods=["GET"], endpoint="api_at_risk")
    @json_endpoint
    def api_at_risk(month: str):
        floor = _float_arg("floor", AT_RISK_FLOOR_PERCENT)
        return [
            {"stats": s, "missing_to_threshold": s.missing_to_threshold}
            for s in container.compensation_service.at_risk(month, floor=floor)
        ]

    @app.route("/api/compensation/<month>/evolution", methods=["GET"], endpoint="api_evolution")
    @json_endpoint
    def api_evolution(month: str):
        months = request.args.get("months") or DEFAULT_EVOLUTION_MONTHS
        return {
            "points": container.compensation_service.evolution(month, months=months),
            "trend": container.compensation_service.trend(month),
        }

    @app.route("/api/compensation/<month>/projection", methods=["GET"], endpoint="api_projection")
    @json_endpoint
    def api_projection(month: str):
        return container.compensation_service.project(month, request.args.get("count", ""))

    @app.route("/api/compensation/<month>/export", methods=["GET"], endpoint="api_compensation_export")
    @json_endpoint
    def api_compensation_export(month: str):
        month = require_month(month)
        stats = container.compensation_service.student_stats(month)
        frequent = sorted((s for s in stats if s.frequent), key=lambda s: (s.room_name, s.student_name))
        at_risk = container.compensation_service.at_risk(month)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            pd.DataFrame(_stats_rows(frequent)).to_excel(writer, index=False, sheet_name="Frequentes")
            pd.DataFrame(_stats_rows(at_risk)).to_excel(writer, index=False, sheet_name="Em risco")
        output.seek(0)
        return send_file(
            output,
            download_name=f"bonus_{month}.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
