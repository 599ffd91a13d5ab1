from __future__ import annotations

from flask import Flask, request

from ..common.http import json_endpoint
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/reports/overview", methods=["GET"], endpoint="api_reports_overview")
    @json_endpoint
    def api_reports_overview():
        return container.report_service.global_stats(request.args.get("month") or None)

    @app.route("/api/reports/radar", methods=["GET"], endpoint="api_reports_radar")
    @json_endpoint
    def api_reports_radar():
        return container.report_service.radar()

    @app.route("/api/rooms/<int:room_id>/report", methods=["GET"], endpoint="api_room_report")
    @json_endpoint
    def api_room_report(room_id: int):
        stats = container.report_service.class_stats(room_id)
        if stats is None:
            raise ValidationError("Room not found")
        return stats

    @app.route("/api/rooms/<int:room_id>/students/<int:student_id>/stats", methods=["GET"], endpoint="api_student_stats")
    @json_endpoint
    def api_student_stats(room_id: int, student_id: int):
        stats = container.report_service.student_stats(room_id=room_id, student_id=student_id)
        if stats is None:
            raise ValidationError("Student not found in this room")
        return stats
