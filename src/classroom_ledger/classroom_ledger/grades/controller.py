from __future__ import annotations

from flask import Flask

from ..common.http import json_endpoint
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route(
        "/api/rooms/<int:room_id>/students/<int:student_id>/books/<int:book_id>/attendance",
        methods=["GET"],
        endpoint="api_book_attendance",
    )
    @json_endpoint
    def api_book_attendance(room_id: int, student_id: int, book_id: int):
        attendance = container.attendance_service.aggregate_by_ids(room_id=room_id, student_id=student_id, book_id=book_id)
        grade = container.report_card_service.grade_for(room_id=room_id, student_id=student_id, book_id=book_id)
        return {"attendance": attendance, "grade": grade}

    @app.route("/api/rooms/<int:room_id>/students/<int:student_id>/report-card", methods=["GET"], endpoint="api_report_card")
    @json_endpoint
    def api_report_card(room_id: int, student_id: int):
        card = container.report_card_service.build(room_id=room_id, student_id=student_id)
        if card is None:
            raise ValidationError("Student not found in this room")
        return card
