from __future__ import annotations

from flask import Flask, request

from ..common.http import json_endpoint
from ..container import Container
from ..core.exceptions import ValidationError
from .model import TransferRequest


def register(app: Flask, container: Container) -> None:
    @app.route("/api/transfers", methods=["POST"], endpoint="api_transfer")
    @json_endpoint
    def api_transfer():
        data = request.get_json(silent=True) or {}
        try:
            req = TransferRequest(
                student_id=int(data["student_id"]),
                source_room_id=int(data["source_room_id"]),
                source_book_id=int(data["source_book_id"]),
                target_room_id=int(data["target_room_id"]),
                target_book_id=int(data["target_book_id"]),
                historic_classes_given=data.get("historic_classes_given", 0),
                historic_attendance_present=data.get("historic_attendance_present", 0),
                preserve_grades=bool(data.get("preserve_grades", False)),
            )
        except (KeyError, TypeError, ValueError):
            raise ValidationError("Student, rooms and books are required")
        return container.transfer_service.transfer(req)

    @app.route("/api/rooms/<int:room_id>/books/<int:book_id>/class-count", methods=["GET"], endpoint="api_class_count")
    @json_endpoint
    def api_class_count(room_id: int, book_id: int):
        count = container.transfer_service.full_attendance_history(room_id=room_id, book_id=book_id)
        return {"classes_given": count, "attendance_present": count}
