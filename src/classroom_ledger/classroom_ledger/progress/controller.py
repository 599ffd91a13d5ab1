from __future__ import annotations

import json

from flask import Flask, jsonify, request

from ..common.http import json_endpoint
from ..container import Container
from ..core.exceptions import ImportFormatError, ValidationError


def register(app: Flask, container: Container) -> None:
    def _body() -> dict:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError("Request body must be a JSON object")
        return data

    @app.route("/api/progress/reconcile", methods=["POST"], endpoint="api_reconcile")
    @json_endpoint
    def api_reconcile():
        return container.reconciler.reconcile_all(container.records)

    @app.route("/api/students/<int:student_id>/books/<int:book_id>/grades/<field>", methods=["PUT"], endpoint="api_set_grade")
    @json_endpoint
    def api_set_grade(student_id: int, book_id: int, field: str):
        data = _body()
        # Clearing needs an explicit null or "".
        if "value" not in data:
            raise ValidationError("Missing 'value' (use null or \"\" to clear the grade)")
        return container.progress_service.set_grade(student_id, book_id, field, data["value"])

    @app.route("/api/students/<int:student_id>/books/<int:book_id>/attendance", methods=["PUT"], endpoint="api_set_manual_attendance")
    @json_endpoint
    def api_set_manual_attendance(student_id: int, book_id: int):
        data = _body()
        return container.progress_service.set_manual_attendance(
            student_id, book_id, data.get("classes_given"), data.get("attendance_present")
        )

    @app.route("/api/students/<int:student_id>/books/<int:book_id>/attendance", methods=["DELETE"], endpoint="api_clear_manual_attendance")
    @json_endpoint
    def api_clear_manual_attendance(student_id: int, book_id: int):
        return container.progress_service.clear_manual_attendance(student_id, book_id)

    @app.route("/api/students/<int:student_id>/books/<int:book_id>/history", methods=["PUT"], endpoint="api_set_history")
    @json_endpoint
    def api_set_history(student_id: int, book_id: int):
        data = _body()
        return container.progress_service.set_historic_attendance(
            student_id, book_id, data.get("classes_given"), data.get("attendance_present")
        )

    @app.route("/api/backup/import", methods=["POST"], endpoint="api_backup_import")
    @json_endpoint
    def api_backup_import():
        upload = request.files.get("file")
        if upload is not None:
            try:
                payload = json.load(upload.stream)
            except ValueError as e:
                raise ImportFormatError("Backup file is not valid JSON") from e
        else:
            payload = request.get_json(silent=True)
        return container.backup_service.restore(payload)

    @app.route("/api/backup/export", methods=["GET"], endpoint="api_backup_export")
    def api_backup_export():
        resp = jsonify(container.backup_service.export())
        resp.headers["Content-Disposition"] = "attachment; filename=backup.json"
        return resp
