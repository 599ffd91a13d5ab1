from __future__ import annotations

from datetime import date, datetime

import pytest

from src.classroom_ledger.classroom_ledger.core.enums import RoomKind
from src.classroom_ledger.classroom_ledger.core.exceptions import ImportFormatError
from src.classroom_ledger.classroom_ledger.progress.importer import BackupService
from src.classroom_ledger.classroom_ledger.records.memory_store import InMemoryRecordStore
from src.classroom_ledger.classroom_ledger.records.model import Book, Progress, Room, Student


def _backup(progress: list[dict], **settings) -> dict:
    return {
        "appName": "Lumen",
        "version": "2.24",
        "exportDate": "2024-04-01T10:00:00",
        "data": {
            "settings": settings,
            "salas": [
                {
                    "id": 1,
                    "nome": "English B2",
                    "dataInicio": "2024-01-08",
                    "status": "ativa",
                    "livros": [{"id": 11, "nome": "Book 1"}, {"id": 12, "nome": "Book 2"}],
                    "alunos": [{"id": 1, "nomeCompleto": "Ana", "statusMatricula": "Ativo", "progresso": progress}],
                }
            ],
            "aulas": [
                {"id": 1, "date": "2024-03-04", "turma": "English B2", "livroAulaHoje": "Book 1", "chamadaRealizada": True, "presentes": [1]}
            ],
        },
    }


def _store_with(progress: list[Progress]) -> InMemoryRecordStore:
    student = Student(student_id=1, full_name="Ana", progress=progress)
    room = Room(room_id=1, name="English B2", start_date=date(2024, 1, 8), books=[Book(11, "Book 1"), Book(12, "Book 2")], students=[student])
    return InMemoryRecordStore(rooms=[room])


def test_restore_decodes_rooms_sessions_and_settings():
    store = InMemoryRecordStore()

    BackupService(store).restore(_backup([], bonusValue=4.0))

    room = store.get_room(1)
    assert room.kind == RoomKind.REGULAR
    assert [b.name for b in room.books] == ["Book 1", "Book 2"]
    assert store.sessions[0].present_ids == frozenset({1})
    assert store.settings.bonus_value == 4.0
    assert store.settings.min_frequent_students == 100


def test_restore_keeps_previous_progress():
    store = _store_with(
        [
            Progress(book_id=11, written=9.0, historic_classes_given=5, historic_attendance_present=5),
            Progress(book_id=12, oral=7.0),
        ]
    )
    imported = [{"livroId": 11, "notaWritten": None, "notaOral": 6.5, "historicoAulasDadas": 8, "historicoPresencas": 4}]

    BackupService(store).restore(_backup(imported))

    progress = {p.book_id: p for p in store.get_room(1).students[0].progress}
    assert (progress[11].written, progress[11].oral) == (9.0, 6.5)
    assert (progress[11].historic_classes_given, progress[11].historic_attendance_present) == (8, 5)
    assert progress[12].oral == 7.0


@pytest.mark.parametrize("payload", [None, [], {"appName": "Other", "data": {}}, {"appName": "Lumen"}])
def test_invalid_envelope_leaves_store_untouched(payload):
    store = _store_with([Progress(book_id=11, written=9.0)])

    with pytest.raises(ImportFormatError):
        BackupService(store).restore(payload)

    assert store.get_room(1).students[0].progress[0].written == 9.0


def test_export_round_trips_through_restore():
    store = _store_with([Progress(book_id=11, written=9.0, manual_classes_given=3, manual_attendance_present=2)])
    service = BackupService(store)

    payload = service.export(exported_at=datetime(2024, 4, 1, 9, 0))
    fresh = InMemoryRecordStore()
    BackupService(fresh).restore(payload)

    assert payload["appName"] == "Lumen"
    assert payload["exportDate"] == "2024-04-01T09:00:00"
    p = fresh.get_room(1).students[0].progress[0]
    assert (p.written, p.manual_classes_given, p.manual_attendance_present) == (9.0, 3, 2)


def test_sections_the_engine_does_not_model_survive_export():
    payload = _backup([])
    payload["data"]["avisos"] = [{"id": 1, "texto": "Prova na sexta"}]
    service = BackupService(InMemoryRecordStore())

    service.restore(payload)
    exported = service.export()

    assert exported["data"]["avisos"] == [{"id": 1, "texto": "Prova na sexta"}]
    assert exported["data"]["salas"][0]["nome"] == "English B2"


@pytest.mark.parametrize(
    "room_patch",
    [{"finalizacao": "2024-05-01"}, {"finalizacao": ["2024-05-01"]}, {"livros": ["Book 1"]}],
)
def test_malformed_room_is_a_format_error(room_patch):
    payload = _backup([])
    payload["data"]["salas"][0].update(room_patch)
    store = _store_with([Progress(book_id=11, written=9.0)])

    with pytest.raises(ImportFormatError):
        BackupService(store).restore(payload)

    assert store.get_room(1).students[0].progress[0].written == 9.0
