"""Backup envelope <-> record store.

The backup is the JSON document the application exports and imports:
``{"appName", "version", "exportDate", "data": {"settings", "salas", "aulas", ...}}``.
Only the fields the engine works with are mapped; key names are the ones
found in the backup files.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.constants import BACKUP_APP_NAME, BACKUP_VERSION
from ..core.enums import EnrollmentStatus, RoomKind, RoomStatus
from ..core.exceptions import ImportFormatError
from .model import Book, Finalization, Progress, Room, Session, Settings, Student


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    return int(value)


def _opt_float(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    return float(value)


def _opt_date(value: Any) -> Optional[date]:
    if not value:
        return None
    return parse_iso_date(str(value))


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def unwrap_envelope(payload: Any) -> dict:
    if not isinstance(payload, dict) or payload.get("appName") != BACKUP_APP_NAME or not isinstance(payload.get("data"), dict):
        raise ImportFormatError("Invalid backup file")
    return payload["data"]


# --- decoding -------------------------------------------------------------


def progress_from_dict(raw: dict) -> Progress:
    return Progress(
        book_id=int(raw["livroId"]),
        written=_opt_float(raw.get("notaWritten")),
        oral=_opt_float(raw.get("notaOral")),
        participation=_opt_float(raw.get("notaParticipation")),
        manual_classes_given=_opt_int(raw.get("manualAulasDadas")),
        manual_attendance_present=_opt_int(raw.get("manualPresencas")),
        historic_classes_given=_opt_int(raw.get("historicoAulasDadas")),
        historic_attendance_present=_opt_int(raw.get("historicoPresencas")),
    )


def student_from_dict(raw: dict) -> Student:
    return Student(
        student_id=int(raw["id"]),
        full_name=str(raw.get("nomeCompleto", "")),
        registration_code=str(raw.get("ctr", "") or ""),
        status=str(raw.get("statusMatricula") or EnrollmentStatus.ACTIVE.value),
        transfer_origin=raw.get("origemTransferencia") or None,
        starting_book_id=_opt_int(raw.get("livroInicioId")),
        progress=[progress_from_dict(p) for p in raw.get("progresso") or []],
    )


def room_from_dict(raw: dict) -> Room:
    fin = raw.get("finalizacao")
    finalization = None
    if fin is not None and not isinstance(fin, dict):
        raise ValueError(f"room {raw.get('id')}: finalizacao must be an object")
    if fin and fin.get("data"):
        finalization = Finalization(
            finalized_on=parse_iso_date(str(fin["data"])),
            reason=fin.get("motivo", "") or "",
            details=fin.get("detalhes", "") or "",
        )
    return Room(
        room_id=int(raw["id"]),
        name=str(raw.get("nome", "")),
        start_date=parse_iso_date(str(raw["dataInicio"])),
        # Rooms saved before hourly rooms existed have no kind.
        kind=RoomKind(raw.get("tipo") or RoomKind.REGULAR.value),
        status=RoomStatus(raw.get("status") or RoomStatus.ACTIVE.value),
        planned_end_date=_opt_date(raw.get("dataFimPrevista")),
        finalization=finalization,
        books=[
            Book(
                book_id=int(b["id"]),
                name=str(b.get("nome", "")),
                start_month=b.get("mesInicio") or None,
                planned_end_month=b.get("mesFimPrevisto") or None,
            )
            for b in raw.get("livros") or []
        ],
        students=[student_from_dict(a) for a in raw.get("alunos") or []],
        session_hours=_opt_float(raw.get("duracaoAulaHoras")),
    )


def session_from_dict(raw: dict) -> Session:
    return Session(
        session_id=int(raw["id"]),
        session_date=parse_iso_date(str(raw["date"])),
        room_name=str(raw.get("turma", "") or ""),
        book_name=str(raw.get("livroAulaHoje", "") or ""),
        roll_call_completed=bool(raw.get("chamadaRealizada", False)),
        present_ids=frozenset(int(i) for i in raw.get("presentes") or []),
        no_class_event=bool(raw.get("isNoClassEvent", False)),
        freelance_hourly=bool(raw.get("isFreelanceHorista", False)),
        hours=_opt_float(raw.get("duracaoAulaHoras")),
    )


def settings_from_dict(raw: Optional[dict], *, defaults: Optional[Settings] = None) -> Settings:
    """Defaults overlaid with whatever the backup carries."""
    base = defaults or Settings()
    raw = raw or {}
    return Settings(
        bonus_value=float(raw.get("bonusValue", base.bonus_value)),
        min_frequent_students=int(raw.get("minAlunos", base.min_frequent_students)),
        hourly_rate=float(raw.get("valorHoraAula", base.hourly_rate) or 0),
    )


def decode_backup(payload: Any, *, default_settings: Optional[Settings] = None) -> tuple[list[Room], list[Session], Settings]:
    data = unwrap_envelope(payload)
    try:
        rooms = [room_from_dict(r) for r in data.get("salas") or []]
        sessions = [session_from_dict(a) for a in data.get("aulas") or []]
        settings = settings_from_dict(data.get("settings"), defaults=default_settings)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise ImportFormatError(f"Invalid backup file: {e}") from e
    return rooms, sessions, settings


# --- encoding -------------------------------------------------------------


def progress_to_dict(p: Progress) -> dict:
    out: dict[str, Any] = {
        "livroId": p.book_id,
        "notaWritten": p.written,
        "notaOral": p.oral,
        "notaParticipation": p.participation,
    }
    optional = {
        "manualAulasDadas": p.manual_classes_given,
        "manualPresencas": p.manual_attendance_present,
        "historicoAulasDadas": p.historic_classes_given,
        "historicoPresencas": p.historic_attendance_present,
    }
    out.update({k: v for k, v in optional.items() if v is not None})
    return out


def room_to_dict(room: Room) -> dict:
    return {
        "id": room.room_id,
        "nome": room.name,
        "dataInicio": room.start_date.isoformat(),
        "dataFimPrevista": _iso(room.planned_end_date),
        "status": room.status.value,
        "tipo": room.kind.value,
        "duracaoAulaHoras": room.session_hours,
        "finalizacao": (
            {
                "data": room.finalization.finalized_on.isoformat(),
                "motivo": room.finalization.reason,
                "detalhes": room.finalization.details,
            }
            if room.finalization
            else None
        ),
        "livros": [
            {"id": b.book_id, "nome": b.name, "mesInicio": b.start_month, "mesFimPrevisto": b.planned_end_month}
            for b in room.books
        ],
        "alunos": [
            {
                "id": s.student_id,
                "ctr": s.registration_code,
                "nomeCompleto": s.full_name,
                "statusMatricula": s.status,
                "origemTransferencia": s.transfer_origin,
                "livroInicioId": s.starting_book_id,
                "progresso": [progress_to_dict(p) for p in s.progress],
            }
            for s in room.students
        ],
    }


def session_to_dict(s: Session) -> dict:
    return {
        "id": s.session_id,
        "date": s.session_date.isoformat(),
        "turma": s.room_name,
        "livroAulaHoje": s.book_name,
        "chamadaRealizada": s.roll_call_completed,
        "presentes": sorted(s.present_ids),
        "isNoClassEvent": s.no_class_event,
        "isFreelanceHorista": s.freelance_hourly,
        "duracaoAulaHoras": s.hours,
    }


_MAPPED_SECTIONS = ("settings", "salas", "aulas")


def unmapped_sections(data: dict) -> dict:
    """Backup sections the engine does not model (notices, exams, calendar...)."""
    return {k: v for k, v in data.items() if k not in _MAPPED_SECTIONS}


def encode_backup(
    rooms: list[Room],
    sessions: list[Session],
    settings: Settings,
    *,
    exported_at: Optional[datetime] = None,
    extra_sections: Optional[dict] = None,
) -> dict:
    data: dict[str, Any] = dict(extra_sections or {})
    data.update(
        {
            "settings": {
                "bonusValue": settings.bonus_value,
                "minAlunos": settings.min_frequent_students,
                "valorHoraAula": settings.hourly_rate,
            },
            "salas": [room_to_dict(r) for r in rooms],
            "aulas": [session_to_dict(s) for s in sessions],
        }
    )
    return {
        "appName": BACKUP_APP_NAME,
        "version": BACKUP_VERSION,
        "exportDate": (exported_at or datetime.now()).isoformat(),
        "data": data,
    }
