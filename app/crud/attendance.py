import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback
from app.db.models.attendance import Attendance
from app.db.models.lesson import Lesson
from app.schemas.attendance import StudentAttendanceStats, LessonAttendanceStats

logger = logging.getLogger(__name__)


@safe_read()
def get_all_attendance(db: Session):
    return db.query(Attendance).order_by(Attendance.created_at.desc()).all()


@safe_read()
def get_by_lesson(db: Session, lesson_id: str):
    return db.query(Attendance).filter(Attendance.lesson_id == lesson_id).all()


@safe_read()
def get_by_student(db: Session, student_id: str):
    return (
        db.query(Attendance)
        .filter(Attendance.student_id == student_id)
        .order_by(Attendance.created_at.desc())
        .all()
    )


@safe_read(default=None)
def get_record(db: Session, lesson_id: str, student_id: str):
    return db.query(Attendance).filter(
        Attendance.lesson_id == lesson_id,
        Attendance.student_id == student_id,
    ).first()


@safe_read(default=None)
def get_record_by_id(db: Session, record_id: str):
    return db.query(Attendance).filter(Attendance.id == record_id).first()


def upsert_attendance(db: Session, lesson_id: str, student_id: str, present: bool):
    """Находим или создаём запись (урок, студент) и ставим отметку."""
    existing = get_record(db, lesson_id, student_id)
    if existing:
        existing.present = present
        return commit_or_rollback(db, existing)

    record = Attendance(lesson_id=lesson_id, student_id=student_id, present=present)
    db.add(record)
    try:
        return commit_or_rollback(db, record)
    except IntegrityError:
        # Запись появилась между чтением и вставкой, обновляем её
        existing = get_record(db, lesson_id, student_id)
        if existing is None:
            raise
        existing.present = present
        return commit_or_rollback(db, existing)


def bulk_update_attendance(db: Session, lesson_id: str, marks: List) -> List[Attendance]:
    return [upsert_attendance(db, lesson_id, m.student_id, m.present) for m in marks]


def delete_attendance(db: Session, record: Attendance):
    db.delete(record)
    commit_or_rollback(db)


def _percentage(part: int, total: int) -> float:
    return round(part / total * 100, 2) if total > 0 else 0


@safe_read(default=StudentAttendanceStats)
def get_student_stats(db: Session, student_id: str) -> StudentAttendanceStats:
    records = get_by_student(db, student_id)
    attended = sum(1 for r in records if r.present)
    return StudentAttendanceStats(
        total_lessons=len(records),
        attended_lessons=attended,
        missed_lessons=len(records) - attended,
        attendance_percentage=_percentage(attended, len(records)),
    )


@safe_read(default=LessonAttendanceStats)
def get_lesson_stats(db: Session, lesson_id: str) -> LessonAttendanceStats:
    records = get_by_lesson(db, lesson_id)
    present = sum(1 for r in records if r.present)
    return LessonAttendanceStats(
        total_students=len(records),
        present_students=present,
        absent_students=len(records) - present,
        attendance_percentage=_percentage(present, len(records)),
    )


@safe_read()
def get_group_subject_attendance(db: Session, group_id: str, subject_id: str):
    lesson_ids = [
        row.id for row in db.query(Lesson.id).filter(
            Lesson.group_id == group_id,
            Lesson.subject_id == subject_id,
        )
    ]
    if not lesson_ids:
        return []
    return db.query(Attendance).filter(Attendance.lesson_id.in_(lesson_ids)).all()
