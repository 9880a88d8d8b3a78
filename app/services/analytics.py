# app/services/analytics.py
"""
Агрегация посещаемости: одна строка на пару (студент, дисциплина),
собранная в памяти из уже загруженных занятий, отметок, групп,
дисциплин и пользователей.
"""
import csv
import io
import logging
import math
from collections import defaultdict
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.models.attendance import Attendance
from app.db.models.group import Group
from app.db.models.lesson import Lesson
from app.db.models.subject import Subject
from app.db.models.user import User
from app.schemas.analytics import (
    AttendanceFilters,
    AttendanceReport,
    AttendanceStats,
    AttendanceSummary,
    GroupAttendanceStats,
    IntegrityWarning,
    RecentAttendance,
    SubjectAttendanceStats,
)

logger = logging.getLogger(__name__)

RECENT_LESSONS = 5

CSV_HEADERS = [
    "Студент",
    "Группа",
    "Дисциплина",
    "Преподаватель",
    "Всего занятий",
    "Посещено",
    "Пропущено",
    "Процент посещаемости",
]

UNKNOWN_GROUP = "Неизвестная группа"
UNKNOWN_SUBJECT = "Неизвестная дисциплина"


def attendance_rate(attended: int, total: int) -> float:
    if total == 0:
        return 0
    # Половина округляется вверх: 1 из 16 даёт 6.3
    return math.floor(attended / total * 1000 + 0.5) / 10


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _in_range(lesson, start: Optional[datetime], end: Optional[datetime]) -> bool:
    lesson_date = _naive_utc(lesson.date)
    if start and lesson_date < start:
        return False
    if end and lesson_date > end:
        return False
    return True


def build_attendance_report(
    lessons: Iterable,
    attendance: Iterable,
    users: Iterable,
    groups: Iterable,
    subjects: Iterable,
    filters: Optional[AttendanceFilters] = None,
) -> AttendanceReport:
    filters = filters or AttendanceFilters()
    start = _naive_utc(filters.start_date)
    end = _naive_utc(filters.end_date)

    users_by_id = {u.id: u for u in users}
    groups_by_id = {g.id: g for g in groups}
    subjects_by_id = {s.id: s for s in subjects}
    warnings: List[IntegrityWarning] = []

    attendance_by_student: Dict[str, list] = defaultdict(list)
    for record in attendance:
        attendance_by_student[record.student_id].append(record)

    # Занятия раскладываются по студентам через состав группы
    lessons_by_student: Dict[str, list] = defaultdict(list)
    for lesson in lessons:
        group = groups_by_id.get(lesson.group_id)
        if group is None:
            warnings.append(IntegrityWarning(
                kind="unknown_group",
                lesson_id=lesson.id,
                subject_id=lesson.subject_id,
                detail=f"Занятие ссылается на несуществующую группу {lesson.group_id}",
            ))
            continue
        for student_id in group.student_ids:
            lessons_by_student[student_id].append(lesson)

    records: List[AttendanceSummary] = []

    for student_id, student_attendance in attendance_by_student.items():
        student = users_by_id.get(student_id)
        if student is None:
            warnings.append(IntegrityWarning(
                kind="unknown_student",
                student_id=student_id,
                detail=f"Отметки посещаемости у несуществующего пользователя {student_id}",
            ))
            continue
        if student.role != "STUDENT":
            continue

        lessons_by_subject: Dict[str, list] = defaultdict(list)
        for lesson in lessons_by_student.get(student_id, []):
            lessons_by_subject[lesson.subject_id].append(lesson)

        for subject_id, subject_lessons in lessons_by_subject.items():
            subject = subjects_by_id.get(subject_id)
            if subject is None:
                warnings.append(IntegrityWarning(
                    kind="unknown_subject",
                    student_id=student_id,
                    subject_id=subject_id,
                    lesson_id=subject_lessons[0].id,
                    detail=f"Занятия ссылаются на несуществующую дисциплину {subject_id}",
                ))
                continue

            first_lesson = subject_lessons[0]
            group = groups_by_id.get(first_lesson.group_id)
            teacher = users_by_id.get(first_lesson.teacher_id)
            if group is None or teacher is None:
                warnings.append(IntegrityWarning(
                    kind="unknown_teacher",
                    student_id=student_id,
                    subject_id=subject_id,
                    lesson_id=first_lesson.id,
                    detail=f"Занятие ссылается на несуществующего преподавателя {first_lesson.teacher_id}",
                ))
                continue

            if filters.group_id and first_lesson.group_id != filters.group_id:
                continue
            if filters.subject_id and subject_id != filters.subject_id:
                continue
            if filters.teacher_id and first_lesson.teacher_id != filters.teacher_id:
                continue

            if start or end:
                subject_lessons = [l for l in subject_lessons if _in_range(l, start, end)]

            lesson_ids = {l.id for l in subject_lessons}
            relevant = {
                a.lesson_id: a for a in student_attendance if a.lesson_id in lesson_ids
            }

            total = len(subject_lessons)
            attended = sum(1 for a in relevant.values() if a.present)

            recent = sorted(subject_lessons, key=lambda l: l.date, reverse=True)[:RECENT_LESSONS]

            records.append(AttendanceSummary(
                id=f"{student_id}-{subject_id}",
                student_id=student_id,
                student_name=student.name,
                group_id=group.id,
                group_name=group.title,
                subject_id=subject_id,
                subject_name=subject.title,
                teacher_id=teacher.id,
                teacher_name=teacher.name,
                total_lessons=total,
                attended_lessons=attended,
                missed_lessons=total - attended,
                attendance_rate=attendance_rate(attended, total),
                recent_attendance=[
                    RecentAttendance(
                        date=l.date,
                        present=bool(relevant.get(l.id) and relevant[l.id].present),
                        lesson_id=l.id,
                        lesson_title=l.title,
                    )
                    for l in recent
                ],
            ))

    for warning in warnings:
        logger.warning("Нарушена целостность данных посещаемости: %s", warning.detail)

    records.sort(key=lambda r: r.attendance_rate, reverse=True)
    return AttendanceReport(records=records, warnings=warnings)


def load_attendance_report(db: Session, filters: Optional[AttendanceFilters] = None) -> AttendanceReport:
    """
    Загружает все коллекции и строит отчёт; при ошибке БД пустой отчёт.

    Коллекции читаются напрямую, без safe_read: ошибка любого чтения
    даёт пустой отчёт без предупреждений целостности.
    """
    try:
        lessons = db.query(Lesson).order_by(Lesson.date.desc()).all()
        attendance = db.query(Attendance).all()
        users = db.query(User).all()
        groups = db.query(Group).all()
        subjects = db.query(Subject).all()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ошибка при получении агрегированных данных посещаемости")
        return AttendanceReport()

    return build_attendance_report(
        lessons=lessons,
        attendance=attendance,
        users=users,
        groups=groups,
        subjects=subjects,
        filters=filters,
    )


def _band_counts(records: List[AttendanceSummary]):
    excellent = sum(1 for r in records if r.attendance_rate >= settings.ATTENDANCE_EXCELLENT_MIN)
    poor = sum(1 for r in records if r.attendance_rate < settings.ATTENDANCE_GOOD_MIN)
    return excellent, poor


def _average_rate(records: List[AttendanceSummary]) -> int:
    if not records:
        return 0
    return _round_half_up(sum(r.attendance_rate for r in records) / len(records))


def attendance_stats(records: List[AttendanceSummary]) -> AttendanceStats:
    excellent, poor = _band_counts(records)
    return AttendanceStats(
        total_students=len(records),
        average_attendance=_average_rate(records),
        excellent_attendance=excellent,
        good_attendance=len(records) - excellent - poor,
        poor_attendance=poor,
        total_lessons=sum(r.total_lessons for r in records),
        total_missed=sum(r.missed_lessons for r in records),
    )


def group_stats(records: List[AttendanceSummary]) -> List[GroupAttendanceStats]:
    by_group: Dict[str, List[AttendanceSummary]] = defaultdict(list)
    for record in records:
        by_group[record.group_id].append(record)

    result = []
    for group_id, group_records in by_group.items():
        excellent, poor = _band_counts(group_records)
        result.append(GroupAttendanceStats(
            group_id=group_id,
            group_name=group_records[0].group_name or UNKNOWN_GROUP,
            student_count=len(group_records),
            average_attendance=_average_rate(group_records),
            excellent_count=excellent,
            poor_count=poor,
        ))
    result.sort(key=lambda s: s.average_attendance, reverse=True)
    return result


def subject_stats(records: List[AttendanceSummary]) -> List[SubjectAttendanceStats]:
    by_subject: Dict[str, List[AttendanceSummary]] = defaultdict(list)
    for record in records:
        by_subject[record.subject_id].append(record)

    result = []
    for subject_id, subject_records in by_subject.items():
        excellent, poor = _band_counts(subject_records)
        result.append(SubjectAttendanceStats(
            subject_id=subject_id,
            subject_name=subject_records[0].subject_name or UNKNOWN_SUBJECT,
            record_count=len(subject_records),
            average_attendance=_average_rate(subject_records),
            excellent_count=excellent,
            poor_count=poor,
        ))
    result.sort(key=lambda s: s.average_attendance, reverse=True)
    return result


def _format_rate(rate: float) -> str:
    # 70.0 -> "70%", 66.7 -> "66.7%"
    return f"{rate:g}%"


def export_to_csv(records: List[AttendanceSummary]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for r in records:
        writer.writerow([
            r.student_name,
            r.group_name,
            r.subject_name,
            r.teacher_name,
            str(r.total_lessons),
            str(r.attended_lessons),
            str(r.missed_lessons),
            _format_rate(r.attendance_rate),
        ])
    # Строки разделяются переводом строки, без завершающего
    return buffer.getvalue()[:-1]
