from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback, apply_updates
from app.db.models.attendance import Attendance
from app.db.models.lesson import Lesson
from app.schemas.lesson import TeacherLessonStats


def _newest_first(query):
    return query.order_by(Lesson.date.desc()).all()


@safe_read()
def get_lessons(db: Session):
    return _newest_first(db.query(Lesson))


@safe_read()
def get_lessons_by_group(db: Session, group_id: str):
    return _newest_first(db.query(Lesson).filter(Lesson.group_id == group_id))


@safe_read()
def get_lessons_by_subject(db: Session, subject_id: str):
    return _newest_first(db.query(Lesson).filter(Lesson.subject_id == subject_id))


@safe_read()
def get_lessons_by_teacher(db: Session, teacher_id: str):
    return _newest_first(db.query(Lesson).filter(Lesson.teacher_id == teacher_id))


@safe_read()
def get_lessons_by_group_and_subject(db: Session, group_id: str, subject_id: str):
    return _newest_first(
        db.query(Lesson).filter(Lesson.group_id == group_id, Lesson.subject_id == subject_id)
    )


@safe_read()
def get_lessons_by_date_range(
    db: Session, start: datetime, end: datetime, teacher_id: Optional[str] = None
):
    query = db.query(Lesson).filter(Lesson.date >= start, Lesson.date <= end)
    if teacher_id:
        query = query.filter(Lesson.teacher_id == teacher_id)
    return query.order_by(Lesson.date.asc()).all()


@safe_read(default=None)
def get_lesson(db: Session, lesson_id: str):
    return db.query(Lesson).filter(Lesson.id == lesson_id).first()


def create_lesson(db: Session, lesson_in, teacher_id: str):
    db_lesson = Lesson(**lesson_in.model_dump(), teacher_id=teacher_id)
    db.add(db_lesson)
    return commit_or_rollback(db, db_lesson)


def update_lesson(db: Session, lesson: Lesson, lesson_in):
    apply_updates(lesson, lesson_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, lesson)


def delete_lesson(db: Session, lesson: Lesson):
    # Отметки посещаемости без занятия не имеют смысла
    db.query(Attendance).filter(Attendance.lesson_id == lesson.id).delete(synchronize_session=False)
    db.delete(lesson)
    commit_or_rollback(db)


@safe_read(default=TeacherLessonStats)
def get_teacher_lesson_stats(db: Session, teacher_id: str) -> TeacherLessonStats:
    lessons = get_lessons_by_teacher(db, teacher_id)
    return TeacherLessonStats(
        total_lessons=len(lessons),
        groups_count=len({l.group_id for l in lessons}),
        subjects_count=len({l.subject_id for l in lessons}),
    )
