import logging
from collections import Counter
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback, apply_updates
from app.db.models.grading import GradingPeriod, FinalGrade
from app.schemas.grading import GradingPeriodStats
from app.services.grading import get_letter_grade

logger = logging.getLogger(__name__)


# === ПЕРИОДЫ ОЦЕНОК ===

@safe_read()
def get_grading_periods(db: Session):
    return db.query(GradingPeriod).order_by(GradingPeriod.created_at.desc()).all()


@safe_read()
def get_active_grading_periods(db: Session):
    return (
        db.query(GradingPeriod)
        .filter(GradingPeriod.is_active.is_(True))
        .order_by(GradingPeriod.start_date.desc())
        .all()
    )


@safe_read(default=None)
def get_grading_period(db: Session, period_id: str):
    return db.query(GradingPeriod).filter(GradingPeriod.id == period_id).first()


def create_grading_period(db: Session, period_in, created_by: str):
    # Новые периоды создаются неактивными
    period = GradingPeriod(**period_in.model_dump(), created_by=created_by, is_active=False)
    db.add(period)
    return commit_or_rollback(db, period)


def update_grading_period(db: Session, period: GradingPeriod, period_in):
    apply_updates(period, period_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, period)


def set_grading_period_status(db: Session, period: GradingPeriod, is_active: bool):
    period.is_active = is_active
    return commit_or_rollback(db, period)


def delete_grading_period(db: Session, period: GradingPeriod):
    db.delete(period)
    commit_or_rollback(db)


# === ИТОГОВЫЕ ОЦЕНКИ ===

@safe_read()
def get_final_grades_by_period(db: Session, period_id: str):
    return (
        db.query(FinalGrade)
        .filter(FinalGrade.grading_period_id == period_id)
        .order_by(FinalGrade.student_id.asc())
        .all()
    )


@safe_read()
def get_final_grades_by_student(db: Session, student_id: str):
    return (
        db.query(FinalGrade)
        .filter(FinalGrade.student_id == student_id)
        .order_by(FinalGrade.created_at.desc())
        .all()
    )


@safe_read()
def get_final_grades_by_teacher(db: Session, teacher_id: str):
    return (
        db.query(FinalGrade)
        .filter(FinalGrade.teacher_id == teacher_id)
        .order_by(FinalGrade.created_at.desc())
        .all()
    )


@safe_read()
def get_final_grades_by_group_and_subject(
    db: Session, group_id: str, subject_id: str, period_id: Optional[str] = None
):
    query = db.query(FinalGrade).filter(
        FinalGrade.group_id == group_id,
        FinalGrade.subject_id == subject_id,
    )
    if period_id:
        query = query.filter(FinalGrade.grading_period_id == period_id)
    return query.all()


@safe_read(default=None)
def get_final_grade(db: Session, grade_id: str):
    return db.query(FinalGrade).filter(FinalGrade.id == grade_id).first()


def _find_final_grade(db: Session, student_id: str, subject_id: str, period_id: str):
    return db.query(FinalGrade).filter(
        FinalGrade.student_id == student_id,
        FinalGrade.subject_id == subject_id,
        FinalGrade.grading_period_id == period_id,
    ).first()


def upsert_final_grade(db: Session, data, teacher_id: str) -> FinalGrade:
    """
    Одна итоговая оценка на (студент, дисциплина, период).

    Существующая запись обновляется на месте. Уникальный индекс по тройке
    не даёт параллельной вставке создать дубль: проигравшая вставка
    откатывается и обновляет запись победителя.
    """
    letter_grade = data.letter_grade or get_letter_grade(data.total_score)

    existing = _find_final_grade(db, data.student_id, data.subject_id, data.grading_period_id)
    if existing:
        existing.total_score = data.total_score
        existing.letter_grade = letter_grade
        return commit_or_rollback(db, existing)

    grade = FinalGrade(
        student_id=data.student_id,
        subject_id=data.subject_id,
        group_id=data.group_id,
        teacher_id=data.teacher_id or teacher_id,
        grading_period_id=data.grading_period_id,
        total_score=data.total_score,
        letter_grade=letter_grade,
    )
    db.add(grade)
    try:
        return commit_or_rollback(db, grade)
    except IntegrityError:
        existing = _find_final_grade(db, data.student_id, data.subject_id, data.grading_period_id)
        if existing is None:
            raise
        logger.warning(
            "Итоговая оценка student=%s subject=%s period=%s создана параллельно, обновляем",
            data.student_id, data.subject_id, data.grading_period_id,
        )
        existing.total_score = data.total_score
        existing.letter_grade = letter_grade
        return commit_or_rollback(db, existing)


def bulk_upsert_final_grades(db: Session, grades: List, teacher_id: str) -> List[FinalGrade]:
    return [upsert_final_grade(db, g, teacher_id) for g in grades]


def delete_final_grade(db: Session, grade: FinalGrade):
    db.delete(grade)
    commit_or_rollback(db)


@safe_read(default=GradingPeriodStats)
def get_grading_period_stats(db: Session, period_id: str) -> GradingPeriodStats:
    grades = get_final_grades_by_period(db, period_id)
    scores = [g.total_score for g in grades if g.total_score is not None]
    average = sum(scores) / len(scores) if scores else 0
    return GradingPeriodStats(
        total_students=len(grades),
        graded_students=len(scores),
        average_score=round(average, 2),
        grade_distribution=dict(Counter(g.letter_grade for g in grades)),
    )
