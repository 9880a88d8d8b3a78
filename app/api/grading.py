from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_staff, require_teacher, require_teacher_or_staff
from app.crud import assignment as crud_assignment
from app.crud import grading as crud_grading
from app.crud import group as crud_group
from app.crud import teacher_assignment as crud_ta
from app.db.models.user import User
from app.schemas.grading import (
    CurrentGrade,
    FinalGradeBulkCreate,
    FinalGradeCreate,
    FinalGradeOut,
    GradingPeriodCreate,
    GradingPeriodOut,
    GradingPeriodStats,
    GradingPeriodUpdate,
    StatusToggle,
)
from app.services.grading import compute_current_grades

router = APIRouter()


def get_period_or_404(db: Session, period_id: str):
    period = crud_grading.get_grading_period(db, period_id)
    if not period:
        raise HTTPException(status_code=404, detail="Период оценок не найден")
    return period


# === ПЕРИОДЫ ===

@router.get("/periods", response_model=List[GradingPeriodOut])
def list_periods(active: bool = False, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if active:
        return crud_grading.get_active_grading_periods(db)
    return crud_grading.get_grading_periods(db)


@router.get("/periods/{period_id}", response_model=GradingPeriodOut)
def get_period(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_period_or_404(db, period_id)


@router.get("/periods/{period_id}/stats", response_model=GradingPeriodStats)
def period_stats(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher_or_staff)):
    return crud_grading.get_grading_period_stats(db, period_id)


@router.post("/periods", response_model=GradingPeriodOut, status_code=status.HTTP_201_CREATED)
def create_period(
    period_in: GradingPeriodCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    if period_in.end_date <= period_in.start_date:
        raise HTTPException(status_code=400, detail="Дата окончания должна быть позже даты начала")
    return crud_grading.create_grading_period(db, period_in, created_by=current_user.id)


@router.put("/periods/{period_id}", response_model=GradingPeriodOut)
def update_period(
    period_id: str,
    period_in: GradingPeriodUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_grading.update_grading_period(db, get_period_or_404(db, period_id), period_in)


@router.post("/periods/{period_id}/status", response_model=GradingPeriodOut)
def toggle_period(
    period_id: str,
    toggle: StatusToggle,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_grading.set_grading_period_status(db, get_period_or_404(db, period_id), toggle.is_active)


@router.delete("/periods/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_period(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    crud_grading.delete_grading_period(db, get_period_or_404(db, period_id))


# === ИТОГОВЫЕ ОЦЕНКИ ===

@router.get("/final", response_model=List[FinalGradeOut])
def list_final_grades(
    period_id: Optional[str] = None,
    student_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    group_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Студент видит только свои оценки
    if current_user.role == "STUDENT":
        return crud_grading.get_final_grades_by_student(db, current_user.id)
    if group_id and subject_id:
        return crud_grading.get_final_grades_by_group_and_subject(db, group_id, subject_id, period_id)
    if period_id:
        return crud_grading.get_final_grades_by_period(db, period_id)
    if student_id:
        return crud_grading.get_final_grades_by_student(db, student_id)
    if teacher_id:
        return crud_grading.get_final_grades_by_teacher(db, teacher_id)
    raise HTTPException(status_code=400, detail="Укажите период, студента, преподавателя или группу с дисциплиной")


@router.post("/final", response_model=FinalGradeOut)
def upsert_final_grade(
    grade_in: FinalGradeCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    get_period_or_404(db, grade_in.grading_period_id)
    return crud_grading.upsert_final_grade(db, grade_in, teacher_id=current_user.id)


@router.post("/final/bulk", response_model=List[FinalGradeOut])
def bulk_upsert_final_grades(
    body: FinalGradeBulkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    return crud_grading.bulk_upsert_final_grades(db, body.grades, teacher_id=current_user.id)


@router.delete("/final/{grade_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_final_grade(grade_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher_or_staff)):
    grade = crud_grading.get_final_grade(db, grade_id)
    if not grade:
        raise HTTPException(status_code=404, detail="Оценка не найдена")
    crud_grading.delete_final_grade(db, grade)


# Текущие баллы по проверенным заданиям преподавателя
@router.get("/current", response_model=List[CurrentGrade])
def current_grades(db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    pairs = [(p["group_id"], p["subject_id"]) for p in crud_ta.get_group_subject_pairs(db, current_user.id)]
    groups = {g.id: g for g in crud_group.get_groups(db)}
    return compute_current_grades(
        pairs,
        groups,
        crud_assignment.get_assignments_by_teacher(db, current_user.id),
        crud_assignment.get_all_submissions(db),
    )
