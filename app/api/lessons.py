from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_teacher
from app.crud import lesson as crud_lesson
from app.crud import teacher_assignment as crud_ta
from app.db.models.user import User
from app.schemas.lesson import LessonCreate, LessonOut, LessonUpdate, TeacherLessonStats

router = APIRouter()


def get_lesson_or_404(db: Session, lesson_id: str):
    lesson = crud_lesson.get_lesson(db, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Занятие не найдено")
    return lesson


def check_lesson_owner(lesson, current_user: User):
    if lesson.teacher_id != current_user.id:
        raise HTTPException(status_code=403, detail="Можно изменять только свои занятия")


# Фильтры взаимоисключающие, как и в остальных списках
@router.get("/", response_model=List[LessonOut])
def list_lessons(
    group_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if group_id and subject_id:
        return crud_lesson.get_lessons_by_group_and_subject(db, group_id, subject_id)
    if group_id:
        return crud_lesson.get_lessons_by_group(db, group_id)
    if subject_id:
        return crud_lesson.get_lessons_by_subject(db, subject_id)
    if teacher_id:
        return crud_lesson.get_lessons_by_teacher(db, teacher_id)
    return crud_lesson.get_lessons(db)


@router.get("/range", response_model=List[LessonOut])
def list_lessons_in_range(
    start: datetime,
    end: datetime,
    teacher_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_lesson.get_lessons_by_date_range(db, start, end, teacher_id)


@router.get("/teacher/{teacher_id}/stats", response_model=TeacherLessonStats)
def teacher_stats(teacher_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_lesson.get_teacher_lesson_stats(db, teacher_id)


@router.get("/{lesson_id}", response_model=LessonOut)
def get_lesson(lesson_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_lesson_or_404(db, lesson_id)


@router.post("/", response_model=LessonOut, status_code=status.HTTP_201_CREATED)
def create_lesson(
    lesson_in: LessonCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    # Преподаватель ведёт занятия только в назначенных ему группах и дисциплинах
    if not crud_ta.assignment_exists(db, current_user.id, lesson_in.group_id, lesson_in.subject_id):
        raise HTTPException(status_code=403, detail="Вы не назначены на эту группу и дисциплину")
    return crud_lesson.create_lesson(db, lesson_in, teacher_id=current_user.id)


@router.put("/{lesson_id}", response_model=LessonOut)
def update_lesson(
    lesson_id: str,
    lesson_in: LessonUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    lesson = get_lesson_or_404(db, lesson_id)
    check_lesson_owner(lesson, current_user)
    return crud_lesson.update_lesson(db, lesson, lesson_in)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_lesson(lesson_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    lesson = get_lesson_or_404(db, lesson_id)
    check_lesson_owner(lesson, current_user)
    crud_lesson.delete_lesson(db, lesson)
