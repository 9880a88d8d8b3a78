from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_teacher
from app.crud import attendance as crud_attendance
from app.crud import lesson as crud_lesson
from app.db.models.user import User
from app.schemas.attendance import (
    AttendanceBulkUpdate,
    AttendanceCreate,
    AttendanceOut,
    LessonAttendanceStats,
    StudentAttendanceStats,
)

router = APIRouter()


# Отметки ставит только преподаватель, который ведёт занятие
def get_own_lesson(db: Session, lesson_id: str, current_user: User):
    lesson = crud_lesson.get_lesson(db, lesson_id)
    if not lesson:
        raise HTTPException(status_code=404, detail="Занятие не найдено")
    if lesson.teacher_id != current_user.id:
        raise HTTPException(status_code=403, detail="Это занятие ведёт другой преподаватель")
    return lesson


@router.get("/", response_model=List[AttendanceOut])
def list_attendance(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT":
        return crud_attendance.get_by_student(db, current_user.id)
    return crud_attendance.get_all_attendance(db)


@router.get("/lesson/{lesson_id}", response_model=List[AttendanceOut])
def list_lesson_attendance(lesson_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_attendance.get_by_lesson(db, lesson_id)


@router.get("/lesson/{lesson_id}/stats", response_model=LessonAttendanceStats)
def lesson_stats(lesson_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_attendance.get_lesson_stats(db, lesson_id)


@router.get("/student/{student_id}", response_model=List[AttendanceOut])
def list_student_attendance(student_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT" and current_user.id != student_id:
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_attendance.get_by_student(db, student_id)


@router.get("/student/{student_id}/stats", response_model=StudentAttendanceStats)
def student_stats(student_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT" and current_user.id != student_id:
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_attendance.get_student_stats(db, student_id)


@router.get("/group/{group_id}/subject/{subject_id}", response_model=List[AttendanceOut])
def list_group_subject_attendance(
    group_id: str,
    subject_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_attendance.get_group_subject_attendance(db, group_id, subject_id)


# Обновить или создать отметку
@router.post("/", response_model=AttendanceOut)
def mark_attendance(
    record: AttendanceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    get_own_lesson(db, record.lesson_id, current_user)
    return crud_attendance.upsert_attendance(db, record.lesson_id, record.student_id, record.present)


@router.put("/lesson/{lesson_id}", response_model=List[AttendanceOut])
def bulk_mark_attendance(
    lesson_id: str,
    body: AttendanceBulkUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    get_own_lesson(db, lesson_id, current_user)
    return crud_attendance.bulk_update_attendance(db, lesson_id, body.records)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance(record_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    record = crud_attendance.get_record_by_id(db, record_id)
    if not record:
        raise HTTPException(status_code=404, detail="Отметка не найдена")
    get_own_lesson(db, record.lesson_id, current_user)
    crud_attendance.delete_attendance(db, record)
