from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_staff
from app.crud import teacher_assignment as crud_ta
from app.crud.teacher_assignment import DuplicateAssignmentError
from app.db.models.user import User
from app.schemas.teacher_assignment import (
    GroupSubjectPair,
    TeacherAssignmentBulkCreate,
    TeacherAssignmentCreate,
    TeacherAssignmentOut,
)

router = APIRouter()


@router.get("/", response_model=List[TeacherAssignmentOut])
def list_assignments(
    teacher_id: Optional[str] = None,
    group_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    assigned_by: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if teacher_id:
        return crud_ta.get_assignments_by_teacher(db, teacher_id)
    if group_id:
        return crud_ta.get_assignments_by_group(db, group_id)
    if subject_id:
        return crud_ta.get_assignments_by_subject(db, subject_id)
    if assigned_by:
        return crud_ta.get_assignments_by_assigner(db, assigned_by)
    return crud_ta.get_assignments(db)


@router.get("/exists")
def check_exists(
    teacher_id: str,
    group_id: str,
    subject_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return {"exists": crud_ta.assignment_exists(db, teacher_id, group_id, subject_id)}


@router.get("/teacher/{teacher_id}/pairs", response_model=List[GroupSubjectPair])
def list_teacher_pairs(teacher_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_ta.get_group_subject_pairs(db, teacher_id)


@router.post("/", response_model=TeacherAssignmentOut, status_code=status.HTTP_201_CREATED)
def create_assignment(
    data: TeacherAssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    try:
        return crud_ta.create_assignment(db, data, assigned_by=current_user.id)
    except DuplicateAssignmentError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.post("/bulk", response_model=List[TeacherAssignmentOut], status_code=status.HTTP_201_CREATED)
def bulk_create_assignments(
    data: TeacherAssignmentBulkCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_ta.bulk_create_assignments(db, data.items, assigned_by=current_user.id)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    assignment = crud_ta.get_assignment(db, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Назначение не найдено")
    crud_ta.delete_assignment(db, assignment)
