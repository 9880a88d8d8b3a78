from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_student, require_teacher
from app.crud import assignment as crud_assignment
from app.crud import teacher_assignment as crud_ta
from app.db.models.user import User
from app.schemas.assignment import (
    AssignmentCreate,
    AssignmentOut,
    AssignmentStats,
    AssignmentUpdate,
    SubmissionCreate,
    SubmissionGrade,
    SubmissionOut,
)

router = APIRouter()


def get_assignment_or_404(db: Session, assignment_id: str):
    assignment = crud_assignment.get_assignment(db, assignment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Задание не найдено")
    return assignment


def get_own_assignment(db: Session, assignment_id: str, current_user: User):
    assignment = get_assignment_or_404(db, assignment_id)
    if assignment.teacher_id != current_user.id:
        raise HTTPException(status_code=403, detail="Это задание создал другой преподаватель")
    return assignment


# Ученик видит только активные задания, преподаватель и администрация видят все
@router.get("/", response_model=List[AssignmentOut])
def list_assignments(
    group_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if group_id and subject_id:
        return crud_assignment.get_assignments_by_group_and_subject(db, group_id, subject_id)
    if group_id:
        return crud_assignment.get_assignments_by_group(db, group_id)
    if subject_id:
        return crud_assignment.get_assignments_by_subject(db, subject_id)
    if teacher_id:
        return crud_assignment.get_assignments_by_teacher(db, teacher_id)
    if current_user.role == "STUDENT":
        return crud_assignment.get_active_assignments(db)
    return crud_assignment.get_assignments(db)


@router.get("/submissions/unchecked", response_model=List[SubmissionOut])
def list_unchecked_submissions(db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    return crud_assignment.get_unchecked_submissions_by_teacher(db, current_user.id)


@router.get("/submissions/student/{student_id}", response_model=List[SubmissionOut])
def list_student_submissions(student_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT" and current_user.id != student_id:
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_assignment.get_submissions_by_student(db, student_id)


@router.post("/submissions", response_model=SubmissionOut)
def submit_assignment(
    submission_in: SubmissionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    assignment = get_assignment_or_404(db, submission_in.assignment_id)
    if not assignment.is_active:
        raise HTTPException(status_code=400, detail="Задание больше не принимает ответы")
    return crud_assignment.submit_assignment(db, submission_in, student_id=current_user.id)


@router.post("/submissions/{submission_id}/grade", response_model=SubmissionOut)
def grade_submission(
    submission_id: str,
    grade_in: SubmissionGrade,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    submission = crud_assignment.get_submission(db, submission_id)
    if not submission:
        raise HTTPException(status_code=404, detail="Ответ не найден")
    get_own_assignment(db, submission.assignment_id, current_user)
    return crud_assignment.grade_submission(db, submission, grade_in, teacher_id=current_user.id)


@router.get("/{assignment_id}", response_model=AssignmentOut)
def get_assignment(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_assignment_or_404(db, assignment_id)


@router.get("/{assignment_id}/stats", response_model=AssignmentStats)
def assignment_stats(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_assignment.get_assignment_stats(db, assignment_id)


@router.get("/{assignment_id}/submissions", response_model=List[SubmissionOut])
def list_submissions(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    get_own_assignment(db, assignment_id, current_user)
    return crud_assignment.get_submissions_by_assignment(db, assignment_id)


@router.get("/{assignment_id}/my-submission", response_model=Optional[SubmissionOut])
def get_my_submission(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_student)):
    return crud_assignment.get_student_submission(db, assignment_id, current_user.id)


@router.post("/", response_model=AssignmentOut, status_code=status.HTTP_201_CREATED)
def create_assignment(
    assignment_in: AssignmentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    if not crud_ta.assignment_exists(db, current_user.id, assignment_in.group_id, assignment_in.subject_id):
        raise HTTPException(status_code=403, detail="Вы не назначены на эту группу и дисциплину")
    return crud_assignment.create_assignment(db, assignment_in, teacher_id=current_user.id)


@router.put("/{assignment_id}", response_model=AssignmentOut)
def update_assignment(
    assignment_id: str,
    assignment_in: AssignmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher),
):
    assignment = get_own_assignment(db, assignment_id, current_user)
    return crud_assignment.update_assignment(db, assignment, assignment_in)


@router.post("/{assignment_id}/deactivate", response_model=AssignmentOut)
def deactivate_assignment(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    assignment = get_own_assignment(db, assignment_id, current_user)
    return crud_assignment.deactivate_assignment(db, assignment)


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(assignment_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_teacher)):
    assignment = get_own_assignment(db, assignment_id, current_user)
    crud_assignment.delete_assignment(db, assignment)
