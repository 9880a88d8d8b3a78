from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_super_admin
from app.crud import subject as crud_subject
from app.db.models.user import User
from app.schemas.grading import StatusToggle
from app.schemas.subject import SubjectCreate, SubjectOut, SubjectUpdate

router = APIRouter()


def get_subject_or_404(db: Session, subject_id: str):
    subject = crud_subject.get_subject(db, subject_id)
    if not subject:
        raise HTTPException(status_code=404, detail="Дисциплина не найдена")
    return subject


@router.get("/", response_model=List[SubjectOut])
def list_subjects(
    active: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud_subject.get_subjects(db, only_active=active)


@router.get("/created-by/{creator_id}", response_model=List[SubjectOut])
def list_subjects_by_creator(creator_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_subject.get_subjects_by_creator(db, creator_id)


@router.get("/{subject_id}", response_model=SubjectOut)
def get_subject(subject_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_subject_or_404(db, subject_id)


@router.post("/", response_model=SubjectOut, status_code=status.HTTP_201_CREATED)
def create_subject(
    subject_in: SubjectCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    return crud_subject.create_subject(db, subject_in, created_by=current_user.id)


@router.put("/{subject_id}", response_model=SubjectOut)
def update_subject(
    subject_id: str,
    subject_in: SubjectUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    subject = get_subject_or_404(db, subject_id)
    return crud_subject.update_subject(db, subject, subject_in)


@router.post("/{subject_id}/status", response_model=SubjectOut)
def toggle_subject_status(
    subject_id: str,
    toggle: StatusToggle,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    subject = get_subject_or_404(db, subject_id)
    return crud_subject.set_subject_status(db, subject, toggle.is_active)


@router.delete("/{subject_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_subject(subject_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_super_admin)):
    crud_subject.delete_subject(db, get_subject_or_404(db, subject_id))
