from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_staff
from app.crud import group as crud_group
from app.db.models.user import User
from app.schemas.group import GroupCreate, GroupOut, GroupStats, GroupStudents, GroupUpdate

router = APIRouter()


def get_group_or_404(db: Session, group_id: str):
    group = crud_group.get_group(db, group_id)
    if not group:
        raise HTTPException(status_code=404, detail="Группа не найдена")
    return group


@router.get("/", response_model=List[GroupOut])
def list_groups(
    search: Optional[str] = None,
    empty: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    if empty:
        return crud_group.get_empty_groups(db)
    if search:
        return crud_group.search_groups(db, search)
    return crud_group.get_groups(db)


@router.get("/title-exists")
def check_title_exists(
    title: str,
    exclude_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return {"exists": crud_group.group_title_exists(db, title, exclude_id)}


@router.get("/created-by/{creator_id}", response_model=List[GroupOut])
def list_groups_by_creator(creator_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_group.get_groups_by_creator(db, creator_id)


@router.get("/by-student/{student_id}", response_model=List[GroupOut])
def list_groups_by_student(student_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT" and current_user.id != student_id:
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_group.get_groups_by_student(db, student_id)


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_group_or_404(db, group_id)


@router.get("/{group_id}/stats", response_model=GroupStats)
def get_group_stats(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_group.get_group_stats(db, group_id)


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(group_in: GroupCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    if crud_group.group_title_exists(db, group_in.title):
        raise HTTPException(status_code=400, detail="Группа с таким названием уже существует")
    return crud_group.create_group(db, group_in, created_by=current_user.id)


@router.put("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: str,
    group_in: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    group = get_group_or_404(db, group_id)
    if group_in.title and crud_group.group_title_exists(db, group_in.title, exclude_id=group_id):
        raise HTTPException(status_code=400, detail="Группа с таким названием уже существует")
    return crud_group.update_group(db, group, group_in)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_group(group_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    crud_group.delete_group(db, get_group_or_404(db, group_id))


@router.post("/{group_id}/students", response_model=GroupOut)
def add_students(
    group_id: str,
    body: GroupStudents,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_group.add_students(db, get_group_or_404(db, group_id), body.student_ids)


@router.put("/{group_id}/students", response_model=GroupOut)
def replace_students(
    group_id: str,
    body: GroupStudents,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_group.replace_students(db, get_group_or_404(db, group_id), body.student_ids)


@router.delete("/{group_id}/students/{student_id}", response_model=GroupOut)
def remove_student(
    group_id: str,
    student_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_group.remove_student(db, get_group_or_404(db, group_id), student_id)
