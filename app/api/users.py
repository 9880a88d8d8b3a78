# app/api/users.py
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_staff, require_super_admin
from app.crud import user as crud_user
from app.db.models.user import User
from app.schemas.user import Role, StaffUserCreate, UserOut, UserUpdate

router = APIRouter()


def get_user_or_404(db: Session, user_id: str) -> User:
    user = crud_user.get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="Пользователь не найден")
    return user


@router.get("/", response_model=List[UserOut])
def list_users(
    role: Optional[Role] = None,
    is_active: Optional[bool] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    # Студентам список пользователей не нужен
    if current_user.role == "STUDENT":
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_user.get_users(db, role=role, is_active=is_active)


@router.get("/pending", response_model=List[UserOut])
def list_pending_users(db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return crud_user.get_users(db, is_active=False)


@router.post("/", response_model=UserOut, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: StaffUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    # Академ советник не может создавать администраторов
    if user_in.role == "SUPER_ADMIN" and current_user.role != "SUPER_ADMIN":
        raise HTTPException(status_code=403, detail="Только СуперАдмин может создавать администраторов")
    if crud_user.get_user_by_email(db, user_in.email):
        raise HTTPException(status_code=400, detail="Email уже зарегистрирован")
    return crud_user.create_user(db, user_in, created_by=current_user.id)


@router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserOut)
def update_user(
    user_id: str,
    user_in: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_super_admin),
):
    user = get_user_or_404(db, user_id)
    return crud_user.update_user(db, user, user_in)


@router.post("/{user_id}/activate", response_model=UserOut)
def activate_user(user_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    user = get_user_or_404(db, user_id)
    if user.is_active:
        raise HTTPException(status_code=400, detail="Пользователь уже активирован")
    return crud_user.set_user_active(db, user, True)


@router.post("/{user_id}/deactivate", response_model=UserOut)
def deactivate_user(user_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    user = get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="Нельзя деактивировать собственный аккаунт")
    return crud_user.set_user_active(db, user, False)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_super_admin)):
    user = get_user_or_404(db, user_id)
    if user.id == current_user.id:
        raise HTTPException(status_code=400, detail="Нельзя удалить собственный аккаунт")
    crud_user.delete_user(db, user)
