import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.core.security import get_password_hash
from app.crud.base import safe_read, commit_or_rollback
from app.db.models.user import User

logger = logging.getLogger(__name__)


@safe_read(default=None)
def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


@safe_read(default=None)
def get_user_by_id(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


@safe_read()
def get_users(db: Session, role: Optional[str] = None, is_active: Optional[bool] = None):
    query = db.query(User)
    if role is not None:
        query = query.filter(User.role == role)
    if is_active is not None:
        query = query.filter(User.is_active == is_active)
    return query.order_by(User.created_at.desc()).all()


@safe_read()
def get_users_by_ids(db: Session, user_ids):
    if not user_ids:
        return []
    return db.query(User).filter(User.id.in_(list(user_ids))).all()


def has_super_admin(db: Session) -> bool:
    return db.query(User.id).filter(User.role == "SUPER_ADMIN").first() is not None


def register_user(db: Session, user_in):
    """
    Регистрация через форму. Первый пользователь системы становится
    SUPER_ADMIN и сразу активен, остальные ждут активации.
    """
    if has_super_admin(db):
        role = user_in.role or "TEACHER"
    else:
        role = "SUPER_ADMIN"

    db_user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        role=role,
        is_active=role == "SUPER_ADMIN",
    )
    db.add(db_user)
    commit_or_rollback(db, db_user)
    logger.info("Пользователь зарегистрирован: %s (%s)", db_user.email, db_user.role)
    if role == "SUPER_ADMIN":
        logger.info("Пользователь назначен СуперАдминистратором (первый пользователь в системе)")
    return db_user


def create_user(db: Session, user_in, created_by: str):
    """Создание пользователя сотрудником: аккаунт активен сразу."""
    db_user = User(
        name=user_in.name,
        email=user_in.email,
        hashed_password=get_password_hash(user_in.password),
        role=user_in.role,
        is_active=True,
        created_by=created_by,
    )
    db.add(db_user)
    commit_or_rollback(db, db_user)
    logger.info("Создан пользователь %s с ролью %s", db_user.email, db_user.role)
    return db_user


def update_user(db: Session, user: User, user_in):
    data = user_in.model_dump(exclude_unset=True)
    password = data.pop("password", None)
    for field, value in data.items():
        if value is not None:
            setattr(user, field, value)
    if password:
        user.hashed_password = get_password_hash(password)
    return commit_or_rollback(db, user)


def set_user_active(db: Session, user: User, is_active: bool):
    user.is_active = is_active
    commit_or_rollback(db, user)
    logger.info("Пользователь %s %s", user.email, "активирован" if is_active else "деактивирован")
    return user


def delete_user(db: Session, user: User):
    db.delete(user)
    commit_or_rollback(db)
