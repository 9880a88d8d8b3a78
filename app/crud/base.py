# app/crud/base.py
import functools
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def safe_read(default=list):
    """
    Чтение из БД: при ошибке пишет в лог и возвращает пустой результат
    (список по умолчанию, либо default(), например None или пустую статистику).
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except SQLAlchemyError:
                # Сессия всегда первый аргумент
                db = args[0] if args else kwargs.get("db")
                if db is not None:
                    db.rollback()
                logger.exception("Ошибка чтения в %s", func.__name__)
                return default() if callable(default) else default
        return wrapper
    return decorator


def commit_or_rollback(db: Session, *instances):
    """Фиксирует транзакцию; при ошибке откатывает её и пробрасывает исключение дальше."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ошибка записи в БД")
        raise
    for instance in instances:
        db.refresh(instance)
    if not instances:
        return None
    return instances[0] if len(instances) == 1 else instances


def apply_updates(instance, data: dict):
    for field, value in data.items():
        setattr(instance, field, value)
    return instance
