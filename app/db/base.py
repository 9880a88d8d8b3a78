# app/db/base.py
import uuid
from datetime import datetime

from sqlalchemy.orm import declarative_base

Base = declarative_base()


def new_id() -> str:
    """Идентификатор документа: uuid4 строкой, 36 символов."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.utcnow()
