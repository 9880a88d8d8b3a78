# app/db/__init__.py
# Этот файл гарантирует, что все модели импортированы при первом импорте app.db,
# и Base.metadata содержит полную схему (её же использует app.provision)

from app.db.base import Base
from app.db import models  # noqa: F401

__all__ = ["Base", "models"]
