from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class SubjectCreate(BaseModel):
    title: str
    description: Optional[str] = None


class SubjectUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None


class SubjectOut(SubjectCreate):
    id: str
    created_by: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True
