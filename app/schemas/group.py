from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class GroupCreate(BaseModel):
    title: str
    student_ids: List[str] = []


class GroupUpdate(BaseModel):
    title: Optional[str] = None
    student_ids: Optional[List[str]] = None


class GroupStudents(BaseModel):
    student_ids: List[str]


class GroupOut(BaseModel):
    id: str
    title: str
    student_ids: List[str]
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class GroupStats(BaseModel):
    total_students: int = 0
    active_students: int = 0
    inactive_students: int = 0
    lessons_count: int = 0
    assignments_count: int = 0
