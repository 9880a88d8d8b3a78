from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class LessonCreate(BaseModel):
    title: str
    description: Optional[str] = None
    date: datetime
    group_id: str
    subject_id: str


class LessonUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None


class LessonOut(LessonCreate):
    id: str
    teacher_id: str
    created_at: datetime

    class Config:
        from_attributes = True


class TeacherLessonStats(BaseModel):
    total_lessons: int = 0
    groups_count: int = 0
    subjects_count: int = 0
