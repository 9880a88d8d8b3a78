from datetime import datetime
from typing import List

from pydantic import BaseModel


class TeacherAssignmentCreate(BaseModel):
    teacher_id: str
    group_id: str
    subject_id: str


class TeacherAssignmentBulkCreate(BaseModel):
    items: List[TeacherAssignmentCreate]


class TeacherAssignmentOut(TeacherAssignmentCreate):
    id: str
    assigned_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class GroupSubjectPair(BaseModel):
    group_id: str
    subject_id: str
