from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AssignmentCreate(BaseModel):
    title: str
    description: str
    group_id: str
    subject_id: str
    due_date: datetime
    max_score: int = Field(default=100, gt=0)


class AssignmentUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    max_score: Optional[int] = Field(default=None, gt=0)
    is_active: Optional[bool] = None


class AssignmentOut(AssignmentCreate):
    id: str
    teacher_id: str
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True


class SubmissionCreate(BaseModel):
    assignment_id: str
    submission_url: str = Field(max_length=500)


class SubmissionGrade(BaseModel):
    score: int = Field(ge=0, le=100)
    comment: Optional[str] = None


class SubmissionOut(BaseModel):
    id: str
    assignment_id: str
    student_id: str
    submission_url: str
    submitted_at: datetime
    score: Optional[int] = None
    comment: Optional[str] = None
    is_checked: bool
    checked_at: Optional[datetime] = None
    checked_by: Optional[str] = None

    class Config:
        from_attributes = True


class AssignmentStats(BaseModel):
    total_submissions: int = 0
    checked_submissions: int = 0
    unchecked_submissions: int = 0
    average_score: float = 0
