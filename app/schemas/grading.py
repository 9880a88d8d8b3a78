from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from app.services.grading import EXCELLENT, GOOD, SATISFACTORY, UNSATISFACTORY

LetterGrade = Literal[EXCELLENT, GOOD, SATISFACTORY, UNSATISFACTORY]


class GradingPeriodCreate(BaseModel):
    title: str
    description: Optional[str] = None
    start_date: datetime
    end_date: datetime


class GradingPeriodUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class GradingPeriodOut(GradingPeriodCreate):
    id: str
    is_active: bool
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class StatusToggle(BaseModel):
    is_active: bool


class FinalGradeCreate(BaseModel):
    student_id: str
    subject_id: str
    group_id: str
    teacher_id: Optional[str] = None  # по умолчанию текущий преподаватель
    grading_period_id: str
    total_score: int = Field(ge=0, le=100)
    letter_grade: Optional[LetterGrade] = None  # вычисляется из total_score, если не задана


class FinalGradeBulkCreate(BaseModel):
    grades: List[FinalGradeCreate]


class FinalGradeOut(BaseModel):
    id: str
    student_id: str
    subject_id: str
    group_id: str
    teacher_id: str
    grading_period_id: str
    total_score: int
    letter_grade: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class GradingPeriodStats(BaseModel):
    total_students: int = 0
    graded_students: int = 0
    average_score: float = 0
    grade_distribution: Dict[str, int] = {}


class CurrentGrade(BaseModel):
    student_id: str
    group_id: str
    subject_id: str
    total_score: int
    max_score: int
    percentage: float
    letter_grade: str
