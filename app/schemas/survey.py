from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class SurveyCreate(BaseModel):
    title: str
    description: str
    questions: List[str] = []


class SurveyUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None


class SurveyQuestionCreate(BaseModel):
    text: str


class SurveyQuestionOut(BaseModel):
    id: str
    survey_id: str
    text: str
    order: int

    class Config:
        from_attributes = True


class SurveyOut(BaseModel):
    id: str
    title: str
    description: str
    is_active: bool
    created_by: str
    created_at: datetime
    questions: List[SurveyQuestionOut] = []

    class Config:
        from_attributes = True


class SurveyPeriodCreate(BaseModel):
    title: str
    description: Optional[str] = None
    survey_id: str
    start_date: datetime
    end_date: datetime


class SurveyPeriodUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class SurveyPeriodOut(SurveyPeriodCreate):
    id: str
    is_active: bool
    created_by: str
    created_at: datetime

    class Config:
        from_attributes = True


class AnswerIn(BaseModel):
    question_id: str
    value: int = Field(ge=0, le=10)


class SurveySubmit(BaseModel):
    survey_id: str
    teacher_id: str
    subject_id: str
    survey_period_id: str
    answers: List[AnswerIn]


class SurveyAnswerOut(BaseModel):
    id: str
    response_id: str
    question_id: str
    value: int

    class Config:
        from_attributes = True


class SurveyResponseOut(BaseModel):
    id: str
    survey_id: str
    student_id: str
    teacher_id: str
    subject_id: str
    survey_period_id: str
    submitted_at: datetime
    answers: List[SurveyAnswerOut] = []

    class Config:
        from_attributes = True


class SurveyPeriodStats(BaseModel):
    total_responses: int = 0
    unique_students: int = 0
    unique_teachers: int = 0


class QuestionRating(BaseModel):
    question_id: str
    question_text: str
    average_rating: float
    response_count: int


class TeacherRating(BaseModel):
    average_rating: float = 0
    total_responses: int = 0
    question_ratings: List[QuestionRating] = []


class TeacherRatingSummary(BaseModel):
    teacher_id: str
    average_rating: float
    total_responses: int
