from sqlalchemy import Column, String, Boolean, DateTime, Integer, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from app.db.base import Base, new_id, utcnow


class Survey(Base):
    __tablename__ = "surveys"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_by = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    questions = relationship(
        "SurveyQuestion",
        order_by="SurveyQuestion.order",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class SurveyQuestion(Base):
    __tablename__ = "survey_questions"
    __table_args__ = (CheckConstraint('"order" >= 1', name="ck_survey_question_order"),)

    id = Column(String(36), primary_key=True, default=new_id)
    survey_id = Column(String(36), ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String(500), nullable=False)
    order = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class SurveyPeriod(Base):
    __tablename__ = "survey_periods"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    survey_id = Column(String(36), nullable=False, index=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    created_by = Column(String(36), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class SurveyResponse(Base):
    __tablename__ = "survey_responses"
    __table_args__ = (
        UniqueConstraint(
            "student_id", "teacher_id", "subject_id", "survey_period_id",
            name="uq_survey_response_student_teacher_subject_period",
        ),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    survey_id = Column(String(36), nullable=False, index=True)
    student_id = Column(String(36), nullable=False, index=True)
    teacher_id = Column(String(36), nullable=False, index=True)
    subject_id = Column(String(36), nullable=False, index=True)
    survey_period_id = Column(String(36), nullable=False, index=True)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    answers = relationship("SurveyAnswer", cascade="all, delete-orphan", lazy="selectin")


class SurveyAnswer(Base):
    __tablename__ = "survey_answers"
    __table_args__ = (CheckConstraint("value >= 0 AND value <= 10", name="ck_survey_answer_value"),)

    id = Column(String(36), primary_key=True, default=new_id)
    response_id = Column(String(36), ForeignKey("survey_responses.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(36), nullable=False, index=True)
    value = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
