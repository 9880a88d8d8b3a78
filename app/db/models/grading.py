from sqlalchemy import Column, String, Boolean, DateTime, Integer, CheckConstraint, UniqueConstraint
from app.db.base import Base, new_id, utcnow


class GradingPeriod(Base):
    __tablename__ = "grading_periods"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    created_by = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class FinalGrade(Base):
    __tablename__ = "final_grades"
    __table_args__ = (
        # Одна итоговая оценка на (студент, дисциплина, период)
        UniqueConstraint("student_id", "subject_id", "grading_period_id", name="uq_final_grade_student_subject_period"),
        CheckConstraint("total_score >= 0 AND total_score <= 100", name="ck_final_grade_total_score"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    student_id = Column(String(36), nullable=False, index=True)
    subject_id = Column(String(36), nullable=False, index=True)
    group_id = Column(String(36), nullable=False)
    teacher_id = Column(String(36), nullable=False, index=True)
    grading_period_id = Column(String(36), nullable=False, index=True)
    total_score = Column(Integer, nullable=False)
    letter_grade = Column(String(50), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
