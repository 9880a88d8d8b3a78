from sqlalchemy import Column, String, Text, Boolean, DateTime, Integer, CheckConstraint, UniqueConstraint
from app.db.base import Base, new_id, utcnow


class Assignment(Base):
    __tablename__ = "assignments"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    group_id = Column(String(36), nullable=False, index=True)
    subject_id = Column(String(36), nullable=False, index=True)
    teacher_id = Column(String(36), nullable=False, index=True)
    due_date = Column(DateTime, nullable=False, index=True)
    max_score = Column(Integer, default=100, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)


class AssignmentSubmission(Base):
    __tablename__ = "assignment_submissions"
    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        CheckConstraint("score IS NULL OR (score >= 0 AND score <= 100)", name="ck_submission_score"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    assignment_id = Column(String(36), nullable=False, index=True)
    student_id = Column(String(36), nullable=False, index=True)
    submission_url = Column(String(500), nullable=False)
    submitted_at = Column(DateTime, default=utcnow, nullable=False)

    # Поля проверки: сбрасываются при повторной отправке
    score = Column(Integer, nullable=True)
    comment = Column(String(1000), nullable=True)
    is_checked = Column(Boolean, default=False, nullable=False, index=True)
    checked_at = Column(DateTime, nullable=True)
    checked_by = Column(String(36), nullable=True)
