# app/db/models/attendance.py
from sqlalchemy import Column, String, Boolean, DateTime, UniqueConstraint
from app.db.base import Base, new_id, utcnow


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = (
        UniqueConstraint("lesson_id", "student_id", name="uq_attendance_lesson_student"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    lesson_id = Column(String(36), nullable=False, index=True)
    student_id = Column(String(36), nullable=False, index=True)
    # True: присутствовал, False: пропуск
    present = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
