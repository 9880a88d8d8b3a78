from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from app.db.base import Base, new_id, utcnow


class TeacherAssignment(Base):
    """Закрепление преподавателя за парой (группа, дисциплина)."""
    __tablename__ = "teacher_assignments"
    __table_args__ = (
        UniqueConstraint("teacher_id", "group_id", "subject_id", name="uq_teacher_group_subject"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    teacher_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    group_id = Column(String(36), ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(String(36), ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_by = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
