from sqlalchemy import Column, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from app.db.base import Base, new_id, utcnow

# Состав группы: многие-ко-многим между группами и студентами
group_students = Table(
    "group_students",
    Base.metadata,
    Column("group_id", String(36), ForeignKey("groups.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Group(Base):
    __tablename__ = "groups"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    created_by = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    students = relationship("User", secondary=group_students, lazy="selectin")

    @property
    def student_ids(self):
        return [student.id for student in self.students]
