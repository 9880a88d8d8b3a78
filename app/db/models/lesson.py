from sqlalchemy import Column, String, DateTime
from app.db.base import Base, new_id, utcnow


class Lesson(Base):
    __tablename__ = "lessons"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    date = Column(DateTime, nullable=False, index=True)
    # Ссылки без внешних ключей: целостность проверяет аналитика
    group_id = Column(String(36), nullable=False, index=True)
    subject_id = Column(String(36), nullable=False, index=True)
    teacher_id = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
