from sqlalchemy import Column, String, Boolean, DateTime, Enum
from app.db.base import Base, new_id, utcnow

USER_ROLES = ("SUPER_ADMIN", "ACADEMIC_ADVISOR", "TEACHER", "STUDENT")


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False)
    email = Column(String(320), unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(Enum(*USER_ROLES, name="user_role"), nullable=False, index=True)
    is_active = Column(Boolean, default=False, nullable=False, index=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    created_by = Column(String(36), nullable=True)
