# app/schemas/user.py

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

Role = Literal["SUPER_ADMIN", "ACADEMIC_ADVISOR", "TEACHER", "STUDENT"]


class UserCreate(BaseModel):
    name: str
    email: str
    password: str
    role: Optional[Role] = None  # по умолчанию TEACHER, первый пользователь SUPER_ADMIN


class StaffUserCreate(BaseModel):
    name: str
    email: str
    password: str
    role: Role


class UserUpdate(BaseModel):
    name: Optional[str] = None
    role: Optional[Role] = None
    password: Optional[str] = None


class UserLogin(BaseModel):
    email: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    role: Role
    is_active: bool
    created_at: datetime
    created_by: Optional[str] = None

    class Config:
        from_attributes = True
