from datetime import datetime
from typing import List

from pydantic import BaseModel


class AttendanceBase(BaseModel):
    lesson_id: str
    student_id: str
    present: bool = False


class AttendanceCreate(AttendanceBase):
    pass


class AttendanceMark(BaseModel):
    student_id: str
    present: bool


class AttendanceBulkUpdate(BaseModel):
    records: List[AttendanceMark]


class AttendanceOut(AttendanceBase):
    id: str
    created_at: datetime

    class Config:
        from_attributes = True


class StudentAttendanceStats(BaseModel):
    total_lessons: int = 0
    attended_lessons: int = 0
    missed_lessons: int = 0
    attendance_percentage: float = 0


class LessonAttendanceStats(BaseModel):
    total_students: int = 0
    present_students: int = 0
    absent_students: int = 0
    attendance_percentage: float = 0
