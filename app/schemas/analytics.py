from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel


class AttendanceFilters(BaseModel):
    group_id: Optional[str] = None
    subject_id: Optional[str] = None
    teacher_id: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class RecentAttendance(BaseModel):
    date: datetime
    present: bool
    lesson_id: str
    lesson_title: str


class AttendanceSummary(BaseModel):
    """Агрегированная посещаемость студента по дисциплине (не хранится в БД)."""
    id: str
    student_id: str
    student_name: str
    group_id: str
    group_name: str
    subject_id: str
    subject_name: str
    teacher_id: str
    teacher_name: str
    total_lessons: int
    attended_lessons: int
    missed_lessons: int
    attendance_rate: float
    recent_attendance: List[RecentAttendance] = []


IntegrityKind = Literal["unknown_group", "unknown_subject", "unknown_teacher", "unknown_student"]


class IntegrityWarning(BaseModel):
    kind: IntegrityKind
    lesson_id: Optional[str] = None
    student_id: Optional[str] = None
    subject_id: Optional[str] = None
    detail: str


class AttendanceReport(BaseModel):
    records: List[AttendanceSummary] = []
    warnings: List[IntegrityWarning] = []


class AttendanceStats(BaseModel):
    total_students: int = 0
    average_attendance: int = 0
    excellent_attendance: int = 0
    good_attendance: int = 0
    poor_attendance: int = 0
    total_lessons: int = 0
    total_missed: int = 0


class GroupAttendanceStats(BaseModel):
    group_id: str
    group_name: str
    student_count: int
    average_attendance: int
    excellent_count: int
    poor_count: int


class SubjectAttendanceStats(BaseModel):
    subject_id: str
    subject_name: str
    record_count: int
    average_attendance: int
    excellent_count: int
    poor_count: int
