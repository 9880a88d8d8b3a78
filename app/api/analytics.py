from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.api.deps import get_db, require_teacher_or_staff
from app.db.models.user import User
from app.schemas.analytics import (
    AttendanceFilters,
    AttendanceReport,
    AttendanceStats,
    GroupAttendanceStats,
    SubjectAttendanceStats,
)
from app.services import analytics

router = APIRouter()


def get_filters(
    group_id: Optional[str] = None,
    subject_id: Optional[str] = None,
    teacher_id: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    current_user: User = Depends(require_teacher_or_staff),
) -> AttendanceFilters:
    # Преподаватель видит только свои занятия
    if current_user.role == "TEACHER":
        teacher_id = current_user.id
    return AttendanceFilters(
        group_id=group_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/attendance", response_model=AttendanceReport)
def attendance_report(filters: AttendanceFilters = Depends(get_filters), db: Session = Depends(get_db)):
    return analytics.load_attendance_report(db, filters)


@router.get("/attendance/stats", response_model=AttendanceStats)
def attendance_stats(filters: AttendanceFilters = Depends(get_filters), db: Session = Depends(get_db)):
    report = analytics.load_attendance_report(db, filters)
    return analytics.attendance_stats(report.records)


@router.get("/attendance/groups", response_model=List[GroupAttendanceStats])
def attendance_by_group(filters: AttendanceFilters = Depends(get_filters), db: Session = Depends(get_db)):
    report = analytics.load_attendance_report(db, filters)
    return analytics.group_stats(report.records)


@router.get("/attendance/subjects", response_model=List[SubjectAttendanceStats])
def attendance_by_subject(filters: AttendanceFilters = Depends(get_filters), db: Session = Depends(get_db)):
    report = analytics.load_attendance_report(db, filters)
    return analytics.subject_stats(report.records)


@router.get("/attendance/export")
def export_attendance(filters: AttendanceFilters = Depends(get_filters), db: Session = Depends(get_db)):
    report = analytics.load_attendance_report(db, filters)
    filename = f"attendance_{datetime.utcnow():%Y-%m-%d}.csv"
    return Response(
        content=analytics.export_to_csv(report.records),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
