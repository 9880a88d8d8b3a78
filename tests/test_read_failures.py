from datetime import datetime

import pytest

from app.crud import subject as crud_subject
from app.crud import user as crud_user
from app.db.models.attendance import Attendance
from app.db.models.group import Group
from app.db.models.lesson import Lesson
from app.db.models.subject import Subject
from app.schemas.user import StaffUserCreate
from app.services.analytics import load_attendance_report


@pytest.fixture
def marked_lesson(db, make_user):
    teacher = make_user("TEACHER")
    student = make_user("STUDENT")
    subject = Subject(title="Математика", created_by=teacher.id)
    group = Group(title="ИС-21", created_by=teacher.id)
    group.students = [student]
    db.add_all([subject, group])
    db.commit()

    lesson = Lesson(
        title="Пределы",
        date=datetime(2024, 9, 2, 9, 0),
        group_id=group.id,
        subject_id=subject.id,
        teacher_id=teacher.id,
    )
    db.add(lesson)
    db.commit()
    db.add(Attendance(lesson_id=lesson.id, student_id=student.id, present=True))
    db.commit()
    return lesson


def test_report_is_built_from_database(db, marked_lesson):
    report = load_attendance_report(db)
    assert len(report.records) == 1
    assert report.warnings == []


def test_failed_read_gives_empty_report_without_warnings(db, engine, marked_lesson):
    Subject.__table__.drop(engine)

    report = load_attendance_report(db)

    assert report.records == []
    assert report.warnings == []


def test_failed_read_returns_default_and_session_stays_usable(db, engine):
    Subject.__table__.drop(engine)

    assert crud_subject.get_subjects(db) == []
    assert crud_subject.get_subject(db, "missing") is None

    user_in = StaffUserCreate(name="После сбоя", email="after@school.test", password="secret123", role="TEACHER")
    user = crud_user.create_user(db, user_in, created_by="tests")
    assert crud_user.get_user_by_id(db, user.id) is not None
