from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from app.schemas.analytics import AttendanceFilters
from app.services.analytics import (
    UNKNOWN_GROUP,
    attendance_rate,
    attendance_stats,
    build_attendance_report,
    group_stats,
    subject_stats,
)
from app.services.grading import SATISFACTORY, get_letter_grade

START = datetime(2024, 9, 2, 9, 0)


def user(id, role="STUDENT", name=None):
    return SimpleNamespace(id=id, role=role, name=name or id.title())


def group(id, student_ids, title=None):
    return SimpleNamespace(id=id, title=title or id.upper(), student_ids=student_ids)


def subject(id, title=None):
    return SimpleNamespace(id=id, title=title or id.title())


def lesson(id, group_id="g1", subject_id="math", teacher_id="t1", day=0):
    return SimpleNamespace(
        id=id,
        title=f"Занятие {id}",
        group_id=group_id,
        subject_id=subject_id,
        teacher_id=teacher_id,
        date=START + timedelta(days=day),
    )


def mark(lesson_id, student_id="s1", present=True):
    return SimpleNamespace(lesson_id=lesson_id, student_id=student_id, present=present)


@pytest.fixture
def world():
    return {
        "users": [user("s1"), user("s2"), user("t1", role="TEACHER", name="Иванова")],
        "groups": [group("g1", ["s1", "s2"])],
        "subjects": [subject("math"), subject("art")],
    }


def report(world, lessons, attendance, filters=None):
    return build_attendance_report(
        lessons=lessons,
        attendance=attendance,
        users=world["users"],
        groups=world["groups"],
        subjects=world["subjects"],
        filters=filters,
    )


def test_rate_is_zero_without_lessons():
    assert attendance_rate(0, 0) == 0


def test_seven_of_ten_lessons(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(10)]
    attendance = [mark(f"l{i}", present=i < 7) for i in range(10)]

    rows = report(world, lessons, attendance).records

    assert len(rows) == 1
    row = rows[0]
    assert row.id == "s1-math"
    assert row.total_lessons == 10
    assert row.attended_lessons == 7
    assert row.missed_lessons == 3
    assert row.attendance_rate == 70.0
    assert row.teacher_name == "Иванова"
    assert get_letter_grade(row.attendance_rate) == SATISFACTORY


def test_rate_rounds_to_one_decimal(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(3)]
    attendance = [mark("l0"), mark("l1"), mark("l2", present=False)]

    row = report(world, lessons, attendance).records[0]
    assert row.attendance_rate == 66.7


@pytest.mark.parametrize("attended, total, expected", [
    (1, 16, 6.3),
    (3, 16, 18.8),
    (1, 8, 12.5),
    (7, 10, 70.0),
])
def test_rate_rounds_half_up(attended, total, expected):
    assert attendance_rate(attended, total) == expected


def test_one_of_sixteen_lessons_in_report(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(16)]
    attendance = [mark("l0")]

    row = report(world, lessons, attendance).records[0]
    assert row.attendance_rate == 6.3


def test_lessons_without_marks_count_as_missed(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(4)]
    attendance = [mark("l0")]

    row = report(world, lessons, attendance).records[0]
    assert row.total_lessons == 4
    assert row.attended_lessons == 1
    assert 0 <= row.attendance_rate <= 100
    assert row.attended_lessons + row.missed_lessons == row.total_lessons


def test_recent_attendance_lists_five_newest(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(8)]
    attendance = [mark("l7"), mark("l6", present=False)]

    recent = report(world, lessons, attendance).records[0].recent_attendance

    assert [r.lesson_id for r in recent] == ["l7", "l6", "l5", "l4", "l3"]
    assert [r.present for r in recent] == [True, False, False, False, False]


def test_only_students_with_marks_produce_rows(world):
    world["users"].append(user("t2", role="TEACHER"))
    world["groups"][0].student_ids.append("t2")
    lessons = [lesson("l1")]
    attendance = [mark("l1", "s1"), mark("l1", "t2")]

    rows = report(world, lessons, attendance).records
    assert [r.student_id for r in rows] == ["s1"]


def test_rows_sorted_by_rate_descending(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(4)]
    attendance = [mark("l0", "s1")] + [mark(f"l{i}", "s2") for i in range(4)]

    rows = report(world, lessons, attendance).records
    assert [r.student_id for r in rows] == ["s2", "s1"]
    assert rows[0].attendance_rate >= rows[1].attendance_rate


def test_filters(world):
    world["users"].append(user("t2", role="TEACHER"))
    lessons = [
        lesson("m1", subject_id="math", teacher_id="t1"),
        lesson("a1", subject_id="art", teacher_id="t2"),
    ]
    attendance = [mark("m1"), mark("a1")]

    by_subject = report(world, lessons, attendance, AttendanceFilters(subject_id="art")).records
    assert [r.subject_id for r in by_subject] == ["art"]

    by_teacher = report(world, lessons, attendance, AttendanceFilters(teacher_id="t1")).records
    assert [r.subject_id for r in by_teacher] == ["math"]

    by_group = report(world, lessons, attendance, AttendanceFilters(group_id="other")).records
    assert by_group == []


def test_date_range_is_inclusive(world):
    lessons = [lesson(f"l{i}", day=i) for i in range(5)]
    attendance = [mark(f"l{i}") for i in range(5)]
    filters = AttendanceFilters(start_date=START + timedelta(days=1), end_date=START + timedelta(days=3))

    row = report(world, lessons, attendance, filters).records[0]
    assert row.total_lessons == 3


def test_date_range_without_lessons_gives_zero_rate(world):
    lessons = [lesson("l1")]
    attendance = [mark("l1")]
    filters = AttendanceFilters(start_date=START + timedelta(days=30))

    row = report(world, lessons, attendance, filters).records[0]
    assert row.total_lessons == 0
    assert row.attendance_rate == 0


def test_missing_references_become_warnings(world):
    lessons = [
        lesson("ok"),
        lesson("lost-group", group_id="ghost"),
        lesson("lost-subject", subject_id="ghost-subject"),
    ]
    attendance = [mark("ok"), mark("lost-group"), mark("lost-subject")]

    result = report(world, lessons, attendance)

    assert [r.subject_id for r in result.records] == ["math"]
    kinds = sorted(w.kind for w in result.warnings)
    assert kinds == ["unknown_group", "unknown_subject"]


def test_unknown_teacher_is_reported(world):
    lessons = [lesson("l1", teacher_id="nobody")]
    result = report(world, lessons, [mark("l1")])

    assert result.records == []
    assert result.warnings[0].kind == "unknown_teacher"


def summary(student_id, rate, group_id="g1", subject_id="math", total=10, group_name="G1"):
    attended = round(total * rate / 100)
    return SimpleNamespace(
        student_id=student_id,
        group_id=group_id,
        group_name=group_name,
        subject_id=subject_id,
        subject_name=subject_id.title(),
        total_lessons=total,
        attended_lessons=attended,
        missed_lessons=total - attended,
        attendance_rate=rate,
    )


def test_attendance_stats_bands():
    records = [summary("s1", 95), summary("s2", 90), summary("s3", 80), summary("s4", 74.9)]

    stats = attendance_stats(records)

    assert stats.total_students == 4
    assert stats.excellent_attendance == 2
    assert stats.good_attendance == 1
    assert stats.poor_attendance == 1
    assert stats.average_attendance == 85
    assert stats.total_lessons == 40


def test_attendance_stats_empty():
    stats = attendance_stats([])
    assert stats.total_students == 0
    assert stats.average_attendance == 0


def test_group_and_subject_stats_sorted_by_average():
    records = [
        summary("s1", 50, group_id="g1", subject_id="math"),
        summary("s2", 100, group_id="g2", subject_id="art", group_name=""),
    ]

    groups = group_stats(records)
    assert [g.group_id for g in groups] == ["g2", "g1"]
    assert groups[0].group_name == UNKNOWN_GROUP
    assert groups[0].excellent_count == 1
    assert groups[1].poor_count == 1

    subjects = subject_stats(records)
    assert [s.subject_id for s in subjects] == ["art", "math"]
    assert subjects[0].record_count == 1
