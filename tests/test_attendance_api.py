import pytest

from app.db.models.attendance import Attendance


@pytest.fixture
def classroom(client, make_user, auth_headers):
    admin = make_user("SUPER_ADMIN")
    teacher = make_user("TEACHER")
    students = [make_user("STUDENT"), make_user("STUDENT")]
    admin_headers = auth_headers(admin)

    subject = client.post("/api/subjects/", json={"title": "Математика"}, headers=admin_headers).json()
    group = client.post(
        "/api/groups/",
        json={"title": "ИС-21", "student_ids": [s.id for s in students]},
        headers=admin_headers,
    ).json()
    response = client.post(
        "/api/teacher-assignments/",
        json={"teacher_id": teacher.id, "group_id": group["id"], "subject_id": subject["id"]},
        headers=admin_headers,
    )
    assert response.status_code == 201

    return {
        "admin": admin_headers,
        "teacher": auth_headers(teacher),
        "teacher_id": teacher.id,
        "students": students,
        "group": group,
        "subject": subject,
    }


def create_lesson(client, classroom, date="2024-09-02T09:00:00"):
    return client.post(
        "/api/lessons/",
        json={
            "title": "Производные",
            "date": date,
            "group_id": classroom["group"]["id"],
            "subject_id": classroom["subject"]["id"],
        },
        headers=classroom["teacher"],
    )


def test_duplicate_teacher_assignment_conflicts(client, classroom):
    response = client.post(
        "/api/teacher-assignments/",
        json={
            "teacher_id": classroom["teacher_id"],
            "group_id": classroom["group"]["id"],
            "subject_id": classroom["subject"]["id"],
        },
        headers=classroom["admin"],
    )
    assert response.status_code == 409


def test_lesson_requires_teacher_assignment(client, classroom, make_user, auth_headers):
    outsider = make_user("TEACHER")
    response = client.post(
        "/api/lessons/",
        json={
            "title": "Чужое занятие",
            "date": "2024-09-02T09:00:00",
            "group_id": classroom["group"]["id"],
            "subject_id": classroom["subject"]["id"],
        },
        headers=auth_headers(outsider),
    )
    assert response.status_code == 403
    assert create_lesson(client, classroom).status_code == 201


def test_marking_twice_updates_the_same_record(client, classroom, db):
    lesson = create_lesson(client, classroom).json()
    student = classroom["students"][0]

    first = client.post(
        "/api/attendance/",
        json={"lesson_id": lesson["id"], "student_id": student.id, "present": True},
        headers=classroom["teacher"],
    ).json()
    second = client.post(
        "/api/attendance/",
        json={"lesson_id": lesson["id"], "student_id": student.id, "present": False},
        headers=classroom["teacher"],
    ).json()

    assert first["id"] == second["id"]
    assert second["present"] is False
    assert db.query(Attendance).filter(Attendance.lesson_id == lesson["id"]).count() == 1


def test_bulk_marks_and_stats(client, classroom):
    lesson = create_lesson(client, classroom).json()
    s1, s2 = classroom["students"]

    response = client.put(
        f"/api/attendance/lesson/{lesson['id']}",
        json={"records": [
            {"student_id": s1.id, "present": True},
            {"student_id": s2.id, "present": False},
        ]},
        headers=classroom["teacher"],
    )
    assert response.status_code == 200
    assert len(response.json()) == 2

    stats = client.get(f"/api/attendance/lesson/{lesson['id']}/stats", headers=classroom["teacher"]).json()
    assert stats == {
        "total_students": 2,
        "present_students": 1,
        "absent_students": 1,
        "attendance_percentage": 50.0,
    }

    report = client.get("/api/analytics/attendance", headers=classroom["admin"]).json()
    assert report["warnings"] == []
    assert [r["student_id"] for r in report["records"]] == [s1.id, s2.id]
    assert report["records"][0]["attendance_rate"] == 100.0

    export = client.get("/api/analytics/attendance/export", headers=classroom["admin"])
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert len(export.text.split("\n")) == 3


def test_deleting_lesson_removes_its_marks(client, classroom, db):
    lesson = create_lesson(client, classroom).json()
    client.post(
        "/api/attendance/",
        json={"lesson_id": lesson["id"], "student_id": classroom["students"][0].id, "present": True},
        headers=classroom["teacher"],
    )

    response = client.delete(f"/api/lessons/{lesson['id']}", headers=classroom["teacher"])

    assert response.status_code == 204
    assert db.query(Attendance).filter(Attendance.lesson_id == lesson["id"]).count() == 0


def test_other_teachers_cannot_mark_attendance(client, classroom, make_user, auth_headers):
    lesson = create_lesson(client, classroom).json()
    outsider = make_user("TEACHER")

    response = client.post(
        "/api/attendance/",
        json={"lesson_id": lesson["id"], "student_id": classroom["students"][0].id, "present": True},
        headers=auth_headers(outsider),
    )
    assert response.status_code == 403


@pytest.fixture
def two_teachers(client, classroom, make_user, auth_headers):
    other = make_user("TEACHER")
    other_headers = auth_headers(other)
    art = client.post("/api/subjects/", json={"title": "Рисование"}, headers=classroom["admin"]).json()
    client.post(
        "/api/teacher-assignments/",
        json={"teacher_id": other.id, "group_id": classroom["group"]["id"], "subject_id": art["id"]},
        headers=classroom["admin"],
    )
    student_id = classroom["students"][0].id

    own = create_lesson(client, classroom).json()
    foreign = client.post(
        "/api/lessons/",
        json={
            "title": "Натюрморт",
            "date": "2024-09-03T09:00:00",
            "group_id": classroom["group"]["id"],
            "subject_id": art["id"],
        },
        headers=other_headers,
    ).json()
    client.post(
        "/api/attendance/",
        json={"lesson_id": own["id"], "student_id": student_id, "present": True},
        headers=classroom["teacher"],
    )
    client.post(
        "/api/attendance/",
        json={"lesson_id": foreign["id"], "student_id": student_id, "present": False},
        headers=other_headers,
    )
    return other


def test_teacher_sees_only_own_lessons_in_analytics(client, classroom, two_teachers):
    report = client.get(
        "/api/analytics/attendance",
        params={"teacher_id": two_teachers.id},
        headers=classroom["teacher"],
    ).json()

    assert report["records"]
    assert {r["teacher_id"] for r in report["records"]} == {classroom["teacher_id"]}

    full = client.get("/api/analytics/attendance", headers=classroom["admin"]).json()
    assert {r["teacher_id"] for r in full["records"]} == {classroom["teacher_id"], two_teachers.id}


@pytest.mark.parametrize("path", [
    "/api/analytics/attendance",
    "/api/analytics/attendance/stats",
    "/api/analytics/attendance/groups",
    "/api/analytics/attendance/subjects",
    "/api/analytics/attendance/export",
])
def test_students_cannot_read_analytics(client, make_user, auth_headers, path):
    headers = auth_headers(make_user("STUDENT"))
    assert client.get(path, headers=headers).status_code == 403
