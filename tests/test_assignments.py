import pytest


@pytest.fixture
def course(client, make_user, auth_headers):
    admin = auth_headers(make_user("SUPER_ADMIN"))
    teacher = make_user("TEACHER")
    student = make_user("STUDENT")

    subject = client.post("/api/subjects/", json={"title": "Физика"}, headers=admin).json()
    group = client.post("/api/groups/", json={"title": "Ф-11", "student_ids": [student.id]}, headers=admin).json()
    client.post(
        "/api/teacher-assignments/",
        json={"teacher_id": teacher.id, "group_id": group["id"], "subject_id": subject["id"]},
        headers=admin,
    )
    assignment = client.post(
        "/api/assignments/",
        json={
            "title": "Лабораторная 1",
            "description": "Измерить ускорение свободного падения",
            "group_id": group["id"],
            "subject_id": subject["id"],
            "due_date": "2024-10-01T23:59:00",
            "max_score": 100,
        },
        headers=auth_headers(teacher),
    ).json()

    return {
        "teacher": auth_headers(teacher),
        "student": auth_headers(student),
        "student_id": student.id,
        "assignment": assignment,
    }


def submit(client, course, url="https://files.test/lab1.pdf"):
    return client.post(
        "/api/assignments/submissions",
        json={"assignment_id": course["assignment"]["id"], "submission_url": url},
        headers=course["student"],
    )


def test_grading_and_resubmission(client, course):
    submission = submit(client, course).json()
    assert submission["is_checked"] is False

    unchecked = client.get("/api/assignments/submissions/unchecked", headers=course["teacher"]).json()
    assert [s["id"] for s in unchecked] == [submission["id"]]

    graded = client.post(
        f"/api/assignments/submissions/{submission['id']}/grade",
        json={"score": 80, "comment": "Хорошо"},
        headers=course["teacher"],
    ).json()
    assert graded["is_checked"] is True
    assert graded["score"] == 80

    current = client.get("/api/grading/current", headers=course["teacher"]).json()
    assert current[0]["student_id"] == course["student_id"]
    assert current[0]["percentage"] == 80.0
    assert current[0]["letter_grade"] == "хорошо"

    again = submit(client, course, url="https://files.test/lab1-v2.pdf").json()
    assert again["id"] == submission["id"]
    assert again["is_checked"] is False
    assert again["score"] is None

    stats = client.get(f"/api/assignments/{course['assignment']['id']}/stats", headers=course["teacher"]).json()
    assert stats["total_submissions"] == 1
    assert stats["unchecked_submissions"] == 1


def test_score_above_hundred_is_rejected(client, course):
    submission = submit(client, course).json()
    response = client.post(
        f"/api/assignments/submissions/{submission['id']}/grade",
        json={"score": 101},
        headers=course["teacher"],
    )
    assert response.status_code == 422


def test_deactivated_assignment_rejects_submissions(client, course):
    client.post(f"/api/assignments/{course['assignment']['id']}/deactivate", headers=course["teacher"])
    assert submit(client, course).status_code == 400
