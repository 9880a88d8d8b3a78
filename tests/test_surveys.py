from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from app.services.surveys import compute_teacher_rating


def test_rating_without_responses_is_empty():
    rating = compute_teacher_rating([], [], {})
    assert rating.average_rating == 0
    assert rating.total_responses == 0
    assert rating.question_ratings == []


def test_rating_averages_per_question():
    responses = [SimpleNamespace(id="r1"), SimpleNamespace(id="r2")]
    answers = [
        SimpleNamespace(question_id="q1", value=10),
        SimpleNamespace(question_id="q1", value=7),
        SimpleNamespace(question_id="q2", value=5),
    ]

    rating = compute_teacher_rating(responses, answers, {"q1": "Понятно ли объясняет?"})

    assert rating.total_responses == 2
    assert rating.average_rating == 7.33
    by_question = {q.question_id: q for q in rating.question_ratings}
    assert by_question["q1"].average_rating == 8.5
    assert by_question["q1"].question_text == "Понятно ли объясняет?"
    assert by_question["q2"].response_count == 1


@pytest.fixture
def survey_setup(client, make_user, auth_headers):
    admin = auth_headers(make_user("SUPER_ADMIN"))
    teacher = make_user("TEACHER")
    student = make_user("STUDENT")

    survey = client.post(
        "/api/surveys/",
        json={
            "title": "Оценка преподавателя",
            "description": "Анонимный опрос",
            "questions": ["Понятно ли объясняет?", "Доступен ли для вопросов?"],
        },
        headers=admin,
    ).json()
    now = datetime.utcnow()
    period = client.post(
        "/api/surveys/periods",
        json={
            "title": "Осень",
            "survey_id": survey["id"],
            "start_date": (now - timedelta(days=1)).isoformat(),
            "end_date": (now + timedelta(days=1)).isoformat(),
        },
        headers=admin,
    ).json()
    client.post(f"/api/surveys/periods/{period['id']}/status", json={"is_active": True}, headers=admin)

    return SimpleNamespace(
        admin=admin,
        student=auth_headers(student),
        teacher_id=teacher.id,
        survey=survey,
        period=period,
    )


def submission(setup, values):
    return {
        "survey_id": setup.survey["id"],
        "teacher_id": setup.teacher_id,
        "subject_id": "math",
        "survey_period_id": setup.period["id"],
        "answers": [
            {"question_id": q["id"], "value": v}
            for q, v in zip(setup.survey["questions"], values)
        ],
    }


def test_questions_keep_their_order(survey_setup):
    assert [q["order"] for q in survey_setup.survey["questions"]] == [1, 2]


def test_current_periods(client, survey_setup):
    current = client.get("/api/surveys/periods/current", headers=survey_setup.student).json()
    assert [p["id"] for p in current] == [survey_setup.period["id"]]


def test_second_submission_conflicts(client, survey_setup):
    first = client.post("/api/surveys/responses", json=submission(survey_setup, [9, 7]), headers=survey_setup.student)
    assert first.status_code == 201
    assert len(first.json()["answers"]) == 2

    second = client.post("/api/surveys/responses", json=submission(survey_setup, [1, 1]), headers=survey_setup.student)
    assert second.status_code == 409

    completed = client.get(
        "/api/surveys/responses/completed",
        params={"teacher_id": survey_setup.teacher_id, "subject_id": "math", "period_id": survey_setup.period["id"]},
        headers=survey_setup.student,
    ).json()
    assert completed == {"completed": True}


def test_teacher_ratings_for_period(client, survey_setup):
    client.post("/api/surveys/responses", json=submission(survey_setup, [10, 8]), headers=survey_setup.student)
    period_id = survey_setup.period["id"]

    rating = client.get(f"/api/surveys/periods/{period_id}/ratings/{survey_setup.teacher_id}", headers=survey_setup.admin).json()
    assert rating["average_rating"] == 9
    assert rating["total_responses"] == 1

    ratings = client.get(f"/api/surveys/periods/{period_id}/ratings", headers=survey_setup.admin).json()
    assert ratings == [{"teacher_id": survey_setup.teacher_id, "average_rating": 9, "total_responses": 1}]

    stats = client.get(f"/api/surveys/periods/{period_id}/stats", headers=survey_setup.admin).json()
    assert stats == {"total_responses": 1, "unique_students": 1, "unique_teachers": 1}


def test_answer_values_are_bounded(client, survey_setup):
    response = client.post("/api/surveys/responses", json=submission(survey_setup, [11, 5]), headers=survey_setup.student)
    assert response.status_code == 422
