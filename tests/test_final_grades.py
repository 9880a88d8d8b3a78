from datetime import datetime

import pytest
from pydantic import ValidationError

from app.crud import grading as crud_grading
from app.db.models.grading import FinalGrade
from app.schemas.grading import FinalGradeCreate, GradingPeriodCreate
from app.services.grading import EXCELLENT, GOOD, SATISFACTORY


@pytest.fixture
def period(db, make_user):
    admin = make_user("SUPER_ADMIN")
    period_in = GradingPeriodCreate(
        title="1 семестр",
        start_date=datetime(2024, 9, 1),
        end_date=datetime(2024, 12, 31),
    )
    return crud_grading.create_grading_period(db, period_in, created_by=admin.id)


def grade_in(period, score, **overrides):
    data = dict(
        student_id="s1",
        subject_id="math",
        group_id="g1",
        grading_period_id=period.id,
        total_score=score,
    )
    data.update(overrides)
    return FinalGradeCreate(**data)


def test_new_period_starts_inactive(period):
    assert period.is_active is False


def test_repeated_upsert_updates_single_row(db, period):
    first = crud_grading.upsert_final_grade(db, grade_in(period, 70), teacher_id="t1")
    second = crud_grading.upsert_final_grade(db, grade_in(period, 90), teacher_id="t1")

    assert first.id == second.id
    assert second.total_score == 90
    assert second.letter_grade == EXCELLENT
    assert db.query(FinalGrade).count() == 1


def test_letter_grade_derived_unless_given(db, period):
    derived = crud_grading.upsert_final_grade(db, grade_in(period, 75), teacher_id="t1")
    assert derived.letter_grade == GOOD
    assert derived.teacher_id == "t1"

    explicit = crud_grading.upsert_final_grade(
        db, grade_in(period, 75, student_id="s2", letter_grade=SATISFACTORY), teacher_id="t1"
    )
    assert explicit.letter_grade == SATISFACTORY


def test_insert_race_falls_back_to_update(db, period, monkeypatch):
    crud_grading.upsert_final_grade(db, grade_in(period, 60), teacher_id="t1")

    # Первая проверка не видит запись, как будто её вставил параллельный запрос
    real_find = crud_grading._find_final_grade
    calls = {"n": 0}

    def stale_find(*args):
        calls["n"] += 1
        return None if calls["n"] == 1 else real_find(*args)

    monkeypatch.setattr(crud_grading, "_find_final_grade", stale_find)

    grade = crud_grading.upsert_final_grade(db, grade_in(period, 88), teacher_id="t2")

    assert grade.total_score == 88
    assert grade.letter_grade == EXCELLENT
    assert db.query(FinalGrade).count() == 1


def test_period_stats(db, period):
    crud_grading.bulk_upsert_final_grades(
        db,
        [grade_in(period, 90), grade_in(period, 75, student_id="s2"), grade_in(period, 76, student_id="s3")],
        teacher_id="t1",
    )

    stats = crud_grading.get_grading_period_stats(db, period.id)

    assert stats.total_students == 3
    assert stats.graded_students == 3
    assert stats.average_score == 80.33
    assert stats.grade_distribution == {EXCELLENT: 1, GOOD: 2}


def test_final_grade_endpoint_is_idempotent(client, db, period, make_user, auth_headers):
    headers = auth_headers(make_user("TEACHER"))
    payload = grade_in(period, 65).model_dump()

    first = client.post("/api/grading/final", json=payload, headers=headers).json()
    payload["total_score"] = 80
    second = client.post("/api/grading/final", json=payload, headers=headers).json()

    assert first["id"] == second["id"]
    assert second["letter_grade"] == GOOD
    assert db.query(FinalGrade).count() == 1


def test_unknown_letter_grade_is_rejected(period):
    with pytest.raises(ValidationError):
        grade_in(period, 90, letter_grade="пятёрка")


def test_final_grade_endpoint_rejects_unknown_letter(client, db, period, make_user, auth_headers):
    headers = auth_headers(make_user("TEACHER"))
    payload = grade_in(period, 65).model_dump()
    payload["letter_grade"] = "A+"

    response = client.post("/api/grading/final", json=payload, headers=headers)

    assert response.status_code == 422
    assert db.query(FinalGrade).count() == 0
