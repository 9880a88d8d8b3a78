# app/services/surveys.py
from collections import defaultdict
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from app.crud import survey as crud_survey
from app.schemas.survey import QuestionRating, TeacherRating, TeacherRatingSummary


def _average(values: List[int]) -> float:
    return round(sum(values) / len(values), 2) if values else 0


def compute_teacher_rating(responses: List, answers: Iterable, question_texts: Dict[str, str]) -> TeacherRating:
    """Средняя оценка преподавателя в целом и по каждому вопросу."""
    if not responses:
        return TeacherRating()

    values_by_question: Dict[str, List[int]] = defaultdict(list)
    for answer in answers:
        values_by_question[answer.question_id].append(answer.value)

    question_ratings = [
        QuestionRating(
            question_id=question_id,
            question_text=question_texts.get(question_id, f"Вопрос {question_id[-6:]}"),
            average_rating=_average(values),
            response_count=len(values),
        )
        for question_id, values in values_by_question.items()
    ]
    all_values = [v for values in values_by_question.values() for v in values]

    return TeacherRating(
        average_rating=_average(all_values),
        total_responses=len(responses),
        question_ratings=question_ratings,
    )


def get_teacher_rating(db: Session, teacher_id: str, period_id: str) -> TeacherRating:
    responses = crud_survey.get_responses_by_teacher(db, teacher_id, period_id)
    answers = crud_survey.get_answers_by_responses(db, [r.id for r in responses])

    question_texts = {}
    for question_id in {a.question_id for a in answers}:
        question = crud_survey.get_question(db, question_id)
        if question is not None:
            question_texts[question_id] = question.text

    return compute_teacher_rating(responses, answers, question_texts)


def get_all_teacher_ratings(db: Session, period_id: str) -> List[TeacherRatingSummary]:
    teacher_ids = {r.teacher_id for r in crud_survey.get_responses_by_period(db, period_id)}
    ratings = []
    for teacher_id in teacher_ids:
        rating = get_teacher_rating(db, teacher_id, period_id)
        ratings.append(TeacherRatingSummary(
            teacher_id=teacher_id,
            average_rating=rating.average_rating,
            total_responses=rating.total_responses,
        ))
    ratings.sort(key=lambda r: r.average_rating, reverse=True)
    return ratings
