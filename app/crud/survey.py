from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback, apply_updates
from app.db.models.survey import Survey, SurveyQuestion, SurveyPeriod, SurveyResponse, SurveyAnswer
from app.schemas.survey import SurveyPeriodStats


class SurveyAlreadyCompletedError(Exception):
    """Студент уже прошёл опрос по этому преподавателю, дисциплине и периоду."""


# === ОПРОСНИКИ ===

@safe_read()
def get_surveys(db: Session, only_active: bool = False):
    query = db.query(Survey)
    if only_active:
        query = query.filter(Survey.is_active.is_(True))
    return query.order_by(Survey.created_at.desc()).all()


@safe_read(default=None)
def get_survey(db: Session, survey_id: str):
    return db.query(Survey).filter(Survey.id == survey_id).first()


def create_survey(db: Session, survey_in, created_by: str):
    survey = Survey(
        title=survey_in.title,
        description=survey_in.description,
        created_by=created_by,
        is_active=True,
    )
    survey.questions = [
        SurveyQuestion(text=text, order=position)
        for position, text in enumerate(survey_in.questions, start=1)
    ]
    db.add(survey)
    return commit_or_rollback(db, survey)


def update_survey(db: Session, survey: Survey, survey_in):
    apply_updates(survey, survey_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, survey)


def add_question(db: Session, survey: Survey, text: str):
    next_order = max((q.order for q in survey.questions), default=0) + 1
    survey.questions.append(SurveyQuestion(text=text, order=next_order))
    return commit_or_rollback(db, survey)


def delete_survey(db: Session, survey: Survey):
    db.delete(survey)
    commit_or_rollback(db)


@safe_read(default=None)
def get_question(db: Session, question_id: str):
    return db.query(SurveyQuestion).filter(SurveyQuestion.id == question_id).first()


# === ПЕРИОДЫ ОПРОСОВ ===

@safe_read()
def get_survey_periods(db: Session):
    return db.query(SurveyPeriod).order_by(SurveyPeriod.created_at.desc()).all()


@safe_read()
def get_current_survey_periods(db: Session, now: Optional[datetime] = None):
    """Активные периоды, в границы которых попадает текущий момент."""
    now = now or datetime.utcnow()
    return (
        db.query(SurveyPeriod)
        .filter(
            SurveyPeriod.is_active.is_(True),
            SurveyPeriod.start_date <= now,
            SurveyPeriod.end_date >= now,
        )
        .order_by(SurveyPeriod.start_date.desc())
        .all()
    )


@safe_read()
def get_survey_periods_by_survey(db: Session, survey_id: str):
    return (
        db.query(SurveyPeriod)
        .filter(SurveyPeriod.survey_id == survey_id)
        .order_by(SurveyPeriod.start_date.desc())
        .all()
    )


@safe_read(default=None)
def get_survey_period(db: Session, period_id: str):
    return db.query(SurveyPeriod).filter(SurveyPeriod.id == period_id).first()


def create_survey_period(db: Session, period_in, created_by: str):
    period = SurveyPeriod(**period_in.model_dump(), created_by=created_by, is_active=False)
    db.add(period)
    return commit_or_rollback(db, period)


def update_survey_period(db: Session, period: SurveyPeriod, period_in):
    apply_updates(period, period_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, period)


def set_survey_period_status(db: Session, period: SurveyPeriod, is_active: bool):
    period.is_active = is_active
    return commit_or_rollback(db, period)


def delete_survey_period(db: Session, period: SurveyPeriod):
    db.delete(period)
    commit_or_rollback(db)


# === ОТВЕТЫ НА ОПРОСЫ ===

def _newest_first(query):
    return query.order_by(SurveyResponse.submitted_at.desc()).all()


@safe_read()
def get_responses(db: Session):
    return _newest_first(db.query(SurveyResponse))


@safe_read()
def get_responses_by_survey(db: Session, survey_id: str):
    return _newest_first(db.query(SurveyResponse).filter(SurveyResponse.survey_id == survey_id))


@safe_read()
def get_responses_by_student(db: Session, student_id: str):
    return _newest_first(db.query(SurveyResponse).filter(SurveyResponse.student_id == student_id))


@safe_read()
def get_responses_by_teacher(db: Session, teacher_id: str, period_id: Optional[str] = None):
    query = db.query(SurveyResponse).filter(SurveyResponse.teacher_id == teacher_id)
    if period_id:
        query = query.filter(SurveyResponse.survey_period_id == period_id)
    return _newest_first(query)


@safe_read()
def get_responses_by_period(db: Session, period_id: str):
    return _newest_first(db.query(SurveyResponse).filter(SurveyResponse.survey_period_id == period_id))


@safe_read(default=None)
def get_response(db: Session, response_id: str):
    return db.query(SurveyResponse).filter(SurveyResponse.id == response_id).first()


@safe_read(default=False)
def has_completed_survey(db: Session, student_id: str, teacher_id: str, subject_id: str, period_id: str) -> bool:
    return db.query(SurveyResponse.id).filter(
        SurveyResponse.student_id == student_id,
        SurveyResponse.teacher_id == teacher_id,
        SurveyResponse.subject_id == subject_id,
        SurveyResponse.survey_period_id == period_id,
    ).first() is not None


def submit_response(db: Session, submit_in, student_id: str):
    """Ответ студента вместе со всеми ответами на вопросы, одной транзакцией."""
    if has_completed_survey(
        db, student_id, submit_in.teacher_id, submit_in.subject_id, submit_in.survey_period_id
    ):
        raise SurveyAlreadyCompletedError("Студент уже прошел этот опрос")

    response = SurveyResponse(
        survey_id=submit_in.survey_id,
        student_id=student_id,
        teacher_id=submit_in.teacher_id,
        subject_id=submit_in.subject_id,
        survey_period_id=submit_in.survey_period_id,
    )
    response.answers = [
        SurveyAnswer(question_id=a.question_id, value=a.value) for a in submit_in.answers
    ]
    db.add(response)
    try:
        return commit_or_rollback(db, response)
    except IntegrityError:
        raise SurveyAlreadyCompletedError("Студент уже прошел этот опрос")


def delete_response(db: Session, response: SurveyResponse):
    # Ответы на вопросы удаляются каскадом
    db.delete(response)
    commit_or_rollback(db)


@safe_read()
def get_answers_by_responses(db: Session, response_ids):
    if not response_ids:
        return []
    return db.query(SurveyAnswer).filter(SurveyAnswer.response_id.in_(list(response_ids))).all()


@safe_read(default=SurveyPeriodStats)
def get_survey_period_stats(db: Session, period_id: str) -> SurveyPeriodStats:
    responses = get_responses_by_period(db, period_id)
    return SurveyPeriodStats(
        total_responses=len(responses),
        unique_students=len({r.student_id for r in responses}),
        unique_teachers=len({r.teacher_id for r in responses}),
    )
