from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_db, get_current_user, require_staff, require_student, require_teacher_or_staff
from app.crud import survey as crud_survey
from app.crud.survey import SurveyAlreadyCompletedError
from app.db.models.user import User
from app.schemas.grading import StatusToggle
from app.schemas.survey import (
    SurveyCreate,
    SurveyOut,
    SurveyPeriodCreate,
    SurveyPeriodOut,
    SurveyPeriodStats,
    SurveyPeriodUpdate,
    SurveyQuestionCreate,
    SurveyResponseOut,
    SurveySubmit,
    SurveyUpdate,
    TeacherRating,
    TeacherRatingSummary,
)
from app.services import surveys as survey_service

router = APIRouter()


def get_survey_or_404(db: Session, survey_id: str):
    survey = crud_survey.get_survey(db, survey_id)
    if not survey:
        raise HTTPException(status_code=404, detail="Опросник не найден")
    return survey


def get_period_or_404(db: Session, period_id: str):
    period = crud_survey.get_survey_period(db, period_id)
    if not period:
        raise HTTPException(status_code=404, detail="Период опроса не найден")
    return period


# === ОПРОСНИКИ ===

@router.get("/", response_model=List[SurveyOut])
def list_surveys(active: bool = False, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_survey.get_surveys(db, only_active=active)


@router.post("/", response_model=SurveyOut, status_code=status.HTTP_201_CREATED)
def create_survey(survey_in: SurveyCreate, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return crud_survey.create_survey(db, survey_in, created_by=current_user.id)


# === ПЕРИОДЫ ===

@router.get("/periods", response_model=List[SurveyPeriodOut])
def list_periods(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_survey.get_survey_periods(db)


@router.get("/periods/current", response_model=List[SurveyPeriodOut])
def list_current_periods(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_survey.get_current_survey_periods(db)


@router.post("/periods", response_model=SurveyPeriodOut, status_code=status.HTTP_201_CREATED)
def create_period(
    period_in: SurveyPeriodCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    get_survey_or_404(db, period_in.survey_id)
    if period_in.end_date <= period_in.start_date:
        raise HTTPException(status_code=400, detail="Дата окончания должна быть позже даты начала")
    return crud_survey.create_survey_period(db, period_in, created_by=current_user.id)


@router.get("/periods/{period_id}", response_model=SurveyPeriodOut)
def get_period(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_period_or_404(db, period_id)


@router.put("/periods/{period_id}", response_model=SurveyPeriodOut)
def update_period(
    period_id: str,
    period_in: SurveyPeriodUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_survey.update_survey_period(db, get_period_or_404(db, period_id), period_in)


@router.post("/periods/{period_id}/status", response_model=SurveyPeriodOut)
def toggle_period(
    period_id: str,
    toggle: StatusToggle,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_survey.set_survey_period_status(db, get_period_or_404(db, period_id), toggle.is_active)


@router.delete("/periods/{period_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_period(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    crud_survey.delete_survey_period(db, get_period_or_404(db, period_id))


@router.get("/periods/{period_id}/stats", response_model=SurveyPeriodStats)
def period_stats(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return crud_survey.get_survey_period_stats(db, period_id)


@router.get("/periods/{period_id}/ratings", response_model=List[TeacherRatingSummary])
def period_ratings(period_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    return survey_service.get_all_teacher_ratings(db, period_id)


@router.get("/periods/{period_id}/ratings/{teacher_id}", response_model=TeacherRating)
def teacher_rating(
    period_id: str,
    teacher_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_teacher_or_staff),
):
    # Преподаватель видит только собственный рейтинг
    if current_user.role == "TEACHER" and current_user.id != teacher_id:
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return survey_service.get_teacher_rating(db, teacher_id, period_id)


# === ОТВЕТЫ ===

@router.get("/responses", response_model=List[SurveyResponseOut])
def list_responses(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    if current_user.role == "STUDENT":
        return crud_survey.get_responses_by_student(db, current_user.id)
    if current_user.role == "TEACHER":
        raise HTTPException(status_code=403, detail="Недостаточно прав")
    return crud_survey.get_responses(db)


@router.get("/responses/completed")
def check_completed(
    teacher_id: str,
    subject_id: str,
    period_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    return {"completed": crud_survey.has_completed_survey(db, current_user.id, teacher_id, subject_id, period_id)}


@router.post("/responses", response_model=SurveyResponseOut, status_code=status.HTTP_201_CREATED)
def submit_response(
    submit_in: SurveySubmit,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_student),
):
    period = get_period_or_404(db, submit_in.survey_period_id)
    if not period.is_active:
        raise HTTPException(status_code=400, detail="Период опроса не активен")
    try:
        return crud_survey.submit_response(db, submit_in, student_id=current_user.id)
    except SurveyAlreadyCompletedError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/responses/{response_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_response(response_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    response = crud_survey.get_response(db, response_id)
    if not response:
        raise HTTPException(status_code=404, detail="Ответ на опрос не найден")
    crud_survey.delete_response(db, response)


# Маршруты с {survey_id} после статических путей
@router.get("/{survey_id}", response_model=SurveyOut)
def get_survey(survey_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_survey_or_404(db, survey_id)


@router.get("/{survey_id}/periods", response_model=List[SurveyPeriodOut])
def list_survey_periods(survey_id: str, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return crud_survey.get_survey_periods_by_survey(db, survey_id)


@router.put("/{survey_id}", response_model=SurveyOut)
def update_survey(
    survey_id: str,
    survey_in: SurveyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_survey.update_survey(db, get_survey_or_404(db, survey_id), survey_in)


@router.post("/{survey_id}/questions", response_model=SurveyOut)
def add_question(
    survey_id: str,
    question_in: SurveyQuestionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_staff),
):
    return crud_survey.add_question(db, get_survey_or_404(db, survey_id), question_in.text)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_survey(survey_id: str, db: Session = Depends(get_db), current_user: User = Depends(require_staff)):
    crud_survey.delete_survey(db, get_survey_or_404(db, survey_id))
