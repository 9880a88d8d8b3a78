import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from app.api import (
    analytics,
    assignments,
    attendance,
    auth,
    grading,
    groups,
    lessons,
    subjects,
    surveys,
    teacher_assignments,
    users,
)
from app.core.config import settings
from app.core.logging import setup_logging

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Academic management API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Нарушение уникальности при записи отдаём как 409
@app.exception_handler(IntegrityError)
def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Конфликт данных при %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse(status_code=409, content={"detail": "Запись с такими данными уже существует"})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(subjects.router, prefix="/api/subjects", tags=["subjects"])
app.include_router(groups.router, prefix="/api/groups", tags=["groups"])
app.include_router(teacher_assignments.router, prefix="/api/teacher-assignments", tags=["teacher-assignments"])
app.include_router(lessons.router, prefix="/api/lessons", tags=["lessons"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(analytics.router, prefix="/api/analytics", tags=["analytics"])
app.include_router(assignments.router, prefix="/api/assignments", tags=["assignments"])
app.include_router(grading.router, prefix="/api/grading", tags=["grading"])
app.include_router(surveys.router, prefix="/api/surveys", tags=["surveys"])


@app.get("/health")
def health():
    return {"status": "ok"}
