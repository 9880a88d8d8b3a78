import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback
from app.db.models.teacher_assignment import TeacherAssignment

logger = logging.getLogger(__name__)


class DuplicateAssignmentError(Exception):
    """Преподаватель уже закреплён за этой группой и дисциплиной."""


def _ordered(query):
    return query.order_by(TeacherAssignment.created_at.desc()).all()


@safe_read()
def get_assignments(db: Session):
    return _ordered(db.query(TeacherAssignment))


@safe_read()
def get_assignments_by_teacher(db: Session, teacher_id: str):
    return _ordered(db.query(TeacherAssignment).filter(TeacherAssignment.teacher_id == teacher_id))


@safe_read()
def get_assignments_by_group(db: Session, group_id: str):
    return _ordered(db.query(TeacherAssignment).filter(TeacherAssignment.group_id == group_id))


@safe_read()
def get_assignments_by_subject(db: Session, subject_id: str):
    return _ordered(db.query(TeacherAssignment).filter(TeacherAssignment.subject_id == subject_id))


@safe_read()
def get_assignments_by_assigner(db: Session, assigner_id: str):
    return _ordered(db.query(TeacherAssignment).filter(TeacherAssignment.assigned_by == assigner_id))


@safe_read(default=None)
def get_assignment(db: Session, assignment_id: str):
    return db.query(TeacherAssignment).filter(TeacherAssignment.id == assignment_id).first()


@safe_read(default=False)
def assignment_exists(db: Session, teacher_id: str, group_id: str, subject_id: str) -> bool:
    return db.query(TeacherAssignment.id).filter(
        TeacherAssignment.teacher_id == teacher_id,
        TeacherAssignment.group_id == group_id,
        TeacherAssignment.subject_id == subject_id,
    ).first() is not None


def create_assignment(db: Session, data, assigned_by: str):
    if assignment_exists(db, data.teacher_id, data.group_id, data.subject_id):
        raise DuplicateAssignmentError("Преподаватель уже назначен на эту группу и дисциплину")

    db_assignment = TeacherAssignment(**data.model_dump(), assigned_by=assigned_by)
    db.add(db_assignment)
    try:
        return commit_or_rollback(db, db_assignment)
    except IntegrityError:
        # Параллельный запрос успел создать ту же тройку
        raise DuplicateAssignmentError("Преподаватель уже назначен на эту группу и дисциплину")


def bulk_create_assignments(db: Session, items: List, assigned_by: str):
    created = []
    for item in items:
        try:
            created.append(create_assignment(db, item, assigned_by))
        except DuplicateAssignmentError:
            logger.info(
                "Пропускаем существующее назначение teacher=%s group=%s subject=%s",
                item.teacher_id, item.group_id, item.subject_id,
            )
    return created


def delete_assignment(db: Session, assignment: TeacherAssignment):
    db.delete(assignment)
    commit_or_rollback(db)


@safe_read()
def get_group_subject_pairs(db: Session, teacher_id: str):
    """Уникальные пары (группа, дисциплина), которые ведёт преподаватель."""
    seen = set()
    pairs = []
    for a in get_assignments_by_teacher(db, teacher_id):
        key = (a.group_id, a.subject_id)
        if key in seen:
            continue
        seen.add(key)
        pairs.append({"group_id": a.group_id, "subject_id": a.subject_id})
    return pairs
