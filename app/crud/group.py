from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback
from app.db.models.assignment import Assignment
from app.db.models.group import Group, group_students
from app.db.models.lesson import Lesson
from app.db.models.user import User
from app.schemas.group import GroupStats


@safe_read()
def get_groups(db: Session):
    return db.query(Group).order_by(Group.title.asc()).all()


@safe_read(default=None)
def get_group(db: Session, group_id: str):
    return db.query(Group).filter(Group.id == group_id).first()


@safe_read()
def get_groups_by_creator(db: Session, creator_id: str):
    return (
        db.query(Group)
        .filter(Group.created_by == creator_id)
        .order_by(Group.title.asc())
        .all()
    )


@safe_read()
def get_groups_by_student(db: Session, student_id: str):
    return (
        db.query(Group)
        .join(group_students, group_students.c.group_id == Group.id)
        .filter(group_students.c.student_id == student_id)
        .order_by(Group.title.asc())
        .all()
    )


def _load_students(db: Session, student_ids: List[str]) -> List[User]:
    if not student_ids:
        return []
    # Состав группы: множество, порядок и дубликаты не сохраняются
    return db.query(User).filter(User.id.in_(set(student_ids))).all()


def create_group(db: Session, group_in, created_by: str):
    db_group = Group(title=group_in.title, created_by=created_by)
    db_group.students = _load_students(db, group_in.student_ids)
    db.add(db_group)
    return commit_or_rollback(db, db_group)


def update_group(db: Session, group: Group, group_in):
    data = group_in.model_dump(exclude_unset=True)
    if data.get("title") is not None:
        group.title = data["title"]
    if data.get("student_ids") is not None:
        group.students = _load_students(db, data["student_ids"])
    return commit_or_rollback(db, group)


def delete_group(db: Session, group: Group):
    db.delete(group)
    commit_or_rollback(db)


def add_students(db: Session, group: Group, student_ids: List[str]):
    current = set(group.student_ids)
    for student in _load_students(db, student_ids):
        if student.id not in current:
            group.students.append(student)
    return commit_or_rollback(db, group)


def remove_student(db: Session, group: Group, student_id: str):
    group.students = [s for s in group.students if s.id != student_id]
    return commit_or_rollback(db, group)


def replace_students(db: Session, group: Group, student_ids: List[str]):
    group.students = _load_students(db, student_ids)
    return commit_or_rollback(db, group)


@safe_read()
def search_groups(db: Session, term: str):
    needle = term.lower()
    return [g for g in get_groups(db) if needle in g.title.lower()]


@safe_read(default=False)
def group_title_exists(db: Session, title: str, exclude_id: Optional[str] = None) -> bool:
    # Сравнение в Python: lower() в SQLite не знает кириллицу
    needle = title.lower()
    return any(
        g.title.lower() == needle and g.id != exclude_id
        for g in get_groups(db)
    )


@safe_read()
def get_empty_groups(db: Session):
    return [g for g in get_groups(db) if not g.students]


@safe_read(default=GroupStats)
def get_group_stats(db: Session, group_id: str) -> GroupStats:
    group = get_group(db, group_id)
    if not group:
        return GroupStats()

    total = len(group.students)
    active = sum(1 for s in group.students if s.is_active)
    lessons_count = db.query(func.count(Lesson.id)).filter(Lesson.group_id == group_id).scalar()
    assignments_count = (
        db.query(func.count(Assignment.id)).filter(Assignment.group_id == group_id).scalar()
    )
    return GroupStats(
        total_students=total,
        active_students=active,
        inactive_students=total - active,
        lessons_count=lessons_count or 0,
        assignments_count=assignments_count or 0,
    )
