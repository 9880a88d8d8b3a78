from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback, apply_updates
from app.db.models.subject import Subject


@safe_read()
def get_subjects(db: Session, only_active: bool = False):
    query = db.query(Subject)
    if only_active:
        query = query.filter(Subject.is_active.is_(True))
    return query.order_by(Subject.created_at.desc()).all()


@safe_read(default=None)
def get_subject(db: Session, subject_id: str):
    return db.query(Subject).filter(Subject.id == subject_id).first()


@safe_read()
def get_subjects_by_creator(db: Session, creator_id: str):
    return (
        db.query(Subject)
        .filter(Subject.created_by == creator_id)
        .order_by(Subject.created_at.desc())
        .all()
    )


def create_subject(db: Session, subject_in, created_by: str):
    db_subject = Subject(**subject_in.model_dump(), created_by=created_by, is_active=True)
    db.add(db_subject)
    return commit_or_rollback(db, db_subject)


def update_subject(db: Session, subject: Subject, subject_in):
    apply_updates(subject, subject_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, subject)


def set_subject_status(db: Session, subject: Subject, is_active: bool):
    subject.is_active = is_active
    return commit_or_rollback(db, subject)


def delete_subject(db: Session, subject: Subject):
    db.delete(subject)
    commit_or_rollback(db)
