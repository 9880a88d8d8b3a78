from datetime import datetime

from sqlalchemy.orm import Session

from app.crud.base import safe_read, commit_or_rollback, apply_updates
from app.db.models.assignment import Assignment, AssignmentSubmission
from app.schemas.assignment import AssignmentStats


# === ЗАДАНИЯ ===

def _by_due_date(query):
    return query.order_by(Assignment.due_date.desc()).all()


@safe_read()
def get_assignments(db: Session):
    return db.query(Assignment).order_by(Assignment.created_at.desc()).all()


@safe_read()
def get_active_assignments(db: Session):
    return _by_due_date(db.query(Assignment).filter(Assignment.is_active.is_(True)))


@safe_read()
def get_assignments_by_group(db: Session, group_id: str):
    return _by_due_date(db.query(Assignment).filter(Assignment.group_id == group_id))


@safe_read()
def get_assignments_by_subject(db: Session, subject_id: str):
    return _by_due_date(db.query(Assignment).filter(Assignment.subject_id == subject_id))


@safe_read()
def get_assignments_by_teacher(db: Session, teacher_id: str):
    return _by_due_date(db.query(Assignment).filter(Assignment.teacher_id == teacher_id))


@safe_read()
def get_assignments_by_group_and_subject(db: Session, group_id: str, subject_id: str):
    return _by_due_date(
        db.query(Assignment).filter(
            Assignment.group_id == group_id,
            Assignment.subject_id == subject_id,
        )
    )


@safe_read(default=None)
def get_assignment(db: Session, assignment_id: str):
    return db.query(Assignment).filter(Assignment.id == assignment_id).first()


def create_assignment(db: Session, assignment_in, teacher_id: str):
    db_assignment = Assignment(**assignment_in.model_dump(), teacher_id=teacher_id, is_active=True)
    db.add(db_assignment)
    return commit_or_rollback(db, db_assignment)


def update_assignment(db: Session, assignment: Assignment, assignment_in):
    apply_updates(assignment, assignment_in.model_dump(exclude_unset=True))
    return commit_or_rollback(db, assignment)


def deactivate_assignment(db: Session, assignment: Assignment):
    assignment.is_active = False
    return commit_or_rollback(db, assignment)


def delete_assignment(db: Session, assignment: Assignment):
    db.query(AssignmentSubmission).filter(
        AssignmentSubmission.assignment_id == assignment.id
    ).delete(synchronize_session=False)
    db.delete(assignment)
    commit_or_rollback(db)


# === ОТВЕТЫ СТУДЕНТОВ ===

@safe_read()
def get_submissions_by_assignment(db: Session, assignment_id: str):
    # Непроверенные сверху, затем самые свежие
    return (
        db.query(AssignmentSubmission)
        .filter(AssignmentSubmission.assignment_id == assignment_id)
        .order_by(AssignmentSubmission.is_checked.asc(), AssignmentSubmission.submitted_at.desc())
        .all()
    )


@safe_read()
def get_submissions_by_student(db: Session, student_id: str):
    return (
        db.query(AssignmentSubmission)
        .filter(AssignmentSubmission.student_id == student_id)
        .order_by(AssignmentSubmission.submitted_at.desc())
        .all()
    )


@safe_read()
def get_all_submissions(db: Session):
    return db.query(AssignmentSubmission).order_by(AssignmentSubmission.submitted_at.desc()).all()


@safe_read()
def get_unchecked_submissions_by_teacher(db: Session, teacher_id: str):
    return (
        db.query(AssignmentSubmission)
        .join(Assignment, Assignment.id == AssignmentSubmission.assignment_id)
        .filter(
            Assignment.teacher_id == teacher_id,
            AssignmentSubmission.is_checked.is_(False),
        )
        .order_by(AssignmentSubmission.submitted_at.desc())
        .all()
    )


@safe_read(default=None)
def get_submission(db: Session, submission_id: str):
    return db.query(AssignmentSubmission).filter(AssignmentSubmission.id == submission_id).first()


@safe_read(default=None)
def get_student_submission(db: Session, assignment_id: str, student_id: str):
    return db.query(AssignmentSubmission).filter(
        AssignmentSubmission.assignment_id == assignment_id,
        AssignmentSubmission.student_id == student_id,
    ).first()


def submit_assignment(db: Session, submission_in, student_id: str):
    """Отправка ответа. Повторная отправка сбрасывает результат проверки."""
    existing = get_student_submission(db, submission_in.assignment_id, student_id)
    now = datetime.utcnow()
    if existing:
        existing.submission_url = submission_in.submission_url
        existing.submitted_at = now
        existing.is_checked = False
        existing.score = None
        existing.comment = None
        existing.checked_at = None
        existing.checked_by = None
        return commit_or_rollback(db, existing)

    submission = AssignmentSubmission(
        assignment_id=submission_in.assignment_id,
        student_id=student_id,
        submission_url=submission_in.submission_url,
        submitted_at=now,
        is_checked=False,
    )
    db.add(submission)
    return commit_or_rollback(db, submission)


def grade_submission(db: Session, submission: AssignmentSubmission, grade_in, teacher_id: str):
    submission.score = grade_in.score
    submission.comment = grade_in.comment
    submission.is_checked = True
    submission.checked_at = datetime.utcnow()
    submission.checked_by = teacher_id
    return commit_or_rollback(db, submission)


@safe_read(default=AssignmentStats)
def get_assignment_stats(db: Session, assignment_id: str) -> AssignmentStats:
    submissions = get_submissions_by_assignment(db, assignment_id)
    checked = [s for s in submissions if s.is_checked]
    scores = [s.score for s in checked if s.score is not None]
    average = sum(scores) / len(scores) if scores else 0
    return AssignmentStats(
        total_submissions=len(submissions),
        checked_submissions=len(checked),
        unchecked_submissions=len(submissions) - len(checked),
        average_score=round(average, 2),
    )
