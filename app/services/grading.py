# app/services/grading.py
from typing import Dict, Iterable, List, Tuple

from app.core.config import settings

EXCELLENT = "отлично"
GOOD = "хорошо"
SATISFACTORY = "удовлетворительно"
UNSATISFACTORY = "неудовлетворительно"

LETTER_GRADES = (UNSATISFACTORY, SATISFACTORY, GOOD, EXCELLENT)


def grade_scale() -> List[Tuple[float, str]]:
    """Нижние границы диапазонов в порядке убывания."""
    return [
        (settings.GRADE_EXCELLENT_MIN, EXCELLENT),
        (settings.GRADE_GOOD_MIN, GOOD),
        (settings.GRADE_SATISFACTORY_MIN, SATISFACTORY),
    ]


def get_letter_grade(score: float) -> str:
    for minimum, label in grade_scale():
        if score >= minimum:
            return label
    return UNSATISFACTORY


def percentage(score: float, max_score: float) -> float:
    return score / max_score * 100 if max_score > 0 else 0


def compute_current_grades(
    pairs: Iterable[Tuple[str, str]],
    groups: Dict[str, object],
    assignments: Iterable,
    submissions: Iterable,
) -> List[dict]:
    """
    Текущие баллы студентов по парам (группа, дисциплина) преподавателя.

    Для каждого студента группы суммируются баллы проверенных ответов на
    задания этой пары и максимальные баллы этих заданий; процент переводится
    в оценку по той же шкале, что и итоговые оценки.
    """
    assignments_by_id = {a.id: a for a in assignments}
    checked = [s for s in submissions if s.is_checked]

    results = []
    seen = set()
    for group_id, subject_id in pairs:
        group = groups.get(group_id)
        if group is None:
            continue
        for student_id in group.student_ids:
            key = (student_id, group_id, subject_id)
            if key in seen:
                continue
            seen.add(key)

            total = 0
            max_total = 0
            for submission in checked:
                assignment = assignments_by_id.get(submission.assignment_id)
                if (
                    assignment is None
                    or submission.student_id != student_id
                    or assignment.group_id != group_id
                    or assignment.subject_id != subject_id
                ):
                    continue
                total += submission.score or 0
                max_total += assignment.max_score

            pct = percentage(total, max_total)
            results.append({
                "student_id": student_id,
                "group_id": group_id,
                "subject_id": subject_id,
                "total_score": total,
                "max_score": max_total,
                "percentage": round(pct, 1),
                "letter_grade": get_letter_grade(pct),
            })
    return results
