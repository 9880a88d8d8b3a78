from app.db.base import Base
from app.db.models.user import User, USER_ROLES
from app.db.models.subject import Subject
from app.db.models.group import Group, group_students
from app.db.models.teacher_assignment import TeacherAssignment
from app.db.models.lesson import Lesson
from app.db.models.attendance import Attendance
from app.db.models.assignment import Assignment, AssignmentSubmission
from app.db.models.grading import GradingPeriod, FinalGrade
from app.db.models.survey import Survey, SurveyQuestion, SurveyPeriod, SurveyResponse, SurveyAnswer

__all__ = [
    "Base", "User", "USER_ROLES", "Subject", "Group", "group_students",
    "TeacherAssignment", "Lesson", "Attendance", "Assignment",
    "AssignmentSubmission", "GradingPeriod", "FinalGrade", "Survey",
    "SurveyQuestion", "SurveyPeriod", "SurveyResponse", "SurveyAnswer",
]
