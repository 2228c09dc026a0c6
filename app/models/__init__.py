from app.models.user import User, UserRole, ExpertType
from app.models.dog import Dog, HealthRecord
from app.models.expert_question import ExpertQuestion, QuestionStatus, QuestionCategory, expert_question_dogs
from app.models.expert_answer import ExpertAnswer
from app.models.regional_alert import RegionalAlert, AlertType, AlertSeverity

__all__ = [
    "User", "UserRole", "ExpertType", "Dog", "HealthRecord",
    "ExpertQuestion", "QuestionStatus", "QuestionCategory", "expert_question_dogs",
    "ExpertAnswer", "RegionalAlert", "AlertType", "AlertSeverity",
]
