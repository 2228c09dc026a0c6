"""
Persistence for AI answers: question lookup, AI answer rechecks, AI principal, inserts.
Functions do not commit unless noted; callers own the transaction (see AiAnswerService).
"""
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from app.models.dog import HealthRecord
from app.models.expert_answer import ExpertAnswer
from app.models.expert_question import ExpertQuestion
from app.models.regional_alert import RegionalAlert
from app.models.user import ExpertType, User, UserRole
from app.schemas.ai import DogContext, HealthRecordContext, QuestionContext

AI_PRINCIPAL_NAME = "Ponnect AI Assistant"
AI_PRINCIPAL_BIO = (
    "AI-powered assistant providing preliminary answers to help dog owners. "
    "All AI answers are reviewed by verified experts."
)
# Sentinel password value: the principal can never log in
AI_PRINCIPAL_NO_LOGIN = "AI_SYSTEM_USER_NO_LOGIN"


def get_question(db: Session, question_id: str) -> ExpertQuestion | None:
    return db.query(ExpertQuestion).filter(ExpertQuestion.id == question_id).first()


def lock_question(db: Session, question_id: str) -> ExpertQuestion | None:
    """SELECT ... FOR UPDATE on the question row; a no-op lock on SQLite."""
    return (
        db.query(ExpertQuestion)
        .filter(ExpertQuestion.id == question_id)
        .with_for_update()
        .first()
    )


def get_ai_answer(db: Session, question_id: str) -> ExpertAnswer | None:
    """The AI answer for a question (oldest first if legacy duplicates exist)."""
    return (
        db.query(ExpertAnswer)
        .filter(ExpertAnswer.question_id == question_id, ExpertAnswer.is_ai_generated.is_(True))
        .order_by(ExpertAnswer.created_at)
        .first()
    )


def count_human_answers(db: Session, question_id: str) -> int:
    return db.query(func.count(ExpertAnswer.id)).filter(
        ExpertAnswer.question_id == question_id,
        ExpertAnswer.is_ai_generated.is_(False),
    ).scalar() or 0


def get_user(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def get_or_create_ai_principal(db: Session, user_id: str, email: str) -> User:
    """Absence check then insert, inside the caller's transaction (flushed at commit)."""
    user = db.query(User).filter(User.id == user_id).first()
    if user is not None:
        return user
    user = User(
        id=user_id,
        email=email,
        password=AI_PRINCIPAL_NO_LOGIN,
        name=AI_PRINCIPAL_NAME,
        bio=AI_PRINCIPAL_BIO,
        role=UserRole.EXPERT.value,
        expert_type=ExpertType.AI_ASSISTANT.value,
        is_verified=True,
    )
    db.add(user)
    return user


def insert_ai_answer(db: Session, question_id: str, content: str, expert_id: str) -> ExpertAnswer:
    answer = ExpertAnswer(
        question_id=question_id,
        expert_id=expert_id,
        content=content,
        is_ai_generated=True,
    )
    db.add(answer)
    db.flush()
    return answer


def build_question_context(db: Session, question: ExpertQuestion, health_record_limit: int = 10) -> QuestionContext:
    """Snapshot of the question and its dogs (with recent health records) for prompt building."""
    dogs = []
    for dog in question.dogs:
        records = (
            db.query(HealthRecord)
            .filter(HealthRecord.dog_id == dog.id)
            .order_by(desc(HealthRecord.date))
            .limit(health_record_limit)
            .all()
        )
        dogs.append(
            DogContext(
                name=dog.name,
                breed=dog.breed or "",
                birth_date=dog.birth_date,
                gender=dog.gender,
                weight=dog.weight,
                bio=dog.bio,
                health_records=[HealthRecordContext.model_validate(r) for r in records],
            )
        )
    return QuestionContext(
        id=question.id,
        title=question.title,
        content=question.content,
        category=question.category,
        dogs=dogs,
    )


def get_alert(db: Session, alert_id: str) -> RegionalAlert | None:
    return db.query(RegionalAlert).filter(RegionalAlert.id == alert_id).first()


def delete_duplicate_ai_answers(db: Session) -> int:
    """Keep the oldest AI answer per question, delete the rest. Commits. Returns deleted count."""
    answers = (
        db.query(ExpertAnswer)
        .filter(ExpertAnswer.is_ai_generated.is_(True))
        .order_by(ExpertAnswer.question_id, ExpertAnswer.created_at)
        .all()
    )
    seen: set[str] = set()
    deleted = 0
    for answer in answers:
        if answer.question_id in seen:
            db.delete(answer)
            deleted += 1
        else:
            seen.add(answer.question_id)
    db.commit()
    return deleted


class ExpertAnswerRepository:
    """Thin wrapper for dependency injection; delegates to module functions."""

    get_question = staticmethod(get_question)
    lock_question = staticmethod(lock_question)
    get_ai_answer = staticmethod(get_ai_answer)
    count_human_answers = staticmethod(count_human_answers)
    get_user = staticmethod(get_user)
    get_or_create_ai_principal = staticmethod(get_or_create_ai_principal)
    insert_ai_answer = staticmethod(insert_ai_answer)
    build_question_context = staticmethod(build_question_context)
    get_alert = staticmethod(get_alert)
    delete_duplicate_ai_answers = staticmethod(delete_duplicate_ai_answers)
