import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from app.database import Base


class QuestionStatus(str, enum.Enum):
    PENDING = "PENDING"
    ANSWERED = "ANSWERED"
    CLOSED = "CLOSED"


class QuestionCategory(str, enum.Enum):
    HEALTH = "HEALTH"
    TRAINING = "TRAINING"
    NUTRITION = "NUTRITION"
    BEHAVIOR = "BEHAVIOR"
    GENERAL = "GENERAL"


expert_question_dogs = Table(
    "expert_question_dogs",
    Base.metadata,
    Column("question_id", String(36), ForeignKey("expert_questions.id", ondelete="CASCADE"), primary_key=True),
    Column("dog_id", String(36), ForeignKey("dogs.id", ondelete="CASCADE"), primary_key=True),
)


class ExpertQuestion(Base):
    __tablename__ = "expert_questions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    author_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    content = Column(Text, nullable=False)
    category = Column(String(32), nullable=False, default=QuestionCategory.GENERAL.value)
    status = Column(String(20), nullable=False, default=QuestionStatus.PENDING.value)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    dogs = relationship("Dog", secondary=expert_question_dogs, lazy="select")
    answers = relationship(
        "ExpertAnswer",
        back_populates="question",
        order_by="ExpertAnswer.created_at",
        lazy="select",
    )

    @property
    def is_closed(self) -> bool:
        return self.status == QuestionStatus.CLOSED.value
