"""Answer to an expert question. At most one AI-generated answer per question (partial unique index)."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from app.database import Base


class ExpertAnswer(Base):
    __tablename__ = "expert_answers"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    question_id = Column(
        String(36),
        ForeignKey("expert_questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    expert_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    is_ai_generated = Column(Boolean, nullable=False, default=False)
    # Set when a human expert endorses an AI answer
    endorsed_by_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    endorsed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    question = relationship("ExpertQuestion", back_populates="answers")
    expert = relationship("User", foreign_keys=[expert_id], lazy="select")

    __table_args__ = (
        Index(
            "uq_expert_answers_one_ai_per_question",
            "question_id",
            unique=True,
            sqlite_where=text("is_ai_generated = 1"),
            postgresql_where=text("is_ai_generated"),
        ),
    )
