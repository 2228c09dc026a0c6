import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Text
from app.database import Base


class UserRole(str, enum.Enum):
    OWNER = "OWNER"
    EXPERT = "EXPERT"
    ADMIN = "ADMIN"


class ExpertType(str, enum.Enum):
    VETERINARIAN = "VETERINARIAN"
    TRAINER = "TRAINER"
    NUTRITIONIST = "NUTRITIONIST"
    BEHAVIORIST = "BEHAVIORIST"
    AI_ASSISTANT = "AI_ASSISTANT"


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=True)
    name = Column(String(100), nullable=False, default="")
    bio = Column(Text, nullable=True)
    role = Column(String(20), nullable=False, default=UserRole.OWNER.value)
    expert_type = Column(String(32), nullable=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
