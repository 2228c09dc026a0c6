"""Dog profiles and their health history. Read-only context for AI answer prompts."""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Text, Date, DateTime, Float, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class Dog(Base):
    __tablename__ = "dogs"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    breed = Column(String(100), nullable=False, default="")
    birth_date = Column(Date, nullable=True)
    gender = Column(String(16), nullable=True)  # "MALE" | "FEMALE"
    weight = Column(Float, nullable=True)  # kg
    bio = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    health_records = relationship(
        "HealthRecord",
        back_populates="dog",
        order_by="HealthRecord.date.desc()",
        cascade="all, delete-orphan",
    )


class HealthRecord(Base):
    __tablename__ = "health_records"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    dog_id = Column(String(36), ForeignKey("dogs.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(32), nullable=False)  # VACCINATION, MEDICATION, VET_VISIT, ...
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    date = Column(Date, nullable=False)
    dosage = Column(String(100), nullable=True)
    vet_clinic = Column(String(200), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    dog = relationship("Dog", back_populates="health_records")
