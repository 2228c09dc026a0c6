import uuid
import enum
from datetime import datetime
from sqlalchemy import Column, String, Text, Boolean, DateTime
from app.database import Base


class AlertType(str, enum.Enum):
    TICK = "TICK"
    SNAKE = "SNAKE"
    DISEASE = "DISEASE"
    HEATWAVE = "HEATWAVE"
    UV = "UV"
    OTHER = "OTHER"


class AlertSeverity(str, enum.Enum):
    INFO = "INFO"
    WATCH = "WATCH"
    WARNING = "WARNING"
    EMERGENCY = "EMERGENCY"


class RegionalAlert(Base):
    __tablename__ = "regional_alerts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    type = Column(String(20), nullable=False, default=AlertType.OTHER.value)
    severity = Column(String(20), nullable=False, default=AlertSeverity.INFO.value)
    region = Column(String(100), nullable=False)
    source = Column(String(100), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    active_until = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
