from datetime import date, datetime
from pydantic import BaseModel, Field


# ---- Prompt context (read-only snapshots of ORM rows) ----

class HealthRecordContext(BaseModel):
    type: str
    title: str
    description: str | None = None
    date: date
    dosage: str | None = None
    vet_clinic: str | None = None
    notes: str | None = None

    class Config:
        from_attributes = True


class DogContext(BaseModel):
    name: str
    breed: str = ""
    birth_date: date | None = None
    gender: str | None = None
    weight: float | None = None
    bio: str | None = None
    health_records: list[HealthRecordContext] = Field(default_factory=list)

    class Config:
        from_attributes = True


class QuestionContext(BaseModel):
    id: str
    title: str
    content: str
    category: str
    dogs: list[DogContext] = Field(default_factory=list)


class AlertContext(BaseModel):
    """Alert metadata used for guidance generation. Stored alerts are taken as-is."""
    title: str = ""
    message: str = ""
    type: str = Field("OTHER", description="TICK, SNAKE, DISEASE, HEATWAVE, UV or OTHER")
    severity: str = Field("INFO", description="INFO, WATCH, WARNING or EMERGENCY")
    region: str = ""
    source: str = ""

    class Config:
        from_attributes = True


class AlertGuidanceRequest(AlertContext):
    """Guidance request body: callers must name the alert."""
    title: str = Field(..., min_length=1, max_length=200)


# ---- AI answer ----

class ExpertSummary(BaseModel):
    id: str
    name: str
    role: str
    expert_type: str | None = None
    is_verified: bool = False

    class Config:
        from_attributes = True


class AiAnswerOut(BaseModel):
    id: str
    question_id: str
    expert_id: str
    content: str
    is_ai_generated: bool
    endorsed_by_id: str | None = None
    endorsed_at: datetime | None = None
    created_at: datetime | None = None
    expert: ExpertSummary | None = None

    class Config:
        from_attributes = True


class AiAnswerResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: AiAnswerOut | None = None


# ---- Guidance ----

class GuidanceOut(BaseModel):
    fingerprint: str
    guidance: list[str]
    source: str = Field(..., description="ai | cache | fallback")


class GuidanceResponse(BaseModel):
    success: bool = True
    data: GuidanceOut


class GuidanceBatchRequest(BaseModel):
    alerts: list[AlertGuidanceRequest] = Field(..., min_length=1, max_length=50)


class GuidanceBatchResponse(BaseModel):
    success: bool = True
    data: dict[str, list[str]]


# ---- Health ----

class AiHealthResponse(BaseModel):
    generation: str  # "configured" | "unconfigured"
    model: str
    answer_cache_entries: int = 0
    guidance_cache_entries: int = 0
