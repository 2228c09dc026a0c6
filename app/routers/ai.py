"""
AI endpoints for Ponnect:
- GET  /api/ai/health: Gemini configuration and cache sizes
- POST /api/expert-qa/questions/{id}/ai-answer: trigger preliminary AI answer (idempotent)
- GET  /api/expert-qa/questions/{id}/ai-answer: the AI answer, if any
- POST /api/alerts/guidance: guidance for alert metadata (never fails; fallback list)
- POST /api/alerts/guidance/batch: guidance for several alerts
- GET  /api/alerts/{id}/guidance: guidance for a stored alert
"""
import logging
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from app.core.ai import (
    get_ai_answer_service,
    get_alert_guidance_service,
    get_answer_cache,
    get_gemini_client,
    get_guidance_cache,
)
from app.database import get_db
from app.repositories.expert_answer_repository import get_alert
from app.schemas.ai import (
    AiAnswerResponse,
    AiHealthResponse,
    AlertContext,
    AlertGuidanceRequest,
    GuidanceBatchRequest,
    GuidanceBatchResponse,
    GuidanceOut,
    GuidanceResponse,
)
from app.services.ai_answer_service import (
    AiAnswerService,
    AiAnswerStatus,
    AiPrincipalError,
    QuestionClosedError,
    QuestionNotFoundError,
)
from app.services.ai_guidance import AlertGuidanceService
from app.services.content_cache import ContentCache
from app.services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["ai"])

AI_UNAVAILABLE_DETAIL = "Failed to generate AI answer. Please try again later."


# ---------- Health ----------


@router.get("/ai/health", response_model=AiHealthResponse)
def ai_health(
    client: GeminiClient = Depends(get_gemini_client),
    answer_cache: ContentCache = Depends(get_answer_cache),
    guidance_cache: ContentCache = Depends(get_guidance_cache),
):
    """Whether Gemini is configured. No outbound call is made."""
    return AiHealthResponse(
        generation="configured" if client.is_configured else "unconfigured",
        model=client.model,
        answer_cache_entries=len(answer_cache),
        guidance_cache_entries=len(guidance_cache),
    )


# ---------- Expert Q&A: AI answer ----------


@router.post("/expert-qa/questions/{question_id}/ai-answer", response_model=AiAnswerResponse)
def trigger_ai_answer(
    question_id: str,
    response: Response,
    db: Session = Depends(get_db),
    service: AiAnswerService = Depends(get_ai_answer_service),
):
    """
    Generate the preliminary AI answer for an unanswered, open question.
    Repeated or concurrent calls return the single stored AI answer.
    The question stays PENDING: the AI answer is preliminary until an expert answers.
    """
    try:
        outcome = service.trigger(db, question_id)
    except QuestionNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Question not found")
    except QuestionClosedError:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Cannot add AI answer to closed question",
        )
    except AiPrincipalError:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=AI_UNAVAILABLE_DETAIL)

    if outcome.status == AiAnswerStatus.UNAVAILABLE:
        logger.warning("AI answer unavailable for question %s", question_id)
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=AI_UNAVAILABLE_DETAIL)
    if outcome.status == AiAnswerStatus.SKIPPED:
        return AiAnswerResponse(message="Question already answered by an expert", data=None)
    if outcome.status == AiAnswerStatus.EXISTING:
        return AiAnswerResponse(message="AI answer already exists", data=outcome.answer)

    response.status_code = status.HTTP_201_CREATED
    return AiAnswerResponse(data=outcome.answer)


@router.get("/expert-qa/questions/{question_id}/ai-answer", response_model=AiAnswerResponse)
def read_ai_answer(
    question_id: str,
    db: Session = Depends(get_db),
    service: AiAnswerService = Depends(get_ai_answer_service),
):
    answer = service.get_ai_answer(db, question_id)
    if answer is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No AI answer found for this question")
    return AiAnswerResponse(data=answer)


# ---------- Alerts: guidance ----------


@router.post("/alerts/guidance", response_model=GuidanceResponse)
def alert_guidance(
    body: AlertGuidanceRequest,
    service: AlertGuidanceService = Depends(get_alert_guidance_service),
):
    """Safety guidance for an alert. Falls back to static advice when AI is unavailable."""
    result = service.generate(body)
    return GuidanceResponse(data=GuidanceOut(**vars(result)))


@router.post("/alerts/guidance/batch", response_model=GuidanceBatchResponse)
def alert_guidance_batch(
    body: GuidanceBatchRequest,
    service: AlertGuidanceService = Depends(get_alert_guidance_service),
):
    """Guidance for several alerts, keyed by alert fingerprint (type-severity-title)."""
    return GuidanceBatchResponse(data=service.generate_batch(body.alerts))


@router.get("/alerts/{alert_id}/guidance", response_model=GuidanceResponse)
def stored_alert_guidance(
    alert_id: str,
    db: Session = Depends(get_db),
    service: AlertGuidanceService = Depends(get_alert_guidance_service),
):
    alert = get_alert(db, alert_id)
    if alert is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Alert not found")
    result = service.generate(AlertContext.model_validate(alert))
    return GuidanceResponse(data=GuidanceOut(**vars(result)))
