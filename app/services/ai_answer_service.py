"""
AI preliminary answers for expert questions.

ensure_ai_answer() guarantees at most one AI answer per question even when several requests
trigger generation at once:
  1. read: existing AI answer -> return it
  2. closed question -> QuestionClosedError (before any Gemini call)
  3-5. short transaction: recheck, create the AI principal if missing, commit
       (AiPrincipalError, still before any Gemini call, if the principal cannot exist)
  6. Gemini call outside any transaction (slow, must not hold locks)
  7. short transaction: lock + recheck, insert if still absent
A caller that loses the race at step 7 drops its text and returns the winner's row.
"""
import enum
import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from app.models.expert_question import ExpertQuestion
from app.repositories.expert_answer_repository import ExpertAnswerRepository
from app.schemas.ai import AiAnswerOut, QuestionContext
from app.services.ai_response import parse_answer_text
from app.services.content_cache import ContentCache
from app.services.gemini_client import GeminiClient
from app.services.prompt_builder import HEALTH_RECORD_LIMIT, build_answer_prompt

logger = logging.getLogger(__name__)


class QuestionNotFoundError(Exception):
    pass


class QuestionClosedError(Exception):
    """Closed questions accept no new answers, AI or human."""


class AiPrincipalError(Exception):
    """The AI system user could not be created (e.g. its email belongs to another account)."""


class AiAnswerStatus(str, enum.Enum):
    CREATED = "created"
    EXISTING = "existing"
    UNAVAILABLE = "unavailable"
    SKIPPED = "skipped"  # question already answered by a human expert


@dataclass
class AiAnswerOutcome:
    status: AiAnswerStatus
    answer: AiAnswerOut | None = None


class AiAnswerGenerator:
    """Prompt -> Gemini -> validated text, cached per question id."""

    def __init__(
        self,
        client: GeminiClient,
        cache: ContentCache,
        max_output_tokens: int = 1000,
        health_record_limit: int = HEALTH_RECORD_LIMIT,
        today: Callable[[], date] = date.today,
    ):
        self._client = client
        self._cache = cache
        self._max_output_tokens = max_output_tokens
        self._health_record_limit = health_record_limit
        self._today = today

    def generate(self, question: QuestionContext) -> str | None:
        cached = self._cache.get(question.id)
        if cached is not None:
            logger.info("[AI Q&A] Returning cached answer for question %s", question.id)
            return cached

        logger.info("[AI Q&A] Generating AI answer for question %s (%d dogs)", question.id, len(question.dogs))
        prompt = build_answer_prompt(question, today=self._today(), health_record_limit=self._health_record_limit)
        text = parse_answer_text(
            self._client.generate(prompt, max_output_tokens=self._max_output_tokens, label="AI Q&A")
        )
        if text is None:
            logger.info("[AI Q&A] Failed to generate AI answer for question %s", question.id)
            return None
        self._cache.put(question.id, text, model=self._client.model)
        return text


class AiAnswerService:
    def __init__(
        self,
        session_factory: sessionmaker,
        generator: AiAnswerGenerator,
        ai_user_id: str,
        ai_user_email: str,
        repository: ExpertAnswerRepository | None = None,
        health_record_limit: int = HEALTH_RECORD_LIMIT,
    ):
        self._session_factory = session_factory
        self._generator = generator
        self._ai_user_id = ai_user_id
        self._ai_user_email = ai_user_email
        self._repo = repository or ExpertAnswerRepository()
        self._health_record_limit = health_record_limit

    # ---- read path ----

    def get_ai_answer(self, db: Session, question_id: str) -> AiAnswerOut | None:
        answer = self._repo.get_ai_answer(db, question_id)
        return AiAnswerOut.model_validate(answer) if answer is not None else None

    # ---- trigger ----

    def trigger(self, db: Session, question_id: str) -> AiAnswerOutcome:
        """
        Entry point for question views: only unanswered, open questions get an AI answer.
        Safe to call repeatedly; once an AI answer exists this is a read.
        """
        question, outcome = self._check_question(db, question_id)
        if outcome is not None:
            return outcome
        if self._repo.count_human_answers(db, question_id) > 0:
            return AiAnswerOutcome(AiAnswerStatus.SKIPPED)
        return self._generate_and_store(db, question)

    # ---- idempotent persistence ----

    def ensure_ai_answer(self, db: Session, question_id: str) -> AiAnswerOutcome:
        question, outcome = self._check_question(db, question_id)
        if outcome is not None:
            return outcome
        return self._generate_and_store(db, question)

    def _check_question(self, db: Session, question_id: str) -> tuple[ExpertQuestion, AiAnswerOutcome | None]:
        """Steps 1-2: existing AI answer wins over the closed check; closed raises."""
        question = self._repo.get_question(db, question_id)
        if question is None:
            raise QuestionNotFoundError(question_id)
        existing = self._repo.get_ai_answer(db, question_id)
        if existing is not None:
            return question, AiAnswerOutcome(AiAnswerStatus.EXISTING, AiAnswerOut.model_validate(existing))
        if question.is_closed:
            raise QuestionClosedError(question_id)
        return question, None

    def _generate_and_store(self, db: Session, question: ExpertQuestion) -> AiAnswerOutcome:
        context = self._repo.build_question_context(db, question, self._health_record_limit)
        # End the request session's read transaction; nothing may stay open across the Gemini call
        db.rollback()

        existing_out = self._prepare(context.id)
        if existing_out is not None:
            return AiAnswerOutcome(AiAnswerStatus.EXISTING, existing_out)

        content = self._generator.generate(context)
        if content is None:
            return AiAnswerOutcome(AiAnswerStatus.UNAVAILABLE)

        answer, created = self._persist(context.id, content)
        return AiAnswerOutcome(AiAnswerStatus.CREATED if created else AiAnswerStatus.EXISTING, answer)

    def _prepare(self, question_id: str) -> AiAnswerOut | None:
        """Recheck and ensure the AI principal exists, in one short transaction."""
        try:
            with self._session_factory.begin() as tx:
                existing = self._repo.get_ai_answer(tx, question_id)
                if existing is not None:
                    return AiAnswerOut.model_validate(existing)
                self._repo.get_or_create_ai_principal(tx, self._ai_user_id, self._ai_user_email)
        except IntegrityError:
            # Either a concurrent request created the principal first, or another row holds its email
            with self._session_factory() as db:
                if self._repo.get_user(db, self._ai_user_id) is None:
                    logger.error(
                        "AI principal %s could not be created (email %s already in use?)",
                        self._ai_user_id, self._ai_user_email,
                    )
                    raise AiPrincipalError(self._ai_user_id)
            logger.info("AI principal %s created concurrently", self._ai_user_id)
        return None

    def _persist(self, question_id: str, content: str) -> tuple[AiAnswerOut, bool]:
        """Final recheck then insert. Returns (answer, created)."""
        try:
            with self._session_factory.begin() as tx:
                self._repo.lock_question(tx, question_id)
                existing = self._repo.get_ai_answer(tx, question_id)
                if existing is not None:
                    logger.info("[AI Q&A] AI answer for question %s already created; discarding ours", question_id)
                    return AiAnswerOut.model_validate(existing), False
                answer = self._repo.insert_ai_answer(tx, question_id, content, self._ai_user_id)
                out = AiAnswerOut.model_validate(answer)
            logger.info("[AI Q&A] Stored AI answer %s for question %s", out.id, question_id)
            return out, True
        except IntegrityError:
            logger.info("[AI Q&A] Lost AI answer insert race for question %s", question_id)

        with self._session_factory() as db:
            existing = self._repo.get_ai_answer(db, question_id)
            if existing is None:
                raise RuntimeError(f"AI answer insert for question {question_id} failed without a winner")
            return AiAnswerOut.model_validate(existing), False
