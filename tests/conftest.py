"""
Shared fixtures: per-test SQLite database, fake clock, scripted Gemini stand-ins, seed data.
"""
import itertools
import uuid
from datetime import date
from types import SimpleNamespace

import pytest
from sqlalchemy.orm import sessionmaker

from app.database import Base, build_engine
from app.models import Dog, ExpertQuestion, HealthRecord, QuestionStatus, RegionalAlert, User
from app.services.ai_answer_service import AiAnswerGenerator, AiAnswerService
from app.services.content_cache import TTLContentCache

AI_USER_ID = "ponnect-ai-system"
AI_USER_EMAIL = "ai@ponnect.app"


class FakeClock:
    """Callable clock whose sleep() advances time instead of blocking."""

    def __init__(self, start: float = 1_000.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_response(text):
    part = SimpleNamespace(text=text)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


class FakeModels:
    """Scripted generate_content: each step is response text or an exception; the last step repeats."""

    def __init__(self, script, clock: FakeClock | None = None):
        self.script = list(script)
        self.clock = clock
        self.calls = []

    def generate_content(self, model, contents, config):
        self.calls.append({
            "model": model,
            "contents": contents,
            "config": config,
            "at": self.clock() if self.clock else None,
        })
        step = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(step, Exception):
            raise step
        if isinstance(step, SimpleNamespace):
            return step
        return make_response(step)


class FakeGenaiClient:
    def __init__(self, script, clock: FakeClock | None = None):
        self.models = FakeModels(script, clock)


class StubGenerationClient:
    """Stands in for GeminiClient: returns scripted raw text (None = generation failure)."""

    model = "stub-model"

    def __init__(self, reply="Keep your dog hydrated and see a vet if symptoms persist.", hook=None):
        self.reply = reply
        self.hook = hook
        self.calls: list[str] = []
        self._counter = itertools.count(1)

    @property
    def is_configured(self) -> bool:
        return True

    def generate(self, prompt, *, max_output_tokens=1000, label="AI"):
        self.calls.append(prompt)
        n = next(self._counter)
        if self.hook is not None:
            self.hook()
        if callable(self.reply):
            return self.reply(n)
        return self.reply


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'test.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


def build_answer_service(session_factory, client, cache=None, repository=None) -> AiAnswerService:
    generator = AiAnswerGenerator(
        client=client,
        cache=cache if cache is not None else TTLContentCache(),
        today=lambda: date(2026, 10, 1),
    )
    return AiAnswerService(
        session_factory=session_factory,
        generator=generator,
        ai_user_id=AI_USER_ID,
        ai_user_email=AI_USER_EMAIL,
        repository=repository,
    )


def seed_question(session_factory, status=QuestionStatus.PENDING.value, with_dog=True, record_count=3) -> str:
    """Owner + optional dog with health records + question. Returns the question id."""
    with session_factory.begin() as s:
        owner = User(email=f"owner-{uuid.uuid4().hex[:8]}@example.com", name="Sam Owner")
        s.add(owner)
        s.flush()
        question = ExpertQuestion(
            author_id=owner.id,
            title="Dog scratching ears constantly",
            content="My dog keeps scratching her ears after swimming. What should I do?",
            category="HEALTH",
            status=status,
        )
        if with_dog:
            dog = Dog(
                owner_id=owner.id,
                name="Biscuit",
                breed="Labrador Retriever",
                birth_date=date(2022, 4, 15),
                gender="FEMALE",
                weight=28.5,
                bio="Loves the beach",
            )
            for i in range(record_count):
                dog.health_records.append(
                    HealthRecord(
                        type="VET_VISIT",
                        title=f"Check-up {i}",
                        date=date(2025, 1 + i % 12, 1),
                    )
                )
            s.add(dog)
            question.dogs.append(dog)
        s.add(question)
        s.flush()
        return question.id


def seed_alert(session_factory, **overrides) -> str:
    values = dict(
        title="Paralysis tick activity high on the north coast",
        message="Increased paralysis tick reports after recent rain.",
        type="TICK",
        severity="WARNING",
        region="NSW North Coast",
        source="NSW DPI",
    )
    values.update(overrides)
    with session_factory.begin() as s:
        alert = RegionalAlert(**values)
        s.add(alert)
        s.flush()
        return alert.id
