"""
Prompt assembly tests. Prompts are pure functions of their input, so assertions are on content.
"""
from datetime import date

import pytest

from app.schemas.ai import AlertContext, DogContext, HealthRecordContext, QuestionContext
from app.services.prompt_builder import (
    DEFAULT_CATEGORY_DESCRIPTION,
    NO_DOG_SELECTED,
    NO_HEALTH_RECORDS,
    build_answer_prompt,
    build_guidance_prompt,
    calculate_age,
    format_health_records,
    recent_health_records,
)

TODAY = date(2026, 10, 1)


def record(month, title=None, **kwargs):
    return HealthRecordContext(
        type=kwargs.pop("type", "VET_VISIT"),
        title=title or f"Visit {month}",
        date=date(2025, month, 10),
        **kwargs,
    )


def question(dogs=None, category="HEALTH"):
    return QuestionContext(
        id="q-1",
        title="Limping after walks",
        content="My dog limps for an hour after long walks.",
        category=category,
        dogs=dogs or [],
    )


def test_question_without_dogs_gets_placeholder():
    prompt = build_answer_prompt(question(), today=TODAY)

    assert NO_DOG_SELECTED in prompt
    assert "Limping after walks" in prompt
    assert "My dog limps for an hour after long walks." in prompt


def test_dog_profile_is_included():
    dog = DogContext(
        name="Biscuit",
        breed="Kelpie",
        birth_date=date(2020, 3, 1),
        gender="FEMALE",
        weight=18.5,
        bio="Farm dog",
        health_records=[record(5, description="Annual check", vet_clinic="Bondi Vet")],
    )
    prompt = build_answer_prompt(question([dog]), today=TODAY)

    assert "### Biscuit" in prompt
    assert "- **Breed**: Kelpie" in prompt
    assert "- **Age**: 6 years" in prompt
    assert "- **Weight**: 18.5 kg" in prompt
    assert "- **About**: Farm dog" in prompt
    assert "- [VET_VISIT] Visit 5 (10 May 2025): Annual check - Clinic: Bondi Vet" in prompt
    assert NO_DOG_SELECTED not in prompt


def test_dog_without_records_or_weight():
    dog = DogContext(name="Pip", breed="", birth_date=None)
    prompt = build_answer_prompt(question([dog]), today=TODAY)

    assert NO_HEALTH_RECORDS in prompt
    assert "- **Weight**: Not specified" in prompt
    assert "- **Age**: Unknown" in prompt
    assert "- **Breed**: Unknown" in prompt


def test_health_records_capped_newest_first():
    records = [record(m) for m in range(1, 13)]

    recent = recent_health_records(records, limit=10)

    assert len(recent) == 10
    assert [r.date.month for r in recent] == list(range(12, 2, -1))
    text = format_health_records(records)
    assert "Visit 1 " not in text
    assert "Visit 2 " not in text
    assert text.index("Visit 12") < text.index("Visit 3")


def test_record_optional_fields():
    text = format_health_records([record(2, type="MEDICATION", dosage="5mg", notes="with food")])
    assert text == "- [MEDICATION] Visit 2 (10 Feb 2025) - Dosage: 5mg - Notes: with food"


def test_prompt_is_deterministic():
    dog = DogContext(name="Biscuit", breed="Kelpie", health_records=[record(m) for m in (3, 1, 2)])
    q = question([dog])

    assert build_answer_prompt(q, today=TODAY) == build_answer_prompt(q, today=TODAY)


def test_multiple_dogs_all_rendered():
    dogs = [DogContext(name="Biscuit"), DogContext(name="Pip")]
    prompt = build_answer_prompt(question(dogs), today=TODAY)
    assert "### Biscuit" in prompt and "### Pip" in prompt


def test_unknown_category_uses_default_focus():
    prompt = build_answer_prompt(question(category="GENERAL"), today=TODAY)
    assert f"- **Category Focus**: {DEFAULT_CATEGORY_DESCRIPTION}" in prompt


def test_known_category_focus():
    prompt = build_answer_prompt(question(category="NUTRITION"), today=TODAY)
    assert "dog food, diet, feeding schedules" in prompt


@pytest.mark.parametrize(
    "birth, expected",
    [
        (None, "Unknown"),
        (date(2026, 9, 20), "< 1 month"),
        (date(2026, 9, 1), "1 month"),
        (date(2026, 5, 1), "5 months"),
        (date(2025, 10, 1), "1 year"),
        (date(2025, 6, 1), "1 year and 4 months"),
        (date(2023, 11, 1), "2 years"),
        (date(2027, 1, 1), "Unknown"),
    ],
)
def test_calculate_age(birth, expected):
    assert calculate_age(birth, TODAY) == expected


def test_guidance_prompt_includes_alert_and_severity_rule():
    alert = AlertContext(
        title="Brown snake sightings",
        message="Several sightings near walking tracks.",
        type="SNAKE",
        severity="EMERGENCY",
        region="Blue Mountains",
        source="Local council",
    )
    prompt = build_guidance_prompt(alert)

    assert "- **Title**: Brown snake sightings" in prompt
    assert "- **Region**: Blue Mountains" in prompt
    assert "For EMERGENCY severity: Include immediate actions and when to seek emergency vet care." in prompt
    assert "JSON array of strings" in prompt


def test_guidance_prompt_defaults():
    prompt = build_guidance_prompt(AlertContext(title="Something", severity="UNKNOWN"))

    assert "- **Region**: Australia" in prompt
    assert "- **Source**: Unknown" in prompt
    assert "Include general awareness and routine precautions." in prompt
