"""
Prompt assembly for Ponnect AI features. Pure functions: no I/O, deterministic for the same
input (pass `today` explicitly when ages must be stable, e.g. in tests).
"""
from datetime import date

from app.schemas.ai import AlertContext, DogContext, HealthRecordContext, QuestionContext

HEALTH_RECORD_LIMIT = 10

CATEGORY_DESCRIPTIONS = {
    "HEALTH": "health, veterinary care, medical conditions, symptoms, and treatments",
    "TRAINING": "dog training, behavior modification, obedience, and commands",
    "NUTRITION": "dog food, diet, feeding schedules, supplements, and nutrition",
    "BEHAVIOR": "dog behavior, psychology, social interactions, and temperament",
}
DEFAULT_CATEGORY_DESCRIPTION = "general dog care"

SEVERITY_INSTRUCTIONS = {
    "EMERGENCY": "Include immediate actions and when to seek emergency vet care.",
    "WARNING": "Include preventive measures and signs to watch for.",
    "WATCH": "Include awareness tips and precautionary steps.",
    "INFO": "Include general awareness and routine precautions.",
}

NO_DOG_SELECTED = "No specific dog selected for this question."
NO_HEALTH_RECORDS = "No health records on file"

ANSWER_FRAMING = """You are an AI assistant for Ponnect, an Australian app that helps dog owners keep their pets safe and healthy. You are writing a PRELIMINARY answer to a user's question; verified experts (veterinarians, trainers, nutritionists) will review it and may endorse it.

## Important Context
- This answer is clearly marked as AI-generated in the app
- A human expert will review it later
- Be helpful and acknowledge limitations where appropriate
- If the question needs urgent veterinary attention, say so clearly
- Use the dog's health history below for personalised advice where relevant

## Application Context
- **App Name**: Ponnect
- **Target Audience**: Australian dog owners
- **Tone**: Caring, informative, supportive, and professional"""

ANSWER_TASK = """## Your Task
Write a helpful, well-structured preliminary answer. It should:
1. Be informative and actionable
2. Fit the Australian context (vets, climate, regulations, products)
3. Say when professional consultation is needed
4. Be warm and supportive
5. Be concise but complete (150-300 words)
6. Use line breaks for readability
7. Refer to the dog's profile and health history where relevant (age, breed, existing conditions)

## Response Format
Return ONLY the answer text: no JSON, no markdown headers, just plain paragraphs.
Do not say "As an AI"; the app shows that separately. Start directly with the answer."""

GUIDANCE_FRAMING = """You are an expert veterinary advisor for Ponnect, an Australian app that helps dog owners keep their pets safe and healthy.

## Application Context
- **App Name**: Ponnect
- **Purpose**: Connect Australian dog owners with resources, vets, community support, and real-time safety alerts
- **Target Audience**: Dog owners across Australia, from first-time owners to experienced breeders
- **Tone**: Caring, professional, actionable, and reassuring (not alarmist)"""

GUIDANCE_FORMAT = """## Response Format
Return ONLY a JSON array of strings, one recommendation per string. No other text and no markdown.

Example:
["First recommendation", "Second recommendation", "Third recommendation", "Fourth recommendation"]"""


def _plural(n: int, unit: str) -> str:
    return f"{n} {unit}" if n == 1 else f"{n} {unit}s"


def calculate_age(birth_date: date | None, today: date) -> str:
    if birth_date is None:
        return "Unknown"
    months_total = (today.year - birth_date.year) * 12 + (today.month - birth_date.month)
    if today.day < birth_date.day:
        months_total -= 1
    if months_total < 0:
        return "Unknown"
    years, months = divmod(months_total, 12)
    if years == 0:
        return "< 1 month" if months < 1 else _plural(months, "month")
    if years < 2:
        return _plural(years, "year") + (f" and {_plural(months, 'month')}" if months else "")
    return _plural(years, "year")


def _format_date(d: date) -> str:
    # en-AU short style, e.g. "5 Mar 2024"
    return f"{d.day} {d.strftime('%b %Y')}"


def recent_health_records(records: list[HealthRecordContext], limit: int = HEALTH_RECORD_LIMIT) -> list[HealthRecordContext]:
    """Newest first, capped to keep the prompt bounded."""
    return sorted(records, key=lambda r: r.date, reverse=True)[:limit]


def format_health_records(records: list[HealthRecordContext], limit: int = HEALTH_RECORD_LIMIT) -> str:
    if not records:
        return NO_HEALTH_RECORDS
    lines = []
    for r in recent_health_records(records, limit):
        entry = f"- [{r.type}] {r.title} ({_format_date(r.date)})"
        if r.description:
            entry += f": {r.description}"
        if r.dosage:
            entry += f" - Dosage: {r.dosage}"
        if r.vet_clinic:
            entry += f" - Clinic: {r.vet_clinic}"
        if r.notes:
            entry += f" - Notes: {r.notes}"
        lines.append(entry)
    return "\n".join(lines)


def format_dog_profile(dog: DogContext, today: date, limit: int = HEALTH_RECORD_LIMIT) -> str:
    weight = f"{dog.weight:g} kg" if dog.weight else "Not specified"
    lines = [
        f"### {dog.name}",
        f"- **Breed**: {dog.breed or 'Unknown'}",
        f"- **Age**: {calculate_age(dog.birth_date, today)}",
        f"- **Gender**: {dog.gender or 'Not specified'}",
        f"- **Weight**: {weight}",
    ]
    if dog.bio:
        lines.append(f"- **About**: {dog.bio}")
    lines.append("")
    lines.append("**Health History**:")
    lines.append(format_health_records(dog.health_records, limit))
    return "\n".join(lines)


def build_answer_prompt(
    question: QuestionContext,
    today: date | None = None,
    health_record_limit: int = HEALTH_RECORD_LIMIT,
) -> str:
    today = today or date.today()
    focus = CATEGORY_DESCRIPTIONS.get(question.category, DEFAULT_CATEGORY_DESCRIPTION)

    if question.dogs:
        profiles = "\n\n".join(format_dog_profile(d, today, health_record_limit) for d in question.dogs)
    else:
        profiles = NO_DOG_SELECTED

    parts = [
        ANSWER_FRAMING,
        f"- **Category Focus**: {focus}",
        "",
        "## Question Details",
        f"- **Category**: {question.category}",
        f"- **Title**: {question.title}",
        f"- **Full Question**: {question.content}",
        "",
        "## Dog Profile(s)",
        profiles,
        "",
        ANSWER_TASK,
    ]
    return "\n".join(parts)


def build_guidance_prompt(alert: AlertContext) -> str:
    severity_rule = SEVERITY_INSTRUCTIONS.get(alert.severity, SEVERITY_INSTRUCTIONS["INFO"])
    parts = [
        GUIDANCE_FRAMING,
        "",
        "## Alert Details",
        f"- **Title**: {alert.title}",
        f"- **Description**: {alert.message}",
        f"- **Type**: {alert.type} (TICK, SNAKE, DISEASE, HEATWAVE, UV, OTHER)",
        f"- **Severity**: {alert.severity} (INFO, WATCH, WARNING, EMERGENCY)",
        f"- **Region**: {alert.region or 'Australia'}",
        f"- **Source**: {alert.source or 'Unknown'}",
        "",
        "## Your Task",
        "Generate 4-5 specific, actionable safety recommendations for dog owners based on this alert.",
        "Each recommendation should be one clear sentence, tell owners exactly what to do, be specific to",
        "this alert, consider the Australian context, and match the urgency of the severity level.",
        f"For {alert.severity} severity: {severity_rule}",
        "",
        GUIDANCE_FORMAT,
    ]
    return "\n".join(parts)
