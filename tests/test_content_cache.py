from app.core.ai import get_answer_cache, get_guidance_cache, reset_ai_components, sweep_ai_caches
from app.services.content_cache import DEFAULT_TTL_SECONDS, TTLContentCache
from tests.conftest import FakeClock

DAY = 24 * 60 * 60


def test_default_ttl_is_one_day():
    assert DEFAULT_TTL_SECONDS == DAY
    assert TTLContentCache().ttl_seconds == DAY


def test_entry_is_fresh_just_under_ttl():
    clock = FakeClock()
    cache = TTLContentCache(clock=clock)
    cache.put("q-1", "answer", model="gemini-test")

    clock.advance(DAY - 1)

    assert cache.get("q-1") == "answer"
    assert cache.get_entry("q-1").model == "gemini-test"


def test_entry_is_stale_at_exactly_ttl():
    clock = FakeClock()
    cache = TTLContentCache(clock=clock)
    cache.put("q-1", "answer")

    clock.advance(DAY)

    assert cache.get("q-1") is None


def test_stale_entry_is_overwritten_by_next_put():
    clock = FakeClock()
    cache = TTLContentCache(clock=clock)
    cache.put("q-1", "old")
    clock.advance(DAY + 60)

    cache.put("q-1", "new")

    assert cache.get("q-1") == "new"
    assert cache.get_entry("q-1").generated_at == clock.now
    assert len(cache) == 1


def test_missing_key_is_a_miss():
    assert TTLContentCache().get("nope") is None


def test_sweep_removes_only_expired_entries():
    clock = FakeClock()
    cache = TTLContentCache(ttl_seconds=100, clock=clock)
    cache.put("old", ["a"])
    clock.advance(60)
    cache.put("recent", ["b"])
    clock.advance(50)

    assert cache.sweep_expired() == 1
    assert len(cache) == 1
    assert cache.get("recent") == ["b"]


def test_clear():
    cache = TTLContentCache()
    cache.put("a", "x")
    cache.put("b", "y")

    cache.clear()

    assert len(cache) == 0


def test_sweep_ai_caches_covers_both_process_caches():
    reset_ai_components()
    try:
        answers, guidance = get_answer_cache(), get_guidance_cache()
        answers.ttl_seconds = 0
        guidance.ttl_seconds = 0
        answers.put("q-1", "answer")
        guidance.put("TICK-INFO-x", ["a"])

        assert sweep_ai_caches() == 2
        assert len(answers) == 0 and len(guidance) == 0
    finally:
        reset_ai_components()
