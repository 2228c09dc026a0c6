"""Unit tests for the outbound call throttle and backoff schedule."""
from tenacity import RetryCallState, Retrying

from app.services.ai_rate_limiter import CallThrottle, RetryPolicy
from tests.conftest import FakeClock


def test_first_call_does_not_wait():
    clock = FakeClock()
    throttle = CallThrottle(min_interval=2.0, clock=clock, sleep=clock.sleep)

    assert throttle.wait() == 0.0
    assert clock.sleeps == []
    assert throttle.last_call_at == clock.now


def test_back_to_back_calls_are_spaced_by_min_interval():
    clock = FakeClock()
    throttle = CallThrottle(min_interval=2.0, clock=clock, sleep=clock.sleep)

    throttle.wait()
    clock.advance(0.5)
    waited = throttle.wait()

    assert waited == 1.5
    assert clock.sleeps == [1.5]
    assert throttle.last_call_at == clock.now


def test_no_wait_once_interval_has_elapsed():
    clock = FakeClock()
    throttle = CallThrottle(min_interval=2.0, clock=clock, sleep=clock.sleep)

    throttle.wait()
    clock.advance(3.0)

    assert throttle.wait() == 0.0
    assert clock.sleeps == []


def schedule(policy, attempts):
    """Delays tenacity would sleep after each failed attempt."""
    state = RetryCallState(Retrying(), fn=None, args=(), kwargs={})
    delays = []
    for n in range(1, attempts + 1):
        state.attempt_number = n
        delays.append(policy.wait()(state))
    return delays


def test_backoff_schedule_is_exponential():
    policy = RetryPolicy()

    assert policy.max_retries == 3
    assert schedule(policy, 3) == [5.0, 15.0, 45.0]


def test_custom_backoff_schedule():
    policy = RetryPolicy(max_retries=2, base_delay=1.0, multiplier=2.0)
    assert schedule(policy, 2) == [1.0, 2.0]


def test_stop_allows_initial_attempt_plus_retries():
    stop = RetryPolicy().stop()
    state = RetryCallState(Retrying(), fn=None, args=(), kwargs={})

    state.attempt_number = 3
    assert stop(state) is False
    state.attempt_number = 4
    assert stop(state) is True
