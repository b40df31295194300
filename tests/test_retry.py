import threading

import pytest

from orchestrator.retry import Deadline, RetryPolicy, interruptible_sleep


def test_backoff_doubles_from_initial_delay():
    policy = RetryPolicy(max_attempts=3, initial_backoff_s=0.2, multiplier=2.0)
    assert policy.backoff_for(0) == pytest.approx(0.2)
    assert policy.backoff_for(1) == pytest.approx(0.4)


def test_attempt_ceiling_counts_first_call():
    policy = RetryPolicy(max_attempts=2)
    assert policy.has_attempts_left(0)
    assert not policy.has_attempts_left(1)


def test_deadline_tracks_remaining_time():
    now = [100.0]
    deadline = Deadline(5.0, clock=lambda: now[0])
    assert deadline.remaining() == pytest.approx(5.0)
    now[0] = 104.0
    assert deadline.remaining() == pytest.approx(1.0)
    now[0] = 106.0
    assert deadline.remaining() == 0.0
    assert deadline.expired


def test_deadline_without_limit_never_expires():
    deadline = Deadline(None)
    assert deadline.remaining() is None
    assert not deadline.expired


def test_sleep_returns_false_when_cancelled():
    event = threading.Event()
    event.set()
    assert interruptible_sleep(5.0, event) is False


def test_sleep_completes_without_cancellation():
    assert interruptible_sleep(0.01) is True
