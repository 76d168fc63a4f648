import json
import sys
import os
import pytest
from unittest.mock import MagicMock

current_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(current_dir)
sys.path.insert(0, project_root)

from savings_engine.rate_limiter import RateLimiter
from savings_engine.storage import InMemoryStorage, StorageError
from savings_engine.utils import MAX_SUBMISSIONS, RATE_LIMIT_KEY, RATE_LIMIT_WINDOW_MS

WINDOW_SECONDS = RATE_LIMIT_WINDOW_MS / 1000


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def limiter(storage, clock):
    return RateLimiter(storage, clock=clock)


def stored_window(storage):
    return json.loads(storage.get(RATE_LIMIT_KEY))


def test_first_submission_opens_a_window(limiter, storage, clock):
    assert limiter.check() is True
    assert stored_window(storage) == {"count": 1, "resetTime": int(clock() * 1000) + RATE_LIMIT_WINDOW_MS}


def test_five_allowed_then_denied(limiter, storage):
    assert [limiter.check() for _ in range(MAX_SUBMISSIONS)] == [True] * 5
    assert limiter.check() is False
    assert limiter.check() is False
    # Denials do not touch the stored window
    assert stored_window(storage)["count"] == 5


def test_still_denied_at_the_reset_instant(limiter, clock):
    for _ in range(MAX_SUBMISSIONS):
        limiter.check()
    clock.now += WINDOW_SECONDS
    assert limiter.check() is False


def test_window_resets_after_fifteen_minutes(limiter, storage, clock):
    for _ in range(MAX_SUBMISSIONS + 1):
        limiter.check()
    clock.now += WINDOW_SECONDS + 1
    assert limiter.check() is True
    assert stored_window(storage)["count"] == 1


@pytest.mark.parametrize("raw_window", [
    "garbage",
    json.dumps({"count": 5}),  # no resetTime
    json.dumps({"count": "many", "resetTime": 0}),
    json.dumps(["count", 5]),
])
def test_malformed_window_fails_open(storage, clock, raw_window):
    storage.set(RATE_LIMIT_KEY, raw_window)
    assert RateLimiter(storage, clock=clock).check() is True


def test_storage_failure_fails_open(clock):
    broken_storage = MagicMock()
    broken_storage.get.side_effect = StorageError("storage disabled")
    assert RateLimiter(broken_storage, clock=clock).check() is True


def test_custom_limits(storage, clock):
    limiter = RateLimiter(storage, clock=clock, max_submissions=1, window_ms=1000)
    assert limiter.check() is True
    assert limiter.check() is False
    clock.now += 2
    assert limiter.check() is True
