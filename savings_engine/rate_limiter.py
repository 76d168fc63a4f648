import json
import logging
import time

from savings_engine.storage import StorageError
from savings_engine.utils import MAX_SUBMISSIONS, RATE_LIMIT_KEY, RATE_LIMIT_WINDOW_MS, now_ms

limiter_logger = logging.getLogger('rate_limiter')


class RateLimiter:
    """
    Counts contact-form submissions in a 15-minute window stored as
    {"count": int, "resetTime": epoch_ms}. Fails open: if the window cannot be
    read or written, the submission is allowed.
    """

    def __init__(self, storage, clock=time.time,
                 max_submissions=MAX_SUBMISSIONS, window_ms=RATE_LIMIT_WINDOW_MS):
        self.storage = storage
        self.clock = clock
        self.max_submissions = max_submissions
        self.window_ms = window_ms

    def _start_window(self, current_ms):
        self.storage.set(RATE_LIMIT_KEY, json.dumps({"count": 1, "resetTime": current_ms + self.window_ms}))

    def check(self) -> bool:
        """True if this submission is allowed (and counted), False if the window is exhausted."""
        current_ms = now_ms(self.clock)
        try:
            rate_limit_data = self.storage.get(RATE_LIMIT_KEY)
            if not rate_limit_data:
                self._start_window(current_ms)
                return True

            window = json.loads(rate_limit_data)
            count = int(window["count"])
            reset_time = int(window["resetTime"])

            if current_ms > reset_time:
                self._start_window(current_ms)
                return True

            if count >= self.max_submissions:
                limiter_logger.info("Submission rate limit reached for this window.")
                return False

            self.storage.set(RATE_LIMIT_KEY, json.dumps({"count": count + 1, "resetTime": reset_time}))
            return True
        except (StorageError, ValueError, TypeError, KeyError) as e:
            limiter_logger.warning(f"Rate limiting unavailable ({type(e).__name__}); allowing submission.")
            return True