import json
import logging
import time

from savings_engine.storage import StorageError
from savings_engine.utils import CONSENT_LOG_KEY, MAX_CONSENT_RECORDS, iso_timestamp, now_ms

consent_logger = logging.getLogger('consent_log')


def track_consent(storage, consent_type, user_agent="unknown", clock=time.time):
    """
    Appends a consent record to the bounded log kept in storage (last 10 entries).
    Never raises: a failed write is logged and the submission carries on.
    Returns True when the record was stored.
    """
    consent_data = {
        "type": consent_type,
        "timestamp": iso_timestamp(now_ms(clock)),
        "userAgent": user_agent,
        "ip": "client-side",  # would be filled in by a backend
    }
    try:
        existing_consents = json.loads(storage.get(CONSENT_LOG_KEY) or "[]")
        if not isinstance(existing_consents, list):
            existing_consents = []
        existing_consents.append(consent_data)
        storage.set(CONSENT_LOG_KEY, json.dumps(existing_consents[-MAX_CONSENT_RECORDS:]))
        return True
    except (StorageError, ValueError) as e:
        consent_logger.error(f"Failed to track consent: {type(e).__name__}")
        return False


def get_consent_history(storage):
    try:
        records = json.loads(storage.get(CONSENT_LOG_KEY) or "[]")
    except (StorageError, ValueError):
        return []
    return records if isinstance(records, list) else []
