import logging
import time
from datetime import datetime, timezone

# --- Logging Setup ---
LOG_FORMAT = '%(asctime)s - %(levelname)s - [%(name)s] - %(message)s'
logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)

# --- Runtime Settings ---
# Filled from st.secrets by smart_home_savings_app.py; these are the fallbacks.
APP_SETTINGS = {
    "environment": "production",
    "default_language": "en",
}

SUPPORTED_LANGUAGES = ("en", "fr")

# --- Storage Keys ---
ASSESSMENT_STORAGE_KEY = "smartHomeSavingsAssessment"
ENCRYPTION_KEY_NAME = "smart-home-savings-key"
RATE_LIMIT_KEY = "form-submission-rate"
CONSENT_LOG_KEY = "user-consents"
# purge_expired() only looks at keys under these prefixes
RECOGNIZED_KEY_PREFIXES = ("smart-home-", "energy-assessment-")

# --- Retention & Rate Limiting ---
DATA_EXPIRY_DAYS = 7
DAY_MS = 24 * 60 * 60 * 1000
DATA_EXPIRY_MS = DATA_EXPIRY_DAYS * DAY_MS

MAX_SUBMISSIONS = 5
RATE_LIMIT_WINDOW_MS = 15 * 60 * 1000  # 15 minutes

MAX_CONSENT_RECORDS = 10


def is_diagnostic_mode():
    """Corruption and crypto diagnostics are only logged outside production."""
    return APP_SETTINGS.get("environment", "production") != "production"


def now_ms(clock=time.time):
    """Epoch milliseconds from a seconds-based clock (time.time by default)."""
    return int(clock() * 1000)


def iso_timestamp(epoch_ms):
    return datetime.fromtimestamp(epoch_ms / 1000, tz=timezone.utc).isoformat()


def format_currency(value):
    """Whole-dollar display, e.g. 15000 -> '$15,000'."""
    try:
        return f"${float(value):,.0f}"
    except (ValueError, TypeError):
        return "$0"


# --- Progress Badge Utility ---
def generate_progress_bar_markdown(step_labels, current_step, final_step_completed=False):
    """
    Generates markdown for a progress bar with completed, current, and future steps highlighted.
    `step_labels` is the ordered list of step names; `current_step` is 0-based.
    """
    current_step_num = current_step + 1
    if final_step_completed:
        current_step_num = len(step_labels) + 1

    progress_display_list = []
    for index, label in enumerate(step_labels):
        step_num = index + 1
        if step_num < current_step_num:
            # Completed step: Green badge
            progress_display_list.append(f":green-badge[:material/task_alt: {step_num}: {label}]")
        elif step_num == current_step_num:
            # Current/active step: Violet badge
            progress_display_list.append(f":violet-badge[:material/screen_record: {step_num}: {label}]")
        else:
            progress_display_list.append(f":grey-badge[:material/radio_button_partial: {step_num}: {label}]")

    return " **--** ".join(progress_display_list)
