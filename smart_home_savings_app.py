import streamlit as st
import logging
from savings_engine.assessment import AssessmentWizard
from savings_engine.rate_limiter import RateLimiter
from savings_engine.secure_store import SecureStore
from savings_engine.storage import SessionStateStorage
from savings_engine.ui_common import display_language_toggle, t
from savings_engine.ui_hero_screen import display_hero_screen
from savings_engine.ui_assessment_screen import display_assessment_screen
from savings_engine.ui_results_screen import display_results_screen, display_blocked_screen
from savings_engine.utils import APP_SETTINGS, ASSESSMENT_STORAGE_KEY, SUPPORTED_LANGUAGES

st.set_page_config(page_title="🍁 Smart Home Savings")

app_logger = logging.getLogger('smart_home_savings_app')

# --- Settings from secrets.toml ---
SECRET_TO_SETTING = {
    "ENVIRONMENT": "environment",
    "DEFAULT_LANGUAGE": "default_language",
}
try:
    for secret_name, setting_name in SECRET_TO_SETTING.items():
        secret_value = st.secrets.get(secret_name)
        if secret_value:
            APP_SETTINGS[setting_name] = str(secret_value)
except Exception:
    if 'secrets_warning_shown' not in st.session_state:
        st.toast("No secrets.toml found. Using default settings.", icon="⚙️")
        st.session_state.secrets_warning_shown = True

if APP_SETTINGS["default_language"] not in SUPPORTED_LANGUAGES:
    APP_SETTINGS["default_language"] = "en"

# --- Session State Initialization ---
if 'current_screen' not in st.session_state:
    st.session_state.current_screen = 'welcome'
if 'language' not in st.session_state:
    st.session_state.language = APP_SETTINGS["default_language"]
if 'storage' not in st.session_state:
    st.session_state.storage = SessionStateStorage()
    # Retention sweep once per session
    SecureStore(st.session_state.storage).purge_expired()
if 'wizard' not in st.session_state:
    st.session_state.wizard = None
if 'assessment_result' not in st.session_state:
    st.session_state.assessment_result = None
if 'submission_blocked' not in st.session_state:
    st.session_state.submission_blocked = False


def get_user_agent():
    try:
        return st.context.headers.get("User-Agent", "unknown")
    except Exception:
        return "unknown"


def build_wizard():
    """A fresh wizard over the session's storage; resumes a saved assessment if one is on file."""
    storage = st.session_state.storage
    return AssessmentWizard(SecureStore(storage), RateLimiter(storage), user_agent=get_user_agent())


def clear_saved_data():
    SecureStore(st.session_state.storage).secure_data_cleanup()
    st.session_state.wizard = None


def reset_assessment():
    """Discards the finished wizard and results, keeping language and the blocked flag."""
    st.session_state.wizard = None
    st.session_state.assessment_result = None
    for key in list(st.session_state.keys()):
        if key.startswith(("question_", "contact_")):
            del st.session_state[key]


# ====== Main App Router ======
if __name__ == "__main__":

    with st.sidebar:
        st.subheader(f"🍁 {t('site.title')}")
        st.caption(t('site.tagline'))
        display_language_toggle()

    current_screen = st.session_state.current_screen
    next_screen_signal = None

    if current_screen == 'welcome':
        has_saved = SecureStore(st.session_state.storage).load(ASSESSMENT_STORAGE_KEY) is not None
        next_screen_signal = display_hero_screen(has_saved_assessment=has_saved, on_clear_data=clear_saved_data)
        if next_screen_signal == 'assessment' and st.session_state.submission_blocked:
            next_screen_signal = 'blocked'

    elif current_screen == 'assessment':
        if st.session_state.wizard is None:
            st.session_state.wizard = build_wizard()
            if st.session_state.wizard.resumed:
                st.toast("Welcome back! Your saved answers have been restored.", icon="📂")
        next_screen_signal = display_assessment_screen(st.session_state.wizard)
        if next_screen_signal == 'blocked':
            st.session_state.submission_blocked = True
            st.session_state.wizard = None
        elif next_screen_signal == 'welcome':
            st.session_state.wizard = None

    elif current_screen == 'results':
        if st.session_state.assessment_result is None:
            next_screen_signal = 'welcome'
        else:
            next_screen_signal = display_results_screen(st.session_state.assessment_result)
            if next_screen_signal == 'welcome':
                reset_assessment()

    elif current_screen == 'blocked':
        display_blocked_screen()

    else:  # Default case if screen state is unknown
        app_logger.warning(f"Unknown screen '{current_screen}', returning to welcome.")
        next_screen_signal = 'welcome'

    if next_screen_signal:
        st.session_state.current_screen = next_screen_signal
        st.rerun()
