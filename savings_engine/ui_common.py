import streamlit as st
from savings_engine.translations import translate
from savings_engine.utils import APP_SETTINGS, SUPPORTED_LANGUAGES

LANGUAGE_LABELS = {"en": "English", "fr": "Français"}


def t(key):
    """Translate using the language picked in the sidebar."""
    return translate(key, st.session_state.get("language", APP_SETTINGS["default_language"]))


def display_language_toggle():
    current = st.session_state.get("language", APP_SETTINGS["default_language"])
    st.session_state.language = st.radio(
        "Language / Langue",
        options=list(SUPPORTED_LANGUAGES),
        index=SUPPORTED_LANGUAGES.index(current) if current in SUPPORTED_LANGUAGES else 0,
        format_func=lambda code: LANGUAGE_LABELS.get(code, code),
        horizontal=True,
        key="sidebar_language_toggle",
    )


def display_trust_badges():
    col1, col2, col3 = st.columns(3)
    with col1:
        st.markdown(f":material/verified: {t('trust.energystar')}")
    with col2:
        st.markdown(f":material/account_balance: {t('trust.nrcan')}")
    with col3:
        st.markdown(f":material/lock: {t('trust.secure')}")
