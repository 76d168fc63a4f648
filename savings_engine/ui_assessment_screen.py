import streamlit as st
from savings_engine.assessment import SUBMIT_BLOCKED, SUBMIT_COMPLETED
from savings_engine.ui_common import t
from savings_engine.utils import generate_progress_bar_markdown


def render_question(question, current_value, on_change):
    """
    Draws one question and reports edits through `on_change(new_raw_value)`,
    called synchronously during this run whenever the widget value differs.
    """
    st.subheader(t(question["title"]))
    if question["help"]:
        st.caption(f":material/help: {t(question['help'])}")

    widget_key = f"question_{question['id']}"
    if question["kind"] == "free_text":
        new_value = st.text_input(
            t(question["title"]),
            value=current_value,
            placeholder=question["placeholder"],
            key=widget_key,
            label_visibility="collapsed",
        )
    else:
        option_values = [option["value"] for option in question["options"]]
        option_labels = {option["value"]: option["label"] for option in question["options"]}
        new_value = st.selectbox(
            t(question["title"]),
            options=option_values,
            index=option_values.index(current_value) if current_value in option_values else None,
            format_func=lambda value: option_labels.get(value, value),
            placeholder=t("assessment.select_placeholder"),
            key=widget_key,
            label_visibility="collapsed",
        )
        new_value = new_value or ""

    if new_value != current_value:
        on_change(new_value)


def display_contact_form(wizard):
    """Contact capture step. Returns "results" or "blocked" after a submission, else None."""
    st.subheader(t('contact.title'))
    st.caption(t('contact.subtitle'))
    col1, col2, col3 = st.columns(3)
    col1.markdown(f":material/lock: {t('contact.canadian')}")
    col2.markdown(f":material/shield: {t('contact.pipeda')}")
    col3.markdown(":material/workspace_premium: SSL Secured")

    with st.form("contact_form"):
        name = st.text_input(t('contact.name'), key="contact_name")
        email = st.text_input(t('contact.email'), key="contact_email")
        phone = st.text_input(t('contact.phone'), placeholder="(xxx) xxx-xxxx", key="contact_phone")
        consent = st.checkbox(t('contact.privacy'), key="contact_consent")
        submitted = st.form_submit_button(f"{t('contact.submit')} →", type="primary", use_container_width=True)

    if submitted:
        result = wizard.submit_contact({"name": name, "email": email, "phone": phone, "consent": consent})
        if result["status"] == SUBMIT_COMPLETED:
            st.session_state.assessment_result = result["data"]
            return "results"
        if result["status"] == SUBMIT_BLOCKED:
            return "blocked"
        for error_key in result["errors"].values():
            st.error(t(error_key), icon=":material/error:")

    st.caption("🍁 Proudly Canadian • 100% Secure • PIPEDA Compliant")
    return None


def display_save_button(wizard):
    if st.button(t('assessment.save'), icon=":material/save:", key="assessment_save"):
        save_result = wizard.save()
        if save_result["saved"] and save_result["encrypted"]:
            st.toast(t('assessment.saved'), icon="💾")
        elif save_result["saved"]:
            st.toast(t('assessment.saved_unencrypted'), icon="⚠️")
        else:
            st.toast(t('assessment.save_failed'), icon="🚫")


def display_assessment_screen(wizard):
    """
    Drives one run of the wizard UI. Returns the next screen name
    ("welcome", "results" or "blocked") or None to stay here.
    """
    col_title, col_save = st.columns([3, 1])
    with col_title:
        st.title(t('assessment.title'))
        st.caption(f"{t('assessment.step')} {wizard.step + 1} {t('assessment.of')} {wizard.total_steps}")

    step_labels = [str(i + 1) for i in range(wizard.question_count)] + [t('assessment.contact_step')]
    st.markdown(generate_progress_bar_markdown(step_labels, wizard.step), unsafe_allow_html=True)
    st.progress(int(wizard.progress_percent), text=f"{t('assessment.progress')} {round(wizard.progress_percent)}%")
    st.markdown("---")

    next_screen_signal = None
    question = wizard.current_question
    if question is not None:
        render_question(
            question,
            wizard.answers[question["id"]],
            lambda value: wizard.answer(question["id"], value),
        )
        if wizard.answers[question["id"]] and not wizard.can_advance():
            st.warning(t('assessment.invalid_answer'), icon=":material/warning:")
    else:
        next_screen_signal = display_contact_form(wizard)
        if next_screen_signal:
            return next_screen_signal

    # Drawn after the question so a same-run edit is already in the answers
    with col_save:
        display_save_button(wizard)

    st.markdown("---")
    col_prev, col_next = st.columns(2)
    with col_prev:
        if st.button(f"← {t('assessment.previous')}", key="assessment_previous", use_container_width=True):
            if not wizard.retreat():
                return "welcome"
            st.rerun()
    with col_next:
        if question is not None:
            if st.button(f"{t('assessment.next')} →", type="primary", key="assessment_next",
                         disabled=not wizard.can_advance(), use_container_width=True):
                wizard.advance()
                st.rerun()
    return next_screen_signal
