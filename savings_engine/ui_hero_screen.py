import streamlit as st
from savings_engine.ui_common import t, display_trust_badges


def display_hero_screen(has_saved_assessment=False, on_clear_data=None):
    """
    Welcome screen. Returns "assessment" when the user starts (or resumes) the wizard.
    `on_clear_data` is called when the user asks to wipe their saved data.
    """
    if st.session_state.pop("data_cleared_notice", False):
        st.toast(t('welcome.data_cleared'), icon="🧹")

    st.title(f"🍁 {t('site.title')}")
    st.caption(t('site.subtitle'))
    st.header(t('welcome.title'))
    st.markdown(t('welcome.description'))

    cta_label = t('welcome.resume') if has_saved_assessment else t('welcome.cta')
    if st.button(f"{cta_label} →", type="primary", icon=":material/rocket_launch:",
                 use_container_width=True, key="hero_start_assessment"):
        return "assessment"
    st.caption(f":material/groups: {t('welcome.trusted')}")
    st.markdown("---")

    col1, col2, col3 = st.columns(3)
    with col1:
        st.subheader(t('features.rebates.title'))
        st.write(t('features.rebates.description'))
    with col2:
        st.subheader(t('features.savings.title'))
        st.write(t('features.savings.description'))
    with col3:
        st.subheader(t('features.support.title'))
        st.write(t('features.support.description'))

    st.markdown("---")
    display_trust_badges()

    if has_saved_assessment and on_clear_data is not None:
        if st.button(t('welcome.clear_data'), icon=":material/delete:", key="hero_clear_data"):
            on_clear_data()
            st.session_state.data_cleared_notice = True
            st.rerun()
    return None
