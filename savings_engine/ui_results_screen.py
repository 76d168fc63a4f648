import logging

import pandas as pd
import plotly.express as px
import streamlit as st

from savings_engine.pdf_generator import generate_pdf_report
from savings_engine.rebate_estimator import REBATE_BUCKETS, estimate_rebates, recommend_upgrades
from savings_engine.ui_common import t, display_trust_badges
from savings_engine.utils import format_currency

results_logger = logging.getLogger('ui_results_screen')


def build_breakdown_figure(breakdown):
    chart_df = pd.DataFrame({
        "Level": [t(f"bucket.{bucket}") for bucket in REBATE_BUCKETS],
        "Rebate ($)": [breakdown[bucket] for bucket in REBATE_BUCKETS],
    })
    fig = px.bar(chart_df, x="Level", y="Rebate ($)", text_auto=True,
                 title=t("results.breakdown"), color="Level")
    fig.update_layout(showlegend=False, yaxis_tickprefix="$", yaxis_tickformat=",")
    return fig


def display_results_screen(answers):
    """Results view for a completed assessment. Returns "welcome" when the user starts over."""
    estimate = estimate_rebates(answers)
    recommendations = recommend_upgrades(answers)

    st.title(f"🎉 {t('results.title')}")
    st.markdown(f"**{answers.get('propertyType', '')}** · {answers.get('postalCode', '')}")
    st.markdown("---")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric(t("results.rebates"), format_currency(estimate["total"]))
    col2.metric(t("results.savings"), format_currency(estimate["annual_savings"]))
    col3.metric(t("results.carbon"), f"{estimate['carbon_reduction_tonnes']} {t('results.tonnes')}")
    col4.metric(t("results.payback"), f"{estimate['payback_years']} {t('results.years')}")

    st.plotly_chart(build_breakdown_figure(estimate["breakdown"]), use_container_width=True)
    with st.expander("Program details"):
        st.dataframe(
            pd.DataFrame([
                {"Program": item["name"], "Level": t(f"bucket.{item['bucket']}"), "Amount": format_currency(item["amount"])}
                for item in estimate["line_items"]
            ]),
            hide_index=True,
            use_container_width=True,
        )

    st.subheader(t("results.recommendations"))
    for recommendation in recommendations:
        st.info(f"**{recommendation['title']}**  \n{recommendation['description']}", icon=":material/construction:")

    st.subheader(t("results.next_steps"))
    st.write(t("results.next_steps_description"))

    col_pdf, col_reset = st.columns(2)
    with col_pdf:
        try:
            pdf_bytes = generate_pdf_report(answers, estimate, recommendations, st.session_state.get("language", "en"))
            st.download_button(
                t("results.download"),
                data=pdf_bytes,
                file_name="smart_home_savings_report.pdf",
                mime="application/pdf",
                icon=":material/download:",
                use_container_width=True,
                key="results_download_pdf",
            )
        except Exception as e:
            results_logger.error(f"PDF generation failed: {e}")
            st.warning("The PDF report could not be generated right now.", icon=":material/warning:")
    with col_reset:
        if st.button(t("results.reset"), icon=":material/restart_alt:", use_container_width=True, key="results_reset"):
            return "welcome"

    st.markdown("---")
    display_trust_badges()
    return None


def display_blocked_screen():
    st.title(f"⏳ {t('blocked.title')}")
    st.error(t('blocked.description'), icon=":material/block:")
