# display.py
import json

import streamlit as st

from constants import BILLING_DOCS_URL
from helpers import (
    format_performance_df,
    format_users,
    keyword_performance_to_df,
    recommendation_sections,
    reconciliation_message,
    styles_to_df,
    theme_keywords_to_df,
    themes_to_df,
)
from models import AnalysisResult, PerformanceExtreme


def display_key_gate(on_connect) -> None:
    """Setup screen shown while no API key is selected for the session."""
    with st.container(border=True):
        st.title("🔑 Editorial AI Setup")
        st.markdown(
            "To analyze large datasets (900+ rows), this app requires a paid Gemini API key. "
            "Please enter your project key to begin."
        )
        entered_key = st.text_input("Gemini API Key", type="password")
        if st.button("Connect API Key", type="primary", use_container_width=True, disabled=not entered_key):
            on_connect(entered_key)
            st.rerun()
        st.markdown(f"[Billing Documentation]({BILLING_DOCS_URL})")


def _display_extreme(label: str, extreme: PerformanceExtreme) -> None:
    with st.container(border=True):
        st.caption(label)
        st.subheader(extreme.theme)
        st.metric(extreme.metric or "Users Per Story", f"{format_users(extreme.value)} U/S")
        c1, c2 = st.columns(2)
        c1.metric("Stories", extreme.count)
        c2.metric("Reach", format_users(extreme.total_reach))
        st.markdown(extreme.explanation)


def display_analysis_result(result: AnalysisResult, row_count: int) -> None:
    """Render the scorecard: extremes, keyword and theme tables, insights and roadmap."""
    st.header("Scorecard Analysis")
    st.markdown(reconciliation_message(result, row_count))

    col_top, col_bottom = st.columns(2)
    with col_top:
        _display_extreme("🏆 Winner", result.top_performer)
    with col_bottom:
        _display_extreme("🎯 Underperformer", result.bottom_performer)

    # --- Keyword Drill-Down ---
    with st.container(border=True):
        st.subheader("Keyword Drill-Down")
        st.markdown("Targeted entity performance (Cancer, Heart Attack, etc.)")
        keyword_df = keyword_performance_to_df(result)
        if keyword_df.empty:
            st.info("No keyword performance returned.")
        else:
            st.dataframe(format_performance_df(keyword_df), hide_index=True, use_container_width=True)

    # --- Performance Matrix ---
    with st.container(border=True):
        st.subheader("Performance Matrix")
        themes_df = themes_to_df(result)
        if themes_df.empty:
            st.info("No themes returned.")
        else:
            highlight = themes_df['Above Average']
            styled = format_performance_df(themes_df.drop(columns=['Above Average'])).style.apply(
                lambda row: ['background-color: #d1fae5' if highlight[row.name] else '' for _ in row],
                axis=1
            )
            st.dataframe(styled, hide_index=True, use_container_width=True)
            st.download_button(
                label="Download Theme Matrix (CSV)",
                data=themes_df.to_csv(index=False).encode('utf-8'),
                file_name="theme_performance.csv",
                mime="text/csv",
            )

    col_insights, col_roadmap = st.columns([2, 3])
    with col_insights:
        with st.container(border=True):
            st.subheader("💡 Strategic Insights")
            for i, insight in enumerate(result.insights, start=1):
                st.markdown(f"**{i}.** {insight}")

    with col_roadmap:
        with st.container(border=True):
            st.subheader("✅ Action Roadmap")
            sections = recommendation_sections(result)
            for row_start in range(0, len(sections), 2):
                cols = st.columns(2)
                for col, (title, items) in zip(cols, sections[row_start:row_start + 2]):
                    with col:
                        st.markdown(f"#### {title}")
                        for item in items:
                            st.markdown(f"• {item}")

    with st.expander("Theme Keywords & Entities"):
        keywords_df = theme_keywords_to_df(result)
        if keywords_df.empty:
            st.info("No theme keywords returned.")
        else:
            st.dataframe(keywords_df, hide_index=True, use_container_width=True)

    with st.expander("Headline Style Notes"):
        style_df = styles_to_df(result)
        if style_df.empty:
            st.info("No style notes returned.")
        else:
            st.dataframe(format_performance_df(style_df), hide_index=True, use_container_width=True)

    st.download_button(
        label="Download Full Analysis (JSON)",
        data=json.dumps(result.model_dump(by_alias=True), indent=2).encode('utf-8'),
        file_name="editorial_analysis.json",
        mime="application/json",
    )
