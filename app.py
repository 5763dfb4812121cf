# app.py
import logging

import streamlit as st

from analysis_gateway import analyze_editorial_data
from constants import DEFAULT_GEMINI_MODEL, GEMINI_MODEL_KEY_NAME
from display import display_analysis_result, display_key_gate
from helpers import rows_to_df
from key_gate import KeyGate, streamlit_secret_lookup
from parsing import decode_upload, ingest_text
from session import init_session_state, reset_analysis, run_analysis

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)

st.set_page_config(
    page_title="Editorial Intel AI",
    page_icon="📊",
    layout="wide"
)

# --- Session State Initialization ---
key_gate = KeyGate(st.session_state)
init_session_state(st.session_state, key_gate)

model_name = streamlit_secret_lookup(GEMINI_MODEL_KEY_NAME) or DEFAULT_GEMINI_MODEL


def analyze_fn(rows, api_key):
    return analyze_editorial_data(rows, api_key, model_name=model_name)


def on_text_change():
    ingest_text(st.session_state, st.session_state.input_text)


def on_file_upload():
    uploaded = st.session_state.get('uploaded_csv')
    if uploaded is None:
        return
    text = decode_upload(uploaded.getvalue())
    st.session_state.input_text = text
    ingest_text(st.session_state, text)


# --- API Key Gate ---
if not st.session_state.has_key:
    if st.session_state.error_message:
        st.error(st.session_state.error_message, icon="🚫")
    display_key_gate(key_gate.open_select_key)
    st.stop()

# --- Header ---
rows = st.session_state.content_rows
header_left, header_right = st.columns([3, 1])
with header_left:
    st.title("📊 Editorial Intel AI")
    st.caption("Enterprise Analyzer")
with header_right:
    if rows:
        st.markdown(f"**#️⃣ {len(rows)} Stories**")
    st.success("Key Connected", icon="🛡️")

st.divider()

result = st.session_state.analysis_result

if result is None:
    st.header("Full Scale Analysis.")
    st.markdown("Optimized for 900+ rows. No data truncation.")

    with st.container(border=True):
        st.text_area(
            "Input CSV Data",
            key="input_text",
            height=320,
            placeholder="URL, Headline, Users...",
            on_change=on_text_change,
        )
        st.file_uploader("Upload CSV", type=["csv"], key="uploaded_csv", on_change=on_file_upload)

        if st.button(
            f"⚡ ANALYZE {len(rows)} RECORDS",
            type="primary",
            use_container_width=True,
            disabled=not rows or st.session_state.is_analyzing,
        ):
            with st.spinner(f"Processing Dataset. Reading {len(rows)} records. This ensures no story is left behind."):
                run_analysis(st.session_state, key_gate, analyze_fn)
            st.rerun()

        if st.session_state.error_message:
            st.error(st.session_state.error_message, icon="⚠️")

    if rows:
        with st.expander(f"Preview Parsed Rows ({len(rows)})"):
            st.dataframe(rows_to_df(rows), hide_index=True, use_container_width=True)

else:
    st.button("Reset ➡️", on_click=reset_analysis, args=(st.session_state,))
    display_analysis_result(result, len(rows))
