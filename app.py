import json

import streamlit as st

from pii_masking import DEFAULT_MASK_CHAR, DEFAULT_PLACEHOLDER, hide_pii
from pii_masking.file_scanner import mask_text
from pii_masking.pii_detector import detect_pii_in_text
from utils.report import display_format, findings_frame, summarize_by_type

# Page config
st.set_page_config(
    page_title="PII Masker",
    page_icon="🎭",
    layout="wide"
)

st.title("🎭 PII Masker")
st.markdown("Paste a log excerpt or JSON payload, or upload a file, to see what would leave the process.")

# Masking options
with st.sidebar:
    st.header("Options")
    placeholder = st.text_input("Placeholder for sensitive keys", value=DEFAULT_PLACEHOLDER)
    mask_char = st.text_input("Mask character", value=DEFAULT_MASK_CHAR, max_chars=1) or DEFAULT_MASK_CHAR

pasted = st.text_area("Text or JSON", height=200)

uploaded_file = st.file_uploader(
    "...or upload a file (txt, log, json)",
    type=["txt", "log", "json"]
)

mask_button = st.button("🛡 Mask")


def _read_input():
    """Uploaded file wins over pasted text. Returns (text, label)."""
    if uploaded_file is not None:
        return uploaded_file.getvalue().decode("utf-8", errors="replace"), uploaded_file.name
    return pasted, "<pasted>"


def _parse_json(text):
    try:
        return json.loads(text), True
    except ValueError:
        return None, False


if mask_button:
    text, label = _read_input()

    if not text.strip():
        st.warning("⚠️ Paste some text or upload a file first.")
    else:
        options = {"placeholder": placeholder, "mask_char": mask_char}
        payload, is_json = _parse_json(text)

        col1, col2 = st.columns([2, 1])

        with col1:
            st.subheader("🎭 Masked output")
            if is_json:
                masked = hide_pii(payload, options)
                if display_format(masked) == "json":
                    st.json(masked)
                else:
                    st.code(masked, language="text")
            else:
                st.code(mask_text(text, mask_char), language="text")

        findings = findings_frame(detect_pii_in_text(text, filename=label, mask_char=mask_char))

        with col2:
            st.subheader("📊 Findings by type")
            if findings.empty:
                st.info("No patterns matched. Sensitive keys in JSON are still redacted.")
            else:
                st.dataframe(summarize_by_type(findings), use_container_width=True)

        st.markdown("---")
        with st.expander("📋 Findings by line"):
            if findings.empty:
                st.write("Nothing to show.")
            else:
                st.dataframe(findings, use_container_width=True)

else:
    st.info("Paste text or upload a file and click 'Mask' to begin.")
