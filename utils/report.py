"""
Tabular summaries of detector findings for display (Streamlit, notebooks).

Only the masked rendition of each finding is put in a table; raw values
never leave pii_detector.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Literal

import pandas as pd

from pii_masking.pii_detector import PiiMatch


FINDING_COLUMNS = ["Type", "Masked", "File", "Line"]


def findings_frame(matches: Iterable[PiiMatch]) -> pd.DataFrame:
    """
    One row per finding: Type, Masked, File (base name), Line.
    """
    rows = [
        {
            "Type": m.pii_type,
            "Masked": m.masked,
            "File": Path(m.filename).name,
            "Line": m.line_number,
        }
        for m in matches
    ]
    if not rows:
        return pd.DataFrame(columns=FINDING_COLUMNS)
    return pd.DataFrame(rows, columns=FINDING_COLUMNS)


def summarize_by_type(frame: pd.DataFrame) -> pd.DataFrame:
    """
    Count findings per type, most frequent first (ties by type name).
    """
    if frame.empty:
        return pd.DataFrame(columns=["Type", "Count"])
    counts = frame.groupby("Type").size().reset_index(name="Count")
    return counts.sort_values(["Count", "Type"], ascending=[False, True]).reset_index(drop=True)


def display_format(masked: Any) -> Literal["json", "text"]:
    """
    How to show a hide_pii result: containers as JSON, anything else (a
    top-level scalar comes back as a plain string) as text.
    """
    return "json" if isinstance(masked, (dict, list, tuple)) else "text"
